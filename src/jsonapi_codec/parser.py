import dataclasses
import types
import typing

from .codec import ResourceCodec
from .exceptions import (
    MalformedPayloadError,
    MalformedPayloadErrorItem,
    MissingRelationshipError,
    TypeMismatchError,
)
from .serde.deserializer import ReprDeserializer
from .serde.exceptions import DeserializationError
from .serde.models import AttributeValue, ResourceIdRepr, ResourceRepr, Source
from .serde.types import JSONValue
from .serde.utils import JSONPointer
from .utils.types import UNSPECIFIED, UnspecifiedType

R = typing.TypeVar("R")
T = typing.TypeVar("T")


def _subpointer(source: typing.Optional[Source], component: str) -> typing.Optional[JSONPointer]:
    if source is None:
        return None
    pointer = source if isinstance(source, JSONPointer) else JSONPointer(source)
    return pointer / component


@dataclasses.dataclass(frozen=True)
class ParsedInput(typing.Generic[R]):
    """
    The outcome of parsing an inbound document.

    ``attributes`` is a record materialized from the supplied attributes, with its identity
    left unset; ``supplied`` carries the attribute values actually present in the payload.
    ``id`` is present only when the payload carried one (update requests).  Relationships are
    identity references only.
    """

    type: str
    id: typing.Optional[str]
    attributes: R
    supplied: typing.Mapping[str, AttributeValue]
    relationships: typing.Mapping[str, ResourceIdRepr]
    _source_: typing.Optional[Source] = None

    def relationship_identity(
        self, name: str, default: typing.Union[T, UnspecifiedType] = UNSPECIFIED
    ) -> typing.Union[str, T]:
        """
        Returns the identity referenced by the named relationship.  When ``default`` is given,
        it is returned for an absent relationship instead of raising :py:class:`MissingRelationshipError`.
        """
        if name not in self.relationships and default is not UNSPECIFIED:
            return typing.cast(T, default)
        return get_relationship_identity(self, name)


def get_relationship_reference(parsed: ParsedInput[typing.Any], name: str) -> ResourceIdRepr:
    """
    Returns the reference (identity and type) supplied for the named relationship.

    :raises MissingRelationshipError: if the payload did not supply the relationship.
    """
    try:
        return parsed.relationships[name]
    except KeyError:
        raise MissingRelationshipError(
            parsed.type, name, _subpointer(parsed._source_, "relationships")
        )


def get_relationship_identity(parsed: ParsedInput[typing.Any], name: str) -> str:
    """
    Returns the identity supplied for the named relationship.

    Whether an absent relationship is acceptable is up to the caller; this function only
    performs the lookup.

    :raises MissingRelationshipError: if the payload did not supply the relationship.
    """
    return get_relationship_reference(parsed, name).id


def ensure_type(actual: str, expected: str, source: typing.Optional[Source] = None) -> None:
    """
    :raises TypeMismatchError: if ``actual`` is not ``expected``.
    """
    if actual != expected:
        raise TypeMismatchError(expected, actual, source)


class DocumentParser(typing.Generic[R]):
    """
    Parses inbound documents for a single resource type.

    Attributes are restricted to the ones declared by the codec and converted to their
    declared types; unknown attributes are ignored.  The parser holds no per-request state.

    :param ResourceCodec codec: the codec of the resource type being parsed.
    :param bool check_type: reject documents whose ``type`` differs from the codec's type tag.
    """

    codec: ResourceCodec[R]
    check_type: bool
    _deserializer: ReprDeserializer

    def _read(self, raw: JSONValue, require_complete_set_of_attributes: bool) -> ResourceRepr:
        try:
            document = self._deserializer(raw, require_complete_set_of_attributes)
        except DeserializationError as e:
            raise MalformedPayloadError(
                MalformedPayloadErrorItem(item.pointer, item.message) for item in e.errors
            ) from e

        resource = document.data
        if self.check_type:
            ensure_type(
                resource.type,
                self.codec.type_tag,
                _subpointer(resource._source_, "type"),
            )
        return resource

    def _check_identity(self, resource: ResourceRepr, record: R) -> None:
        if resource.id is None:
            return
        expected_id = self.codec.identity_of(record)
        if resource.id != expected_id:
            raise MalformedPayloadError(
                [
                    MalformedPayloadErrorItem(
                        typing.cast(JSONPointer, _subpointer(resource._source_, "id")),
                        f'identity "{resource.id}" does not match "{expected_id}"',
                    )
                ]
            )

    def _materialize(
        self, resource: ResourceRepr, supplied: typing.Mapping[str, AttributeValue]
    ) -> R:
        # the factory may insist on fields a partial payload leaves out
        try:
            return self.codec.materialize(supplied)
        except TypeError as e:
            raise MalformedPayloadError(
                [
                    MalformedPayloadErrorItem(
                        typing.cast(JSONPointer, _subpointer(resource._source_, "attributes")),
                        f'attributes do not make up a "{self.codec.type_tag}": {e}',
                    )
                ]
            ) from e

    def _parse(
        self,
        raw: JSONValue,
        require_complete_set_of_attributes: bool,
        target: typing.Optional[R] = None,
        apply: bool = True,
    ) -> ParsedInput[R]:
        resource = self._read(raw, require_complete_set_of_attributes)
        if target is not None:
            self._check_identity(resource, target)

        supplied = types.MappingProxyType(dict(resource.attributes))
        if target is None:
            record = self._materialize(resource, supplied)
        elif apply:
            record = self.codec.apply(target, supplied)
        else:
            record = target
        relationships = types.MappingProxyType(
            {
                name: linkage.data
                for name, linkage in resource.relationships.items()
                if linkage.data is not None
            }
        )
        return ParsedInput(
            type=resource.type,
            id=resource.id,
            attributes=record,
            supplied=supplied,
            relationships=relationships,
            _source_=resource._source_,
        )

    def parse(
        self, raw: JSONValue, require_complete_set_of_attributes: bool = False
    ) -> ParsedInput[R]:
        """
        Parses an inbound document.

        :param raw: the decoded JSON body.
        :param bool require_complete_set_of_attributes: report every attribute required on creation that is missing.
        :raises MalformedPayloadError: if the document does not have the expected shape, or its
            attributes are not enough to build a record.
        :raises TypeMismatchError: if ``check_type`` is on and the resource type differs.
        """
        return self._parse(raw, require_complete_set_of_attributes)

    def parse_for_update(self, raw: JSONValue, record: R, apply: bool = True) -> ParsedInput[R]:
        """
        Parses an inbound document and writes the supplied attributes onto ``record``.
        Attributes absent from the payload are left untouched.  An identity given in the
        payload must be the one of ``record``; nothing is written otherwise.

        With ``apply=False`` the document is checked against ``record`` but nothing is written;
        the caller applies ``supplied`` with :py:meth:`ResourceCodec.apply` once ready.

        :raises MalformedPayloadError: if the document is malformed or its identity differs.
        :raises TypeMismatchError: if ``check_type`` is on and the resource type differs.
        """
        return self._parse(raw, False, record, apply)

    def __init__(self, codec: ResourceCodec[R], check_type: bool = True):
        self.codec = codec
        self.check_type = check_type
        self._deserializer = ReprDeserializer(lambda _: codec)


def parse(raw: JSONValue, codec: ResourceCodec[R], check_type: bool = True) -> ParsedInput[R]:
    """
    Shorthand for ``DocumentParser(codec, check_type).parse(raw)``.
    """
    return DocumentParser(codec, check_type).parse(raw)
