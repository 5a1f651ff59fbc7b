import collections.abc
import json
import typing

from .exceptions import DeserializationError
from .interfaces import ResourceDescriptor
from .models import (
    AttributeValue,
    LinkageRepr,
    LinksRepr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)
from .types import JSONObject, JSONValue
from .utils.converter import (
    AttributeConverter,
    ConverterContext,
    ErrorCollectingConverterContext,
    JsonicDataValidationError,
)
from .utils.jsonpointer import JSONPointer


class DescriptorQuerier(typing.Protocol):
    def __call__(self, name: str) -> ResourceDescriptor:
        ...  # pragma: nocover


class OurErrorCollectingConverterContext(ErrorCollectingConverterContext):
    require_complete_set_of_attributes: bool

    def __init__(self, require_complete_set_of_attributes: bool):
        super().__init__()
        self.require_complete_set_of_attributes = require_complete_set_of_attributes


EMPTY_ATTRIBUTES_DICT: typing.Mapping[str, JSONValue] = {}


def _dumps(value: JSONValue) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


class ReprDeserializer:
    """
    Validates an inbound document and turns it into a :py:class:`SingletonDocumentRepr`.

    Every violation found is recorded with its JSON pointer; if there is any, a
    :py:class:`DeserializationError` carrying all of them is raised, so the caller never
    sees a partially built representation.

    When a ``querier`` is given, attributes are restricted to the ones declared by the
    resource descriptor it returns and are converted to their declared types.  Attributes
    that are not declared (or that are read-only) are ignored.
    """

    _converter: AttributeConverter
    _querier: typing.Optional[DescriptorQuerier]

    def _expect_object(
        self, ctx: ConverterContext, pointer: JSONPointer, value: JSONValue, what: str
    ) -> bool:
        if isinstance(value, collections.abc.Mapping):
            return True
        ctx.validation_error_occurred(
            JsonicDataValidationError(pointer, f"value ({_dumps(value)}) must be {what}")
        )
        return False

    def _convert_string(
        self, ctx: ConverterContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[str]:
        if isinstance(value, str):
            return value
        ctx.validation_error_occurred(
            JsonicDataValidationError(pointer, f"value ({_dumps(value)}) must be a string")
        )
        return None

    def _convert_attributes(
        self,
        ctx: ConverterContext,
        pointer: JSONPointer,
        type_: str,
        attributes_: JSONObject,
    ) -> typing.Sequence[typing.Tuple[str, AttributeValue]]:
        attributes: typing.List[typing.Tuple[str, AttributeValue]] = []
        if self._querier is None:
            for k, v in attributes_.items():
                attributes.append(
                    (
                        k,
                        typing.cast(
                            AttributeValue,
                            self._converter.convert(ctx, pointer / k, typing.Any, v),
                        ),
                    )
                )
            return attributes

        resource_descr = self._querier(type_)
        for attr_descr in resource_descr.attributes.values():
            if attr_descr.read_only:
                continue
            if attr_descr.name not in attributes_:
                if (
                    typing.cast(
                        OurErrorCollectingConverterContext, ctx
                    ).require_complete_set_of_attributes
                    and attr_descr.required_on_creation
                ):
                    ctx.validation_error_occurred(
                        JsonicDataValidationError(
                            pointer,
                            f'attribute "{attr_descr.name}" is not provided where a complete set of attributes is wanted',
                        )
                    )
                    if ctx.stopped:
                        break
                continue
            attributes.append(
                (
                    attr_descr.name,
                    typing.cast(
                        AttributeValue,
                        self._converter.convert(
                            ctx,
                            pointer / attr_descr.name,
                            (
                                typing.Optional[attr_descr.type]
                                if attr_descr.allow_null
                                else attr_descr.type
                            ),
                            attributes_[attr_descr.name],
                        ),
                    ),
                )
            )
            if ctx.stopped:
                break
        return attributes

    def _convert_resource_id_repr(
        self, ctx: ConverterContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[ResourceIdRepr]:
        if not self._expect_object(ctx, pointer, value, "a resource identifier object"):
            return None
        value = typing.cast(JSONObject, value)
        id_: typing.Optional[str] = None
        type_: typing.Optional[str] = None
        for k in ("type", "id"):
            if k not in value:
                ctx.validation_error_occurred(
                    JsonicDataValidationError(pointer / k, f'value must have a property "{k}"')
                )
        if "type" in value:
            type_ = self._convert_string(ctx, pointer / "type", value["type"])
        if "id" in value:
            id_ = self._convert_string(ctx, pointer / "id", value["id"])
        if type_ is None or id_ is None:
            return None
        return ResourceIdRepr(type=type_, id=id_, _source_=pointer)

    def _convert_linkage_repr(
        self, ctx: ConverterContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[LinkageRepr]:
        if not self._expect_object(ctx, pointer, value, "a relationship object"):
            return None
        value = typing.cast(JSONObject, value)
        if "data" not in value:
            # link-only entries, such as the ones echoed back from a rendered document
            return None
        data = value["data"]
        if not isinstance(data, collections.abc.Mapping):
            ctx.validation_error_occurred(
                JsonicDataValidationError(
                    pointer / "data",
                    f"value ({_dumps(data)}) must be a single resource identifier object",
                )
            )
            return None
        return LinkageRepr(
            data=self._convert_resource_id_repr(ctx, pointer / "data", data),
            _source_=pointer,
        )

    def _convert_resource_repr(
        self, ctx: ConverterContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[ResourceRepr]:
        if not self._expect_object(ctx, pointer, value, "a resource object"):
            return None
        value = typing.cast(JSONObject, value)

        if "type" not in value:
            ctx.validation_error_occurred(
                JsonicDataValidationError(pointer / "type", 'value must have a property "type"')
            )
            return None
        type_ = self._convert_string(ctx, pointer / "type", value["type"])
        if type_ is None:
            return None

        id_: typing.Optional[str] = None
        id_repr = value.get("id")
        if id_repr is not None:
            id_ = self._convert_string(ctx, pointer / "id", id_repr)

        attributes: typing.Sequence[typing.Tuple[str, AttributeValue]] = ()
        attributes_ = value.get("attributes", EMPTY_ATTRIBUTES_DICT)
        if self._expect_object(ctx, pointer / "attributes", attributes_, "an object"):
            attributes = self._convert_attributes(
                ctx, pointer / "attributes", type_, typing.cast(JSONObject, attributes_)
            )

        relationships: typing.List[typing.Tuple[str, LinkageRepr]] = []
        relationships_ = value.get("relationships", EMPTY_ATTRIBUTES_DICT)
        if self._expect_object(ctx, pointer / "relationships", relationships_, "an object"):
            for k, v in typing.cast(JSONObject, relationships_).items():
                linkage = self._convert_linkage_repr(ctx, pointer / "relationships" / k, v)
                if linkage is not None:
                    relationships.append((k, linkage))

        return ResourceRepr(
            type=type_,
            id=id_,
            attributes=attributes,
            relationships=relationships,
            _source_=pointer,
        )

    def _convert_document(
        self, ctx: ConverterContext, document: JSONValue
    ) -> typing.Optional[SingletonDocumentRepr]:
        pointer = JSONPointer()
        if not self._expect_object(ctx, pointer, document, "an object"):
            return None
        document = typing.cast(JSONObject, document)
        if "data" not in document:
            ctx.validation_error_occurred(
                JsonicDataValidationError(pointer / "data", 'value must have a property "data"')
            )
            return None

        links: typing.Optional[LinksRepr] = None
        if "links" in document:
            links_ = document["links"]
            if self._expect_object(ctx, pointer / "links", links_, "an object"):
                links_ = typing.cast(JSONObject, links_)
                links = LinksRepr(
                    self_=links_.get("self"),
                    related=links_.get("related"),
                    _source_=pointer / "links",
                )

        resource = self._convert_resource_repr(ctx, pointer / "data", document["data"])
        if resource is None:
            return None
        return SingletonDocumentRepr(data=resource, links=links, _source_=pointer)

    def __call__(
        self,
        document: JSONValue,
        require_complete_set_of_attributes: bool = False,
    ) -> SingletonDocumentRepr:
        ctx = OurErrorCollectingConverterContext(require_complete_set_of_attributes)
        retval = self._convert_document(ctx, document)
        if ctx.errors or retval is None:
            raise DeserializationError(document, ctx.errors)
        return retval

    def __init__(self, querier: typing.Optional[DescriptorQuerier] = None):
        self._converter = AttributeConverter()
        self._querier = querier
