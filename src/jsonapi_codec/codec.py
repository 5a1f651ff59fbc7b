import types
import typing
from collections import OrderedDict

from .exceptions import InvalidDeclarationError, InvalidIdentifierError
from .links import PLACEHOLDER
from .serde.models import AttributeValue
from .utils import assert_not_none

R = typing.TypeVar("R")


class AttributeDescriptor:
    """
    An :py:class:`AttributeDescriptor` describes a single attribute of a resource and the
    record field it is read from and written to.

    :param type: the python type of the attribute value.
    :param str name: the name of the attribute on the wire.
    :param Optional[str] field: the name of the record field; defaults to ``name``.
    :param bool allow_null: whether ``null`` is accepted on input.
    :param bool required_on_creation: whether the attribute must be supplied on creation.
    :param bool read_only: never accepted on input.
    :param bool write_only: never rendered on output.
    """

    name: str
    type: typing.Any
    field: str
    allow_null: bool
    required_on_creation: bool
    read_only: bool
    write_only: bool

    def fetch_value(self, record: typing.Any) -> AttributeValue:
        return getattr(record, self.field)

    def store_value(self, record: typing.Any, value: AttributeValue) -> bool:
        prev_value = getattr(record, self.field, None)
        setattr(record, self.field, value)
        return prev_value != value

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, {self.type!r})"

    def __init__(
        self,
        type: typing.Any,
        name: str,
        field: typing.Optional[str] = None,
        allow_null: bool = False,
        required_on_creation: bool = True,
        read_only: bool = False,
        write_only: bool = False,
    ):
        if read_only and write_only:
            raise InvalidDeclarationError(f"attribute {name} cannot be both read-only and write-only")
        self.type = type
        self.name = name
        self.field = field if field is not None else name
        self.allow_null = allow_null
        self.required_on_creation = required_on_creation
        self.read_only = read_only
        self.write_only = write_only


class ResourceCodec(typing.Generic[R]):
    """
    A :py:class:`ResourceCodec` is the per-resource-type configuration of how records of a single
    known class are put on the wire.

    Codecs are built once and never mutated afterwards, so a single instance can be shared by
    any number of concurrent requests.  Which codec applies to which record is decided by the
    caller; a codec never inspects the runtime type of the records it is handed.

    :param str type_tag: the resource type on the wire.
    :param type class_: the record class the codec is bound to.
    :param Iterable[AttributeDescriptor] attributes: the declared attributes.
    :param Mapping[str, str] relationship_templates: relation names to related-link templates.
    :param str identity_attribute: the record field carrying the identity.
    :param Optional[Callable] attributes_of: an explicit projection overriding the declared attributes on output.
    :param Optional[Callable] factory: builds a record from keyword arguments; defaults to ``class_``.
    """

    type_tag: str
    class_: typing.Type[R]
    identity_attribute: str
    _attributes: typing.Mapping[str, AttributeDescriptor]
    _relationship_templates: typing.Mapping[str, str]
    _attributes_of: typing.Optional[typing.Callable[[R], typing.Mapping[str, AttributeValue]]]
    _factory: typing.Callable[..., R]

    @property
    def attributes(self) -> typing.Mapping[str, AttributeDescriptor]:
        return self._attributes

    @property
    def relationship_templates(self) -> typing.Mapping[str, str]:
        return self._relationship_templates

    def attributes_of(self, record: R) -> typing.Mapping[str, AttributeValue]:
        """
        Returns the attributes of the record meant for external consumption.
        Neither the identity nor relationship data are included.
        """
        if self._attributes_of is not None:
            return self._attributes_of(record)
        return OrderedDict(
            (descr.name, descr.fetch_value(record))
            for descr in self._attributes.values()
            if not descr.write_only
        )

    def identity_of(self, record: R) -> str:
        id_ = getattr(record, self.identity_attribute, None)
        if id_ is None:
            raise InvalidIdentifierError(
                f'{self.class_.__name__} has no identity assigned to "{self.identity_attribute}"'
            )
        return str(id_)

    def materialize(self, attributes: typing.Mapping[str, AttributeValue]) -> R:
        """
        Builds a fresh record out of parsed attributes.  The identity is left unset.
        """
        return self._factory(
            **{self._attributes[name].field: value for name, value in attributes.items()}
        )

    def apply(self, record: R, attributes: typing.Mapping[str, AttributeValue]) -> R:
        """
        Writes parsed attributes onto an existing record.
        """
        for name, value in attributes.items():
            self._attributes[name].store_value(record, value)
        return record

    def __repr__(self):
        return f"{type(self).__name__}({self.type_tag!r}, {self.class_.__name__})"

    def __init__(
        self,
        type_tag: str,
        class_: typing.Type[R],
        attributes: typing.Iterable[AttributeDescriptor] = (),
        relationship_templates: typing.Optional[typing.Mapping[str, str]] = None,
        identity_attribute: str = "id",
        attributes_of: typing.Optional[
            typing.Callable[[R], typing.Mapping[str, AttributeValue]]
        ] = None,
        factory: typing.Optional[typing.Callable[..., R]] = None,
    ):
        if not type_tag:
            raise InvalidDeclarationError("type tag must not be empty")

        _attributes: typing.MutableMapping[str, AttributeDescriptor] = OrderedDict()
        for descr in attributes:
            name = assert_not_none(descr.name)
            if name in _attributes:
                raise InvalidDeclarationError(f'attribute "{name}" is declared more than once')
            if name == "id" or descr.field == identity_attribute:
                raise InvalidDeclarationError(
                    f'attribute "{name}" collides with the identity of "{type_tag}"'
                )
            _attributes[name] = descr

        _templates: typing.MutableMapping[str, str] = OrderedDict()
        for rel_name, template in (relationship_templates or {}).items():
            if not isinstance(template, str):
                raise InvalidDeclarationError(
                    f'template for relationship "{rel_name}" must be a string, got {template!r}'
                )
            if template.count(PLACEHOLDER) > 1:
                raise InvalidDeclarationError(
                    f'template for relationship "{rel_name}" has more than one placeholder: {template}'
                )
            if rel_name in _attributes:
                raise InvalidDeclarationError(
                    f'relationship "{rel_name}" collides with an attribute of "{type_tag}"'
                )
            _templates[rel_name] = template

        self.type_tag = type_tag
        self.class_ = class_
        self.identity_attribute = identity_attribute
        self._attributes = types.MappingProxyType(_attributes)
        self._relationship_templates = types.MappingProxyType(_templates)
        self._attributes_of = attributes_of
        self._factory = factory if factory is not None else class_
