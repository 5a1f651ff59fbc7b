import dataclasses
import typing

from .codec import AttributeDescriptor, ResourceCodec
from .exceptions import InvalidDeclarationError
from .serde.utils import unwrap_optional
from .utils.types import UNSPECIFIED, UnspecifiedType

R = typing.TypeVar("R")


@dataclasses.dataclass
class Attr:
    """
    Overrides what would otherwise be derived from a record field.
    """

    type: typing.Union[UnspecifiedType, typing.Any] = UNSPECIFIED
    name: typing.Union[UnspecifiedType, str] = UNSPECIFIED
    allow_null: typing.Union[UnspecifiedType, bool] = UNSPECIFIED
    required_on_creation: typing.Union[UnspecifiedType, bool] = UNSPECIFIED
    read_only: typing.Union[UnspecifiedType, bool] = UNSPECIFIED
    write_only: typing.Union[UnspecifiedType, bool] = UNSPECIFIED


def build_attribute_descriptor(
    field_name: str,
    type_: typing.Any,
    allow_null: bool,
    required_on_creation: bool,
    override: typing.Optional[Attr] = None,
) -> AttributeDescriptor:
    if override is None:
        override = Attr()
    return AttributeDescriptor(
        type=type_ if override.type is UNSPECIFIED else override.type,
        name=field_name if override.name is UNSPECIFIED else typing.cast(str, override.name),
        field=field_name,
        allow_null=(
            allow_null if override.allow_null is UNSPECIFIED else bool(override.allow_null)
        ),
        required_on_creation=(
            required_on_creation
            if override.required_on_creation is UNSPECIFIED
            else bool(override.required_on_creation)
        ),
        read_only=bool(override.read_only),
        write_only=bool(override.write_only),
    )


def _dataclass_factory(class_: typing.Type[R]) -> typing.Callable[..., R]:
    required = [
        f.name
        for f in dataclasses.fields(class_)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING  # type: ignore
    ]

    def factory(**kwargs: typing.Any) -> R:
        for name in required:
            kwargs.setdefault(name, None)
        return class_(**kwargs)

    return factory


def codec_for_dataclass(
    class_: typing.Type[R],
    type_tag: str,
    relationship_templates: typing.Optional[typing.Mapping[str, str]] = None,
    identity_attribute: str = "id",
    attribute_overrides: typing.Optional[typing.Mapping[str, Attr]] = None,
    exclude: typing.Iterable[str] = (),
) -> ResourceCodec[R]:
    """
    Builds a :py:class:`ResourceCodec` for a dataclass, deriving one attribute per field.

    The identity field and the fields named in ``exclude`` (typically the ones holding related
    records) are left out.  ``Optional`` fields accept ``null``; fields with a default are not
    required on creation.  Records materialized from partial input get ``None`` for the
    fields that were not supplied.

    :param type class_: the dataclass.
    :param str type_tag: the resource type on the wire.
    :param Mapping[str, str] relationship_templates: relation names to related-link templates.
    :param str identity_attribute: the field carrying the identity.
    :param Mapping[str, Attr] attribute_overrides: per-field overrides.
    :param Iterable[str] exclude: fields that are not attributes.
    """
    if not dataclasses.is_dataclass(class_):
        raise InvalidDeclarationError(f"{class_!r} is not a dataclass")
    overrides = dict(attribute_overrides or {})
    excluded = set(exclude)
    hints = typing.get_type_hints(class_)
    field_names = set()
    descrs: typing.List[AttributeDescriptor] = []
    for f in dataclasses.fields(class_):
        field_names.add(f.name)
        if f.name == identity_attribute or f.name in excluded:
            continue
        type_, allow_null = unwrap_optional(hints.get(f.name, typing.Any))
        has_default = (
            f.default is not dataclasses.MISSING
            or f.default_factory is not dataclasses.MISSING  # type: ignore
        )
        descrs.append(
            build_attribute_descriptor(
                f.name, type_, allow_null, not has_default, overrides.pop(f.name, None)
            )
        )
    if identity_attribute not in field_names:
        raise InvalidDeclarationError(
            f'{class_.__name__} has no identity field "{identity_attribute}"'
        )
    if overrides:
        raise InvalidDeclarationError(
            f"overrides given for unknown fields of {class_.__name__}: {', '.join(overrides)}"
        )
    return ResourceCodec(
        type_tag,
        class_,
        attributes=descrs,
        relationship_templates=relationship_templates,
        identity_attribute=identity_attribute,
        factory=_dataclass_factory(class_),
    )
