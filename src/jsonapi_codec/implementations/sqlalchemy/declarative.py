import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...codec import AttributeDescriptor, ResourceCodec
from ...declarative import Attr, build_attribute_descriptor
from ...exceptions import InvalidDeclarationError
from .core import python_type_of, single_primary_key

R = typing.TypeVar("R")


def is_alien_clause(sa_mapper: orm.Mapper, expression: sa.sql.ClauseElement) -> bool:
    if not isinstance(expression, sa.Column):
        return True
    if expression.table is None:
        return True
    return expression.table not in sa_mapper.tables


def _has_default(column: sa.Column) -> bool:
    return column.default is not None or column.server_default is not None


def codec_for_mapped_class(
    class_: typing.Type[R],
    type_tag: str,
    relationship_templates: typing.Optional[typing.Mapping[str, str]] = None,
    attribute_overrides: typing.Optional[typing.Mapping[str, Attr]] = None,
    exclude: typing.Iterable[str] = (),
) -> ResourceCodec[R]:
    """
    Builds a :py:class:`ResourceCodec` for an SQLAlchemy-mapped class, deriving one attribute
    per column property.

    The primary key becomes the identity; foreign key columns, columns of other tables and
    the properties named in ``exclude`` are left out, as relationships are conveyed by links.

    :param type class_: the mapped class.
    :param str type_tag: the resource type on the wire.
    :param Mapping[str, str] relationship_templates: relation names to related-link templates.
    :param Mapping[str, Attr] attribute_overrides: per-property overrides.
    :param Iterable[str] exclude: column properties that are not attributes.
    """
    sa_mapper = sa.inspect(class_)
    pk_attr, _ = single_primary_key(sa_mapper)
    overrides = dict(attribute_overrides or {})
    excluded = set(exclude)
    descrs: typing.List[AttributeDescriptor] = []
    for prop in sa_mapper.column_attrs:
        if prop.key == pk_attr or prop.key in excluded:
            continue
        column = prop.expression
        if is_alien_clause(sa_mapper, column) or column.foreign_keys:
            continue
        type_ = python_type_of(column)
        if type_ is None or type_ in (dict, list):
            type_ = typing.Any
        descrs.append(
            build_attribute_descriptor(
                prop.key,
                type_,
                bool(column.nullable),
                not column.nullable and not _has_default(column),
                overrides.pop(prop.key, None),
            )
        )
    if overrides:
        raise InvalidDeclarationError(
            f"overrides given for unknown properties of {class_.__name__}: {', '.join(overrides)}"
        )
    return ResourceCodec(
        type_tag,
        class_,
        attributes=descrs,
        relationship_templates=relationship_templates,
        identity_attribute=pk_attr,
    )
