"""
Classes in :py:mod:`jsonapi_codec.serde.models` are the in-memory representation of document nodes.

Only the part of JSON:API this library speaks is modelled: resource objects carrying attributes
and link-only relationships on output, resource identifier linkages on input, and error objects.
Every node may carry ``_source_``, the JSON pointer it was read from, so that errors found later
can be reported against the inbound payload.
"""

import dataclasses
import datetime
import decimal
import typing
from collections import OrderedDict

from .utils import JSONPointer

Source = typing.Union[JSONPointer, str]


class Repr:
    """
    The base class for any model objects.
    """

    _source_: typing.Optional[Source]


@dataclasses.dataclass
class LinksRepr(Repr):
    """
    A ``links`` node.  ``self_`` stands for the ``self`` member.

    Ref. `Document Links <https://jsonapi.org/format/#document-links>`_
    """

    self_: typing.Optional[str] = None
    related: typing.Optional[str] = None
    _source_: typing.Optional[Source] = None


@dataclasses.dataclass
class ResourceIdRepr(Repr):
    """
    A `Resource Identifier Object <https://jsonapi.org/format/#document-resource-identifier-objects>`_.

    This is the only form a relationship takes on input: an identity pointer to an existing
    resource, never a full nested resource.
    """

    type: str
    id: str
    _source_: typing.Optional[Source] = None


@dataclasses.dataclass
class LinkageRepr(Repr):
    """
    A single entry of a ``relationships`` node.  Outbound entries carry ``links`` only;
    inbound ones carry ``data``.
    """

    links: typing.Optional[LinksRepr] = None
    data: typing.Optional[ResourceIdRepr] = None
    _source_: typing.Optional[Source] = None


AttributeScalar = typing.Union[
    datetime.datetime, datetime.date, decimal.Decimal, str, int, float, bytes, None
]
AttributeValue = typing.Union[
    typing.Sequence[AttributeScalar],
    typing.Mapping[str, AttributeScalar],
    AttributeScalar,
]


@dataclasses.dataclass
class ResourceRepr(Repr):
    """
    A `Resource Object <https://jsonapi.org/format/#document-resource-objects>`_.

    ``attributes`` and ``relationships`` accept either mappings or sequences of name-value
    pairs and are kept as ordered dictionaries, preserving the order they were given in.
    """

    type: str
    id: typing.Optional[str]
    attributes: typing.Mapping[str, AttributeValue] = dataclasses.field(default_factory=OrderedDict)
    relationships: typing.Mapping[str, LinkageRepr] = dataclasses.field(default_factory=OrderedDict)
    _source_: typing.Optional[Source] = None

    def __getitem__(self, name: str) -> AttributeValue:
        return self.attributes[name]

    def __post_init__(self):
        self.attributes = OrderedDict(self.attributes)
        self.relationships = OrderedDict(self.relationships)


@dataclasses.dataclass
class SourceRepr(Repr):
    """
    The ``source`` member of an `Error Object <https://jsonapi.org/format/#error-objects>`_.
    """

    pointer: typing.Optional[str] = None
    _source_: typing.Optional[Source] = None


@dataclasses.dataclass
class ErrorRepr(Repr):
    code: typing.Optional[str] = None
    title: typing.Optional[str] = None
    detail: typing.Optional[str] = None
    source: typing.Optional[SourceRepr] = None
    _source_: typing.Optional[Source] = None


@dataclasses.dataclass
class SingletonDocumentRepr(Repr):
    """
    An envelope carrying a single resource object.
    """

    data: ResourceRepr
    links: typing.Optional[LinksRepr] = None
    _source_: typing.Optional[Source] = None


@dataclasses.dataclass
class CollectionDocumentRepr(Repr):
    """
    An envelope carrying resource objects in the order they were given.
    """

    data: typing.Sequence[ResourceRepr] = ()
    links: typing.Optional[LinksRepr] = None
    _source_: typing.Optional[Source] = None

    def __post_init__(self):
        self.data = tuple(self.data)


@dataclasses.dataclass
class ErrorDocumentRepr(Repr):
    errors: typing.Sequence[ErrorRepr] = ()
    _source_: typing.Optional[Source] = None

    def __post_init__(self):
        self.errors = tuple(self.errors)
