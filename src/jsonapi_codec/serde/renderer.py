"""
:py:mod:`jsonapi_codec.serde.renderer` turns document representations into plain JSON-compatible
dictionaries, ready to be handed to :py:func:`json.dumps`.

Synopsis
--------

.. code-block:: python

   import json

   from jsonapi_codec.serde.renderer import ReprRenderer

   document = SingletonDocumentRepr(
       links=LinksRepr(self_="/posts/1"),
       data=ResourceRepr(
           type="posts",
           id="1",
           attributes=[("title", "hello")],
           relationships=[
               ("comments", LinkageRepr(links=LinksRepr(related="/posts/1/comments"))),
           ],
       ),
   )

   print(json.dumps(ReprRenderer()(document)))

"""

import base64
import collections.abc
import datetime
import decimal
import typing
from collections import OrderedDict

from .models import (
    AttributeValue,
    CollectionDocumentRepr,
    ErrorDocumentRepr,
    ErrorRepr,
    LinkageRepr,
    LinksRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)
from .types import JSONScalar, JSONValue, MutableJSONObject
from .utils import JSONPointer

Document = typing.Union[SingletonDocumentRepr, CollectionDocumentRepr, ErrorDocumentRepr]


class TZLocalizer(typing.Protocol):
    def localize(self, dt: datetime.datetime) -> datetime.datetime:
        ...  # pragma: nocover


class ReprRenderer:
    """
    Renders document representations into JSON-compatible dictionaries.

    Attribute values of the types listed in ``_encoders`` are converted to their JSON form;
    sequences and mappings of them are rendered member by member.  Any other value raises
    :py:class:`TypeError` carrying the JSON pointer of the offending attribute.

    :param bool render_decimal_as_str: render :py:class:`decimal.Decimal` values as strings (floats otherwise).
    :param Optional[datetime.tzinfo] assume_naive_timezone_as: the timezone naive datetimes are assumed to be in.
        Naive datetimes are rejected when not given.  A pytz-style zone with ``localize()`` is also accepted.
    """

    _render_decimal_as_str: bool = True
    _assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None

    def _encode_datetime(self, path: JSONPointer, value: datetime.datetime) -> JSONScalar:
        if value.tzinfo is None:
            tz = self._assume_naive_timezone_as
            if tz is None:
                raise ValueError(f"{path}: naive datetime {value}")
            if hasattr(tz, "localize"):
                value = typing.cast(TZLocalizer, tz).localize(value)
            else:
                value = value.replace(tzinfo=tz)
        return value.astimezone(datetime.timezone.utc).isoformat()

    def _encode_date(self, path: JSONPointer, value: datetime.date) -> JSONScalar:
        return value.isoformat()

    def _encode_decimal(self, path: JSONPointer, value: decimal.Decimal) -> JSONScalar:
        if self._render_decimal_as_str:
            return str(value)
        return float(value)

    def _encode_bytes(self, path: JSONPointer, value: bytes) -> JSONScalar:
        return base64.b64encode(value).decode("ascii")

    def _encode_as_is(self, path: JSONPointer, value: typing.Any) -> JSONScalar:
        return value

    # datetime precedes date, as the former is a subclass of the latter
    _encoders: typing.ClassVar[typing.Sequence[typing.Tuple[type, str]]] = (
        (datetime.datetime, "_encode_datetime"),
        (datetime.date, "_encode_date"),
        (decimal.Decimal, "_encode_decimal"),
        (bytes, "_encode_bytes"),
        (str, "_encode_as_is"),
        (bool, "_encode_as_is"),
        (int, "_encode_as_is"),
        (float, "_encode_as_is"),
        (type(None), "_encode_as_is"),
    )

    def _encode_scalar(self, path: JSONPointer, value: typing.Any) -> JSONScalar:
        for type_, method in self._encoders:
            if isinstance(value, type_):
                return getattr(self, method)(path, value)
        raise TypeError(f"{path}: unsupported type {value!r}")

    def _render_attribute_value(self, path: JSONPointer, value: AttributeValue) -> JSONValue:
        if isinstance(value, collections.abc.Mapping):
            return OrderedDict((k, self._encode_scalar(path / k, v)) for k, v in value.items())
        if isinstance(value, collections.abc.Sequence) and not isinstance(value, (str, bytes)):
            return [self._encode_scalar(path[i], v) for i, v in enumerate(value)]
        return self._encode_scalar(path, value)

    def _render_links(self, links: LinksRepr) -> MutableJSONObject:
        retval: MutableJSONObject = {}
        for key, value in (("self", links.self_), ("related", links.related)):
            if value is not None:
                retval[key] = value
        return retval

    def _render_linkage(self, linkage: LinkageRepr) -> MutableJSONObject:
        retval: MutableJSONObject = {}
        if linkage.links is not None:
            retval["links"] = self._render_links(linkage.links)
        if linkage.data is not None:
            retval["data"] = {"type": linkage.data.type, "id": linkage.data.id}
        return retval

    def _render_resource(self, path: JSONPointer, resource: ResourceRepr) -> MutableJSONObject:
        attributes_path = path / "attributes"
        return {
            "type": resource.type,
            "id": resource.id,
            "attributes": OrderedDict(
                (name, self._render_attribute_value(attributes_path / name, value))
                for name, value in resource.attributes.items()
            ),
            "relationships": OrderedDict(
                (name, self._render_linkage(linkage))
                for name, linkage in resource.relationships.items()
            ),
        }

    def _render_error(self, error: ErrorRepr) -> MutableJSONObject:
        retval: MutableJSONObject = {}
        for key, value in (("code", error.code), ("title", error.title), ("detail", error.detail)):
            if value is not None:
                retval[key] = value
        if error.source is not None:
            retval["source"] = (
                {} if error.source.pointer is None else {"pointer": error.source.pointer}
            )
        return retval

    def _with_links(
        self,
        document: typing.Union[SingletonDocumentRepr, CollectionDocumentRepr],
        data: JSONValue,
    ) -> MutableJSONObject:
        retval: MutableJSONObject = {}
        if document.links is not None:
            retval["links"] = self._render_links(document.links)
        retval["data"] = data
        return retval

    def __call__(self, document: Document) -> MutableJSONObject:
        root = JSONPointer() / "data"
        if isinstance(document, SingletonDocumentRepr):
            return self._with_links(document, self._render_resource(root, document.data))
        elif isinstance(document, CollectionDocumentRepr):
            return self._with_links(
                document,
                [self._render_resource(root[i], r) for i, r in enumerate(document.data)],
            )
        elif isinstance(document, ErrorDocumentRepr):
            return {"errors": [self._render_error(e) for e in document.errors]}
        raise TypeError(f"not a document: {document!r}")

    def __init__(
        self,
        render_decimal_as_str: bool = True,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self._render_decimal_as_str = render_decimal_as_str
        self._assume_naive_timezone_as = assume_naive_timezone_as
