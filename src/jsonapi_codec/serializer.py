import typing

from .codec import ResourceCodec
from .exceptions import CodecError, MalformedPayloadError
from .links import resolve_related_link
from .serde.builders import CollectionDocumentBuilder, ResourceReprBuilder, SingletonDocumentBuilder
from .serde.models import (
    CollectionDocumentRepr,
    ErrorDocumentRepr,
    ErrorRepr,
    LinkageRepr,
    LinksRepr,
    ResourceRepr,
    SingletonDocumentRepr,
    SourceRepr,
)
from .serde.renderer import ReprRenderer
from .serde.types import MutableJSONObject

R = typing.TypeVar("R")


def build_relationships(
    id: str, templates: typing.Mapping[str, str]
) -> typing.Mapping[str, LinkageRepr]:
    """
    Builds link-only relationship entries, one per declared relation.

    :param str id: the identity of the host record.
    :param Mapping[str, str] templates: relation names to related-link templates.
    """
    return {
        name: LinkageRepr(links=LinksRepr(related=resolve_related_link(template, id)))
        for name, template in templates.items()
    }


def _populate_resource(builder: ResourceReprBuilder, record: R, codec: ResourceCodec[R]) -> None:
    id_ = codec.identity_of(record)
    builder.set_type(codec.type_tag)
    builder.set_id(id_)
    for name, value in codec.attributes_of(record).items():
        builder.add_attribute(name, value)
    for name, linkage in build_relationships(id_, codec.relationship_templates).items():
        builder.add_relationship(name, linkage)


def build_document(record: R, codec: ResourceCodec[R]) -> ResourceRepr:
    """
    Builds the resource object for a single record.
    """
    builder = ResourceReprBuilder()
    _populate_resource(builder, record, codec)
    return builder()


def serialize_one(self_url: str, record: R, codec: ResourceCodec[R]) -> SingletonDocumentRepr:
    """
    Builds an envelope carrying a single record.

    :param str self_url: the value for the top-level ``links.self``.
    :param record: the record to serialize.
    :param ResourceCodec codec: the codec of the record's resource type.
    """
    builder = SingletonDocumentBuilder()
    builder.links = LinksRepr(self_=self_url)
    _populate_resource(builder.data, record, codec)
    return builder()


def serialize_many(
    self_url: str, records: typing.Iterable[R], codec: ResourceCodec[R]
) -> CollectionDocumentRepr:
    """
    Builds an envelope carrying the records in the order they are given.

    ``records`` may be a lazily produced iterable; it is consumed exactly once.

    :param str self_url: the value for the top-level ``links.self``.
    :param Iterable records: the records to serialize.
    :param ResourceCodec codec: the codec of the records' resource type.
    """
    builder = CollectionDocumentBuilder()
    builder.links = LinksRepr(self_=self_url)
    for record in records:
        _populate_resource(builder.next(), record, codec)
    return builder()


def serialize_error(exc: CodecError) -> ErrorDocumentRepr:
    """
    Builds an error document out of a codec error, one error object per offending location.
    """
    if isinstance(exc, MalformedPayloadError):
        return ErrorDocumentRepr(
            errors=[
                ErrorRepr(
                    title=exc.title,
                    detail=item.message,
                    source=SourceRepr(pointer=str(item.pointer)),
                )
                for item in exc.items
            ]
        )
    sources = exc.sources
    return ErrorDocumentRepr(
        errors=[
            ErrorRepr(
                title=exc.title,
                detail=exc.message,
                source=SourceRepr(pointer=str(sources[0])) if sources else None,
            )
        ]
    )


class DocumentSerializer:
    """
    Bundles document construction and rendering.  Instances hold no per-request state and
    can be shared freely.

    :param Optional[ReprRenderer] renderer: the renderer to use; a default one is created when omitted.
    """

    renderer: ReprRenderer

    def serialize_one(self, self_url: str, record: R, codec: ResourceCodec[R]) -> SingletonDocumentRepr:
        return serialize_one(self_url, record, codec)

    def serialize_many(
        self, self_url: str, records: typing.Iterable[R], codec: ResourceCodec[R]
    ) -> CollectionDocumentRepr:
        return serialize_many(self_url, records, codec)

    def render_one(self, self_url: str, record: R, codec: ResourceCodec[R]) -> MutableJSONObject:
        return self.renderer(serialize_one(self_url, record, codec))

    def render_many(
        self, self_url: str, records: typing.Iterable[R], codec: ResourceCodec[R]
    ) -> MutableJSONObject:
        return self.renderer(serialize_many(self_url, records, codec))

    def render_error(self, exc: CodecError) -> MutableJSONObject:
        return self.renderer(serialize_error(exc))

    def __init__(self, renderer: typing.Optional[ReprRenderer] = None):
        self.renderer = renderer if renderer is not None else ReprRenderer()
