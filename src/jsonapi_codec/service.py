"""
:py:mod:`jsonapi_codec.service` ties the parser, an :py:class:`~jsonapi_codec.interfaces.EntityStore`
and the serializer together for a single resource type.  It knows nothing about the transport:
it takes decoded request bodies and path parameters and returns document representations.

Synopsis
--------

.. code-block:: python

   posts = ResourceService(post_codec, SQLAEntityStore(session, Post), "/posts")
   comments = ResourceService(
       comment_codec,
       SQLAEntityStore(session, Comment),
       "/comments",
       relations=[
           RelationBinding("post", lambda comment, id: setattr(comment, "post", posts.store.find_one(id))),
       ],
   )

   renderer(comments.create({"data": {"type": "comments", ...}}))

"""

import dataclasses
import logging
import typing

from .codec import ResourceCodec
from .interfaces import EntityStore
from .parser import DocumentParser, ParsedInput, get_relationship_identity
from .serde.models import CollectionDocumentRepr, SingletonDocumentRepr
from .serde.types import JSONValue
from .serializer import serialize_many, serialize_one

logger = logging.getLogger(__name__)

R = typing.TypeVar("R")


@dataclasses.dataclass(frozen=True)
class RelationBinding(typing.Generic[R]):
    """
    Associates the record being written with a related record referenced by identity.

    :param str name: the relationship name.
    :param Callable bind: called with the record and the referenced identity; it should look
        the related record up before touching the record.
    :param bool required_on_creation: whether a create request must supply the relationship.
    """

    name: str
    bind: typing.Callable[[R, str], None]
    required_on_creation: bool = True


class ResourceService(typing.Generic[R]):
    """
    :param ResourceCodec codec: the codec of the resource type.
    :param EntityStore store: the store the records live in.
    :param str base_url: the URL of the resource collection; a record lives at ``{base_url}/{id}``.
    :param Iterable[RelationBinding] relations: the relationships accepted on input.
    :param bool check_type: reject documents of another resource type.
    """

    codec: ResourceCodec[R]
    store: EntityStore[R]
    base_url: str
    relations: typing.Sequence[RelationBinding[R]]
    parser: DocumentParser[R]

    def self_url(self, id: str) -> str:
        return f"{self.base_url}/{id}"

    def _bind_relations(self, parsed: ParsedInput[R], record: R, creating: bool) -> None:
        for binding in self.relations:
            if creating and binding.required_on_creation:
                related_id = get_relationship_identity(parsed, binding.name)
            else:
                related_id = parsed.relationship_identity(binding.name, None)
                if related_id is None:
                    continue
            binding.bind(record, related_id)

    def create(self, raw: JSONValue) -> SingletonDocumentRepr:
        """
        Creates a record out of the document.  The store assigns the identity.

        :raises MalformedPayloadError: if the document is malformed or incomplete.
        :raises MissingRelationshipError: if a relationship required on creation is absent.
        """
        parsed = self.parser.parse(raw, require_complete_set_of_attributes=True)
        record = parsed.attributes
        self._bind_relations(parsed, record, True)
        record = self.store.save(record)
        id_ = self.codec.identity_of(record)
        logger.info("created %s %s", self.codec.type_tag, id_)
        return serialize_one(self.self_url(id_), record, self.codec)

    def update(self, id: str, raw: JSONValue) -> SingletonDocumentRepr:
        """
        Updates the record with the attributes and relationships supplied in the document.
        Attributes are written only once every relationship has been bound, so a related
        record that cannot be found leaves them untouched.

        :raises RecordNotFoundError: if there is no such record, or no such related record.
        :raises MalformedPayloadError: if the document is malformed.
        """
        record = self.store.find_one(id)
        parsed = self.parser.parse_for_update(raw, record, apply=False)
        self._bind_relations(parsed, record, False)
        self.codec.apply(record, parsed.supplied)
        record = self.store.save(record)
        logger.info("updated %s %s (%s)", self.codec.type_tag, id, ", ".join(parsed.supplied))
        return serialize_one(self.self_url(id), record, self.codec)

    def show(self, id: str) -> SingletonDocumentRepr:
        """
        :raises RecordNotFoundError: if there is no such record.
        """
        return serialize_one(self.self_url(id), self.store.find_one(id), self.codec)

    def index(
        self, self_url: typing.Optional[str] = None, **criteria: typing.Any
    ) -> CollectionDocumentRepr:
        """
        Lists the records, optionally narrowed down by ``criteria``.  ``self_url`` defaults to
        the base URL; related collections pass the URL they are served at.
        """
        return serialize_many(
            self.base_url if self_url is None else self_url,
            self.store.find_all(**criteria),
            self.codec,
        )

    def destroy(self, id: str) -> None:
        """
        :raises RecordNotFoundError: if there is no such record.
        """
        self.store.delete(id)
        logger.info("deleted %s %s", self.codec.type_tag, id)

    def __init__(
        self,
        codec: ResourceCodec[R],
        store: EntityStore[R],
        base_url: str,
        relations: typing.Iterable[RelationBinding[R]] = (),
        check_type: bool = True,
    ):
        self.codec = codec
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.relations = tuple(relations)
        self.parser = DocumentParser(codec, check_type)
