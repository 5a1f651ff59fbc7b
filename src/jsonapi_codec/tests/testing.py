import dataclasses
import datetime
import typing
from collections import OrderedDict

from ..declarative import Attr, codec_for_dataclass
from ..exceptions import RecordNotFoundError
from ..interfaces import EntityStore

R = typing.TypeVar("R")


@dataclasses.dataclass
class Post:
    title: str
    body: typing.Optional[str] = None
    published_on: typing.Optional[datetime.date] = None
    id: typing.Optional[int] = None


@dataclasses.dataclass
class Comment:
    content: str
    post: typing.Optional[Post] = None
    id: typing.Optional[int] = None


post_codec = codec_for_dataclass(
    Post,
    "posts",
    relationship_templates={"comments": "/posts/{id}/comments"},
)

comment_codec = codec_for_dataclass(
    Comment,
    "comments",
    relationship_templates={"post": "/comments/{id}/post"},
    attribute_overrides={"content": Attr(allow_null=False)},
    exclude=("post",),
)


class PlainEntityStore(EntityStore[R]):
    _type_name: str
    records: "OrderedDict[str, R]"
    _next_id: int

    @property
    def type_name(self) -> str:
        return self._type_name

    def find_one(self, id: str) -> R:
        try:
            return self.records[id]
        except KeyError:
            raise RecordNotFoundError(self._type_name, id)

    def find_all(self, **criteria: typing.Any) -> typing.Iterator[R]:
        return (
            record
            for record in list(self.records.values())
            if all(getattr(record, k) == v for k, v in criteria.items())
        )

    def save(self, record: R) -> R:
        id_ = getattr(record, "id")
        if id_ is None:
            id_ = self._next_id
            self._next_id += 1
            setattr(record, "id", id_)
        self.records[str(id_)] = record
        return record

    def delete(self, id: str) -> None:
        self.find_one(id)
        del self.records[id]

    def __init__(self, type_name: str):
        self._type_name = type_name
        self.records = OrderedDict()
        self._next_id = 1
