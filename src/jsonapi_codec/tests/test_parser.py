import dataclasses
import datetime
import typing

import pytest

from ..exceptions import MalformedPayloadError, MissingRelationshipError, TypeMismatchError
from ..serde.models import ResourceIdRepr
from ..serde.utils import JSONPointer
from .testing import Comment, Post, comment_codec, post_codec

COMMENT_PAYLOAD = {
    "data": {
        "type": "comments",
        "attributes": {"content": "hi"},
        "relationships": {"post": {"data": {"id": "7", "type": "posts"}}},
    },
}


@pytest.fixture
def target():
    from ..parser import DocumentParser

    return DocumentParser


class TestParse:
    def test_create(self, target):
        parsed = target(comment_codec).parse(COMMENT_PAYLOAD)

        assert parsed.type == "comments"
        assert parsed.id is None
        assert parsed.attributes == Comment(content="hi")
        assert dict(parsed.supplied) == {"content": "hi"}
        assert parsed.relationships == {
            "post": ResourceIdRepr(
                id="7", type="posts", _source_=JSONPointer("/data/relationships/post/data")
            ),
        }

    def test_update_carries_identity(self, target):
        parsed = target(post_codec).parse(
            {"data": {"type": "posts", "id": "3", "attributes": {"title": "t"}}}
        )
        assert parsed.id == "3"
        assert parsed.attributes.id is None

    def test_identity_is_not_inferred_from_attributes(self, target):
        parsed = target(post_codec).parse(
            {"data": {"type": "posts", "attributes": {"title": "t", "id": "3"}}}
        )
        assert parsed.id is None
        assert "id" not in parsed.supplied

    def test_conversion(self, target):
        parsed = target(post_codec).parse(
            {
                "data": {
                    "type": "posts",
                    "attributes": {"title": "t", "published_on": "2020-01-02", "extra": 1},
                },
            }
        )
        assert parsed.attributes == Post(title="t", published_on=datetime.date(2020, 1, 2))

    def test_malformed(self, target):
        with pytest.raises(MalformedPayloadError) as excinfo:
            target(post_codec).parse({"foo": 1})
        assert excinfo.value.sources == [JSONPointer("/data")]

    def test_invalid_attribute(self, target):
        with pytest.raises(MalformedPayloadError) as excinfo:
            target(post_codec).parse(
                {"data": {"type": "posts", "attributes": {"title": None, "published_on": 1}}}
            )
        assert excinfo.value.sources == [
            JSONPointer("/data/attributes/title"),
            JSONPointer("/data/attributes/published_on"),
        ]

    def test_complete_set_of_attributes(self, target):
        parser = target(post_codec)
        payload = {"data": {"type": "posts", "attributes": {"body": "b"}}}

        assert parser.parse(payload).attributes == Post(title=None, body="b")  # type: ignore
        with pytest.raises(MalformedPayloadError):
            parser.parse(payload, require_complete_set_of_attributes=True)

    def test_type_mismatch(self, target):
        with pytest.raises(TypeMismatchError) as excinfo:
            target(post_codec).parse(COMMENT_PAYLOAD)
        assert (excinfo.value.expected, excinfo.value.actual) == ("posts", "comments")
        assert excinfo.value.sources == [JSONPointer("/data/type")]

    def test_type_check_disabled(self, target):
        parsed = target(post_codec, check_type=False).parse(
            {"data": {"type": "articles", "attributes": {"title": "t"}}}
        )
        assert parsed.type == "articles"

    def test_nested_relationship_is_reference_only(self, target):
        payload = {
            "data": {
                "type": "comments",
                "attributes": {"content": "hi"},
                "relationships": {
                    "post": {
                        "data": {"id": "7", "type": "posts", "attributes": {"title": "x"}},
                    },
                },
            },
        }
        parsed = target(comment_codec).parse(payload)
        reference = parsed.relationships["post"]
        assert isinstance(reference, ResourceIdRepr)
        assert (reference.id, reference.type) == ("7", "posts")

    def test_record_cannot_be_built(self, target):
        from ..codec import AttributeDescriptor, ResourceCodec

        @dataclasses.dataclass
        class Note:
            title: str
            id: typing.Optional[int] = None

        codec = ResourceCodec("notes", Note, attributes=[AttributeDescriptor(str, "title")])
        with pytest.raises(MalformedPayloadError) as excinfo:
            target(codec).parse({"data": {"type": "notes", "attributes": {}}})
        assert excinfo.value.sources == [JSONPointer("/data/attributes")]

        parsed = target(codec).parse({"data": {"type": "notes", "attributes": {"title": "t"}}})
        assert parsed.attributes == Note(title="t")


class TestParseForUpdate:
    def test_applies_supplied_attributes(self, target):
        post = Post(title="old", body="keep", id=3)
        parsed = target(post_codec).parse_for_update(
            {"data": {"type": "posts", "id": "3", "attributes": {"title": "new"}}}, post
        )
        assert parsed.attributes is post
        assert post == Post(title="new", body="keep", id=3)

    def test_without_identity(self, target):
        post = Post(title="old", id=3)
        target(post_codec).parse_for_update(
            {"data": {"type": "posts", "attributes": {"title": "new"}}}, post
        )
        assert post.title == "new"

    def test_identity_mismatch(self, target):
        post = Post(title="old", id=3)
        with pytest.raises(MalformedPayloadError) as excinfo:
            target(post_codec).parse_for_update(
                {"data": {"type": "posts", "id": "4", "attributes": {"title": "new"}}}, post
            )
        assert excinfo.value.sources == [JSONPointer("/data/id")]
        assert post.title == "old"

    def test_check_without_applying(self, target):
        post = Post(title="old", id=3)
        parsed = target(post_codec).parse_for_update(
            {"data": {"type": "posts", "id": "3", "attributes": {"title": "new"}}},
            post,
            apply=False,
        )
        assert parsed.attributes is post
        assert post.title == "old"
        assert dict(parsed.supplied) == {"title": "new"}


class TestRelationshipAccess:
    def test_identity(self):
        from ..parser import get_relationship_identity, parse

        parsed = parse(COMMENT_PAYLOAD, comment_codec)
        assert get_relationship_identity(parsed, "post") == "7"

    def test_reference(self):
        from ..parser import get_relationship_reference, parse

        parsed = parse(COMMENT_PAYLOAD, comment_codec)
        assert get_relationship_reference(parsed, "post").type == "posts"

    def test_missing(self):
        from ..parser import get_relationship_identity, parse

        payload = {"data": {"type": "comments", "attributes": {"content": "hi"}}}
        parsed = parse(payload, comment_codec)
        with pytest.raises(MissingRelationshipError) as excinfo:
            get_relationship_identity(parsed, "post")
        assert excinfo.value.name == "post"
        assert excinfo.value.sources == [JSONPointer("/data/relationships")]

    def test_default(self):
        from ..parser import parse

        parsed = parse({"data": {"type": "comments", "attributes": {}}}, comment_codec)
        assert parsed.relationship_identity("post", None) is None
        with pytest.raises(MissingRelationshipError):
            parsed.relationship_identity("post")

        parsed = parse(COMMENT_PAYLOAD, comment_codec)
        assert parsed.relationship_identity("post", None) == "7"


def test_attributes_survive_a_round_trip():
    from ..parser import parse
    from ..serde.renderer import ReprRenderer
    from ..serializer import serialize_one

    post = Post(title="hello", body=None, published_on=datetime.date(2020, 1, 2), id=9)
    rendered = ReprRenderer()(serialize_one("/posts/9", post, post_codec))
    parsed = parse(rendered, post_codec)

    assert parsed.id == "9"
    assert post_codec.attributes_of(parsed.attributes) == post_codec.attributes_of(post)
