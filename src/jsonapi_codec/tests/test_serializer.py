import datetime

import pytest

from ..codec import AttributeDescriptor, ResourceCodec
from ..serde.models import LinkageRepr, LinksRepr
from .testing import Post, post_codec


class TestSerializeOne:
    @pytest.fixture
    def target(self):
        from ..serializer import serialize_one

        return serialize_one

    def test_basic(self, target):
        post = Post(title="hello", body="world", id=42)
        result = target("/posts/42", post, post_codec)

        assert result.links == LinksRepr(self_="/posts/42")
        assert result.data.type == post_codec.type_tag
        assert result.data.id == "42"
        assert result.data.attributes == post_codec.attributes_of(post)
        assert "id" not in result.data.attributes
        assert result.data.relationships == {
            "comments": LinkageRepr(links=LinksRepr(related="/posts/42/comments")),
        }

    def test_type_comes_from_codec(self, target):
        class DraftPost(Post):
            pass

        result = target("/posts/1", DraftPost(title="draft", id=1), post_codec)
        assert result.data.type == "posts"

    def test_no_relationships(self, target):
        codec = ResourceCodec("posts", Post, attributes=[AttributeDescriptor(str, "title")])
        result = target("/posts/1", Post(title="a", id=1), codec)
        assert result.data.relationships == {}


class TestSerializeMany:
    @pytest.fixture
    def target(self):
        from ..serializer import serialize_many

        return serialize_many

    def test_order_is_preserved(self, target):
        posts = [Post(title="b", id=2), Post(title="a", id=1), Post(title="b", id=2)]
        result = target("/posts", posts, post_codec)
        assert [r.id for r in result.data] == ["2", "1", "2"]
        assert result.links == LinksRepr(self_="/posts")

    def test_generator_is_consumed_once(self, target):
        consumed = []

        def records():
            for i in (1, 2, 3):
                consumed.append(i)
                yield Post(title=str(i), id=i)

        result = target("/posts", records(), post_codec)
        assert consumed == [1, 2, 3]
        assert [r.attributes["title"] for r in result.data] == ["1", "2", "3"]

    def test_empty(self, target):
        assert target("/posts", [], post_codec).data == ()


def test_build_relationships():
    from ..serializer import build_relationships

    result = build_relationships(
        "3", {"comments": "/posts/{id}/comments", "site": "/site"}
    )
    assert result == {
        "comments": LinkageRepr(links=LinksRepr(related="/posts/3/comments")),
        "site": LinkageRepr(links=LinksRepr(related="/site")),
    }
    assert build_relationships("3", {}) == {}


def test_build_document():
    from ..serializer import build_document

    doc = build_document(Post(title="a", id=5), post_codec)
    assert (doc.type, doc.id) == ("posts", "5")


class TestDocumentSerializer:
    @pytest.fixture
    def target(self):
        from ..serializer import DocumentSerializer

        return DocumentSerializer()

    def test_render_many(self, target):
        codec = ResourceCodec("posts", Post, attributes=[AttributeDescriptor(str, "title")])
        result = target.render_many(
            "/posts", [Post(title="first", id=1), Post(title="second", id=2)], codec
        )
        assert result == {
            "data": [
                {
                    "type": "posts",
                    "id": "1",
                    "attributes": {"title": "first"},
                    "relationships": {},
                },
                {
                    "type": "posts",
                    "id": "2",
                    "attributes": {"title": "second"},
                    "relationships": {},
                },
            ],
            "links": {"self": "/posts"},
        }

    def test_render_one(self, target):
        post = Post(title="hello", published_on=datetime.date(2020, 1, 2), id=1)
        assert target.render_one("/posts/1", post, post_codec) == {
            "links": {"self": "/posts/1"},
            "data": {
                "type": "posts",
                "id": "1",
                "attributes": {
                    "title": "hello",
                    "body": None,
                    "published_on": "2020-01-02",
                },
                "relationships": {
                    "comments": {"links": {"related": "/posts/1/comments"}},
                },
            },
        }

    def test_render_error(self, target):
        from ..exceptions import MalformedPayloadError, MalformedPayloadErrorItem, TypeMismatchError
        from ..serde.utils import JSONPointer

        assert target.render_error(
            MalformedPayloadError(
                [MalformedPayloadErrorItem(JSONPointer("/data"), 'value must have a property "data"')]
            )
        ) == {
            "errors": [
                {
                    "title": "Malformed payload",
                    "detail": 'value must have a property "data"',
                    "source": {"pointer": "/data"},
                },
            ],
        }

        assert target.render_error(
            TypeMismatchError("posts", "comments", JSONPointer("/data/type"))
        ) == {
            "errors": [
                {
                    "title": "Resource type mismatch",
                    "detail": 'resource type "comments" given where "posts" expected',
                    "source": {"pointer": "/data/type"},
                },
            ],
        }
