import dataclasses
import datetime
import typing

import pytest

from ..declarative import Attr, codec_for_dataclass
from ..exceptions import InvalidDeclarationError
from .testing import Comment, Post, comment_codec, post_codec


class TestCodecForDataclass:
    def test_attributes(self):
        assert list(post_codec.attributes) == ["title", "body", "published_on"]
        title, body, published_on = post_codec.attributes.values()
        assert (title.type, title.allow_null, title.required_on_creation) == (str, False, True)
        assert (body.type, body.allow_null, body.required_on_creation) == (str, True, False)
        assert published_on.type is datetime.date
        assert post_codec.identity_attribute == "id"
        assert post_codec.type_tag == "posts"

    def test_excluded(self):
        assert list(comment_codec.attributes) == ["content"]
        assert comment_codec.relationship_templates == {"post": "/comments/{id}/post"}

    def test_materialize_partial(self):
        post = post_codec.materialize({"body": "text"})
        assert post == Post(title=None, body="text")  # type: ignore
        comment = comment_codec.materialize({})
        assert comment == Comment(content=None)  # type: ignore

    def test_overrides(self):
        @dataclasses.dataclass
        class Account:
            name: str
            password: str
            created_at: typing.Optional[datetime.datetime] = None
            id: typing.Optional[str] = None

        codec = codec_for_dataclass(
            Account,
            "accounts",
            attribute_overrides={
                "name": Attr(name="display-name"),
                "password": Attr(write_only=True),
                "created_at": Attr(read_only=True),
            },
        )
        name, password, created_at = codec.attributes.values()
        assert (name.name, name.field) == ("display-name", "name")
        assert password.write_only
        assert created_at.read_only

        account = Account(name="alice", password="secret", id="a")
        assert codec.attributes_of(account) == {"display-name": "alice", "created_at": None}

    def test_not_a_dataclass(self):
        class Foo:
            id = None

        with pytest.raises(InvalidDeclarationError):
            codec_for_dataclass(Foo, "foos")

    def test_no_identity(self):
        @dataclasses.dataclass
        class Foo:
            name: str

        with pytest.raises(InvalidDeclarationError):
            codec_for_dataclass(Foo, "foos")

    def test_unknown_override(self):
        with pytest.raises(InvalidDeclarationError):
            codec_for_dataclass(Post, "posts", attribute_overrides={"subtitle": Attr()})
