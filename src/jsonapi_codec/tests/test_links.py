import pytest


@pytest.fixture
def target():
    from ..links import resolve_related_link

    return resolve_related_link


def test_substitutes_host_identity(target):
    assert target("/posts/{id}/comments", "42") == "/posts/42/comments"


def test_static_link(target):
    assert target("/posts", "42") == "/posts"


def test_every_occurrence(target):
    assert target("/posts/{id}/{id}", "7") == "/posts/7/7"


def test_identity_is_inserted_verbatim(target):
    assert target("/tags/{id}", "a-b_c") == "/tags/a-b_c"
