"""Resource Serializer — one Record to one JSON:API resource object.

Tests cover:
    - id stringified, wire type used
    - attributes exclude primary key and to-one foreign keys
    - caller's record never mutated; repeated calls identical
    - relationships key omitted when nothing to emit
    - unregistered type and missing id raise
"""

import copy

import pytest

from shelf.core.domain_types import IncludeContext, Record
from shelf.core.errors import MissingIdError, UnregisteredTypeError
from shelf.core.resource_serializer import serialize_resource
from tests.core.blog_graph import (
    blog_registry, make_author, make_comment, make_post, make_publisher,
)

NOTHING_LOADED = IncludeContext()


def test_id_is_stringified_and_type_is_wire_type():
    resource = serialize_resource(
        "post", make_post(id=1, author_id=5), NOTHING_LOADED, blog_registry(),
    )
    assert resource["type"] == "posts"
    assert resource["id"] == "1"


def test_attributes_exclude_primary_key_and_to_one_foreign_key():
    resource = serialize_resource(
        "post", make_post(id=1, title="Hello", author_id=5),
        NOTHING_LOADED, blog_registry(),
    )
    assert resource["attributes"] == {"title": "Hello"}


def test_foreign_key_kept_when_relation_has_no_context():
    post = Record("post", 1, {"id": 1, "title": "Hi", "author_id": 5}, {})
    resource = serialize_resource("post", post, NOTHING_LOADED, blog_registry())
    assert resource["attributes"] == {"title": "Hi", "author_id": 5}
    assert "relationships" not in resource


def test_record_is_not_mutated():
    post = make_post(id=1, title="Hello", author_id=5)
    before = copy.deepcopy(post.attributes)
    serialize_resource("post", post, NOTHING_LOADED, blog_registry())
    assert post.attributes == before
    assert "id" in post.attributes
    assert "author_id" in post.attributes


def test_serializing_twice_is_identical():
    author = make_author(
        id=5, publisher=make_publisher(1), posts=[make_post(1), make_post(2)],
    )
    context = IncludeContext.for_type("author", {"posts"})
    registry = blog_registry()
    first = serialize_resource("author", author, context, registry)
    second = serialize_resource("author", author, context, registry)
    assert first == second


def test_relationships_follow_include_context():
    author = make_author(id=5, posts=[make_post(1)], publisher_id=None)
    registry = blog_registry()
    plain = serialize_resource("author", author, NOTHING_LOADED, registry)
    loaded = serialize_resource(
        "author", author, IncludeContext.for_type("author", {"posts"}), registry,
    )
    assert "data" not in plain["relationships"]["posts"]
    assert loaded["relationships"]["posts"]["data"] == [
        {"type": "posts", "id": "1"},
    ]
    assert plain["relationships"]["publisher"]["data"] is None


def test_context_for_other_type_does_not_load():
    author = make_author(id=5, posts=[make_post(1)])
    resource = serialize_resource(
        "author", author, IncludeContext.for_type("post", {"posts"}),
        blog_registry(),
    )
    assert "data" not in resource["relationships"]["posts"]


def test_type_without_relationships_has_no_relationships_key():
    resource = serialize_resource(
        "publisher", make_publisher(1), NOTHING_LOADED, blog_registry(),
    )
    assert resource == {
        "type": "publishers", "id": "1", "attributes": {"name": "Penguin"},
    }


def test_unregistered_type_raises():
    with pytest.raises(UnregisteredTypeError):
        serialize_resource(
            "ghost", make_comment(), NOTHING_LOADED, blog_registry(),
        )


def test_missing_id_raises():
    with pytest.raises(MissingIdError):
        serialize_resource(
            "post", Record("post", None), NOTHING_LOADED, blog_registry(),
        )


def test_custom_id_attribute_is_removed():
    from shelf.core.registry import registry_from_config

    registry = registry_from_config(
        {"isbn_book": {"type": "books", "id_attribute": "isbn"}},
    )
    book = Record("isbn_book", "978-0", {"isbn": "978-0", "title": "T", "id": 9})
    resource = serialize_resource("isbn_book", book, NOTHING_LOADED, registry)
    assert resource["id"] == "978-0"
    assert resource["attributes"] == {"title": "T", "id": 9}
