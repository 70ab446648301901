"""JSON:API Adapter — fetch-once-then-serialize entrypoints over the SQLite blog.

Tests cover:
    - get_by_id: to-one linkage, includes, nested dedup, empty included, not found
    - get: collection documents
    - fetch_one: to-one / to-many / many-to-many, None for unknown type, relation, id
    - errors delivered as AdapterResult.error, collaborator failures wrapped in FetchError
"""

from shelf.core.errors import (
    FetchError, UnknownRelationshipError, UnregisteredTypeError,
)
from shelf.core.registry import registry_from_config
from shelf.services.json_api_adapter import AdapterResult, JsonApiAdapter


def _included_keys(document):
    return [(r["type"], r["id"]) for r in document["included"]]


# ─── get_by_id ───────────────────────────────────────────────────

async def test_post_without_includes(adapter):
    result = await adapter.get_by_id("posts", "1")
    assert result.ok
    document = result.value
    assert "included" not in document
    data = document["data"]
    assert data["type"] == "posts"
    assert data["id"] == "1"
    assert set(data["attributes"]) == {"title", "published_at"}
    assert data["relationships"]["author"]["data"] == {
        "type": "authors", "id": "5",
    }
    assert "data" not in data["relationships"]["comments"]
    assert "data" not in data["relationships"]["tags"]


async def test_post_including_author(adapter):
    result = await adapter.get_by_id("posts", 1, ["author"])
    document = result.value
    assert document["included"] == [{
        "type": "authors",
        "id": "5",
        "attributes": {"name": "Ada"},
        "relationships": {
            "publisher": {
                "links": {
                    "self": "/authors/5/relationships/publisher",
                    "related": "/authors/5/publisher",
                },
                "data": {"type": "publishers", "id": "1"},
            },
            "posts": {
                "links": {
                    "self": "/authors/5/relationships/posts",
                    "related": "/authors/5/posts",
                },
            },
        },
    }]


async def test_post_without_author_has_null_linkage(adapter):
    result = await adapter.get_by_id("posts", "3", ["author"])
    document = result.value
    assert document["data"]["relationships"]["author"]["data"] is None
    assert document["included"] == []


async def test_author_without_includes_omits_posts_data(adapter):
    result = await adapter.get_by_id("authors", "5")
    posts = result.value["data"]["relationships"]["posts"]
    assert set(posts) == {"links"}


async def test_author_with_posts_and_comments_dedupes(adapter):
    result = await adapter.get_by_id(
        "authors", "5", ["posts", "posts.comments"],
    )
    document = result.value
    assert document["data"]["relationships"]["posts"]["data"] == [
        {"type": "posts", "id": "1"}, {"type": "posts", "id": "2"},
    ]
    keys = _included_keys(document)
    assert len(keys) == len(set(keys))
    assert sorted(keys) == [
        ("comments", "10"), ("comments", "11"), ("comments", "12"),
        ("posts", "1"), ("posts", "2"),
    ]


async def test_author_without_posts_nested_include_is_empty(adapter):
    result = await adapter.get_by_id("authors", "7", ["posts.author"])
    assert result.value["included"] == []
    assert result.value["data"]["relationships"]["posts"]["data"] == []


async def test_many_to_many_include(adapter):
    result = await adapter.get_by_id("posts", "1", ["tags"])
    document = result.value
    assert document["data"]["relationships"]["tags"]["data"] == [
        {"type": "tags", "id": "1"}, {"type": "tags", "id": "2"},
    ]
    assert _included_keys(document) == [("tags", "1"), ("tags", "2")]


async def test_not_found_is_success_with_none(adapter):
    result = await adapter.get_by_id("posts", "999")
    assert result == AdapterResult(value=None)
    assert result.ok


async def test_uncoercible_id_is_not_found(adapter):
    result = await adapter.get_by_id("posts", "not-a-number")
    assert result.ok
    assert result.value is None


async def test_unknown_include_is_error_value(adapter):
    result = await adapter.get_by_id("posts", "1", ["editor"])
    assert not result.ok
    assert isinstance(result.error, UnknownRelationshipError)
    assert result.value is None


async def test_unregistered_type_is_error_value(adapter):
    result = await adapter.get_by_id("ghosts", "1")
    assert isinstance(result.error, UnregisteredTypeError)


# ─── get ─────────────────────────────────────────────────────────

async def test_get_collection(adapter):
    result = await adapter.get("posts", ["author"])
    document = result.value
    assert [r["id"] for r in document["data"]] == ["1", "2", "3", "4"]
    assert sorted(_included_keys(document)) == [
        ("authors", "5"), ("authors", "6"),
    ]


async def test_get_unregistered_type(adapter):
    result = await adapter.get("ghosts")
    assert isinstance(result.error, UnregisteredTypeError)


# ─── fetch_one ───────────────────────────────────────────────────

async def test_fetch_one_to_one(adapter):
    result = await adapter.fetch_one("posts", "1", "author")
    assert result.value == {
        "links": {
            "self": "/posts/1/relationships/author",
            "related": "/posts/1/author",
        },
        "data": {"type": "authors", "id": "5"},
    }


async def test_fetch_one_to_one_null(adapter):
    result = await adapter.fetch_one("posts", "3", "author")
    assert result.value["data"] is None


async def test_fetch_one_to_many_loads_relation(adapter):
    result = await adapter.fetch_one("authors", "5", "posts")
    assert result.value["data"] == [
        {"type": "posts", "id": "1"}, {"type": "posts", "id": "2"},
    ]


async def test_fetch_one_many_to_many(adapter):
    result = await adapter.fetch_one("posts", "2", "tags")
    assert result.value["data"] == [{"type": "tags", "id": "1"}]


async def test_fetch_one_resolves_unknowns_to_none(adapter):
    for args in (
        ("ghosts", "1", "author"),
        ("posts", "1", "editor"),
        ("posts", "999", "author"),
    ):
        result = await adapter.fetch_one(*args)
        assert result.ok
        assert result.value is None


# ─── collaborator failures ───────────────────────────────────────

class ExplodingFetcher:
    async def fetch_by_id(self, type_name, resource_id, relations):
        raise RuntimeError("connection reset")

    async def fetch_all(self, type_name, relations):
        raise RuntimeError("connection reset")


def _exploding_adapter():
    registry = registry_from_config({"notes": {}})
    return JsonApiAdapter(registry, ExplodingFetcher())


async def test_fetcher_failure_becomes_fetch_error():
    result = await _exploding_adapter().get("notes")
    assert isinstance(result.error, FetchError)
    assert result.error.operation == "fetch_all"
    assert isinstance(result.error.__cause__, RuntimeError)


async def test_fetcher_failure_on_get_by_id():
    result = await _exploding_adapter().get_by_id("notes", "1")
    assert isinstance(result.error, FetchError)
    assert result.error.operation == "fetch_by_id"


class ShelfErrorFetcher:
    async def fetch_by_id(self, type_name, resource_id, relations):
        raise UnknownRelationshipError(type_name, "nope")

    async def fetch_all(self, type_name, relations):
        return []


async def test_shelf_errors_pass_through_unwrapped():
    registry = registry_from_config({"notes": {}})
    result = await JsonApiAdapter(registry, ShelfErrorFetcher()).get_by_id(
        "notes", "1",
    )
    assert isinstance(result.error, UnknownRelationshipError)


async def test_empty_store_gives_empty_list():
    registry = registry_from_config({"notes": {}})
    result = await JsonApiAdapter(registry, ShelfErrorFetcher()).get("notes")
    assert result.value == {"data": []}


# ─── to_json_api ─────────────────────────────────────────────────

def test_to_json_api_uses_adapter_base_url():
    from shelf.core.domain_types import Record

    registry = registry_from_config({"notes": {}})
    adapter = JsonApiAdapter(
        registry, ShelfErrorFetcher(), base_url="http://api",
    )
    document = adapter.to_json_api("notes", Record("notes", 3, {"text": "hi"}))
    assert document == {
        "data": {"type": "notes", "id": "3", "attributes": {"text": "hi"}},
    }
