"""JSON:API Adapter — async entrypoints that fetch once, then run the pure core.

Invariants:
    - Exactly one awaited fetch per call; assembly runs to completion on its result
    - Request errors never raise out of get/get_by_id/fetch_one — returned as AdapterResult.error
    - Collaborator failures wrapped in FetchError; ShelfErrors pass through unchanged
    - Not found is a success with value None
    - fetch_one: unknown type / unknown relation / missing record → value None

Design Decisions:
    - Result value over exceptions at this boundary: callers (routes, jobs) decide
      presentation without try/except around every call
    - fetch_one loads TO_MANY relations only — TO_ONE linkage comes from the owner's foreign key
"""

import logging
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from shelf.core.document_assembler import assemble_document, assemble_from_tree
from shelf.core.domain_types import Cardinality, IncludeContext, Record
from shelf.core.errors import FetchError, ShelfError
from shelf.core.include_tree import parse_includes
from shelf.core.registry import TypeRegistry
from shelf.core.relationship_links import build_relationship
from shelf.core.repository_protocols import RecordFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AdapterResult:
    """Completion value: either a document/relationship (may be None) or an error."""
    value: Any = None
    error: ShelfError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class JsonApiAdapter:
    """Fetch + serialize entrypoints over one registry and one fetcher."""

    def __init__(
        self, registry: TypeRegistry, fetcher: RecordFetcher,
        base_url: str = "",
    ):
        self._registry = registry
        self._fetcher = fetcher
        self._base_url = base_url or ""

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    async def get(
        self, type_name: str, includes: Iterable[str] | None = None,
    ) -> AdapterResult:
        """Collection document for every record of type_name."""
        logger.debug(
            f"get {type_name}", extra={"type_name": type_name},
        )
        try:
            tree = parse_includes(type_name, includes, self._registry)
            records = await self._fetch(
                self._fetcher.fetch_all(type_name, tree.load_paths),
                "fetch_all",
            )
            return AdapterResult(value=assemble_from_tree(
                tree, list(records or []), self._registry, self._base_url,
            ))
        except ShelfError as e:
            return self._failed(e)

    async def get_by_id(
        self, type_name: str, resource_id: str | int,
        includes: Iterable[str] | None = None,
    ) -> AdapterResult:
        """Single-resource document, or value None when not found."""
        logger.debug(
            f"get_by_id {type_name}/{resource_id}",
            extra={"type_name": type_name},
        )
        try:
            tree = parse_includes(type_name, includes, self._registry)
            record = await self._fetch(
                self._fetcher.fetch_by_id(
                    type_name, resource_id, tree.load_paths,
                ),
                "fetch_by_id",
            )
            if record is None:
                return AdapterResult(value=None)
            return AdapterResult(value=assemble_from_tree(
                tree, record, self._registry, self._base_url,
            ))
        except ShelfError as e:
            return self._failed(e)

    async def fetch_one(
        self, type_name: str, resource_id: str | int, relation_name: str,
    ) -> AdapterResult:
        """Relationship object for type_name/resource_id/relation_name."""
        entry = self._registry.get(type_name)
        if entry is None:
            return AdapterResult(value=None)
        descriptor = entry.relationships.get(relation_name)
        if descriptor is None:
            return AdapterResult(value=None)

        match descriptor.cardinality:
            case Cardinality.TO_ONE:
                relations: list[str] = []
            case Cardinality.TO_MANY:
                relations = [relation_name]

        try:
            record = await self._fetch(
                self._fetcher.fetch_by_id(type_name, resource_id, relations),
                "fetch_by_id",
            )
            if record is None:
                return AdapterResult(value=None)
            context = IncludeContext.for_type(type_name, relations)
            return AdapterResult(value=build_relationship(
                type_name, record, relation_name, descriptor,
                context.is_loaded(type_name, relation_name),
                self._registry, self._base_url,
            ))
        except ShelfError as e:
            return self._failed(e, relation_name=relation_name)

    def to_json_api(
        self, type_name: str, record_or_collection: Record | list[Record],
        includes: Iterable[str] | None = None,
    ) -> dict:
        """Pure transform for an already-loaded graph. Raises ShelfError."""
        return assemble_document(
            type_name, record_or_collection, includes,
            self._registry, self._base_url,
        )

    async def _fetch(self, pending: Awaitable[T], operation: str) -> T:
        try:
            return await pending
        except ShelfError:
            raise
        except Exception as e:
            logger.error(
                f"Fetcher {operation} raised {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise FetchError(type(e).__name__, operation) from e

    def _failed(
        self, error: ShelfError, relation_name: str | None = None,
    ) -> AdapterResult:
        logger.warning(
            f"Request failed: {error.message}",
            extra={
                "error_code": error.code,
                "type_name": error.context.type_name,
                "relation_name": relation_name or error.context.relation_name,
            },
        )
        return AdapterResult(error=error)
