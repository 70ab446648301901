"""Boundary Protocols — contract between the pure core and the data layer.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Fetchers return fully materialized Records: every requested relation loaded
    - relations may contain dotted paths ("posts.comments"); the fetcher loads the whole chain
    - Not found is None, never an exception

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, core functions that consume
      their results stay sync — the adapter orchestrates the await
"""

from collections.abc import Collection
from typing import Protocol

from shelf.core.domain_types import Record


class RecordFetcher(Protocol):
    """Contract for loading records with relations eagerly populated."""
    async def fetch_by_id(
        self, type_name: str, resource_id: str | int,
        relations: Collection[str],
    ) -> Record | None: ...

    async def fetch_all(
        self, type_name: str, relations: Collection[str],
    ) -> list[Record]: ...
