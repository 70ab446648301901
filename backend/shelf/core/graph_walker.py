"""Graph Walker — depth-first traversal of one include path over a loaded graph.

Invariants:
    - Reads only already-loaded relation values; never triggers loading
    - Head segment must be declared on the current type (UnknownRelationshipError)
    - Collections are flattened: one entry per related record
    - Records without an id are emitted (Deduplicator drops them) but never recursed into
    - Returns a flat list; no deduplication here

Design Decisions:
    - Level entries first, then each entry's subtree: matches the order clients
      have historically seen, though order is not a contract
"""

from shelf.core.domain_types import (
    IncludePath, IncludedEntry, Record, RelationValue,
)
from shelf.core.registry import TypeRegistry


def walk(
    type_name: str,
    record_or_collection: Record | list[Record],
    path: IncludePath,
    registry: TypeRegistry,
) -> list[IncludedEntry]:
    """All records reachable from the root(s) along path."""
    if not path:
        return []
    head, rest = path[0], path[1:]
    descriptor = registry.relationship(type_name, head)

    entries = [
        IncludedEntry(
            relation_name=head,
            related_type=descriptor.related_type,
            record=related,
        )
        for record in _as_list(record_or_collection)
        for related in _related_records(record, head)
    ]
    if not rest:
        return entries

    nested: list[IncludedEntry] = []
    for entry in entries:
        if entry.record.id is None:
            continue
        nested.extend(walk(entry.related_type, entry.record, rest, registry))
    return entries + nested


def walk_all(
    type_name: str,
    record_or_collection: Record | list[Record],
    paths: tuple[IncludePath, ...],
    registry: TypeRegistry,
) -> list[IncludedEntry]:
    """Concatenated walk over every path."""
    entries: list[IncludedEntry] = []
    for path in paths:
        entries.extend(walk(type_name, record_or_collection, path, registry))
    return entries


def _related_records(record: Record, relation_name: str) -> list[Record]:
    value: RelationValue = record.relations.get(relation_name)
    if value is None:
        return []
    return _as_list(value)


def _as_list(value: Record | list[Record]) -> list[Record]:
    return value if isinstance(value, list) else [value]
