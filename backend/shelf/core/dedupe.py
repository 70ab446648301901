"""Deduplicator — canonical (type, id) set of walked records.

Invariants:
    - Key is "{related_type}-{id}"; first occurrence wins
    - Entries whose record has no id are dropped
"""

from collections.abc import Iterable

from shelf.core.domain_types import IncludedEntry


def dedupe_key(entry: IncludedEntry) -> str:
    return f"{entry.related_type}-{entry.record.id}"


def dedupe(entries: Iterable[IncludedEntry]) -> list[IncludedEntry]:
    unique: dict[str, IncludedEntry] = {}
    for entry in entries:
        if entry.record.id is None:
            continue
        unique.setdefault(dedupe_key(entry), entry)
    return list(unique.values())
