"""Domain Types — records, relationship descriptors and include bookkeeping.

Invariants:
    - Record.relations: missing key = no relation context; None = configured but absent/unloaded
    - Cardinality is a closed Enum — no duck-typing on the loaded value's shape
    - RelationshipDescriptor.foreign_key is set only for TO_ONE
    - Records are inputs: the core reads them, never writes them

Design Decisions:
    - dataclasses over pydantic here: core is pure and sees graphs with cycles
      (ADR: pydantic validation would recurse through back-references)
    - Record uses eq=False and hides relations from repr: cyclic graphs stay printable
    - str Enums: serialize to JSON without custom encoders
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

TypeName = NewType("TypeName", str)       # registry key, e.g. "post"
WireType = NewType("WireType", str)       # JSON:API type, e.g. "posts"

IncludePath = tuple[str, ...]             # ("author", "publisher")


# ─── Enums ───────────────────────────────────────────────────────

class Cardinality(str, Enum):
    """How many related records a relationship resolves to."""
    TO_ONE = "toOne"
    TO_MANY = "toMany"


# ─── Graph ───────────────────────────────────────────────────────

@dataclass(eq=False)
class Record:
    """One loaded entity with attributes and relation slots."""
    type_name: str
    id: str | int | None
    attributes: dict[str, Any] = field(default_factory=dict)
    relations: dict[str, RelationValue] = field(default_factory=dict, repr=False)

    def has_relation_context(self, relation_name: str) -> bool:
        return relation_name in self.relations


RelationValue = Union[Record, list[Record], None]


# ─── Registry Types ──────────────────────────────────────────────

@dataclass(frozen=True)
class RelationshipDescriptor:
    """Declared relationship on a registered type."""
    name: str
    cardinality: Cardinality
    related_type: str
    foreign_key: str | None = None


@dataclass(frozen=True)
class TypeRegistryEntry:
    """Wire type and relationships for one registered type."""
    wire_type: str
    relationships: dict[str, RelationshipDescriptor] = field(default_factory=dict)
    id_attribute: str = "id"


# ─── Walk Types ──────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class IncludedEntry:
    """One related record reached while walking an include path."""
    relation_name: str
    related_type: str
    record: Record


@dataclass(frozen=True)
class IncludeContext:
    """Which (type, relation) pairs were eagerly loaded for this pass."""
    loaded: dict[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def for_type(cls, type_name: str, relation_names) -> IncludeContext:
        return cls(loaded={type_name: frozenset(relation_names)})

    def is_loaded(self, type_name: str, relation_name: str) -> bool:
        return relation_name in self.loaded.get(type_name, frozenset())
