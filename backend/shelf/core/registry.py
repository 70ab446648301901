"""Type Registry — explicit per-type wire types and relationship descriptors.

Invariants:
    - At least one type registered, checked at construction (ConfigurationError)
    - Every descriptor's related_type is itself registered
    - TO_ONE descriptors carry a foreign_key; TO_MANY descriptors never do
    - Immutable after construction: safe to share across requests

Design Decisions:
    - Passed explicitly into every core function, never a module global
      (ADR: multiple independent registries per process, fixture-friendly tests)
"""

from collections.abc import Iterator, Mapping

from shelf.core.domain_types import (
    Cardinality, RelationshipDescriptor, TypeRegistryEntry,
)
from shelf.core.errors import (
    ConfigurationError, UnregisteredTypeError, UnknownRelationshipError,
)


class TypeRegistry(Mapping[str, TypeRegistryEntry]):
    """Read-only mapping of type_name -> TypeRegistryEntry."""

    def __init__(self, entries: Mapping[str, TypeRegistryEntry]):
        if not entries:
            raise ConfigurationError(
                "Registry must contain at least one registered type.",
            )
        self._entries = dict(entries)
        self._validate()

    def _validate(self) -> None:
        for type_name, entry in self._entries.items():
            for name, descriptor in entry.relationships.items():
                if descriptor.related_type not in self._entries:
                    raise ConfigurationError(
                        f"Relationship '{type_name}.{name}' targets "
                        f"unregistered type '{descriptor.related_type}'",
                    )
                if (
                    descriptor.cardinality is Cardinality.TO_ONE
                    and not descriptor.foreign_key
                ):
                    raise ConfigurationError(
                        f"To-one relationship '{type_name}.{name}' "
                        f"needs a foreign_key",
                    )
                if (
                    descriptor.cardinality is Cardinality.TO_MANY
                    and descriptor.foreign_key
                ):
                    raise ConfigurationError(
                        f"To-many relationship '{type_name}.{name}' "
                        f"cannot declare a foreign_key",
                    )

    def __getitem__(self, type_name: str) -> TypeRegistryEntry:
        return self._entries[type_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, type_name: str) -> TypeRegistryEntry:
        """Entry for type_name, or UnregisteredTypeError."""
        try:
            return self._entries[type_name]
        except KeyError:
            raise UnregisteredTypeError(type_name) from None

    def relationship(
        self, type_name: str, relation_name: str,
    ) -> RelationshipDescriptor:
        """Descriptor for type_name.relation_name, or UnknownRelationshipError."""
        try:
            return self.entry(type_name).relationships[relation_name]
        except KeyError:
            raise UnknownRelationshipError(type_name, relation_name) from None

    def wire_type(self, type_name: str) -> str:
        return self.entry(type_name).wire_type

    def resolve_type(self, segment: str) -> str:
        """type_name for a URL segment: wire types first, then type names."""
        for type_name, entry in self._entries.items():
            if entry.wire_type == segment:
                return type_name
        return segment


def registry_from_config(config: Mapping[str, Mapping]) -> TypeRegistry:
    """Build a registry from plain dicts.

    Shape::

        {"post": {"type": "posts", "relationships": {
            "author": {"type": "author", "cardinality": "toOne",
                       "foreign_key": "author_id"}}}}
    """
    entries = {}
    for type_name, raw in config.items():
        try:
            relationships = {
                name: RelationshipDescriptor(
                    name=name,
                    cardinality=Cardinality(rel["cardinality"]),
                    related_type=rel["type"],
                    foreign_key=rel.get("foreign_key"),
                )
                for name, rel in (raw.get("relationships") or {}).items()
            }
        except (KeyError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid relationship config on '{type_name}': {e}",
            ) from e
        entries[type_name] = TypeRegistryEntry(
            wire_type=raw.get("type", type_name),
            relationships=relationships,
            id_attribute=raw.get("id_attribute", "id"),
        )
    return TypeRegistry(entries)
