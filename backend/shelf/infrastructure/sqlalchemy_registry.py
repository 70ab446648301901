"""SQLAlchemy Registry Builder — derives a TypeRegistry from mapped classes.

Invariants:
    - MANYTOONE → TO_ONE with the owner's local foreign-key attribute
    - ONETOMANY / MANYTOMANY collections → TO_MANY
    - Relationships to classes outside `models` are skipped
    - Scalar one-to-one reverse sides (no local FK) are skipped
    - Single-column primary keys only (ConfigurationError otherwise)

Design Decisions:
    - Wire type defaults to __tablename__: plural table names read naturally as JSON:API types
    - Attribute keys, not column names: Records are keyed by mapped attribute
"""

import logging
from collections.abc import Mapping

from sqlalchemy import inspect
from sqlalchemy.orm import Mapper, RelationshipDirection, RelationshipProperty

from shelf.core.domain_types import (
    Cardinality, RelationshipDescriptor, TypeRegistryEntry,
)
from shelf.core.errors import ConfigurationError
from shelf.core.registry import TypeRegistry

logger = logging.getLogger(__name__)


def model_type_names(models: Mapping[str, type]) -> dict[type, str]:
    """Reverse lookup: mapped class → type_name."""
    return {model: type_name for type_name, model in models.items()}


def build_registry(
    models: Mapping[str, type],
    wire_types: Mapping[str, str] | None = None,
) -> TypeRegistry:
    if not models:
        raise ConfigurationError(
            "Registry must contain at least one registered type.",
        )
    wire_types = wire_types or {}
    type_names = model_type_names(models)
    entries = {}
    for type_name, model in models.items():
        mapper: Mapper = inspect(model)
        entries[type_name] = TypeRegistryEntry(
            wire_type=wire_types.get(type_name, mapper.local_table.name),
            relationships=_describe_relationships(type_name, mapper, type_names),
            id_attribute=_id_attribute(type_name, mapper),
        )
    return TypeRegistry(entries)


def _id_attribute(type_name: str, mapper: Mapper) -> str:
    if len(mapper.primary_key) != 1:
        raise ConfigurationError(
            f"Model '{type_name}' must have a single-column primary key",
        )
    return mapper.get_property_by_column(mapper.primary_key[0]).key


def _describe_relationships(
    type_name: str, mapper: Mapper, type_names: Mapping[type, str],
) -> dict[str, RelationshipDescriptor]:
    descriptors = {}
    for rel in mapper.relationships:
        related_type = type_names.get(rel.mapper.class_)
        if related_type is None:
            logger.debug(
                f"Skipping {type_name}.{rel.key}: target not registered",
                extra={"type_name": type_name, "relation_name": rel.key},
            )
            continue
        descriptor = _describe(mapper, rel, related_type)
        if descriptor is None:
            logger.debug(
                f"Skipping {type_name}.{rel.key}: scalar reverse side",
                extra={"type_name": type_name, "relation_name": rel.key},
            )
            continue
        descriptors[rel.key] = descriptor
    return descriptors


def _describe(
    mapper: Mapper, rel: RelationshipProperty, related_type: str,
) -> RelationshipDescriptor | None:
    if rel.direction is RelationshipDirection.MANYTOONE:
        local_columns = list(rel.local_columns)
        if len(local_columns) != 1:
            raise ConfigurationError(
                f"Relationship '{rel.key}' must use a single-column foreign key",
            )
        return RelationshipDescriptor(
            name=rel.key,
            cardinality=Cardinality.TO_ONE,
            related_type=related_type,
            foreign_key=mapper.get_property_by_column(local_columns[0]).key,
        )
    if rel.uselist:
        return RelationshipDescriptor(
            name=rel.key,
            cardinality=Cardinality.TO_MANY,
            related_type=related_type,
        )
    return None
