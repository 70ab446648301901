"""Relationship Links — builds one JSON:API relationship object.

Invariants:
    - None when the record has no relation context (caller skips the relationship)
    - links.self = {base}/{wire_type}/{id}/relationships/{name}; links.related = {base}/{wire_type}/{id}/{name}
    - TO_ONE: data always present — linkage from the foreign key, or None
    - TO_MANY: data present only when the relation was loaded for this pass

Design Decisions:
    - TO_ONE never needs the related row: the foreign key on the owner is enough
    - TO_MANY withholds data unless loaded: no implicit full-collection dump
"""

from typing import Any

from shelf.core.domain_types import Cardinality, Record, RelationshipDescriptor
from shelf.core.registry import TypeRegistry


def url_merge(*segments: Any) -> str:
    """Slash-join segments as-is. An empty base yields a leading '/'."""
    return "/".join(str(segment) for segment in segments)


def build_links(
    wire_type: str, resource_id: str, relation_name: str, base_url: str = "",
) -> dict[str, str]:
    return {
        "self": url_merge(
            base_url, wire_type, resource_id, "relationships", relation_name,
        ),
        "related": url_merge(base_url, wire_type, resource_id, relation_name),
    }


def linkage(wire_type: str, resource_id: Any) -> dict[str, str]:
    return {"type": wire_type, "id": str(resource_id)}


def build_relationship(
    type_name: str,
    record: Record,
    relation_name: str,
    descriptor: RelationshipDescriptor,
    is_loaded: bool,
    registry: TypeRegistry,
    base_url: str = "",
) -> dict | None:
    """Relationship object for record.relation_name, or None to skip."""
    if not record.has_relation_context(relation_name):
        return None

    output: dict[str, Any] = {
        "links": build_links(
            registry.wire_type(type_name), str(record.id), relation_name,
            base_url,
        ),
    }
    related_wire_type = registry.wire_type(descriptor.related_type)

    match descriptor.cardinality:
        case Cardinality.TO_ONE:
            foreign_key_value = record.attributes.get(descriptor.foreign_key)
            output["data"] = (
                None if foreign_key_value is None
                else linkage(related_wire_type, foreign_key_value)
            )
        case Cardinality.TO_MANY:
            related = record.relations[relation_name]
            if is_loaded and related is not None:
                output["data"] = [
                    linkage(related_wire_type, item.id)
                    for item in _as_list(related)
                    if item.id is not None
                ]

    return output


def _as_list(value: Record | list[Record]) -> list[Record]:
    return value if isinstance(value, list) else [value]
