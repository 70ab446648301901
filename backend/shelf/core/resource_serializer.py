"""Resource Serializer — converts one Record into one JSON:API resource object.

Invariants:
    - type_name must be registered (UnregisteredTypeError); record must have an id (MissingIdError)
    - Attributes are a fresh copy: never the caller's dict
    - Attributes exclude the primary key and every TO_ONE foreign key with relation context
    - `relationships` key omitted when no relationship object was produced
    - Pure: same record + context → identical output
"""

from typing import Any

from shelf.core.domain_types import Cardinality, IncludeContext, Record
from shelf.core.errors import MissingIdError
from shelf.core.registry import TypeRegistry
from shelf.core.relationship_links import build_relationship


def serialize_resource(
    type_name: str,
    record: Record,
    include_context: IncludeContext,
    registry: TypeRegistry,
    base_url: str = "",
) -> dict:
    entry = registry.entry(type_name)
    if record.id is None:
        raise MissingIdError(type_name)

    hidden = {entry.id_attribute}
    relationships: dict[str, Any] = {}
    for name, descriptor in entry.relationships.items():
        if not record.has_relation_context(name):
            continue
        if descriptor.cardinality is Cardinality.TO_ONE:
            hidden.add(descriptor.foreign_key)
        relationship = build_relationship(
            type_name, record, name, descriptor,
            include_context.is_loaded(type_name, name),
            registry, base_url,
        )
        if relationship is not None:
            relationships[name] = relationship

    resource: dict[str, Any] = {
        "type": entry.wire_type,
        "id": str(record.id),
        "attributes": {
            key: value for key, value in record.attributes.items()
            if key not in hidden
        },
    }
    if relationships:
        resource["relationships"] = relationships
    return resource
