"""ORM → Record Conversion — snapshots a loaded SQLAlchemy graph into core Records.

Invariants:
    - Reads InstanceState.dict only — never touches instrumented attributes, never lazy-loads
    - Unloaded relationships become None (configured but absent)
    - Relationships not mapped on the instance get no relation context
    - One Record per ORM instance per conversion (memo), so cycles terminate
    - Attribute maps are fresh dicts: Record.attributes is never the ORM state dict
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import InstanceState

from shelf.core.domain_types import Record, RelationValue
from shelf.core.registry import TypeRegistry


def to_record(
    instance: Any,
    type_names: Mapping[type, str],
    registry: TypeRegistry,
    memo: dict[int, Record] | None = None,
) -> Record:
    """Convert one loaded instance (and everything loaded under it)."""
    memo = {} if memo is None else memo
    key = id(instance)
    if key in memo:
        return memo[key]

    state: InstanceState = inspect(instance)
    type_name = _type_name(state, type_names)
    entry = registry.entry(type_name)
    attributes = {
        attr.key: state.dict[attr.key]
        for attr in state.mapper.column_attrs
        if attr.key in state.dict
    }
    record = Record(
        type_name=type_name,
        id=_identity(state, attributes, entry.id_attribute),
        attributes=attributes,
    )
    memo[key] = record

    mapped = state.mapper.relationships
    unloaded = state.unloaded
    for name in entry.relationships:
        if name not in mapped:
            continue
        if name in unloaded:
            record.relations[name] = None
            continue
        record.relations[name] = _convert_value(
            state.dict.get(name), type_names, registry, memo,
        )
    return record


def to_records(
    instances, type_names: Mapping[type, str], registry: TypeRegistry,
) -> list[Record]:
    """Convert a result list, sharing one memo across the whole graph."""
    memo: dict[int, Record] = {}
    return [to_record(i, type_names, registry, memo) for i in instances]


def _convert_value(
    value: Any, type_names: Mapping[type, str],
    registry: TypeRegistry, memo: dict[int, Record],
) -> RelationValue:
    if value is None:
        return None
    if isinstance(value, (list, set, tuple)):
        return [to_record(v, type_names, registry, memo) for v in value]
    return to_record(value, type_names, registry, memo)


def _type_name(state: InstanceState, type_names: Mapping[type, str]) -> str:
    for cls in state.class_.__mro__:
        if cls in type_names:
            return type_names[cls]
    return state.class_.__name__


def _identity(
    state: InstanceState, attributes: dict[str, Any], id_attribute: str,
) -> Any:
    if state.identity is not None:
        return state.identity[0]
    return attributes.get(id_attribute)
