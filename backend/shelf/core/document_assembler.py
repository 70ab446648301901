"""Document Assembler — primary data plus deduplicated `included` array.

Invariants:
    - Single record → data is an object; collection → data is a list
    - `included` present whenever include paths were requested, even if empty
    - `included` omitted entirely when no include paths were requested
    - Root type's required relations are the only (type, relation) pairs marked loaded

Design Decisions:
    - Walk every path, concatenate, dedupe once at the end (ADR: walk and dedupe testable apart)
    - Included resources share the root's IncludeContext
"""

import logging
from collections.abc import Iterable

from shelf.core.dedupe import dedupe
from shelf.core.domain_types import IncludeContext, Record
from shelf.core.graph_walker import walk_all
from shelf.core.include_tree import IncludeTree, parse_includes
from shelf.core.registry import TypeRegistry
from shelf.core.resource_serializer import serialize_resource

logger = logging.getLogger(__name__)


def assemble_document(
    type_name: str,
    record_or_collection: Record | list[Record],
    include_paths: Iterable[str] | None,
    registry: TypeRegistry,
    base_url: str = "",
) -> dict:
    tree = parse_includes(type_name, include_paths, registry)
    return assemble_from_tree(
        tree, record_or_collection, registry, base_url,
    )


def assemble_from_tree(
    tree: IncludeTree,
    record_or_collection: Record | list[Record],
    registry: TypeRegistry,
    base_url: str = "",
) -> dict:
    """Assemble with an already-parsed tree (shared with the fetch step)."""
    type_name = tree.root_type
    context = IncludeContext.for_type(type_name, tree.required_relations)

    document: dict = {}
    if isinstance(record_or_collection, list):
        document["data"] = [
            serialize_resource(type_name, record, context, registry, base_url)
            for record in record_or_collection
        ]
    else:
        document["data"] = serialize_resource(
            type_name, record_or_collection, context, registry, base_url,
        )

    if tree:
        entries = dedupe(walk_all(
            type_name, record_or_collection, tree.normalized_paths, registry,
        ))
        document["included"] = [
            serialize_resource(
                entry.related_type, entry.record, context, registry, base_url,
            )
            for entry in entries
        ]
        logger.debug(
            f"Assembled {type_name} document with {len(entries)} included",
            extra={"type_name": type_name, "include_count": len(entries)},
        )
    return document
