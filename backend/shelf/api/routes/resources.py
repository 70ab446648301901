"""Resource Routes — generic JSON:API read endpoints for every registered type.

Invariants:
    - `include` is a comma-separated list of dotted relation paths
    - AdapterResult.error re-raised for the global ShelfError handler
    - Missing resource or relationship → 404 JSON:API error document
    - Responses use the application/vnd.api+json media type

Design Decisions:
    - Adapter read from app.state via dependency: one adapter per app, swappable in tests
    - jsonable_encoder at the edge: attribute values (datetime, UUID, Decimal) stay native in the core
"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from shelf.api.error_handlers import JSONAPI_MEDIA_TYPE
from shelf.core.errors import ResourceNotFoundError
from shelf.core.include_tree import split_include_param
from shelf.services.json_api_adapter import AdapterResult, JsonApiAdapter

logger = logging.getLogger(__name__)
router = APIRouter(tags=["resources"])


def get_adapter(request: Request) -> JsonApiAdapter:
    """FastAPI dependency for the app's adapter."""
    return request.app.state.adapter


@router.get("/{type_name}")
async def list_resources(
    type_name: str,
    include: str | None = Query(default=None),
    adapter: JsonApiAdapter = Depends(get_adapter),
):
    """Collection document for type_name."""
    type_name = adapter.registry.resolve_type(type_name)
    result = await adapter.get(type_name, split_include_param(include))
    return _respond(result)


@router.get("/{type_name}/{resource_id}")
async def get_resource(
    type_name: str,
    resource_id: str,
    include: str | None = Query(default=None),
    adapter: JsonApiAdapter = Depends(get_adapter),
):
    """Single-resource document for type_name/resource_id."""
    type_name = adapter.registry.resolve_type(type_name)
    result = await adapter.get_by_id(
        type_name, resource_id, split_include_param(include),
    )
    if result.ok and result.value is None:
        raise ResourceNotFoundError(type_name, resource_id)
    return _respond(result)


@router.get("/{type_name}/{resource_id}/relationships/{relation_name}")
async def get_relationship(
    type_name: str,
    resource_id: str,
    relation_name: str,
    adapter: JsonApiAdapter = Depends(get_adapter),
):
    """Relationship object for type_name/resource_id/relation_name."""
    type_name = adapter.registry.resolve_type(type_name)
    result = await adapter.fetch_one(type_name, resource_id, relation_name)
    if result.ok and result.value is None:
        raise ResourceNotFoundError(
            type_name, f"{resource_id}/relationships/{relation_name}",
        )
    return _respond(result)


def _respond(result: AdapterResult) -> JSONResponse:
    if result.error is not None:
        raise result.error
    return JSONResponse(
        content=jsonable_encoder(result.value),
        media_type=JSONAPI_MEDIA_TYPE,
    )
