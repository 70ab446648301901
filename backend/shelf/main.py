"""Shelf API — FastAPI application factory serving JSON:API documents.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Health routes registered before resource routes (/{type_name} would shadow them)
    - Global error handlers map ShelfError → JSON:API error documents
    - No module-level app: the model set is the caller's, passed to create_app

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - build_adapter wires settings → db_manager → registry → fetcher → adapter in one place;
      registry errors raise here, at setup, never on a request
"""

import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shelf.api.error_handlers import register_error_handlers
from shelf.api.routes import health, resources
from shelf.config import Settings, get_settings
from shelf.infrastructure import database
from shelf.infrastructure.database import init_db
from shelf.infrastructure.observability import setup_logging
from shelf.infrastructure.sqlalchemy_fetcher import SqlAlchemyFetcher
from shelf.infrastructure.sqlalchemy_registry import build_registry
from shelf.services.json_api_adapter import JsonApiAdapter

logger = logging.getLogger(__name__)


def build_adapter(
    models: Mapping[str, type],
    settings: Settings | None = None,
    wire_types: Mapping[str, str] | None = None,
) -> JsonApiAdapter:
    """Adapter over a fresh db_manager for the given mapped models."""
    settings = settings or get_settings()
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    registry = build_registry(models, wire_types)
    fetcher = SqlAlchemyFetcher(manager.session, models, registry)
    logger.info(
        f"Registered {len(registry)} types: {', '.join(registry)}",
    )
    return JsonApiAdapter(registry, fetcher, settings.base_url)


def create_app(
    adapter: JsonApiAdapter, settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Shelf API started")
        yield
        if database.db_manager is not None:
            await database.db_manager.dispose()
        logger.info("Shelf API shutting down")

    app = FastAPI(title="Shelf JSON:API", version="0.1.0", lifespan=lifespan)
    app.state.adapter = adapter

    # Routes — explicit registration, health first
    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(resources.router, prefix=settings.api_prefix)

    register_error_handlers(app)
    return app
