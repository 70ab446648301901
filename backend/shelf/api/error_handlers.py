"""Error Handlers — global exception handlers rendering JSON:API error documents.

Invariants:
    - ShelfError → its own status and JSON:API errors document
    - RequestValidationError → 400 with one error object per invalid field
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (ShelfError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py (ADR: ExMA import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from shelf.core.errors import ShelfError, ErrorSeverity

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_shelf_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_shelf_error_handler(app: FastAPI) -> None:
    """Register shelf domain/infrastructure error handler."""

    @app.exception_handler(ShelfError)
    async def shelf_error_handler(request: Request, exc: ShelfError):
        """Handle all shelf domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"ShelfError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
            media_type=JSONAPI_MEDIA_TYPE,
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
            media_type=JSONAPI_MEDIA_TYPE,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "errors": [{
                    "status": "500",
                    "code": "INTERNAL_ERROR",
                    "title": "internal",
                    "detail": "An unexpected error occurred",
                    "meta": {"severity": ErrorSeverity.CRITICAL.value},
                }],
            },
            media_type=JSONAPI_MEDIA_TYPE,
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build JSON:API errors document for invalid request data."""
    return {
        "errors": [
            {
                "status": "400",
                "code": "VALIDATION_ERROR",
                "title": "validation",
                "detail": e["msg"],
                "source": {
                    "parameter": ".".join(str(loc) for loc in e["loc"]),
                },
            }
            for e in exc.errors()
        ],
    }
