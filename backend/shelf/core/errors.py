"""Error Hierarchy — typed, categorized exceptions for every shelf failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Configuration errors are raised at construction; request errors travel as values
    - to_response() produces a JSON:API `errors` document
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ShelfError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATA_INTEGRITY = "data_integrity"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    type_name: str | None = None
    relation_name: str | None = None
    resource_id: str | None = None


class ShelfError(Exception):
    """Base exception for all shelf errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to a JSON:API errors document."""
        error: dict[str, Any] = {
            "status": str(self.http_status),
            "code": self.code,
            "title": self.category.value,
            "detail": self.message,
            "meta": {
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }
        if self.context.relation_name:
            error["source"] = {"parameter": "include"}
        return {"errors": [error]}


# ─── Setup Errors (raised synchronously) ────────────────────────

class ConfigurationError(ShelfError):
    """Registry or adapter configured incorrectly."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Request Errors (delivered as values) ───────────────────────

class UnregisteredTypeError(ShelfError):
    """Type name has no registry entry."""
    def __init__(self, type_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.type_name = type_name
        super().__init__(
            f"Type '{type_name}' is not registered",
            "UNREGISTERED_TYPE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.type_name = type_name


class UnknownRelationshipError(ShelfError):
    """Relation name is not declared on the type."""
    def __init__(
        self, type_name: str, relation_name: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.type_name = type_name
        ctx.relation_name = relation_name
        super().__init__(
            f"Type '{type_name}' has no relationship '{relation_name}'",
            "UNKNOWN_RELATIONSHIP", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.type_name = type_name
        self.relation_name = relation_name


class MissingIdError(ShelfError):
    """Record reached serialization without an id."""
    def __init__(self, type_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.type_name = type_name
        super().__init__(
            f"Record of type '{type_name}' has no id",
            "MISSING_ID", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.type_name = type_name


class ResourceNotFoundError(ShelfError):
    """Requested resource does not exist."""
    def __init__(
        self, type_name: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.type_name = type_name
        ctx.resource_id = resource_id
        super().__init__(
            f"{type_name} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class FetchError(ShelfError):
    """Data layer failed while fetching records."""
    def __init__(
        self, message: str, operation: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Fetch {operation} failed: {message}",
            "FETCH_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
