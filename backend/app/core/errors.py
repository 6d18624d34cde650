"""Error Hierarchy — exceptions the dashboard raises past a service boundary.

Invariants:
    - Each concrete error fixes its code, category, severity and http_status as
      class attributes; instances only carry message and context
    - to_response() produces the REST envelope; user_message wins over message
    - Form validation failures are NOT exceptions (see core/validate_invoice.py)
    - PersistenceError keeps the driver exception on .cause for the delete action
      and for logs, never for the response body
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where the failure happened, for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    invoice_id: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class DashboardError(Exception):
    """Base for dashboard errors; subclasses set the class-level classification."""

    code = "INTERNAL_ERROR"
    category = ErrorCategory.INTERNAL
    severity = ErrorSeverity.ERROR
    http_status = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": ctx.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {"invoice_id": ctx.invoice_id, "operation": ctx.operation},
            }
        }


class ResourceNotFoundError(DashboardError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)
        self.resource_type = resource_type
        self.resource_id = resource_id


class PersistenceError(DashboardError):
    """A store operation (connect, query, commit) failed."""

    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(
        self,
        message: str,
        operation: str,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(f"Database {operation} failed: {message}", context)
        self.context.operation = self.context.operation or operation
        self.operation = operation
        self.cause = cause
