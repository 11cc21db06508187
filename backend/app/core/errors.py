"""Error Hierarchy - typed, categorized exceptions for all candy shop failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CandyShopError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTEGRITY = "integrity"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context carried alongside an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: str | None = None
    product_id: str | None = None
    customer: str | None = None
    debug_info: dict[str, Any] | None = None


class CandyShopError(Exception):
    """Base exception for all candy shop errors."""

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
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "order_id": self.context.order_id,
                    "product_id": self.context.product_id,
                    "customer": self.context.customer,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(CandyShopError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


class DailyLimitReachedError(CandyShopError):
    """Customer already placed the maximum number of orders today."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DAILY_LIMIT_REACHED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 429,
        )


class InsufficientStockError(CandyShopError):
    """An ordered product cannot cover the requested quantity."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INSUFFICIENT_STOCK", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class OrderRejectedError(CandyShopError):
    """Order request rejected for a reason other than limit or stock."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ORDER_REJECTED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class OrderNotCancellableError(CandyShopError):
    """Cancel requested for an order that is no longer pending."""
    def __init__(
        self, status: str, reason: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            reason or f"Only pending orders can be cancelled (current status: {status})",
            "ORDER_NOT_CANCELLABLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.status = status


class StockAdjustmentError(CandyShopError):
    """Manual stock adjustment would drive stock below zero."""
    def __init__(self, delta: int, context: ErrorContext | None = None):
        super().__init__(
            f"Stock adjustment of {delta} would make stock negative",
            "STOCK_ADJUSTMENT_REJECTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.delta = delta


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CandyShopError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class DataIntegrityError(CandyShopError):
    """Stored state violates a stock invariant. Never corrected silently."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DATA_INTEGRITY_VIOLATION", ErrorCategory.INTEGRITY,
            ErrorSeverity.CRITICAL, context, 500,
        )
