"""Error Hierarchy — typed, categorized exceptions for all pseudonym service failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Chain/period integrity errors are fatal and never retried inside the service
    - DatabaseError is the only transient category (safe for the caller to retry)
    - to_response() produces the REST envelope; no token material ever leaks into it

Design Decisions:
    - Single hierarchy with PseudonymServiceError base: FastAPI global handler catches all
      (ADR: uniform error shape)
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
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    DATA_INTEGRITY = "data_integrity"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    chain_id: str | None = None
    debug_info: dict[str, Any] | None = None


class PseudonymServiceError(Exception):
    """Base exception for all pseudonym service errors."""

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

    @property
    def retryable(self) -> bool:
        return self.category == ErrorCategory.DATABASE

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "retryable": self.retryable,
            }
        }


# ─── Data Integrity Errors (500-level, fatal) ───────────────────

class ChainInconsistentError(PseudonymServiceError):
    """Tokens of one subject resolve to different chains."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CHAIN_INCONSISTENT", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.CRITICAL, context, 500,
        )


class ChainInsertFailedError(PseudonymServiceError):
    """Chain creation race could not be reconciled by rereading the links."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CHAIN_INSERT_FAILED", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.CRITICAL, context, 500,
        )


class ChainMissingError(PseudonymServiceError):
    """Period operation targeted a chain that does not exist."""
    def __init__(self, chain_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.chain_id = chain_id
        super().__init__(
            f"Chain '{chain_id}' not found, could not lock",
            "CHAIN_MISSING", ErrorCategory.DATA_INTEGRITY,
            ErrorSeverity.CRITICAL, ctx, 500,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(PseudonymServiceError):
    """Database operation failed (lock timeout, connectivity). Safe to retry."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConfigurationError(PseudonymServiceError):
    """A configuration value is missing or malformed."""
    def __init__(self, setting: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid configuration '{setting}': {message}",
            "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.setting = setting
