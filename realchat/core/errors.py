"""Error Hierarchy — typed, categorized exceptions for all RealChat failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Protocol errors (400-level) keep the connection open; persistence errors are 503
    - to_response() produces REST envelope; to_envelope() produces the wire `error` frame
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ChatError base: both the FastAPI global handler and the
      WebSocket session handler catch one type (uniform error shape)
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
    PROTOCOL = "protocol"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    connection_id: str | None = None
    username: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class ChatError(Exception):
    """Base exception for all RealChat errors."""

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
            }
        }

    def to_envelope(self) -> dict:
        """Convert to the `error` envelope sent to the offending connection."""
        return {
            "type": "error",
            "message": self.context.user_message or self.message,
        }


# ─── Protocol Errors (400-level) ────────────────────────────────

class ProtocolError(ChatError):
    """Frame could not be parsed into a known envelope."""
    def __init__(self, detail: str = "", context: ErrorContext | None = None):
        super().__init__(
            "Invalid message format", "INVALID_ENVELOPE", ErrorCategory.PROTOCOL,
            ErrorSeverity.WARNING, context, 400,
        )
        self.detail = detail


class JoinRequiredError(ChatError):
    """Chat message received before the connection joined."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Please join with a username first", "JOIN_REQUIRED",
            ErrorCategory.PROTOCOL, ErrorSeverity.WARNING, context, 400,
        )


class AlreadyJoinedError(ChatError):
    """Second join on a connection whose identity is already bound."""
    def __init__(self, username: str, context: ErrorContext | None = None):
        super().__init__(
            f"Already joined as {username}", "ALREADY_JOINED",
            ErrorCategory.PROTOCOL, ErrorSeverity.WARNING, context, 409,
        )
        self.username = username


class IdentityLostError(ChatError):
    """Connection is joined but no longer present in the registry."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Your session is no longer registered, please rejoin",
            "IDENTITY_LOST", ErrorCategory.PROTOCOL,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(ChatError):
    """Message store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_message = ctx.user_message or "Message could not be saved, please try again"
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
