"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ChatMessage is immutable once built (frozen dataclass)
    - ChatMessage.timestamp is timezone-aware UTC
    - All valid envelope tags and session phases encoded as Enums — no raw string matching

Design Decisions:
    - NewType for identifiers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (wire envelopes are JSON)
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ConnectionId = NewType("ConnectionId", str)
MessageId = NewType("MessageId", int)

# Number of messages replayed on join and served by GET /api/messages
HISTORY_LIMIT = 50


# ─── Enums ───────────────────────────────────────────────────────

class EnvelopeType(str, Enum):
    """Wire tags. MESSAGE is used in both directions."""
    JOIN = "join"
    MESSAGE = "message"
    HISTORY = "history"
    SYSTEM = "system"
    ERROR = "error"


class SessionPhase(str, Enum):
    """Per-connection protocol state."""
    UNJOINED = "unjoined"
    JOINED = "joined"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ChatMessage:
    """A persisted chat message."""
    username: str
    body: str
    timestamp: datetime
    id: MessageId | None = None
