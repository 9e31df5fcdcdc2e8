"""Session State — per-connection join state machine.

Invariants:
    - Starts UNJOINED; JOINED is terminal until the connection closes
    - identity is set exactly once, on the UNJOINED -> JOINED transition
    - Guard methods raise typed errors and never mutate state

Design Decisions:
    - Dataclass with guard methods: pure, deterministic, testable without mocks
    - The registry stays the source of truth for presence; this object only
      answers "has this connection completed join"
"""

from dataclasses import dataclass

from realchat.core.domain_types import SessionPhase
from realchat.core.errors import AlreadyJoinedError, JoinRequiredError


@dataclass
class SessionState:
    """Per-connection protocol state — pure dataclass, no IO."""

    phase: SessionPhase = SessionPhase.UNJOINED
    identity: str | None = None

    @property
    def is_joined(self) -> bool:
        return self.phase is SessionPhase.JOINED

    def check_can_join(self) -> None:
        if self.is_joined:
            raise AlreadyJoinedError(self.identity or "")

    def check_can_chat(self) -> None:
        if not self.is_joined:
            raise JoinRequiredError()

    def mark_joined(self, identity: str) -> None:
        self.check_can_join()
        self.phase = SessionPhase.JOINED
        self.identity = identity
