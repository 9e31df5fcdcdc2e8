"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy; test
      fakes satisfy the contract without subclassing
    - MessageStore is async because implementations do IO
"""

from typing import Protocol

from realchat.core.domain_types import ChatMessage, ConnectionId


class ConnectionLike(Protocol):
    """Structural contract for an outbound channel to one client.

    Implemented by services/client_connection.ClientConnection. The registry keys
    on these objects by identity, so implementations must stay hashable.
    """
    connection_id: ConnectionId

    @property
    def is_writable(self) -> bool: ...

    def offer(self, payload: str) -> bool: ...


class MessageStore(Protocol):
    """Contract for chat message persistence — implemented by shell."""
    async def append(self, identity: str, body: str) -> ChatMessage: ...
    async def recent(self, limit: int) -> list[ChatMessage]: ...
