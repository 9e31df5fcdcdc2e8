"""Connection Registry — who is present, keyed by live connection.

Invariants:
    - A connection is present iff it completed join and has not closed
    - Every operation runs under one asyncio.Lock; no IO happens while it is held
    - unregister is idempotent (unknown connections are a no-op)
    - live_connections returns a snapshot list, safe to iterate after the lock is released

Design Decisions:
    - Owned object injected through ChatHub rather than a module-level dict:
      tests build isolated registries and nothing reaches it as ambient state
    - Duplicate display names across connections are allowed (not an error)
"""

import asyncio

from realchat.core.repository_protocols import ConnectionLike


class ConnectionRegistry:
    """In-memory mapping from live connection to display identity."""

    def __init__(self):
        self._entries: dict[ConnectionLike, str] = {}
        self._lock = asyncio.Lock()

    async def register(self, connection: ConnectionLike, identity: str) -> None:
        async with self._lock:
            self._entries[connection] = identity

    async def lookup(self, connection: ConnectionLike) -> str | None:
        async with self._lock:
            return self._entries.get(connection)

    async def unregister(self, connection: ConnectionLike) -> str | None:
        """Remove the entry. Returns the identity it held, if any."""
        async with self._lock:
            return self._entries.pop(connection, None)

    async def live_connections(self) -> list[ConnectionLike]:
        async with self._lock:
            return list(self._entries)

    async def count(self) -> int:
        async with self._lock:
            return len(self._entries)
