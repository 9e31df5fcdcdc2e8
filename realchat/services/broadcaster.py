"""Broadcaster — fan-out of one envelope to every live connection.

Invariants:
    - An envelope is serialized once per broadcast, not once per recipient
    - Recipients come from ConnectionRegistry.live_connections() at call time
    - Non-writable recipients are skipped; nothing is queued or retried for them
    - A failure for one recipient never prevents delivery to the others
    - No await between taking the snapshot and the last enqueue, so every
      connection sees broadcasts in the same relative order

Design Decisions:
    - Enqueue-only (ClientConnection.offer): the broadcaster never awaits a socket write
"""

import logging

from realchat.core.envelopes import encode_envelope
from realchat.core.repository_protocols import ConnectionLike
from realchat.services.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class Broadcaster:
    """Sends envelopes to all (or all-but-one) registered connections."""

    def __init__(self, registry: ConnectionRegistry):
        self._registry = registry

    async def send_to_all(self, envelope: dict) -> int:
        return await self._fan_out(envelope, excluded=None)

    async def send_to_all_except(
        self, excluded: ConnectionLike, envelope: dict,
    ) -> int:
        return await self._fan_out(envelope, excluded=excluded)

    async def _fan_out(
        self, envelope: dict, excluded: ConnectionLike | None,
    ) -> int:
        """Queue the frame for each recipient. Returns how many accepted it."""
        payload = encode_envelope(envelope)
        recipients = await self._registry.live_connections()
        delivered = 0
        for connection in recipients:
            if connection is excluded or not connection.is_writable:
                continue
            try:
                if connection.offer(payload):
                    delivered += 1
            except Exception as e:
                logger.error(
                    f"Broadcast to connection failed: {e}",
                    extra={"connection_id": connection.connection_id},
                )
        logger.debug(
            f"Broadcast {envelope.get('type')}",
            extra={"recipients": delivered},
        )
        return delivered
