"""Client Connection — bounded outbound queue and writer task for one WebSocket.

Invariants:
    - offer() never blocks and never raises: a full queue or closed connection drops the frame
    - Frames are written in the order they were offered
    - Once closed (explicitly or by a failed write) the connection stays closed
    - A failed write is logged here and never propagated to whoever offered the frame

Design Decisions:
    - One asyncio.Queue per connection drained by its own task: a slow or dead peer
      fills its own queue instead of stalling the broadcaster
    - Replies to the sender (history, error) go through the same queue so they stay
      ordered relative to broadcasts
    - Identity-based hashing (no __eq__ override): registry keys are connection objects
"""

import asyncio
import logging
import uuid

from starlette.websockets import WebSocket, WebSocketState

from realchat.core.domain_types import ConnectionId

logger = logging.getLogger(__name__)


class ClientConnection:
    """Outbound channel to one connected client."""

    def __init__(self, websocket: WebSocket, queue_size: int = 256):
        self.connection_id = ConnectionId(uuid.uuid4().hex)
        self._websocket = websocket
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self._closed = False
        self.dropped = 0

    @property
    def is_writable(self) -> bool:
        return (
            not self._closed
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    def offer(self, payload: str) -> bool:
        """Queue a serialized frame. Returns False if it was dropped."""
        if not self.is_writable:
            return False
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Outbound queue full, frame dropped",
                extra={"connection_id": self.connection_id},
            )
            return False
        return True

    async def pump(self) -> None:
        """Drain the queue to the socket until closed or a write fails."""
        while not self._closed:
            payload = await self._queue.get()
            try:
                await self._websocket.send_text(payload)
            except Exception as e:
                logger.info(
                    f"Write failed, closing outbound channel: {e}",
                    extra={"connection_id": self.connection_id},
                )
                self._closed = True

    def close(self) -> None:
        self._closed = True
