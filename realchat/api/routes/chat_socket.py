"""Chat Socket — WebSocket gateway handing each connection to a SessionHandler.

Invariants:
    - One task per connection: frames are received and handled strictly in sequence
    - Each connection gets its own ClientConnection writer task for outbound frames
    - Close and transport errors run the same cleanup, exactly once, in `finally`
    - Transport errors are logged, never sent to the (departing) peer

Design Decisions:
    - websocket.receive() over receive_text(): binary frames carrying JSON are
      accepted and disconnects arrive as a message instead of an exception
    - The outbound channel is closed before session cleanup so the `left`
      broadcast never targets the departing connection
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket

from realchat.api.dependencies import get_chat_hub
from realchat.config import get_settings
from realchat.services.chat_hub import ChatHub
from realchat.services.client_connection import ClientConnection
from realchat.services.session_handler import SessionHandler

logger = logging.getLogger(__name__)
router = APIRouter(tags=["chat"])


@router.websocket(get_settings().websocket_path)
async def chat_socket(
    websocket: WebSocket, hub: ChatHub = Depends(get_chat_hub),
):
    await websocket.accept()
    connection = ClientConnection(websocket, queue_size=hub.outbound_queue_size)
    writer = asyncio.create_task(connection.pump())
    session = hub.open_session(connection)
    logger.info(
        "Connection accepted", extra={"connection_id": connection.connection_id},
    )
    try:
        await _receive_loop(websocket, session)
    finally:
        connection.close()
        await session.close()
        writer.cancel()
        await asyncio.gather(writer, return_exceptions=True)
        logger.info(
            "Connection closed",
            extra={"connection_id": connection.connection_id},
        )


async def _receive_loop(websocket: WebSocket, session: SessionHandler) -> None:
    while True:
        try:
            message = await websocket.receive()
        except Exception as e:
            logger.warning(
                f"Transport error: {e}",
                extra={"connection_id": session.connection.connection_id},
            )
            return
        if message["type"] == "websocket.disconnect":
            return
        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes") or b""
        await session.handle_frame(raw)
