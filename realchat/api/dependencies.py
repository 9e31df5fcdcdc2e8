"""Route Dependencies — access to the process-wide ChatHub.

Invariants:
    - The hub is created by the lifespan; requests before startup get a RuntimeError

Design Decisions:
    - HTTPConnection parameter: the same dependency serves HTTP and WebSocket routes
"""

from fastapi import Depends
from starlette.requests import HTTPConnection

from realchat.core.repository_protocols import MessageStore
from realchat.services.chat_hub import ChatHub


def get_chat_hub(conn: HTTPConnection) -> ChatHub:
    hub = getattr(conn.app.state, "chat_hub", None)
    if hub is None:
        raise RuntimeError("Chat hub not initialized")
    return hub


def get_message_store(hub: ChatHub = Depends(get_chat_hub)) -> MessageStore:
    return hub.store
