"""Recent Messages — read-only HTTP view of the chat log.

Invariants:
    - GET /api/messages returns at most HISTORY_LIMIT messages, oldest-first
    - Direct pass-through to MessageStore.recent; PersistenceError maps to 503
      through the global ChatError handler
"""

from fastapi import APIRouter, Depends

from realchat.api.dependencies import get_message_store
from realchat.core.domain_types import HISTORY_LIMIT
from realchat.core.envelopes import message_payload
from realchat.core.repository_protocols import MessageStore
from realchat.schemas.envelope import MessageOut

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("", response_model=list[MessageOut])
async def recent_messages(store: MessageStore = Depends(get_message_store)):
    """The most recent messages, oldest first."""
    messages = await store.recent(HISTORY_LIMIT)
    return [MessageOut(**message_payload(m)) for m in messages]
