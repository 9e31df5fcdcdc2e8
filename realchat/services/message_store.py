"""Message Store — SQL-backed append-only chat log.

Invariants:
    - append assigns the timestamp (UTC) and returns exactly what was persisted
    - recent(limit) returns at most `limit` newest messages, oldest-first
    - Every database failure surfaces as PersistenceError (via DatabaseSessionManager)

Design Decisions:
    - Query newest-first with LIMIT, then reverse in Python: uses the timestamp index
    - id DESC as secondary sort key: equal timestamps keep insertion order
    - Naive datetimes coming back from SQLite are normalized to UTC
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select

from realchat.core.domain_types import ChatMessage, MessageId
from realchat.infrastructure.database import DatabaseSessionManager
from realchat.models.chat_message import ChatMessageRecord

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_domain(record: ChatMessageRecord) -> ChatMessage:
    return ChatMessage(
        id=MessageId(record.id),
        username=record.username,
        body=record.message,
        timestamp=_as_utc(record.timestamp),
    )


class SqlMessageStore:
    """MessageStore implementation on the async SQLAlchemy session manager."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def append(self, identity: str, body: str) -> ChatMessage:
        timestamp = datetime.now(timezone.utc)
        async with self._db.session() as session:
            record = ChatMessageRecord(
                username=identity, message=body, timestamp=timestamp,
            )
            session.add(record)
            await session.commit()
        logger.info("Message persisted", extra={"username": identity})
        return ChatMessage(
            id=MessageId(record.id),
            username=identity,
            body=body,
            timestamp=timestamp,
        )

    async def recent(self, limit: int) -> list[ChatMessage]:
        if limit <= 0:
            return []
        async with self._db.session() as session:
            result = await session.execute(
                select(ChatMessageRecord)
                .order_by(
                    ChatMessageRecord.timestamp.desc(),
                    ChatMessageRecord.id.desc(),
                )
                .limit(limit),
            )
            records = result.scalars().all()
        return [_to_domain(r) for r in reversed(records)]
