"""ChatMessage ORM — append-only log of chat messages.

Invariants:
    - Rows are never updated or deleted by the application
    - username and message are non-nullable, stored already trimmed
    - timestamp is assigned by the store at persistence time (UTC)

Design Decisions:
    - Integer autoincrement id: breaks ties between equal timestamps so
      recent() ordering is stable
    - Index on timestamp: recent() sorts newest-first with a LIMIT
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from realchat.db.base import Base


class ChatMessageRecord(Base):
    """One persisted chat message."""
    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    username: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
