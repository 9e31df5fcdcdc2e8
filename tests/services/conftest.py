"""Service test fixtures — registry, broadcaster, fake store and an async SQLite DB.

Invariants:
    - Every test gets a fresh registry and a fresh in-memory SQLite database
    - db_manager is built around the test engine (no pool arguments for SQLite)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the chat log
    - DatabaseSessionManager built via __new__: reuses the real session()/error mapping
      while pointing at the test engine
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from realchat.db.base import Base
from realchat.infrastructure.database import DatabaseSessionManager
from realchat.services.broadcaster import Broadcaster
from realchat.services.connection_registry import ConnectionRegistry
from realchat.services.message_store import SqlMessageStore
from realchat.services.session_handler import SessionHandler
import realchat.models  # noqa: F401
from tests.fakes import FakeConnection, FakeMessageStore


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry):
    return Broadcaster(registry)


@pytest.fixture
def store():
    return FakeMessageStore()


@pytest.fixture
def make_session(registry, broadcaster, store):
    """Factory: new FakeConnection + SessionHandler sharing the test registry."""
    def _make(name: str, history_limit: int = 50):
        connection = FakeConnection(name)
        handler = SessionHandler(
            connection, registry, broadcaster, store,
            history_limit=history_limit,
        )
        return connection, handler
    return _make


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_manager(test_engine):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
async def sql_store(db_manager):
    return SqlMessageStore(db_manager)
