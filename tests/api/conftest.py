"""API test fixtures — HTTP client and WebSocket client with a fake-store ChatHub.

Invariants:
    - get_chat_hub overridden: no test touches a real database
    - The WebSocket client runs the app lifespan with init_db stubbed out

Design Decisions:
    - httpx AsyncClient over ASGITransport for HTTP routes (no lifespan needed)
    - Starlette TestClient as a context manager for WebSockets: one portal, so every
      socket in a test shares one event loop and one registry
"""

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

import realchat.main as main_module
from realchat.api.dependencies import get_chat_hub
from realchat.main import app
from realchat.services.chat_hub import ChatHub
from tests.fakes import FakeMessageStore


class _StubManager:
    async def dispose(self) -> None:
        return None


@pytest.fixture
def store():
    return FakeMessageStore()


@pytest.fixture
def hub(store):
    return ChatHub(store=store)


@pytest.fixture
async def client(hub):
    app.dependency_overrides[get_chat_hub] = lambda: hub
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def socket_client(hub, monkeypatch):
    monkeypatch.setattr(main_module, "init_db", lambda *a, **kw: _StubManager())
    app.dependency_overrides[get_chat_hub] = lambda: hub
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
