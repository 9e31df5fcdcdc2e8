"""Chat Socket — full WebSocket round trips through the gateway.

Scenario tests drive real sockets via Starlette's TestClient; the store is the
in-memory fake so history and persistence are observable. Transport failures
are driven by calling the route coroutine with a scripted socket.
"""

import asyncio
import json

from starlette.websockets import WebSocketState

from realchat.api.routes.chat_socket import chat_socket
from tests.fakes import FakeConnection


class ResettingWebSocket:
    """Delivers the scripted frames, then fails the way a dropped peer does."""

    def __init__(self, *frames: str):
        self.application_state = WebSocketState.CONNECTED
        self.sent: list[str] = []
        self._frames = list(frames)

    async def accept(self) -> None:
        return None

    async def send_text(self, data: str) -> None:
        self.sent.append(data)

    async def receive(self) -> dict:
        await asyncio.sleep(0)
        if not self._frames:
            raise ConnectionResetError("connection reset by peer")
        return {"type": "websocket.receive", "text": self._frames.pop(0)}


def test_join_chat_leave_scenario(socket_client, store):
    with socket_client.websocket_connect("/ws") as alice:
        alice.send_json({"type": "join", "username": "alice"})
        assert alice.receive_json() == {"type": "history", "messages": []}

        with socket_client.websocket_connect("/ws") as bob:
            bob.send_json({"type": "join", "username": "bob"})
            assert bob.receive_json()["type"] == "history"

            joined = alice.receive_json()
            assert joined["type"] == "system"
            assert joined["message"] == "bob joined the chat"

            bob.send_json({"type": "message", "message": "hi"})
            to_bob = bob.receive_json()
            to_alice = alice.receive_json()
            assert to_bob == to_alice
            assert to_bob["type"] == "message"
            assert to_bob["username"] == "bob"
            assert to_bob["message"] == "hi"
            assert to_bob["timestamp"] == store.messages[-1].timestamp.isoformat()

        left = alice.receive_json()
        assert left["type"] == "system"
        assert left["message"] == "bob left the chat"


def test_history_replayed_on_join(socket_client, store):
    store.seed(2, username="carol")
    with socket_client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "join", "username": "dave"})
        history = ws.receive_json()
    assert [m["username"] for m in history["messages"]] == ["carol", "carol"]
    assert [m["message"] for m in history["messages"]] == ["message 0", "message 1"]


def test_chat_before_join_gets_error_and_can_still_join(socket_client, store):
    with socket_client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "message", "message": "early"})
        assert ws.receive_json() == {
            "type": "error", "message": "Please join with a username first",
        }
        assert store.append_calls == 0

        ws.send_json({"type": "join", "username": "erin"})
        assert ws.receive_json()["type"] == "history"


def test_malformed_frames_keep_connection_open(socket_client):
    with socket_client.websocket_connect("/ws") as ws:
        ws.send_text("this is not json")
        assert ws.receive_json() == {"type": "error", "message": "Invalid message format"}

        ws.send_bytes(b'{"type": "join", "username": "frank"}')
        assert ws.receive_json()["type"] == "history"

        ws.send_json({"type": "message", "message": "still here"})
        assert ws.receive_json()["message"] == "still here"


def test_failed_save_is_not_broadcast(socket_client, store):
    with socket_client.websocket_connect("/ws") as alice:
        alice.send_json({"type": "join", "username": "alice"})
        alice.receive_json()
        with socket_client.websocket_connect("/ws") as bob:
            bob.send_json({"type": "join", "username": "bob"})
            bob.receive_json()
            alice.receive_json()

            store.fail_append = True
            bob.send_json({"type": "message", "message": "lost"})
            assert bob.receive_json()["type"] == "error"

            store.fail_append = False
            bob.send_json({"type": "message", "message": "saved"})
            assert bob.receive_json()["message"] == "saved"
            # alice never saw "lost": the next frame she gets is "saved"
            assert alice.receive_json()["message"] == "saved"


async def test_transport_error_cleans_up_and_announces_departure(hub):
    bob = FakeConnection("bob")
    bob_session = hub.open_session(bob)
    await bob_session.handle_frame(json.dumps({"type": "join", "username": "bob"}))
    bob.frames.clear()
    ws = ResettingWebSocket(json.dumps({"type": "join", "username": "alice"}))

    await chat_socket(ws, hub)

    assert [e["message"] for e in bob.of_type("system")] == [
        "alice joined the chat", "alice left the chat",
    ]
    assert await hub.registry.live_connections() == [bob]
    assert all(json.loads(f)["type"] != "error" for f in ws.sent)
