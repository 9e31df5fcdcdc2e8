"""Envelope Builders — tests for the server→client wire shapes."""

import json
from datetime import datetime, timezone

from realchat.core.domain_types import ChatMessage
from realchat.core.envelopes import (
    chat_envelope, encode_envelope, error_envelope, history_envelope,
    joined_text, left_text, system_envelope,
)

T0 = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _msg(username="bob", body="hi", ts=T0):
    return ChatMessage(username=username, body=body, timestamp=ts)


def test_chat_envelope_carries_username_message_timestamp():
    assert chat_envelope(_msg()) == {
        "type": "message",
        "username": "bob",
        "message": "hi",
        "timestamp": "2026-03-01T09:30:00+00:00",
    }


def test_history_envelope_keeps_given_order():
    first = _msg(body="first")
    second = _msg(body="second", ts=T0.replace(minute=31))
    envelope = history_envelope([first, second])
    assert envelope["type"] == "history"
    assert [m["message"] for m in envelope["messages"]] == ["first", "second"]


def test_history_envelope_empty():
    assert history_envelope([]) == {"type": "history", "messages": []}


def test_history_items_have_no_type_tag():
    item = history_envelope([_msg()])["messages"][0]
    assert set(item) == {"username", "message", "timestamp"}


def test_system_envelope_uses_supplied_clock():
    envelope = system_envelope(joined_text("bob"), T0)
    assert envelope == {
        "type": "system",
        "message": "bob joined the chat",
        "timestamp": T0.isoformat(),
    }


def test_left_text():
    assert left_text("alice") == "alice left the chat"


def test_error_envelope_has_only_message():
    assert error_envelope("nope") == {"type": "error", "message": "nope"}


def test_encode_envelope_keeps_unicode():
    text = encode_envelope(chat_envelope(_msg(body="olá 👋")))
    assert "olá 👋" in text
    assert json.loads(text)["message"] == "olá 👋"
