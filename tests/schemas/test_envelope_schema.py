"""Envelope Schemas — parsing of client→server frames.

Tests cover:
    - Valid join/message frames (text and bytes)
    - Trimming of username/message
    - Every malformed shape maps to ProtocolError
"""

import pytest

from realchat.core.errors import ProtocolError
from realchat.schemas.envelope import ChatEnvelope, JoinEnvelope, parse_inbound


def test_join_frame():
    envelope = parse_inbound('{"type": "join", "username": "alice"}')
    assert envelope == JoinEnvelope(type="join", username="alice")


def test_message_frame_from_bytes():
    envelope = parse_inbound(b'{"type": "message", "message": "hi"}')
    assert isinstance(envelope, ChatEnvelope)
    assert envelope.message == "hi"


def test_fields_are_trimmed():
    assert parse_inbound('{"type": "join", "username": "  bob "}').username == "bob"
    assert parse_inbound('{"type": "message", "message": " hi\\n"}').message == "hi"


def test_extra_fields_ignored():
    envelope = parse_inbound('{"type": "join", "username": "a", "color": "red"}')
    assert envelope.username == "a"


@pytest.mark.parametrize("raw", [
    "not json",
    "",
    "[]",
    '"join"',
    "{}",
    '{"type": "shout", "message": "hi"}',
    '{"type": "join"}',
    '{"type": "message"}',
    '{"type": "join", "username": 42}',
    '{"type": "join", "username": "   "}',
    '{"type": "message", "message": ""}',
    '{"type": "history", "messages": []}',
])
def test_malformed_frames_raise_protocol_error(raw):
    with pytest.raises(ProtocolError):
        parse_inbound(raw)


def test_invalid_utf8_bytes_raise_protocol_error():
    with pytest.raises(ProtocolError):
        parse_inbound(b"\xff\xfe")
