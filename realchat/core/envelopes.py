"""Envelope Builders — pure construction of server→client wire frames.

Invariants:
    - Every envelope carries exactly one `type` tag
    - Timestamps are ISO-8601 strings; the caller supplies `now` (no clock reads here)
    - history lists messages in the order given (store returns oldest-first)
    - encode_envelope is the only place outbound frames are serialized

Design Decisions:
    - Plain dicts over Pydantic models for outbound frames: they are built on the hot
      broadcast path and serialized once per broadcast
"""

import json
from datetime import datetime

from realchat.core.domain_types import ChatMessage, EnvelopeType


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def message_payload(message: ChatMessage) -> dict:
    """The {username, message, timestamp} shape shared by history and broadcast."""
    return {
        "username": message.username,
        "message": message.body,
        "timestamp": format_timestamp(message.timestamp),
    }


def history_envelope(messages: list[ChatMessage]) -> dict:
    return {
        "type": EnvelopeType.HISTORY.value,
        "messages": [message_payload(m) for m in messages],
    }


def chat_envelope(message: ChatMessage) -> dict:
    return {"type": EnvelopeType.MESSAGE.value, **message_payload(message)}


def system_envelope(text: str, now: datetime) -> dict:
    return {
        "type": EnvelopeType.SYSTEM.value,
        "message": text,
        "timestamp": format_timestamp(now),
    }


def error_envelope(text: str) -> dict:
    return {"type": EnvelopeType.ERROR.value, "message": text}


def joined_text(username: str) -> str:
    return f"{username} joined the chat"


def left_text(username: str) -> str:
    return f"{username} left the chat"


def encode_envelope(envelope: dict) -> str:
    """Serialize an envelope to a text frame."""
    return json.dumps(envelope, ensure_ascii=False)
