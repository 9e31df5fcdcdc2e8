"""Envelope Schemas — Pydantic validation of client→server WebSocket frames.

Invariants:
    - Exactly two inbound tags: join{username}, message{message}
    - username and message are stripped and must be non-empty
    - parse_inbound never returns a partially valid envelope: any failure raises ProtocolError
    - Unknown fields are ignored; unknown tags are rejected

Design Decisions:
    - Discriminated union on `type`: Pydantic selects the model by tag and reports
      union_tag_invalid / union_tag_not_found for bad or missing tags
    - TypeAdapter.validate_json parses and validates in one step, so invalid JSON,
      non-object payloads and bad fields all surface as ValidationError
    - Blank usernames rejected here (server-side hardening of the join contract)
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from realchat.core.errors import ProtocolError


def _strip_required(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return value


class JoinEnvelope(BaseModel):
    """join{username} — binds a display name to the connection."""
    type: Literal["join"]
    username: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return _strip_required(v, "username")


class ChatEnvelope(BaseModel):
    """message{message} — chat body from a joined connection."""
    type: Literal["message"]
    message: str

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return _strip_required(v, "message")


InboundEnvelope = Annotated[
    Union[JoinEnvelope, ChatEnvelope], Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[JoinEnvelope | ChatEnvelope] = TypeAdapter(InboundEnvelope)


def parse_inbound(raw: str | bytes) -> JoinEnvelope | ChatEnvelope:
    """Parse one frame into an inbound envelope or raise ProtocolError."""
    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as e:
        errors = e.errors()
        detail = errors[0]["msg"] if errors else str(e)
        raise ProtocolError(detail)


class MessageOut(BaseModel):
    """Response item for GET /api/messages."""
    username: str
    message: str
    timestamp: str
