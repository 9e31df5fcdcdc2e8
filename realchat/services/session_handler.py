"""Session Handler — per-connection protocol driver (join / message / close).

Invariants:
    - Frames are handled one at a time, in arrival order (the gateway awaits each call)
    - A rejected frame (any ChatError) changes no state and is answered with one
      `error` envelope to this connection only
    - A chat message is broadcast only after the store accepted it; the broadcast
      carries the persisted username/body/timestamp
    - Join sends `history` to this connection only and `joined` to everyone else
    - close() always unregisters; `left` is broadcast only if the connection had joined

Design Decisions:
    - Pure match-case dispatch on the parsed envelope: no handler registry
    - Any history read failure rolls the registration back so join stays all-or-nothing
    - Unexpected exceptions are logged and reported with a generic error: one broken
      frame never takes down the connection task or reaches other connections
"""

import logging
from datetime import datetime, timezone

from realchat.core.domain_types import HISTORY_LIMIT
from realchat.core.envelopes import (
    chat_envelope, encode_envelope, error_envelope, history_envelope,
    joined_text, left_text, system_envelope,
)
from realchat.core.errors import ChatError, IdentityLostError
from realchat.core.repository_protocols import ConnectionLike, MessageStore
from realchat.core.session_state import SessionState
from realchat.schemas.envelope import ChatEnvelope, JoinEnvelope, parse_inbound
from realchat.services.broadcaster import Broadcaster
from realchat.services.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionHandler:
    """Drives one connection through UNJOINED -> JOINED -> closed."""

    def __init__(
        self,
        connection: ConnectionLike,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
        store: MessageStore,
        history_limit: int = HISTORY_LIMIT,
    ):
        self.connection = connection
        self.state = SessionState()
        self._registry = registry
        self._broadcaster = broadcaster
        self._store = store
        self._history_limit = history_limit

    @property
    def _log_extra(self) -> dict:
        return {
            "connection_id": self.connection.connection_id,
            "username": self.state.identity,
        }

    async def handle_frame(self, raw: str | bytes) -> None:
        """Process one inbound frame."""
        try:
            envelope = parse_inbound(raw)
            match envelope:
                case JoinEnvelope(username=username):
                    await self._join(username)
                case ChatEnvelope(message=body):
                    await self._chat(body)
        except ChatError as e:
            detail = getattr(e, "detail", "")
            logger.warning(
                f"Rejected frame: {e.message}" + (f" ({detail})" if detail else ""),
                extra={**self._log_extra, "error_code": e.code},
            )
            self._reply(e.to_envelope())
        except Exception as e:
            logger.error(
                f"Unhandled error while handling frame: {e}",
                extra=self._log_extra, exc_info=True,
            )
            self._reply(error_envelope("An unexpected error occurred"))

    async def _join(self, identity: str) -> None:
        self.state.check_can_join()
        await self._registry.register(self.connection, identity)
        try:
            history = await self._store.recent(self._history_limit)
        except BaseException:
            await self._registry.unregister(self.connection)
            raise
        self.state.mark_joined(identity)
        logger.info("Client joined", extra=self._log_extra)

        self._reply(history_envelope(history))
        await self._broadcaster.send_to_all_except(
            self.connection, system_envelope(joined_text(identity), _utcnow()),
        )

    async def _chat(self, body: str) -> None:
        self.state.check_can_chat()
        identity = await self._registry.lookup(self.connection)
        if identity is None:
            raise IdentityLostError()
        message = await self._store.append(identity, body)
        await self._broadcaster.send_to_all(chat_envelope(message))

    async def close(self) -> None:
        """Connection is gone: unregister and announce the departure."""
        await self._registry.unregister(self.connection)
        if not self.state.is_joined:
            return
        logger.info("Client left", extra=self._log_extra)
        await self._broadcaster.send_to_all(
            system_envelope(left_text(self.state.identity), _utcnow()),
        )

    def _reply(self, envelope: dict) -> None:
        self.connection.offer(encode_envelope(envelope))
