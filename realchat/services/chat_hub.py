"""Chat Hub — wiring of the shared chat collaborators for one process.

Invariants:
    - Exactly one ConnectionRegistry per hub; its Broadcaster reads that same registry
    - Every SessionHandler created by the hub shares the hub's registry, broadcaster and store

Design Decisions:
    - Built once in the FastAPI lifespan and stored on app.state: routes reach it through
      a dependency, so tests swap it with dependency_overrides
"""

from dataclasses import dataclass, field

from realchat.core.domain_types import HISTORY_LIMIT
from realchat.core.repository_protocols import ConnectionLike, MessageStore
from realchat.services.broadcaster import Broadcaster
from realchat.services.connection_registry import ConnectionRegistry
from realchat.services.session_handler import SessionHandler


@dataclass
class ChatHub:
    store: MessageStore
    history_limit: int = HISTORY_LIMIT
    outbound_queue_size: int = 256
    registry: ConnectionRegistry = field(default_factory=ConnectionRegistry)
    broadcaster: Broadcaster = field(init=False)

    def __post_init__(self):
        self.broadcaster = Broadcaster(self.registry)

    def open_session(self, connection: ConnectionLike) -> SessionHandler:
        return SessionHandler(
            connection, self.registry, self.broadcaster, self.store,
            history_limit=self.history_limit,
        )
