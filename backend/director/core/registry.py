"""Process-wide registry of live boardroom sessions."""

import logging
import uuid
from dataclasses import dataclass

from director.core.config import Settings, settings as default_settings
from director.core.gateway import ModelGateway
from director.core.orchestrator import TurnOrchestrator
from director.core.session_store import SessionStore
from director.schemas.startup import StartupContext

logger = logging.getLogger(__name__)


@dataclass
class BoardSession:
    store: SessionStore
    orchestrator: TurnOrchestrator

    @property
    def id(self) -> uuid.UUID:
        return self.store.id


class SessionRegistry:
    def __init__(self, gateway: ModelGateway, settings: Settings | None = None) -> None:
        self.gateway = gateway
        self.settings = settings or default_settings
        self._sessions: dict[uuid.UUID, BoardSession] = {}

    def create(self, context: StartupContext) -> BoardSession:
        store = SessionStore(context)
        session = BoardSession(
            store=store,
            orchestrator=TurnOrchestrator(store, self.gateway, self.settings),
        )
        self._sessions[store.id] = session
        logger.info("Session %s created for %s (%s)", store.id, context.name, context.stage.value)
        return session

    def get(self, session_id: uuid.UUID) -> BoardSession | None:
        return self._sessions.get(session_id)

    def end(self, session_id: uuid.UUID) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
