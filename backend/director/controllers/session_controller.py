import uuid

from fastapi import HTTPException, status

from director.core.registry import BoardSession, SessionRegistry
from director.core.turn_state import TurnStatus
from director.schemas.chat import Message, SessionRead, TurnStatusRead
from director.schemas.startup import StartupContext


def create_session(context: StartupContext, registry: SessionRegistry) -> BoardSession:
    return registry.create(context)


def get_session(session_id: uuid.UUID, registry: SessionRegistry) -> BoardSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


def end_session(session_id: uuid.UUID, registry: SessionRegistry) -> None:
    if not registry.end(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")


def status_read(turn_status: TurnStatus) -> TurnStatusRead:
    return TurnStatusRead(
        state=turn_status.state.value,
        agent=turn_status.agent,
        reason=turn_status.reason,
        error=turn_status.error,
    )


def session_read(session: BoardSession) -> SessionRead:
    return SessionRead(
        id=session.id,
        context=session.store.get_context(),
        message_count=len(session.store.get_history()),
        status=status_read(session.orchestrator.tracker.status),
    )


def get_messages(session_id: uuid.UUID, registry: SessionRegistry) -> list[Message]:
    """Return every message for the session, oldest first."""
    return list(get_session(session_id, registry).store.get_history())


def get_status(session_id: uuid.UUID, registry: SessionRegistry) -> TurnStatusRead:
    return status_read(get_session(session_id, registry).orchestrator.tracker.status)
