"""Sessions router — intake form submission and session inspection."""

import uuid

from fastapi import APIRouter, Depends, status

from director.api.deps import get_registry
from director.controllers import session_controller
from director.core.registry import SessionRegistry
from director.schemas.chat import Message, SessionCreate, SessionRead, TurnStatusRead

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    registry: SessionRegistry = Depends(get_registry),
):
    """Start a boardroom session from the completed intake form."""
    session = session_controller.create_session(payload, registry)
    return session_controller.session_read(session)


@router.get("/{session_id}", response_model=SessionRead)
def get_session(
    session_id: uuid.UUID,
    registry: SessionRegistry = Depends(get_registry),
):
    return session_controller.session_read(session_controller.get_session(session_id, registry))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def end_session(
    session_id: uuid.UUID,
    registry: SessionRegistry = Depends(get_registry),
):
    """End the session and drop its history and caches."""
    session_controller.end_session(session_id, registry)


@router.get("/{session_id}/messages", response_model=list[Message])
def get_messages(
    session_id: uuid.UUID,
    registry: SessionRegistry = Depends(get_registry),
):
    """Get the conversation history, oldest first."""
    return session_controller.get_messages(session_id, registry)


@router.get("/{session_id}/status", response_model=TurnStatusRead)
def get_status(
    session_id: uuid.UUID,
    registry: SessionRegistry = Depends(get_registry),
):
    """Current turn state: idle, awaiting reply, showing activation or error."""
    return session_controller.get_status(session_id, registry)
