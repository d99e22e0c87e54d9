"""Chat router — thin HTTP layer, delegates all logic to chat_controller."""

import uuid

from fastapi import APIRouter, Depends

from director.api.deps import get_registry
from director.controllers import chat_controller
from director.core.registry import SessionRegistry
from director.schemas.chat import Message, ModeSelect, TurnCreate

router = APIRouter(prefix="/sessions", tags=["chat"])


@router.post("/{session_id}/turns", response_model=Message)
async def submit_turn(
    session_id: uuid.UUID,
    payload: TurnCreate,
    registry: SessionRegistry = Depends(get_registry),
):
    """Send a turn to the executive board and get its reply."""
    return await chat_controller.submit_turn(session_id, payload, registry)


@router.post("/{session_id}/mode", response_model=Message)
async def select_mode(
    session_id: uuid.UUID,
    payload: ModeSelect,
    registry: SessionRegistry = Depends(get_registry),
):
    """Choose the fundraising mode for the pending deck request."""
    return await chat_controller.select_mode(session_id, payload, registry)
