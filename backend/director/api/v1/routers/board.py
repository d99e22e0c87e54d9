"""Board router — CEO overview and per-agent mandates."""

import uuid

from fastapi import APIRouter, Depends, Query

from director.api.deps import get_registry
from director.controllers import board_controller
from director.core.registry import SessionRegistry
from director.schemas.board import AgentType, CEOSummary
from director.schemas.chat import Message

router = APIRouter(prefix="/sessions", tags=["board"])


@router.get("/{session_id}/summary", response_model=CEOSummary)
async def get_summary(
    session_id: uuid.UUID,
    registry: SessionRegistry = Depends(get_registry),
):
    return await board_controller.get_summary(session_id, registry)


@router.get("/{session_id}/briefings/{agent}", response_model=Message)
async def get_briefing(
    session_id: uuid.UUID,
    agent: AgentType,
    refresh: bool = Query(False, description="Regenerate instead of returning the cached mandate"),
    registry: SessionRegistry = Depends(get_registry),
):
    return await board_controller.get_briefing(session_id, agent, registry, refresh=refresh)
