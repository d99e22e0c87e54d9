import uuid

from fastapi import HTTPException, status

from director.controllers.session_controller import get_session
from director.core.registry import SessionRegistry
from director.schemas.board import AgentType, CEOSummary
from director.schemas.chat import Message


async def get_summary(session_id: uuid.UUID, registry: SessionRegistry) -> CEOSummary:
    """Return the cached CEO overview, generating it on first request."""
    session = get_session(session_id, registry)
    result = await session.orchestrator.generate_overview_summary()
    if result.summary is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
    return result.summary


async def get_briefing(
    session_id: uuid.UUID,
    agent: AgentType,
    registry: SessionRegistry,
    refresh: bool = False,
) -> Message:
    """Return *agent*'s mandate.  Failures come back as an error-flagged message."""
    session = get_session(session_id, registry)
    return await session.orchestrator.generate_agent_briefing(agent, refresh=refresh)
