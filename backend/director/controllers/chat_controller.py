"""
Chat controller: one boardroom turn per request.

- **turns**: free text plus optional attachments, routed by the orchestrator
  to a chat reply, an audit, a mode prompt or a generated deck.
- **mode**: the answer to a mode prompt, which builds the pending deck.
"""

import logging
import uuid

from fastapi import HTTPException, status

from director.controllers.session_controller import get_session
from director.core.orchestrator import ModeNotPendingError, TurnInFlightError
from director.core.registry import SessionRegistry
from director.schemas.chat import Message, ModeSelect, TurnCreate

logger = logging.getLogger(__name__)


async def submit_turn(
    session_id: uuid.UUID,
    payload: TurnCreate,
    registry: SessionRegistry,
) -> Message:
    """Main chat entry point.

    * Decodes base64 attachments (400 on bad payloads).
    * Rejects overlapping turns with 409.
    * Delegates routing and model calls to the session's orchestrator.
    """
    session = get_session(session_id, registry)

    try:
        attachments = [a.to_attachment() for a in payload.attachments]
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        return await session.orchestrator.submit_turn(payload.content, attachments)
    except TurnInFlightError as e:
        logger.info("Rejected overlapping turn for session %s", session_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


async def select_mode(
    session_id: uuid.UUID,
    payload: ModeSelect,
    registry: SessionRegistry,
) -> Message:
    """Apply a fundraising mode to the pending deck request and build it."""
    session = get_session(session_id, registry)

    try:
        return await session.orchestrator.select_mode(payload.mode, payload.brief)
    except TurnInFlightError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ModeNotPendingError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
