"""Export routes — downloadable transcripts and decks."""

import uuid

from fastapi import APIRouter, Depends, Query

from director.api.deps import get_registry
from director.controllers import export_controller
from director.controllers.export_controller import ExportFormat
from director.core.registry import SessionRegistry

router = APIRouter(prefix="/sessions", tags=["exports"])


@router.get("/{session_id}/messages/{index}/export")
def export_message(
    session_id: uuid.UUID,
    index: int,
    fmt: ExportFormat = Query("txt", alias="format"),
    registry: SessionRegistry = Depends(get_registry),
):
    """Download message *index* as txt, or a generated deck as html / pptx."""
    return export_controller.export_message(session_id, index, fmt, registry)
