import re
import uuid
from typing import Literal

from fastapi import HTTPException, Response, status

from director.controllers.session_controller import get_session
from director.core.deck_template import render_pitch_deck
from director.core.exporters import deck_to_pptx, message_to_text
from director.core.registry import SessionRegistry

ExportFormat = Literal["txt", "html", "pptx"]

PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def _slug(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", name).strip("_") or "startup"


def export_message(
    session_id: uuid.UUID,
    index: int,
    fmt: ExportFormat,
    registry: SessionRegistry,
) -> Response:
    """Render message *index* as a downloadable file.

    Text works for every message; HTML and PPTX only for deck results.
    """
    session = get_session(session_id, registry)
    try:
        message = session.store.get_message(index)
    except IndexError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")

    project_name = session.store.get_context().name
    stem = _slug(project_name)

    if fmt == "txt":
        filename = f"{stem}_Pitch_Deck.txt" if message.is_deck else f"{stem}_Executive_Strategy.txt"
        return Response(
            content=message_to_text(message, project_name),
            media_type="text/plain; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    if not message.is_deck or not message.slides:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only pitch deck messages can be exported as {fmt}",
        )

    if fmt == "html":
        return Response(
            content=render_pitch_deck(message.slides, project_name),
            media_type="text/html; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{stem}_Pitch_Deck.html"'},
        )

    return Response(
        content=deck_to_pptx(message.slides, project_name),
        media_type=PPTX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{stem}_Pitch_Deck.pptx"'},
    )
