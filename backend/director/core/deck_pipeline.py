"""
Pitch deck assembly.

1. One schema-constrained call produces the ordered slide drafts.
2. Every slide gets its own image request; all run concurrently.
3. Results are zipped back onto the drafts in their original order.

A failed or empty image leaves that slide without an image.  A draft that
does not validate fails the whole deck.
"""

import asyncio
import logging

from pydantic import ValidationError

from director.core.gateway import GatewayError, GatewayErrorKind, ModelGateway
from director.core.prompts import build_deck_prompt, build_slide_image_prompt
from director.schemas.deck_content import DeckMode, PitchDeckDraft, PitchDeckSlide, SlideDraft
from director.schemas.startup import StartupContext

logger = logging.getLogger(__name__)

SLIDE_ASPECT_RATIO = "16:9"


def validate_draft(raw: object) -> PitchDeckDraft:
    """Validate whatever the gateway returned as a complete slide list.

    Accepts a ``PitchDeckDraft``, a mapping with a ``slides`` key, or a bare
    list of slide objects.  Any missing required field rejects the deck.
    """
    if isinstance(raw, PitchDeckDraft):
        return raw
    if isinstance(raw, list):
        raw = {"slides": raw}
    try:
        return PitchDeckDraft.model_validate(raw)
    except ValidationError as e:
        raise GatewayError(GatewayErrorKind.MALFORMED, f"Deck content failed validation: {e}") from e


async def _illustrate(
    gateway: ModelGateway,
    index: int,
    slide: SlideDraft,
    context: StartupContext,
) -> bytes | None:
    try:
        image = await gateway.image_from_description(
            build_slide_image_prompt(slide, context),
            aspect_ratio=SLIDE_ASPECT_RATIO,
        )
    except GatewayError as e:
        logger.warning("Image for slide %d (%s) failed: %s", index, slide.layout_type.value, e)
        return None
    return image or None


async def assemble_deck(
    gateway: ModelGateway,
    context: StartupContext,
    brief: str,
    mode: DeckMode,
) -> list[PitchDeckSlide]:
    """Produce the ordered, illustrated slide list for one deck request.

    Raises ``GatewayError`` when the structured content call fails or its
    output does not validate.  Image failures never raise.
    """
    raw = await gateway.structured_slides(build_deck_prompt(context, brief, mode))
    draft = validate_draft(raw)

    results = await asyncio.gather(
        *[_illustrate(gateway, i, slide, context) for i, slide in enumerate(draft.slides)],
        return_exceptions=True,
    )

    slides: list[PitchDeckSlide] = []
    for index, (slide, result) in enumerate(zip(draft.slides, results)):
        if isinstance(result, BaseException):
            logger.warning("Image for slide %d raised unexpectedly", index, exc_info=result)
            result = None
        slides.append(PitchDeckSlide.from_draft(slide, image=result))

    illustrated = sum(1 for s in slides if s.has_image)
    logger.info(
        "Deck assembled for %s (%s): %d slides, %d illustrated",
        context.name, mode.value, len(slides), illustrated,
    )
    return slides
