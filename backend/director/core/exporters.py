"""
Export formats for finished board output.

- ``deck_to_text`` / ``message_to_text``: plain-text transcripts
- ``deck_to_pptx``: 16:9 PowerPoint file, one slide per deck slide

Exports only format; slide order and content pass through untouched.
"""

import io
import logging
from collections.abc import Sequence

from pptx import Presentation
from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE
from pptx.util import Inches, Pt

from director.schemas.chat import Message
from director.schemas.deck_content import PitchDeckSlide

logger = logging.getLogger(__name__)

SLIDE_WIDTH = Inches(13.333)
SLIDE_HEIGHT = Inches(7.5)
TEXT_WHITE = RGBColor(0xFF, 0xFF, 0xFF)
TEXT_GRAY = RGBColor(0xA3, 0xA3, 0xA3)
ACCENT = RGBColor(0x3B, 0x82, 0xF6)
BG_DARK = RGBColor(0x0B, 0x0B, 0x0E)


def deck_to_text(slides: Sequence[PitchDeckSlide], project_name: str) -> str:
    lines = [f"{project_name.upper()} | PITCH DECK ({len(slides)} SLIDES)", ""]
    for number, slide in enumerate(slides, start=1):
        lines.append(f"SLIDE {number} | {slide.layout_type.value.upper()}")
        lines.append(slide.title)
        lines.append(slide.content)
        lines.append(f"VISUAL DIRECTION: {slide.visual_guidance}")
        if slide.chart_data:
            points = ", ".join(f"{p.label}: {p.value:g}" for p in slide.chart_data)
            lines.append(f"CHART: {points}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def message_to_text(message: Message, project_name: str) -> str:
    """Transcript of one model message: the deck for deck results, the text otherwise."""
    if message.is_deck and message.slides:
        return deck_to_text(message.slides, project_name)
    return message.content.strip() + "\n"


def _add_text(slide, text: str, left, top, width, height, size: int, color: RGBColor, bold: bool = False):
    box = slide.shapes.add_textbox(left, top, width, height)
    frame = box.text_frame
    frame.word_wrap = True
    lines = [line for line in text.splitlines() if line.strip()] or [""]
    for i, line in enumerate(lines):
        para = frame.paragraphs[0] if i == 0 else frame.add_paragraph()
        para.text = line.strip()
        para.font.size = Pt(size)
        para.font.bold = bold
        para.font.color.rgb = color
    return box


def _add_background(slide, pptx_slide) -> None:
    fill = pptx_slide.background.fill
    fill.solid()
    fill.fore_color.rgb = BG_DARK
    if not slide.image:
        return
    try:
        pptx_slide.shapes.add_picture(io.BytesIO(slide.image), 0, 0, width=SLIDE_WIDTH, height=SLIDE_HEIGHT)
    except (OSError, ValueError):
        logger.warning("Skipping unreadable image on slide '%s'", slide.title, exc_info=True)


def _add_chart(slide, pptx_slide) -> None:
    chart_data = CategoryChartData()
    chart_data.categories = [p.label for p in slide.chart_data]
    chart_data.add_series(slide.title, [p.value for p in slide.chart_data])
    graphic = pptx_slide.shapes.add_chart(
        XL_CHART_TYPE.BAR_CLUSTERED,
        Inches(7.4), Inches(1.8), Inches(5.4), Inches(4.6),
        chart_data,
    )
    graphic.chart.has_legend = False


def deck_to_pptx(slides: Sequence[PitchDeckSlide], project_name: str) -> bytes:
    prs = Presentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT
    blank = prs.slide_layouts[6]
    prs.core_properties.title = f"{project_name} Pitch Deck"

    for number, slide in enumerate(slides, start=1):
        pptx_slide = prs.slides.add_slide(blank)
        _add_background(slide, pptx_slide)

        body_width = Inches(6.6) if slide.chart_data else Inches(12.3)
        _add_text(pptx_slide, slide.layout_type.value.upper(), Inches(0.5), Inches(0.4), Inches(6), Inches(0.4), 11, ACCENT, bold=True)
        _add_text(pptx_slide, slide.title, Inches(0.5), Inches(0.8), Inches(12.3), Inches(1.0), 34, TEXT_WHITE, bold=True)
        _add_text(pptx_slide, slide.content, Inches(0.5), Inches(1.9), body_width, Inches(4.8), 18, TEXT_GRAY)
        _add_text(pptx_slide, f"{number}/{len(slides)}", Inches(12.4), Inches(7.0), Inches(0.8), Inches(0.3), 10, TEXT_GRAY)
        if slide.chart_data:
            _add_chart(slide, pptx_slide)

        pptx_slide.notes_slide.notes_text_frame.text = slide.visual_guidance

    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()
