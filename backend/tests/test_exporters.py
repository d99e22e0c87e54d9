import io

import pytest
from conftest import PNG_1X1, make_draft
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE

from director.core.deck_template import render_pitch_deck
from director.core.exporters import deck_to_pptx, deck_to_text, message_to_text
from director.schemas.chat import Message
from director.schemas.deck_content import PitchDeckSlide


@pytest.fixture
def slides():
    draft = make_draft(3, chart_on=(2,))
    return [PitchDeckSlide.from_draft(s, image=PNG_1X1 if i != 1 else None) for i, s in enumerate(draft.slides)]


class TestTextExport:
    def test_deck_transcript_keeps_order(self, slides):
        text = deck_to_text(slides, "Nexus AI")
        lines = text.splitlines()

        assert lines[0] == "NEXUS AI | PITCH DECK (3 SLIDES)"
        assert "SLIDE 1 | TITLE" in lines
        assert "SLIDE 3 | SOLUTION" in lines
        assert text.index("Slide 0") < text.index("Slide 1") < text.index("Slide 2")
        assert "VISUAL DIRECTION: Direction VG0! for slide 0" in lines
        assert "CHART: MRR: 30" in lines
        assert text.endswith("\n")

    def test_plain_message_transcript(self):
        message = Message(role="model", content="  Cut burn by 20%.\n\n")

        assert message_to_text(message, "Nexus AI") == "Cut burn by 20%.\n"

    def test_deck_message_transcript(self, slides):
        message = Message(role="model", content="PITCH DECK GENERATED.", is_deck=True, slides=tuple(slides))

        assert message_to_text(message, "Nexus AI") == deck_to_text(slides, "Nexus AI")


class TestPptxExport:
    def test_one_slide_per_deck_slide_in_order(self, slides):
        prs = Presentation(io.BytesIO(deck_to_pptx(slides, "Nexus AI")))

        assert len(prs.slides) == 3
        titles = []
        for pptx_slide in prs.slides:
            texts = [shape.text_frame.text for shape in pptx_slide.shapes if shape.has_text_frame]
            titles.append(next(t for t in texts if t.startswith("Slide ")))
        assert titles == ["Slide 0", "Slide 1", "Slide 2"]

    def test_notes_chart_and_pictures(self, slides):
        prs = Presentation(io.BytesIO(deck_to_pptx(slides, "Nexus AI")))
        pptx_slides = list(prs.slides)

        assert pptx_slides[0].notes_slide.notes_text_frame.text == "Direction VG0! for slide 0"
        assert any(shape.has_chart for shape in pptx_slides[2].shapes)
        assert not any(shape.has_chart for shape in pptx_slides[0].shapes)
        assert sum(1 for shape in pptx_slides[0].shapes if shape.shape_type == MSO_SHAPE_TYPE.PICTURE) == 1
        assert sum(1 for shape in pptx_slides[1].shapes if shape.shape_type == MSO_SHAPE_TYPE.PICTURE) == 0

    def test_unreadable_image_is_skipped(self, slides):
        broken = slides[0].model_copy(update={"image": b"not an image"})

        prs = Presentation(io.BytesIO(deck_to_pptx([broken], "Nexus AI")))

        assert len(prs.slides) == 1


class TestHtmlExport:
    def test_slides_rendered_in_order_with_images(self, slides):
        html = render_pitch_deck(slides, "Nexus AI")

        positions = [html.index(f'data-slide="{i}"') for i in range(3)]
        assert positions == sorted(positions)
        assert html.count("data:image/png;base64,") == 2
        assert "Nexus AI" in html

    def test_text_is_escaped(self, slides):
        hostile = slides[0].model_copy(update={"title": "<script>alert(1)</script>"})

        html = render_pitch_deck([hostile], "Nexus AI")

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
