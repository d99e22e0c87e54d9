"""
Pydantic models for structured pitch deck content.

The deck-content agent outputs a ``PitchDeckDraft`` (the structural fields
of every slide).  The deck pipeline then attaches a generated image to each
slide, producing the final ordered list of ``PitchDeckSlide``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeckMode(str, Enum):
    pre_traction = "Pre-Traction"
    early_users = "Early Users"
    traction = "Traction"


class LayoutType(str, Enum):
    title = "Title"
    problem = "Problem"
    solution = "Solution"
    market = "Market"
    traction = "Traction"
    business_model = "BusinessModel"
    team = "Team"
    ask = "Ask"


class ChartPoint(BaseModel):
    label: str
    value: float

    @field_validator("value")
    @classmethod
    def _magnitude(cls, v: float) -> float:
        # Bars are drawn proportionally, so only the magnitude is meaningful.
        return abs(v)


class SlideDraft(BaseModel):
    """Structural fields of one slide, as returned by the deck-content agent."""

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    visual_guidance: str = Field(alias="visualGuidance", min_length=1)
    layout_type: LayoutType = Field(alias="layoutType")
    chart_data: list[ChartPoint] | None = Field(default=None, alias="chartData")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("chart_data")
    @classmethod
    def _drop_empty_chart(cls, v: list[ChartPoint] | None) -> list[ChartPoint] | None:
        return v or None


class PitchDeckDraft(BaseModel):
    slides: list[SlideDraft] = Field(min_length=1)


class PitchDeckSlide(SlideDraft):
    image: bytes | None = None
    image_mime_type: str = "image/png"

    model_config = ConfigDict(populate_by_name=True, frozen=True, ser_json_bytes="base64")

    @classmethod
    def from_draft(cls, draft: SlideDraft, image: bytes | None = None) -> PitchDeckSlide:
        return cls(**draft.model_dump(), image=image)

    @property
    def has_image(self) -> bool:
        return bool(self.image)
