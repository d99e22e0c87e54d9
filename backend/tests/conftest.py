"""Pytest fixtures for Startup Director tests."""

import asyncio
import base64
import re

import pytest

from director.core.config import Settings
from director.core.gateway import GatewayError, GatewayErrorKind
from director.core.orchestrator import TurnOrchestrator
from director.core.session_store import SessionStore
from director.schemas.board import CEOSummary
from director.schemas.deck_content import ChartPoint, LayoutType, PitchDeckDraft, SlideDraft
from director.schemas.startup import StartupContext, StartupStage

LAYOUT_ORDER = list(LayoutType)
_SLIDE_TAG = re.compile(r"VG(\d+)!")

# Smallest valid PNG (1x1 transparent pixel)
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def make_draft(n: int = 3, chart_on: tuple[int, ...] = ()) -> PitchDeckDraft:
    slides = []
    for i in range(n):
        slides.append(
            SlideDraft(
                title=f"Slide {i}",
                content=f"Narrative for slide {i}",
                visual_guidance=f"Direction VG{i}! for slide {i}",
                layout_type=LAYOUT_ORDER[i % len(LAYOUT_ORDER)],
                chart_data=[ChartPoint(label="MRR", value=10.0 * (i + 1))] if i in chart_on else None,
            )
        )
    return PitchDeckDraft(slides=slides)


class FakeGateway:
    """In-memory ModelGateway that records every call."""

    def __init__(
        self,
        reply: str = "ACTIVATING CEO — Reason: PRIORITIZATION\nFocus on three design partners.",
        draft: object | None = None,
        failing_images: set[int] | None = None,
        empty_images: set[int] | None = None,
        summary: CEOSummary | None = None,
        report: str = "CEO MANDATE\nShip the pilot.",
    ) -> None:
        self.reply = reply
        self.draft = draft if draft is not None else make_draft(3)
        self.failing_images = failing_images or set()
        self.empty_images = empty_images or set()
        self.summary = summary or CEOSummary(
            stage="Revenue with thin retention",
            objective="Close 3 paying customers",
            risk="Founder-led sales does not scale",
            decision="Pause the self-serve tier",
            do_not_do=["Paid ads", "New verticals"],
            focus_next="Convert the two warm pilots",
        )
        self.report = report

        self.chat_error: Exception | None = None
        self.deck_error: Exception | None = None
        self.summary_error: Exception | None = None
        self.report_error: Exception | None = None

        self.chat_calls: list[tuple[tuple, str]] = []
        self.summary_calls = 0
        self.report_prompts: list[str] = []
        self.slide_prompts: list[str] = []
        self.image_calls: list[tuple[int, str]] = []
        self.in_flight_images = 0
        self.max_in_flight_images = 0

    async def structured_summary(self, prompt):
        self.summary_calls += 1
        if self.summary_error:
            raise self.summary_error
        return self.summary

    async def freeform_report(self, prompt, instructions):
        self.report_prompts.append(prompt)
        if self.report_error:
            raise self.report_error
        return self.report

    async def conversational_reply(self, history, instructions, context):
        self.chat_calls.append((tuple(history), instructions))
        if self.chat_error:
            raise self.chat_error
        return self.reply

    async def structured_slides(self, prompt):
        self.slide_prompts.append(prompt)
        if self.deck_error:
            raise self.deck_error
        return self.draft

    async def image_from_description(self, prompt, aspect_ratio="16:9"):
        index = int(_SLIDE_TAG.search(prompt).group(1))
        self.image_calls.append((index, aspect_ratio))
        self.in_flight_images += 1
        self.max_in_flight_images = max(self.max_in_flight_images, self.in_flight_images)
        try:
            # Later slides finish first so ordering has to be restored.
            await asyncio.sleep(0.001 * (20 - index))
            if index in self.failing_images:
                raise GatewayError(GatewayErrorKind.UPSTREAM, f"image {index} failed")
            if index in self.empty_images:
                return None
            return PNG_1X1
        finally:
            self.in_flight_images -= 1


@pytest.fixture
def startup_context() -> StartupContext:
    return StartupContext(
        name="Nexus AI",
        stage=StartupStage.revenue,
        target_customer="SaaS CTOs",
        goal="Close 3 paying customers",
        metrics="$4k MRR, 2 pilots",
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(ACTIVATION_DWELL_SECONDS=0)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def store(startup_context) -> SessionStore:
    return SessionStore(startup_context)


@pytest.fixture
def orchestrator(store, gateway, test_settings) -> TurnOrchestrator:
    return TurnOrchestrator(store, gateway, test_settings)
