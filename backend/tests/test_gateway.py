"""Tests for the OpenAI-backed model gateway, using pydantic-ai's TestModel."""

import asyncio
import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from conftest import PNG_1X1
from openai import AsyncOpenAI
from pydantic_ai import capture_run_messages, models
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.messages import BinaryContent, ModelRequest, ModelResponse, UserPromptPart
from pydantic_ai.models.test import TestModel

from director.core.config import Settings
from director.core.gateway import GatewayError, GatewayErrorKind, OpenAIGateway, to_model_messages
from director.schemas.chat import Attachment, Message

models.ALLOW_MODEL_REQUESTS = False

PDF = Attachment(data=b"%PDF-1.4 fake", mime_type="application/pdf", filename="deck.pdf")


@pytest.fixture
def openai_gateway():
    settings = Settings(OPENAI_API_KEY="sk-test", GATEWAY_TIMEOUT_SECONDS=5)
    return OpenAIGateway(settings, client=AsyncOpenAI(api_key="sk-test"))


def _images_response(*items):
    return SimpleNamespace(data=[SimpleNamespace(b64_json=item) for item in items])


class TestHistoryConversion:
    def test_roles_map_to_requests_and_responses(self):
        history = [
            Message(role="user", content="First"),
            Message(role="model", content="Reply"),
        ]

        converted = to_model_messages(history)

        assert isinstance(converted[0], ModelRequest)
        assert isinstance(converted[1], ModelResponse)
        assert converted[1].parts[0].content == "Reply"

    def test_error_messages_are_dropped(self):
        history = [
            Message(role="user", content="First"),
            Message(role="model", content="SYSTEM ERROR", is_error=True),
        ]

        assert len(to_model_messages(history)) == 1

    def test_attachment_only_turn_gets_placeholder_text(self):
        converted = to_model_messages([Message(role="user", content="", files=(PDF,))])

        part = converted[0].parts[0]
        assert isinstance(part, UserPromptPart)
        assert part.content[0] == "Uploaded intelligence artifact: deck.pdf"
        assert isinstance(part.content[1], BinaryContent)
        assert part.content[1].media_type == "application/pdf"


class TestAgents:
    @pytest.mark.asyncio
    async def test_structured_summary(self, openai_gateway):
        args = {
            "stage": "Revenue",
            "objective": "Close 3 paying customers",
            "risk": "Churn",
            "decision": "Focus on CTO buyers",
            "doNotDo": ["Paid ads"],
            "focusNext": "Pilot conversions",
        }

        with openai_gateway.summary_agent.override(model=TestModel(custom_output_args=args)):
            summary = await openai_gateway.structured_summary("STARTUP CONTEXT")

        assert summary.do_not_do == ["Paid ads"]
        assert summary.focus_next == "Pilot conversions"

    @pytest.mark.asyncio
    async def test_freeform_report(self, openai_gateway):
        with openai_gateway.report_agent.override(model=TestModel(custom_output_text="CFO MANDATE\nCut burn")):
            text = await openai_gateway.freeform_report("ROLE: CFO", "Be exhaustive.")

        assert text == "CFO MANDATE\nCut burn"

    @pytest.mark.asyncio
    async def test_conversational_reply_uses_history_and_context(self, openai_gateway, startup_context):
        history = [
            Message(role="user", content="First"),
            Message(role="model", content="Reply"),
            Message(role="model", content="SYSTEM ERROR", is_error=True),
            Message(role="user", content="Second"),
        ]
        reply = "ACTIVATING CEO — Reason: FOCUS\nPick one customer segment."

        with capture_run_messages() as messages:
            with openai_gateway.chat_agent.override(model=TestModel(custom_output_text=reply)):
                text = await openai_gateway.conversational_reply(history, "ROUTER RULES", startup_context)

        assert text == reply
        requests = [m for m in messages if isinstance(m, ModelRequest)]
        assert "ROUTER RULES" in requests[-1].instructions
        assert "Name: Nexus AI" in requests[-1].instructions
        assert len(messages) == 4

    @pytest.mark.asyncio
    async def test_conversational_reply_needs_user_turn_last(self, openai_gateway, startup_context):
        with pytest.raises(ValueError):
            await openai_gateway.conversational_reply(
                [Message(role="model", content="hello")], "RULES", startup_context
            )

    def test_blank_text_is_empty_error(self):
        with pytest.raises(GatewayError) as exc_info:
            OpenAIGateway._require_text("   ", "Boardroom chat")

        assert exc_info.value.kind is GatewayErrorKind.EMPTY


class TestBoundedCalls:
    @pytest.mark.asyncio
    async def test_timeout(self, openai_gateway):
        with pytest.raises(GatewayError) as exc_info:
            await openai_gateway._bounded(asyncio.sleep(1), "Probe", timeout=0.01)

        assert exc_info.value.kind is GatewayErrorKind.TIMEOUT
        assert str(exc_info.value).startswith("[timeout]")

    @pytest.mark.asyncio
    async def test_provider_failure_is_upstream(self, openai_gateway):
        async def boom():
            raise RuntimeError("connection reset")

        with pytest.raises(GatewayError) as exc_info:
            await openai_gateway._bounded(boom(), "Probe")

        assert exc_info.value.kind is GatewayErrorKind.UPSTREAM

    @pytest.mark.asyncio
    async def test_bad_model_output_is_malformed(self, openai_gateway):
        async def bad_output():
            raise UnexpectedModelBehavior("Exceeded maximum retries")

        with pytest.raises(GatewayError) as exc_info:
            await openai_gateway._bounded(bad_output(), "Probe")

        assert exc_info.value.kind is GatewayErrorKind.MALFORMED


class TestImages:
    @pytest.mark.asyncio
    async def test_image_bytes_decoded(self, openai_gateway):
        generate = AsyncMock(return_value=_images_response(base64.b64encode(PNG_1X1).decode()))
        openai_gateway._client.images = SimpleNamespace(generate=generate)

        image = await openai_gateway.image_from_description("Dark dashboard")

        assert image == PNG_1X1
        assert generate.await_args.kwargs["size"] == "1536x1024"
        assert generate.await_args.kwargs["model"] == "gpt-image-1"

    @pytest.mark.asyncio
    async def test_slide_ratio_has_its_own_size(self):
        settings = Settings(OPENAI_API_KEY="sk-test", IMAGE_SIZE="1024x1024")
        gateway = OpenAIGateway(settings, client=AsyncOpenAI(api_key="sk-test"))
        generate = AsyncMock(return_value=_images_response(base64.b64encode(PNG_1X1).decode()))
        gateway._client.images = SimpleNamespace(generate=generate)

        await gateway.image_from_description("Dark dashboard", aspect_ratio="16:9")

        assert generate.await_args.kwargs["size"] == "1536x1024"

    @pytest.mark.asyncio
    async def test_square_aspect_ratio(self, openai_gateway):
        generate = AsyncMock(return_value=_images_response(base64.b64encode(PNG_1X1).decode()))
        openai_gateway._client.images = SimpleNamespace(generate=generate)

        await openai_gateway.image_from_description("Logo mark", aspect_ratio="1:1")

        assert generate.await_args.kwargs["size"] == "1024x1024"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [_images_response(), _images_response(None)])
    async def test_missing_image_is_none(self, openai_gateway, response):
        openai_gateway._client.images = SimpleNamespace(generate=AsyncMock(return_value=response))

        assert await openai_gateway.image_from_description("Dark dashboard") is None

    @pytest.mark.asyncio
    async def test_image_failure_raises_gateway_error(self, openai_gateway):
        generate = AsyncMock(side_effect=RuntimeError("content policy"))
        openai_gateway._client.images = SimpleNamespace(generate=generate)

        with pytest.raises(GatewayError) as exc_info:
            await openai_gateway.image_from_description("Dark dashboard")

        assert exc_info.value.kind is GatewayErrorKind.UPSTREAM
