"""
Model gateway for the executive board.

Agents
------
- **summary_agent**  – Structured CEO overview (``CEOSummary``)
- **report_agent**   – Free-form agent mandates (plain text)
- **chat_agent**     – Conversational boardroom replies over the full history
- **deck_agent**     – Schema-constrained slide list (``PitchDeckDraft``)

Slide illustrations go straight through the OpenAI images endpoint.

Every call is bounded by a timeout and any failure surfaces as a
``GatewayError``; callers never see provider exceptions.
"""

import asyncio
import base64
import logging
from collections.abc import Awaitable, Sequence
from enum import Enum
from typing import Protocol, TypeVar

from openai import AsyncOpenAI
from pydantic import ValidationError
from pydantic_ai import Agent, RunContext
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.messages import (
    BinaryContent,
    ModelMessage,
    ModelRequest,
    ModelResponse,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from director.core.config import Settings, settings as default_settings
from director.core.prompts import DECK_INSTRUCTIONS, SUMMARY_INSTRUCTIONS
from director.schemas.board import CEOSummary
from director.schemas.chat import Message
from director.schemas.deck_content import PitchDeckDraft
from director.schemas.startup import StartupContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GatewayErrorKind(str, Enum):
    TIMEOUT = "timeout"
    UPSTREAM = "upstream"
    MALFORMED = "malformed"
    EMPTY = "empty"


class GatewayError(Exception):
    def __init__(self, kind: GatewayErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class ModelGateway(Protocol):
    """What the orchestrator needs from a generative model provider."""

    async def structured_summary(self, prompt: str) -> CEOSummary: ...

    async def freeform_report(self, prompt: str, instructions: str) -> str: ...

    async def conversational_reply(
        self,
        history: Sequence[Message],
        instructions: str,
        context: StartupContext,
    ) -> str: ...

    async def structured_slides(self, prompt: str) -> PitchDeckDraft: ...

    async def image_from_description(self, prompt: str, aspect_ratio: str = "16:9") -> bytes | None: ...


# ===================================================================
# History conversion
# ===================================================================

def _user_content(message: Message) -> list[str | BinaryContent]:
    text = message.content
    if not text and message.attachments:
        names = ", ".join(a.filename or a.mime_type for a in message.attachments)
        text = f"Uploaded intelligence artifact: {names}"
    parts: list[str | BinaryContent] = [text] if text else []
    parts.extend(BinaryContent(data=a.data, media_type=a.mime_type) for a in message.attachments)
    return parts


def to_model_messages(history: Sequence[Message]) -> list[ModelMessage]:
    """Convert session history into pydantic-ai messages.

    Synthetic error messages are dropped: they were never model output.
    """
    converted: list[ModelMessage] = []
    for message in history:
        if message.is_error:
            continue
        if message.role == "user":
            converted.append(ModelRequest(parts=[UserPromptPart(content=_user_content(message))]))
        else:
            converted.append(ModelResponse(parts=[TextPart(content=message.content)]))
    return converted


def _instructions_from_deps(ctx: RunContext[str]) -> str:
    return ctx.deps


_ASPECT_SIZES = {
    "16:9": "1536x1024",
    "1:1": "1024x1024",
    "9:16": "1024x1536",
}


# ===================================================================
# OpenAI-backed gateway
# ===================================================================

class OpenAIGateway:
    def __init__(self, settings: Settings | None = None, client: AsyncOpenAI | None = None) -> None:
        self.settings = settings or default_settings
        self._client = client or AsyncOpenAI(api_key=self.settings.OPENAI_API_KEY or None)
        provider = OpenAIProvider(openai_client=self._client)
        text_model = OpenAIChatModel(self.settings.TEXT_MODEL, provider=provider)
        self._reasoning_model = OpenAIChatModel(self.settings.REASONING_MODEL, provider=provider)

        self.summary_agent = Agent(
            text_model,
            output_type=CEOSummary,
            instructions=SUMMARY_INSTRUCTIONS,
            retries=self.settings.STRUCTURED_RETRIES,
        )
        self.report_agent = Agent(text_model, output_type=str, deps_type=str)
        self.report_agent.instructions(_instructions_from_deps)
        self.chat_agent = Agent(text_model, output_type=str, deps_type=str)
        self.chat_agent.instructions(_instructions_from_deps)
        self.deck_agent = Agent(
            self._reasoning_model,
            output_type=PitchDeckDraft,
            instructions=DECK_INSTRUCTIONS,
            retries=self.settings.STRUCTURED_RETRIES,
        )

    async def _bounded(self, call: Awaitable[T], what: str, timeout: float | None = None) -> T:
        timeout = timeout or self.settings.GATEWAY_TIMEOUT_SECONDS
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise GatewayError(GatewayErrorKind.TIMEOUT, f"{what} timed out after {timeout:g}s") from e
        except (UnexpectedModelBehavior, ValidationError) as e:
            raise GatewayError(GatewayErrorKind.MALFORMED, f"{what} returned malformed output: {e}") from e
        except Exception as e:
            raise GatewayError(GatewayErrorKind.UPSTREAM, f"{what} failed: {e}") from e

    @staticmethod
    def _require_text(text: str | None, what: str) -> str:
        if not text or not text.strip():
            raise GatewayError(GatewayErrorKind.EMPTY, f"{what} returned no text")
        return text

    async def structured_summary(self, prompt: str) -> CEOSummary:
        result = await self._bounded(self.summary_agent.run(prompt), "CEO summary")
        return result.output

    async def freeform_report(self, prompt: str, instructions: str) -> str:
        result = await self._bounded(self.report_agent.run(prompt, deps=instructions), "Agent report")
        return self._require_text(result.output, "Agent report")

    async def conversational_reply(
        self,
        history: Sequence[Message],
        instructions: str,
        context: StartupContext,
    ) -> str:
        if not history or history[-1].role != "user":
            raise ValueError("conversational_reply needs history ending with a user message")

        latest = history[-1]
        system = f"{instructions}\n{context.to_prompt_block()}"
        # Files and screenshots go to the stronger model.
        model = self._reasoning_model if latest.attachments else None
        result = await self._bounded(
            self.chat_agent.run(
                _user_content(latest),
                message_history=to_model_messages(history[:-1]),
                deps=system,
                model=model,
            ),
            "Boardroom chat",
        )
        return self._require_text(result.output, "Boardroom chat")

    async def structured_slides(self, prompt: str) -> PitchDeckDraft:
        result = await self._bounded(self.deck_agent.run(prompt), "Deck content")
        return result.output

    async def image_from_description(self, prompt: str, aspect_ratio: str = "16:9") -> bytes | None:
        size = _ASPECT_SIZES.get(aspect_ratio, self.settings.IMAGE_SIZE)
        response = await self._bounded(
            self._client.images.generate(model=self.settings.IMAGE_MODEL, prompt=prompt, size=size, n=1),
            "Slide image",
            timeout=self.settings.IMAGE_TIMEOUT_SECONDS,
        )
        if not response.data or not response.data[0].b64_json:
            return None
        return base64.b64decode(response.data[0].b64_json)
