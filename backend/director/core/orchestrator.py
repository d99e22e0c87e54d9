"""
Turn orchestration for one boardroom session.

``TurnOrchestrator.submit_turn`` is the single entry point for user turns.
It classifies the turn locally, then either

- asks for a fundraising mode (no model call),
- assembles a pitch deck (structured call + concurrent image calls), or
- runs one conversational call and parses the routing markers in the reply.

Agent briefings and the CEO overview are one-shot calls cached per session.

No public operation lets a gateway failure escape: each one ends in a value
or a fixed, user-presentable error message, and the turn state is always
settled before returning.
"""

import asyncio
import logging
from collections.abc import Sequence

from director.core.config import Settings, settings as default_settings
from director.core.deck_pipeline import assemble_deck
from director.core.gateway import GatewayError, ModelGateway
from director.core.intent import Intent, IntentKind, classify_intent
from director.core.markers import parse_reply
from director.core.prompts import (
    REPORT_INSTRUCTIONS,
    build_briefing_prompt,
    build_chat_instructions,
    build_summary_prompt,
)
from director.core.session_store import SessionStore
from director.core.turn_state import TurnTracker
from director.schemas.board import AgentType, SummaryResult
from director.schemas.chat import Attachment, Message
from director.schemas.deck_content import DeckMode

logger = logging.getLogger(__name__)

CHAT_FAILURE_MESSAGE = "SYSTEM ERROR: Boardroom communications interrupted."
AUDIT_FAILURE_MESSAGE = "SYSTEM ERROR: Artifact analysis failed."
ARTIFACT_FAILURE_MESSAGE = "SYSTEM ERROR: Pitch deck generation failed. Select a mode to try again."
REPORT_FAILURE_MESSAGE = "SYSTEM ERROR: Failed to process intelligence mandate."
SUMMARY_FAILURE_MESSAGE = "SYSTEM ERROR: Executive summary unavailable."

MODE_SELECTION_PROMPT = "SELECT FUNDRAISING MODE"
DECK_READY_MESSAGE = "PITCH DECK GENERATED. Review the slides below or export them."


class TurnInFlightError(RuntimeError):
    """A turn was submitted while the previous one is still running."""


class ModeNotPendingError(RuntimeError):
    """A fundraising mode was chosen but there is no deck request to apply it to."""


class TurnOrchestrator:
    def __init__(
        self,
        store: SessionStore,
        gateway: ModelGateway,
        settings: Settings | None = None,
        tracker: TurnTracker | None = None,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.settings = settings or default_settings
        self.tracker = tracker or TurnTracker()
        self._turn_lock = asyncio.Lock()
        self._summary_lock = asyncio.Lock()
        self._briefing_locks: dict[AgentType, asyncio.Lock] = {agent: asyncio.Lock() for agent in AgentType}

    @property
    def turn_in_flight(self) -> bool:
        return self._turn_lock.locked()

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def submit_turn(
        self,
        text: str = "",
        attachments: Sequence[Attachment] = (),
        mode: DeckMode | None = None,
    ) -> Message:
        """Run one user turn end to end and return the model message appended for it.

        Passing *mode* is the re-entry after a mode prompt: the classifier is
        bypassed and the pending deck brief (or *text*, when given) is built.

        Raises ``TurnInFlightError`` if another turn is running,
        ``ModeNotPendingError`` if *mode* is given with nothing to build and
        ``ValueError`` for a turn with neither text nor attachments.
        """
        if self._turn_lock.locked():
            raise TurnInFlightError("A turn is already in progress for this session")
        if mode is None and not text.strip() and not attachments:
            raise ValueError("A turn needs text or at least one attachment")

        async with self._turn_lock:
            history = self.store.get_history()
            images = tuple(a for a in attachments if a.is_image)
            files = tuple(a for a in attachments if not a.is_image)

            if mode is not None:
                brief = text.strip() or self.store.take_pending_deck_brief()
                if brief is None:
                    raise ModeNotPendingError("No deck request is waiting for a fundraising mode")
                intent = Intent(IntentKind.ARTIFACT_CREATION, mandate=AgentType.fundraising, mode=mode)
                user_message = Message(role="user", content=f"Fundraising mode: {mode.value}")
            else:
                intent = classify_intent(text, images, files, history)
                user_message = Message(role="user", content=text, images=images, files=files)
                brief = text
                if intent.kind is IntentKind.ARTIFACT_CREATION:
                    # Typed answer to a mode prompt: build the brief that prompted it.
                    brief = self.store.take_pending_deck_brief() or text

            logger.info(
                "Session %s turn routed to %s (mandate=%s, signals=%s)",
                self.store.id, intent.kind.value, intent.mandate.value if intent.mandate else None, intent.signals,
            )
            self.store.append_message(user_message)

            self.tracker.begin()
            try:
                reply = await self._dispatch(intent, brief)
            finally:
                self.tracker.settle()

            self.store.append_message(reply)
            return reply

    async def select_mode(self, mode: DeckMode, brief: str | None = None) -> Message:
        """Answer a mode prompt: build the pending deck with *mode*."""
        return await self.submit_turn(brief or "", mode=mode)

    async def _dispatch(self, intent: Intent, brief: str) -> Message:
        if intent.kind is IntentKind.MODE_REQUIRED:
            return self._request_mode(brief)
        if intent.kind is IntentKind.ARTIFACT_CREATION:
            return await self._build_deck(brief, intent.mode)
        return await self._converse(intent, brief)

    def _request_mode(self, brief: str) -> Message:
        self.store.set_pending_deck_brief(brief)
        self.tracker.complete()
        return Message(role="model", content=MODE_SELECTION_PROMPT, is_mode_selection=True)

    async def _build_deck(self, brief: str, mode: DeckMode) -> Message:
        context = self.store.get_context()
        try:
            slides = await assemble_deck(self.gateway, context, brief, mode)
        except GatewayError as e:
            logger.warning("Deck generation failed for session %s: %s", self.store.id, e, exc_info=True)
            return self._failed(ARTIFACT_FAILURE_MESSAGE, restore_brief=brief)
        except Exception:
            logger.exception("Unexpected deck failure for session %s", self.store.id)
            return self._failed(ARTIFACT_FAILURE_MESSAGE, restore_brief=brief)

        self.tracker.complete()
        return Message(role="model", content=DECK_READY_MESSAGE, is_deck=True, slides=tuple(slides))

    async def _converse(self, intent: Intent, brief: str) -> Message:
        audit = intent.kind is IntentKind.ARTIFACT_AUDIT
        failure_text = AUDIT_FAILURE_MESSAGE if audit else CHAT_FAILURE_MESSAGE
        instructions = build_chat_instructions(
            audit=audit,
            visual_audit=intent.visual_audit,
            mandate=intent.mandate,
        )
        try:
            raw = await self.gateway.conversational_reply(
                self.store.get_history(),
                instructions,
                self.store.get_context(),
            )
        except GatewayError as e:
            logger.warning("Chat call failed for session %s: %s", self.store.id, e, exc_info=True)
            return self._failed(failure_text)
        except Exception:
            logger.exception("Unexpected chat failure for session %s", self.store.id)
            return self._failed(failure_text)

        parsed = parse_reply(raw)
        if parsed.mode_selection_required:
            logger.info("Model requested mode selection for session %s", self.store.id)
            return self._request_mode(brief)

        if parsed.activation is not None:
            self.tracker.show_activation(parsed.activation.agent, parsed.activation.reason)
            await asyncio.sleep(self.settings.ACTIVATION_DWELL_SECONDS)

        self.tracker.complete()
        return Message(role="model", content=parsed.content, activation=parsed.activation)

    def _failed(self, text: str, restore_brief: str | None = None) -> Message:
        if restore_brief is not None and self.store.pending_deck_brief is None:
            self.store.set_pending_deck_brief(restore_brief)
        self.tracker.fail(text)
        return Message(role="model", content=text, is_error=True)

    # ------------------------------------------------------------------
    # One-shot board outputs
    # ------------------------------------------------------------------

    async def generate_agent_briefing(self, agent: AgentType, refresh: bool = False) -> Message:
        """Return *agent*'s full mandate, generating it at most once per session.

        ``refresh=True`` is the explicit re-trigger that replaces the cached
        text.  The conversation history is neither read nor modified.
        """
        async with self._briefing_locks[agent]:
            cached = self.store.get_cached_agent_output(agent)
            if cached is not None and not refresh:
                return Message(role="model", content=cached, agent=agent)

            prompt = build_briefing_prompt(agent, self.store.get_context())
            try:
                text = await self.gateway.freeform_report(prompt, REPORT_INSTRUCTIONS)
            except GatewayError as e:
                logger.warning("%s briefing failed for session %s: %s", agent.value, self.store.id, e, exc_info=True)
                return Message(role="model", content=REPORT_FAILURE_MESSAGE, agent=agent, is_error=True)
            except Exception:
                logger.exception("Unexpected %s briefing failure for session %s", agent.value, self.store.id)
                return Message(role="model", content=REPORT_FAILURE_MESSAGE, agent=agent, is_error=True)

            self.store.set_cached_agent_output(agent, text)
            return Message(role="model", content=text, agent=agent)

    async def generate_overview_summary(self) -> SummaryResult:
        """Return the CEO overview, generating it at most once per session."""
        async with self._summary_lock:
            cached = self.store.get_cached_summary()
            if cached is not None:
                return SummaryResult(summary=cached)

            try:
                summary = await self.gateway.structured_summary(build_summary_prompt(self.store.get_context()))
            except GatewayError as e:
                logger.warning("CEO summary failed for session %s: %s", self.store.id, e, exc_info=True)
                return SummaryResult(error=SUMMARY_FAILURE_MESSAGE)
            except Exception:
                logger.exception("Unexpected CEO summary failure for session %s", self.store.id)
                return SummaryResult(error=SUMMARY_FAILURE_MESSAGE)

            self.store.set_cached_summary(summary)
            return SummaryResult(summary=summary)
