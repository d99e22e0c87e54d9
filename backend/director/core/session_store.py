"""
In-memory session state.

A ``SessionStore`` holds the startup profile, the append-only message
history and the two per-session caches (CEO summary, agent briefings).
Sessions live for as long as the process does; nothing is persisted.
"""

import uuid

from director.schemas.board import AgentType, CEOSummary
from director.schemas.chat import Message
from director.schemas.startup import StartupContext


class SessionStore:
    def __init__(self, context: StartupContext, session_id: uuid.UUID | None = None) -> None:
        self.id = session_id or uuid.uuid4()
        self._context = context
        self._messages: list[Message] = []
        self._agent_outputs: dict[AgentType, str] = {}
        self._summary: CEOSummary | None = None
        self._pending_deck_brief: str | None = None

    def get_context(self) -> StartupContext:
        return self._context

    def append_message(self, message: Message) -> None:
        self._messages.append(message)

    def get_history(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def get_message(self, index: int) -> Message:
        """Return the message at *index* (oldest first).  Raises ``IndexError``."""
        if index < 0:
            raise IndexError(index)
        return self._messages[index]

    def get_cached_agent_output(self, agent: AgentType) -> str | None:
        return self._agent_outputs.get(agent)

    def set_cached_agent_output(self, agent: AgentType, text: str) -> None:
        self._agent_outputs[agent] = text

    def get_cached_summary(self) -> CEOSummary | None:
        return self._summary

    def set_cached_summary(self, summary: CEOSummary) -> None:
        self._summary = summary

    # ── Pending deck request (between mode prompt and mode choice) ──

    @property
    def pending_deck_brief(self) -> str | None:
        return self._pending_deck_brief

    def set_pending_deck_brief(self, brief: str) -> None:
        self._pending_deck_brief = brief

    def take_pending_deck_brief(self) -> str | None:
        brief, self._pending_deck_brief = self._pending_deck_brief, None
        return brief
