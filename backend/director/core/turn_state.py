"""
Turn state machine for one session.

Replaces the loose loading / thinking / activating flags of a chat UI with a
single state and an explicit transition table::

    IDLE ──begin──▶ AWAITING_REPLY ──show_activation──▶ SHOWING_ACTIVATION
      ▲                 │    │                                │
      └────complete─────┘    └──fail──▶ ERROR ◀──fail─────────┤
      └──────────────────────────complete─────────────────────┘

``ERROR`` is a resting state: the next ``begin`` leaves it.  ``settle`` is
the guaranteed cleanup that callers run in ``finally`` so no busy state can
outlive a turn.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"
    SHOWING_ACTIVATION = "showing_activation"
    ERROR = "error"


TRANSITIONS: dict[TurnState, frozenset[TurnState]] = {
    TurnState.IDLE: frozenset({TurnState.AWAITING_REPLY}),
    TurnState.AWAITING_REPLY: frozenset({TurnState.SHOWING_ACTIVATION, TurnState.IDLE, TurnState.ERROR}),
    TurnState.SHOWING_ACTIVATION: frozenset({TurnState.IDLE, TurnState.ERROR}),
    TurnState.ERROR: frozenset({TurnState.AWAITING_REPLY, TurnState.IDLE}),
}

BUSY_STATES = frozenset({TurnState.AWAITING_REPLY, TurnState.SHOWING_ACTIVATION})


class TurnStateError(RuntimeError):
    pass


@dataclass(frozen=True)
class TurnStatus:
    state: TurnState = TurnState.IDLE
    agent: str | None = None
    reason: str | None = None
    error: str | None = None

    @property
    def is_busy(self) -> bool:
        return self.state in BUSY_STATES

    @property
    def is_thinking(self) -> bool:
        return self.state == TurnState.AWAITING_REPLY

    @property
    def is_activating(self) -> bool:
        return self.state == TurnState.SHOWING_ACTIVATION


StatusListener = Callable[[TurnStatus], None]


class TurnTracker:
    def __init__(self) -> None:
        self._status = TurnStatus()
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> TurnStatus:
        return self._status

    @property
    def state(self) -> TurnState:
        return self._status.state

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _move(self, status: TurnStatus) -> None:
        if status.state not in TRANSITIONS[self._status.state]:
            raise TurnStateError(f"Invalid turn transition {self._status.state.value} -> {status.state.value}")
        self._status = status
        for listener in self._listeners:
            try:
                listener(status)
            except Exception:
                logger.warning("Turn status listener failed", exc_info=True)

    def begin(self) -> None:
        self._move(TurnStatus(TurnState.AWAITING_REPLY))

    def show_activation(self, agent: str, reason: str) -> None:
        self._move(TurnStatus(TurnState.SHOWING_ACTIVATION, agent=agent, reason=reason))

    def complete(self) -> None:
        self._move(TurnStatus(TurnState.IDLE))

    def fail(self, error: str) -> None:
        self._move(TurnStatus(TurnState.ERROR, error=error))

    def settle(self) -> None:
        """Drop any busy state left behind by an interrupted turn."""
        if self._status.is_busy:
            logger.debug("Settling turn left in %s", self._status.state.value)
            self._move(TurnStatus(TurnState.IDLE))
