"""Sale State Machine — жизненный цикл продажи и флаг паузы.

Состояния:
- NOT_STARTED: продажа создана, покупки закрыты (считается паузой)
- RUNNING: покупки и оценки разрешены
- PAUSED: покупки и оценки закрыты, разрешена перезапись будущего инвентаря

Переходы:
- start: NOT_STARTED → RUNNING (однократно)
- pause: RUNNING → PAUSED
- unpause: PAUSED → RUNNING
"""

import logging
from dataclasses import dataclass
from enum import Enum

from salekit.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class SaleState(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"


@dataclass(frozen=True)
class SaleTransitionResult:
    """Результат перехода состояния продажи."""

    new_state: SaleState
    previous_state: SaleState
    transition_reason: str

    # Для отладки
    details: str


class SaleStateMachine:
    def __init__(self, initial_state: SaleState = SaleState.NOT_STARTED):
        self._state = initial_state

    @property
    def state(self) -> SaleState:
        return self._state

    @property
    def started(self) -> bool:
        return self._state != SaleState.NOT_STARTED

    @property
    def paused(self) -> bool:
        return self._state != SaleState.RUNNING

    def start(self) -> SaleTransitionResult:
        """
        Raises:
            ConfigurationError: "already started"
        """
        if self._state != SaleState.NOT_STARTED:
            raise ConfigurationError("already_started", "already started")
        return self._transition(SaleState.RUNNING, "start")

    def pause(self) -> SaleTransitionResult:
        """
        Raises:
            ConfigurationError: "not started" / "paused"
        """
        if self._state == SaleState.NOT_STARTED:
            raise ConfigurationError("not_started", "not started")
        if self._state == SaleState.PAUSED:
            raise ConfigurationError("paused")
        return self._transition(SaleState.PAUSED, "pause")

    def unpause(self) -> SaleTransitionResult:
        """
        Raises:
            ConfigurationError: "not started" / "not paused"
        """
        if self._state == SaleState.NOT_STARTED:
            raise ConfigurationError("not_started", "not started")
        if self._state == SaleState.RUNNING:
            raise ConfigurationError("not_paused", "not paused")
        return self._transition(SaleState.RUNNING, "unpause")

    def _transition(self, new_state: SaleState, reason: str) -> SaleTransitionResult:
        previous_state = self._state
        self._state = new_state

        logger.info("sale state: %s → %s (%s)", previous_state.value, new_state.value, reason)
        return SaleTransitionResult(
            new_state=new_state,
            previous_state=previous_state,
            transition_reason=reason,
            details=f"Transition {previous_state.value} → {new_state.value}",
        )
