"""
Choice navigator - grid selection state machine.

Choices are laid out row-major in a grid with a fixed column count:

    0 1
    2 3
    4

Up/down wrap across the whole list; left/right rotate within a row and
clamp to the last choice when the row is short.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from dialogue_engine.core.errors import NavigatorMisuseError
from dialogue_engine.core.events import DialogueEvent, EventBus
from dialogue_engine.core.signals import CompletionSignal

logger = logging.getLogger(__name__)


class NavigatorState(Enum):
    """Navigator lifecycle."""
    IDLE = auto()
    AWAITING_SELECTION = auto()
    CONFIRMED = auto()


class ChoiceNavigator:
    """
    Tracks the highlighted choice and resolves once the player confirms.

    Publishes:
        DialogueEvent.CHOICE_HIGHLIGHTED (index) on initialize and every move
        DialogueEvent.CHOICE_CONFIRMED (index) once per initialize cycle
    """

    def __init__(
        self,
        events: Optional[EventBus] = None,
        columns: int = 2,
        strict: bool = False,
    ):
        if columns < 1:
            raise ValueError(f"columns must be >= 1, got {columns}")

        self.events = events
        self.columns = columns
        self.strict = strict

        self._total = 0
        self._index = 0
        self._selected = 0
        self._signal: Optional[CompletionSignal[int]] = None
        self._state = NavigatorState.IDLE

    @property
    def state(self) -> NavigatorState:
        return self._state

    @property
    def total_choices(self) -> int:
        return self._total

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def is_awaiting_choice(self) -> bool:
        return self._state == NavigatorState.AWAITING_SELECTION

    def initialize(self, total_choices: int) -> None:
        """Arm the navigator for a node with `total_choices` choices."""
        self._total = total_choices
        self._index = 0
        self._selected = 0
        self._signal = CompletionSignal()
        self._state = NavigatorState.AWAITING_SELECTION

        self._publish(DialogueEvent.CHOICE_HIGHLIGHTED, self._index)
        logger.debug(f"Initialized with {total_choices} choices. Starting at index 0.")

    async def await_selection(self) -> int:
        """
        Suspend until confirm() and return the confirmed index.

        Repeated calls after confirmation return the same index.
        """
        if self._signal is None:
            # Never initialized: nothing will ever resolve this
            raise NavigatorMisuseError("await_selection() called before initialize()")

        logger.debug("Awaiting player choice...")
        selected = await self._signal.wait()
        if self._state == NavigatorState.CONFIRMED:
            self._state = NavigatorState.IDLE
        logger.debug(f"Choice confirmed: {selected}")
        return selected

    # Movement

    def move_up(self) -> None:
        if self._guard("move_up"):
            self._move_to((self._index - self.columns) % self._total)

    def move_down(self) -> None:
        if self._guard("move_down"):
            self._move_to((self._index + self.columns) % self._total)

    def move_left(self) -> None:
        if self._guard("move_left"):
            self._rotate_column(-1)

    def move_right(self) -> None:
        if self._guard("move_right"):
            self._rotate_column(1)

    def confirm(self) -> None:
        """Freeze the highlighted index as the selection."""
        if self._state == NavigatorState.CONFIRMED:
            return
        if not self._guard("confirm"):
            return

        self._selected = self._index
        if self._signal.set_result(self._selected):
            self._state = NavigatorState.CONFIRMED
            self._publish(DialogueEvent.CHOICE_CONFIRMED, self._selected)
            logger.debug(f"Confirmed choice {self._selected}")

    # Internals

    def _rotate_column(self, step: int) -> None:
        row, col = divmod(self._index, self.columns)
        col = (col + step) % self.columns
        index = row * self.columns + col
        # Short last row: the target column does not exist
        if index > self._total - 1:
            index = self._total - 1
        self._move_to(index)

    def _move_to(self, index: int) -> None:
        self._index = index
        self._publish(DialogueEvent.CHOICE_HIGHLIGHTED, index)
        logger.debug(f"Now at index {index}")

    def _guard(self, operation: str) -> bool:
        if self.is_awaiting_choice and self._total > 0:
            return True
        if self.strict:
            raise NavigatorMisuseError(f"{operation}() called while no choice is pending")
        logger.debug(f"Ignored {operation}(): not awaiting a choice")
        return False

    def _publish(self, event_type: DialogueEvent, index: int) -> None:
        if self.events is not None:
            self.events.publish(event_type, index=index)
