"""
Flow controller - drives a dialogue graph from root to terminal node.

Per-node life cycle:
    reveal (skippable) -> cooldown -> choice navigation | advance wait
    -> traverse -> yield one tick

Runs as a single asyncio task. Input layers call the trigger_* and
navigate_* methods from the same event loop; they are no-ops when the
controller is not in a state that accepts them.

Usage:
    controller = FlowController(FlowConfig(), events)
    task = asyncio.create_task(controller.run(root))
    ...
    controller.trigger_advance()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from dialogue_engine.core.config import FlowConfig
from dialogue_engine.core.errors import DialogueError
from dialogue_engine.core.events import DialogueEvent, EventBus
from dialogue_engine.core.signals import CancellationScope, CompletionSignal
from dialogue_engine.graph.nodes import DialogueNode, MultiWayDialogue, NodeKind
from dialogue_engine.systems.navigator import ChoiceNavigator
from dialogue_engine.systems.reveal import RevealProcess

logger = logging.getLogger(__name__)


class FlowController:
    """
    Owns the current node and orchestrates reveal and choice navigation.

    Attributes:
        config: Timing and grid settings
        events: Bus the core publishes DialogueEvent notifications on
        reveal: Reveal process shared by dialogue and choice text
    """

    def __init__(
        self,
        config: Optional[FlowConfig] = None,
        events: Optional[EventBus] = None,
    ):
        self.config = config or FlowConfig()
        self.events = events or EventBus()
        self.reveal = RevealProcess(self.events, self.config.reveal_interval)

        self._current_node: Optional[DialogueNode] = None
        self._navigator: Optional[ChoiceNavigator] = None
        self._skip_scope: Optional[CancellationScope] = None
        self._advance_signal: Optional[CompletionSignal[bool]] = None
        self._running = False

    # State

    @property
    def current_node(self) -> Optional[DialogueNode]:
        return self._current_node

    @property
    def navigator(self) -> Optional[ChoiceNavigator]:
        return self._navigator

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_awaiting_choice(self) -> bool:
        return self._navigator is not None and self._navigator.is_awaiting_choice

    @property
    def is_awaiting_advance(self) -> bool:
        return self._advance_signal is not None and not self._advance_signal.done

    # Main loop

    async def run(self, root: Optional[DialogueNode]) -> None:
        """
        Play the dialogue starting at `root` until a node has no successor.

        Raises:
            DialogueError: If a session is already running on this controller
        """
        if self._running:
            raise DialogueError("A dialogue is already running on this controller")

        self._running = True
        self._current_node = root
        completed = False

        logger.debug("Flow start")
        self.events.publish(DialogueEvent.DIALOGUE_STARTED)

        try:
            while self._current_node is not None:
                self._current_node = await self._play_node(self._current_node)
                await asyncio.sleep(0)
            completed = True
            logger.debug("Flow end: dialogue chain ended")
        finally:
            self._running = False
            self._skip_scope = None
            self._advance_signal = None
            self._navigator = None
            self._current_node = None
            self.events.publish(DialogueEvent.DIALOGUE_ENDED, completed=completed)

    async def _play_node(self, node: DialogueNode) -> Optional[DialogueNode]:
        logger.debug(f"Reading dialogue line: {node.text[:30]}")
        self.events.publish(DialogueEvent.NODE_ENTERED, node=node)

        # 1. Reveal, skippable for this node only
        with CancellationScope() as scope:
            self._skip_scope = scope
            try:
                await self.reveal.reveal_dialogue(node, scope)
            finally:
                self._skip_scope = None

        # 2. Anti-spam cooldown
        await asyncio.sleep(self.config.cooldown)

        # 3. Branch
        if node.kind == NodeKind.MULTI_WAY:
            return await self._resolve_choice(node)
        return await self._resolve_advance(node)

    async def _resolve_choice(self, node: MultiWayDialogue) -> Optional[DialogueNode]:
        labels = node.get_choices_text()
        if not labels:
            logger.warning(f"Multi-way node without choices treated as terminal: {node!r}")
            return None

        for slot, label in enumerate(labels):
            await self.reveal.reveal_choice(label, slot, self.config.choice_cooldown)

        self._navigator = ChoiceNavigator(self.events, columns=self.config.columns)
        self._navigator.initialize(len(labels))

        selected = await self._navigator.await_selection()
        logger.debug(f"Advancing after choice {selected}")
        return node.get_next(selected)

    async def _resolve_advance(self, node: DialogueNode) -> Optional[DialogueNode]:
        self._advance_signal = CompletionSignal()
        try:
            logger.debug("Awaiting player advance input")
            await self._advance_signal.wait()
        finally:
            self._advance_signal = None
        return node.get_next()

    # Input signals

    def trigger_skip(self) -> None:
        """Fast-forward the reveal of the current node."""
        if self._skip_scope is not None:
            self._skip_scope.cancel()

    def trigger_advance(self) -> None:
        """Advance past a one-way node. Also skips an in-flight reveal."""
        self.trigger_skip()
        if self._advance_signal is not None:
            self._advance_signal.set_result(True)

    def navigate_up(self) -> None:
        if self.is_awaiting_choice:
            self._navigator.move_up()

    def navigate_down(self) -> None:
        if self.is_awaiting_choice:
            self._navigator.move_down()

    def navigate_left(self) -> None:
        if self.is_awaiting_choice:
            self._navigator.move_left()

    def navigate_right(self) -> None:
        if self.is_awaiting_choice:
            self._navigator.move_right()

    def confirm_choice(self) -> None:
        if self.is_awaiting_choice:
            self._navigator.confirm()
