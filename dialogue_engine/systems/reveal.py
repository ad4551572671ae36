"""
Reveal process - typewriter effect for dialogue and choice text.

Emits growing prefixes of the target text at a fixed interval. A skip
does not abort the reveal: it fast-forwards to the full text, so
observers always end on either a clean prefix or the complete line.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from dialogue_engine.core.events import DialogueEvent, EventBus, TextRole
from dialogue_engine.core.signals import CancellationScope
from dialogue_engine.graph.nodes import DialogueNode

logger = logging.getLogger(__name__)


class RevealProcess:
    """
    Reveals text one character per tick.

    Every tick publishes DialogueEvent.REVEAL_PROGRESS with
    role, text (the current prefix) and slot (choice index, 0 for
    dialogue text).
    """

    def __init__(self, events: EventBus, interval: float):
        self.events = events
        self.interval = interval
        self._buffer: list[str] = []

    @property
    def buffer(self) -> str:
        """Characters emitted so far by the reveal in progress."""
        return "".join(self._buffer)

    async def reveal(
        self,
        role: TextRole,
        text: str,
        scope: Optional[CancellationScope] = None,
        slot: int = 0,
    ) -> bool:
        """
        Reveal `text`, suspending `interval` seconds after each character.

        Args:
            role: Dialogue or choice text
            text: Target text
            scope: Skip handle; cancelling it emits the full text at once
            slot: Choice slot the text belongs to

        Returns:
            True if the reveal was skipped
        """
        self._buffer.clear()
        skipped = False

        try:
            for char in text:
                self._buffer.append(char)
                self._emit(role, self.buffer, slot)

                if scope is not None:
                    interrupted = await scope.wait(self.interval)
                else:
                    await asyncio.sleep(self.interval)
                    interrupted = False

                if interrupted:
                    skipped = True
                    self._buffer.clear()
                    self._emit(role, text, slot)
                    break
        finally:
            self._buffer.clear()

        if skipped:
            logger.debug(f"Reveal skipped ({role.name}, slot {slot})")
        return skipped

    async def reveal_dialogue(
        self,
        node: DialogueNode,
        scope: Optional[CancellationScope] = None,
    ) -> bool:
        """Reveal the main text of a node."""
        return await self.reveal(TextRole.DIALOGUE_TEXT, node.text, scope)

    async def reveal_choice(
        self,
        text: str,
        slot: int,
        cooldown: float,
        scope: Optional[CancellationScope] = None,
    ) -> bool:
        """Reveal a choice label, then wait out the full `cooldown`."""
        skipped = await self.reveal(TextRole.CHOICE_TEXT, text, scope, slot)
        await asyncio.sleep(cooldown)
        return skipped

    def _emit(self, role: TextRole, text: str, slot: int) -> None:
        self.events.publish(DialogueEvent.REVEAL_PROGRESS, role=role, text=text, slot=slot)
