"""
Dialogue graph nodes.

A node holds display text and zero, one or many successor links.
Nodes are built once by the content author and never mutated; the
flow controller only follows forward links.

Usage:
    ending = OneWayDialogue("Goodbye.")
    question = MultiWayDialogue(
        "Stay or go?",
        ["Stay", "Go"],
        [OneWayDialogue("You stay.", ending), None],
    )
    intro = OneWayDialogue("Hello there.", question)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Optional, Sequence

from dialogue_engine.core.errors import GraphConstructionError


class NodeKind(Enum):
    """Node variant tag."""
    ONE_WAY = auto()
    MULTI_WAY = auto()


class DialogueNode(ABC):
    """
    Base dialogue node.

    Attributes:
        text: Display text
        speaker: Optional speaker label
        kind: Variant tag
    """

    kind: ClassVar[NodeKind]

    __slots__ = ('_text', '_speaker')

    def __init__(self, text: str, speaker: str = ""):
        if not isinstance(text, str):
            raise GraphConstructionError(f"Node text must be a string, got {type(text).__name__}")
        self._text = text
        self._speaker = speaker or ""

    @property
    def text(self) -> str:
        return self._text

    @property
    def speaker(self) -> str:
        return self._speaker

    @abstractmethod
    def get_next(self, choice_index: int = 0) -> Optional[DialogueNode]:
        """
        Follow a successor link.

        Returns:
            The next node, or None when the dialogue ends here
        """

    def __repr__(self) -> str:
        preview = self._text if len(self._text) <= 30 else self._text[:30] + "..."
        return f"{type(self).__name__}({preview!r})"


class OneWayDialogue(DialogueNode):
    """Node with at most one successor."""

    kind = NodeKind.ONE_WAY

    __slots__ = ('_next',)

    def __init__(
        self,
        text: str,
        next_node: Optional[DialogueNode] = None,
        speaker: str = "",
    ):
        super().__init__(text, speaker)
        if next_node is not None and not isinstance(next_node, DialogueNode):
            raise GraphConstructionError(
                f"Successor must be a DialogueNode, got {type(next_node).__name__}"
            )
        self._next = next_node

    @property
    def next_node(self) -> Optional[DialogueNode]:
        return self._next

    def get_next(self, choice_index: int = 0) -> Optional[DialogueNode]:
        return self._next


@dataclass(frozen=True)
class DialogueChoice:
    """A choice label and the branch it leads to (None = terminal branch)."""
    text: str
    next_node: Optional[DialogueNode] = None


class MultiWayDialogue(DialogueNode):
    """Node offering an ordered list of choices."""

    kind = NodeKind.MULTI_WAY

    __slots__ = ('_choices',)

    def __init__(
        self,
        text: str,
        choice_texts: Sequence[str] = (),
        next_nodes: Sequence[Optional[DialogueNode]] = (),
        speaker: str = "",
    ):
        super().__init__(text, speaker)

        if len(choice_texts) != len(next_nodes):
            raise GraphConstructionError(
                f"Choices text and next dialogue lines count must match "
                f"({len(choice_texts)} != {len(next_nodes)})"
            )

        for label, node in zip(choice_texts, next_nodes):
            if not isinstance(label, str):
                raise GraphConstructionError(
                    f"Choice text must be a string, got {type(label).__name__}"
                )
            if node is not None and not isinstance(node, DialogueNode):
                raise GraphConstructionError(
                    f"Choice successor must be a DialogueNode, got {type(node).__name__}"
                )

        self._choices = tuple(
            DialogueChoice(label, node) for label, node in zip(choice_texts, next_nodes)
        )

    @property
    def choices(self) -> tuple[DialogueChoice, ...]:
        return self._choices

    @property
    def has_choices(self) -> bool:
        return len(self._choices) > 0

    def get_next(self, choice_index: int = 0) -> Optional[DialogueNode]:
        if choice_index < 0 or choice_index >= len(self._choices):
            return None
        return self._choices[choice_index].next_node

    def get_choices_text(self) -> list[str]:
        """Choice labels in order. Empty when no choices are configured."""
        return [choice.text for choice in self._choices]
