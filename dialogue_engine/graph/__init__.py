"""Dialogue graph data model."""

from dialogue_engine.graph.nodes import (
    DialogueChoice,
    DialogueNode,
    MultiWayDialogue,
    NodeKind,
    OneWayDialogue,
)

__all__ = [
    "DialogueChoice",
    "DialogueNode",
    "MultiWayDialogue",
    "NodeKind",
    "OneWayDialogue",
]
