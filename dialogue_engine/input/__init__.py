"""Input handling module."""

from dialogue_engine.input.actions import Action
from dialogue_engine.input.handler import DialogueInputRouter, InputHandler, InputState

__all__ = [
    "Action",
    "DialogueInputRouter",
    "InputHandler",
    "InputState",
]
