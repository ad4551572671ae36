"""Dialogue content loading."""

from dialogue_engine.resources.loader import DIALOGUE_SCHEMA, DialogueLoader, load_dialogue

__all__ = [
    "DIALOGUE_SCHEMA",
    "DialogueLoader",
    "load_dialogue",
]
