"""Presentation adapters."""

from dialogue_engine.ui.presenter import DialoguePresenter, DialogueView

__all__ = [
    "DialoguePresenter",
    "DialogueView",
]
