"""
Core primitives - event bus, single-shot signals, configuration, errors.
"""

from dialogue_engine.core.config import FlowConfig, load_config
from dialogue_engine.core.errors import (
    DialogueError,
    GraphConstructionError,
    NavigatorMisuseError,
)
from dialogue_engine.core.events import (
    DialogueEvent,
    Event,
    EventBus,
    EventHandler,
    TextRole,
)
from dialogue_engine.core.signals import CancellationScope, CompletionSignal

__all__ = [
    # Events
    "DialogueEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "TextRole",
    # Signals
    "CancellationScope",
    "CompletionSignal",
    # Config
    "FlowConfig",
    "load_config",
    # Errors
    "DialogueError",
    "GraphConstructionError",
    "NavigatorMisuseError",
]
