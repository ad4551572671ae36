"""
Dialogue Engine

Async flow engine for branching dialogue: typewriter reveal with skip,
advance waits, and grid-based choice selection.

Quick Start:
    import asyncio
    from dialogue_engine import FlowController, FlowConfig, OneWayDialogue

    root = OneWayDialogue("Hello.", OneWayDialogue("Goodbye."))
    controller = FlowController(FlowConfig(reveal_interval=0.02))
    task = asyncio.create_task(controller.run(root))
    # Input layer: controller.trigger_advance(), controller.navigate_up(), ...
"""

__version__ = "0.1.0"

from dialogue_engine.core import (
    CancellationScope,
    CompletionSignal,
    DialogueError,
    DialogueEvent,
    Event,
    EventBus,
    FlowConfig,
    GraphConstructionError,
    NavigatorMisuseError,
    TextRole,
    load_config,
)
from dialogue_engine.graph import (
    DialogueChoice,
    DialogueNode,
    MultiWayDialogue,
    NodeKind,
    OneWayDialogue,
)
from dialogue_engine.systems import (
    ChoiceNavigator,
    FlowController,
    NavigatorState,
    RevealProcess,
)

__all__ = [
    # Core
    "CancellationScope",
    "CompletionSignal",
    "DialogueEvent",
    "Event",
    "EventBus",
    "FlowConfig",
    "TextRole",
    "load_config",
    # Errors
    "DialogueError",
    "GraphConstructionError",
    "NavigatorMisuseError",
    # Graph
    "DialogueChoice",
    "DialogueNode",
    "MultiWayDialogue",
    "NodeKind",
    "OneWayDialogue",
    # Systems
    "ChoiceNavigator",
    "FlowController",
    "NavigatorState",
    "RevealProcess",
]
