"""
Dialogue systems - reveal process, choice navigation and flow control.
"""

from dialogue_engine.systems.flow import FlowController
from dialogue_engine.systems.navigator import ChoiceNavigator, NavigatorState
from dialogue_engine.systems.reveal import RevealProcess

__all__ = [
    "ChoiceNavigator",
    "FlowController",
    "NavigatorState",
    "RevealProcess",
]
