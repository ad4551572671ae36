import os
import sys
import pytest
from unittest.mock import patch

# Ensure dialogue_engine can be imported
sys.path.append(os.getcwd())


@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.display'), \
         patch('pygame.joystick'), \
         patch('pygame.key'), \
         patch('pygame.mouse'):
        yield


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from dialogue_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def fast_config():
    """FlowConfig with every delay set to zero."""
    from dialogue_engine.core.config import FlowConfig
    return FlowConfig(reveal_interval=0.0, cooldown=0.0, choice_cooldown=0.0)


@pytest.fixture
def recorder(event_bus):
    """Collects every dialogue event published on event_bus, in order."""
    from dialogue_engine.core.events import DialogueEvent

    received = []
    for event_type in DialogueEvent:
        event_bus.subscribe(event_type, received.append, weak=False)
    return received
