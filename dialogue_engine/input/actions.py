"""
Dialogue input actions.

Actions abstract raw input (keys, buttons) into the signals the flow
controller understands. Dialogue code should use Actions, not raw keys.
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """Semantic dialogue actions."""

    ADVANCE = auto()
    SKIP = auto()

    # Choice grid
    CHOICE_UP = auto()
    CHOICE_DOWN = auto()
    CHOICE_LEFT = auto()
    CHOICE_RIGHT = auto()
    CHOICE_CONFIRM = auto()


DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.ADVANCE: [pygame.K_SPACE, pygame.K_z],
    Action.SKIP: [pygame.K_x],
    Action.CHOICE_UP: [pygame.K_UP, pygame.K_w],
    Action.CHOICE_DOWN: [pygame.K_DOWN, pygame.K_s],
    Action.CHOICE_LEFT: [pygame.K_LEFT, pygame.K_a],
    Action.CHOICE_RIGHT: [pygame.K_RIGHT, pygame.K_d],
    Action.CHOICE_CONFIRM: [pygame.K_RETURN, pygame.K_KP_ENTER],
}

# Gamepad button bindings (SDL controller layout)
DEFAULT_GAMEPAD_BINDINGS: dict[Action, list[int]] = {
    Action.ADVANCE: [0],         # A button
    Action.SKIP: [1],            # B button
    Action.CHOICE_CONFIRM: [0],  # A button
}

# D-pad bindings (hat)
DEFAULT_GAMEPAD_HAT_BINDINGS: dict[tuple[int, int], Action] = {
    (0, 1): Action.CHOICE_UP,
    (0, -1): Action.CHOICE_DOWN,
    (-1, 0): Action.CHOICE_LEFT,
    (1, 0): Action.CHOICE_RIGHT,
}
