"""
Input handler with action-based abstraction.

Translates raw pygame keyboard and gamepad events into dialogue
Actions, and routes just-pressed actions to a FlowController.

Usage:
    handler = InputHandler()
    router = DialogueInputRouter(handler, controller)

    for event in pygame.event.get():
        handler.process_event(event)
    handler.update()
    router.dispatch()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

import pygame

from dialogue_engine.input.actions import (
    Action,
    DEFAULT_GAMEPAD_BINDINGS,
    DEFAULT_GAMEPAD_HAT_BINDINGS,
    DEFAULT_KEY_BINDINGS,
)

if TYPE_CHECKING:
    from dialogue_engine.systems.flow import FlowController


@dataclass
class InputState:
    """Input state for the current frame."""
    actions_pressed: set[Action] = field(default_factory=set)
    actions_just_pressed: set[Action] = field(default_factory=set)
    keys_pressed: set[int] = field(default_factory=set)


class InputHandler:
    """
    Translates raw pygame events into semantic Actions.

    Supports keyboard and gamepad (buttons and D-pad).
    """

    def __init__(self):
        self._state = InputState()
        self._prev_actions: set[Action] = set()

        # Key bindings (action -> list of keys)
        self._key_bindings = {action: list(keys) for action, keys in DEFAULT_KEY_BINDINGS.items()}
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

        self._gamepad_bindings = DEFAULT_GAMEPAD_BINDINGS.copy()
        self._gamepad_hat_bindings = DEFAULT_GAMEPAD_HAT_BINDINGS.copy()

    def _rebuild_reverse_bindings(self) -> None:
        """Build reverse lookup: key -> actions."""
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    # Public API

    def is_action_pressed(self, action: Action) -> bool:
        return action in self._state.actions_pressed

    def is_action_just_pressed(self, action: Action) -> bool:
        """Check if an action was pressed since the previous update()."""
        return action in self._state.actions_just_pressed

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        return self._key_bindings.get(action, []).copy()

    # Frame update

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event."""
        if event.type == pygame.KEYDOWN:
            self._on_key_down(event.key)

        elif event.type == pygame.KEYUP:
            self._on_key_up(event.key)

        elif event.type == pygame.JOYBUTTONDOWN:
            for action, buttons in self._gamepad_bindings.items():
                if event.button in buttons:
                    self._state.actions_pressed.add(action)

        elif event.type == pygame.JOYBUTTONUP:
            for action, buttons in self._gamepad_bindings.items():
                if event.button in buttons:
                    self._state.actions_pressed.discard(action)

        elif event.type == pygame.JOYHATMOTION:
            self._on_hat_motion(event.value)

    def update(self) -> None:
        """
        Compute just-pressed actions for the new frame.

        Call once per frame after processing events.
        """
        self._state.actions_just_pressed = self._state.actions_pressed - self._prev_actions
        self._prev_actions = self._state.actions_pressed.copy()

    def _on_key_down(self, key: int) -> None:
        self._state.keys_pressed.add(key)
        for action in self._reverse_key_bindings.get(key, []):
            self._state.actions_pressed.add(action)

    def _on_key_up(self, key: int) -> None:
        self._state.keys_pressed.discard(key)

        # Release an action only if no other key for it is still held
        for action in self._reverse_key_bindings.get(key, []):
            still_pressed = any(
                other != key and other in self._state.keys_pressed
                for other in self._key_bindings.get(action, [])
            )
            if not still_pressed:
                self._state.actions_pressed.discard(action)

    def _on_hat_motion(self, value: tuple[int, int]) -> None:
        for action in self._gamepad_hat_bindings.values():
            self._state.actions_pressed.discard(action)

        if value in self._gamepad_hat_bindings:
            self._state.actions_pressed.add(self._gamepad_hat_bindings[value])


class DialogueInputRouter:
    """
    Forwards just-pressed actions to a FlowController.

    Choice actions take priority while a choice is pending, so a button
    bound to both ADVANCE and CHOICE_CONFIRM confirms the choice.
    """

    def __init__(self, input_handler: InputHandler, controller: FlowController):
        self.input = input_handler
        self.controller = controller

        self._choice_routes: dict[Action, Callable[[], None]] = {
            Action.CHOICE_UP: controller.navigate_up,
            Action.CHOICE_DOWN: controller.navigate_down,
            Action.CHOICE_LEFT: controller.navigate_left,
            Action.CHOICE_RIGHT: controller.navigate_right,
            Action.CHOICE_CONFIRM: controller.confirm_choice,
        }

    def dispatch(self) -> None:
        """Route this frame's just-pressed actions."""
        if self.controller.is_awaiting_choice:
            for action, route in self._choice_routes.items():
                if self.input.is_action_just_pressed(action):
                    route()
                    # One grid move per frame
                    return
            return

        if self.input.is_action_just_pressed(Action.ADVANCE):
            self.controller.trigger_advance()
        elif self.input.is_action_just_pressed(Action.SKIP):
            self.controller.trigger_skip()
