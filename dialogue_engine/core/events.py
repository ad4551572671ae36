"""
Typed event bus used as the observer channel between the dialogue core
and the presentation layer.

Uses Enums for event types to prevent magic strings.

Usage:
    bus = EventBus()
    bus.subscribe(DialogueEvent.REVEAL_PROGRESS, on_progress)
    bus.publish(DialogueEvent.REVEAL_PROGRESS, role=TextRole.DIALOGUE_TEXT, text="He", slot=0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class DialogueEvent(Enum):
    """Notifications published by the dialogue core."""
    DIALOGUE_STARTED = auto()
    DIALOGUE_ENDED = auto()
    NODE_ENTERED = auto()
    REVEAL_PROGRESS = auto()
    CHOICE_HIGHLIGHTED = auto()
    CHOICE_CONFIRMED = auto()


class TextRole(Enum):
    """Which part of the dialogue box a reveal emission belongs to."""
    DIALOGUE_TEXT = auto()
    CHOICE_TEXT = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Publish/subscribe channel.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Optional weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Handler failures are logged and never reach the publisher
    """

    def __init__(self):
        # event type -> list of (priority, handler, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Events published from inside a handler are delivered afterwards
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, hold only a weak reference to the handler.
                  Lambdas and closures need weak=False.
        """
        handlers = self._handlers.setdefault(event_type, [])

        if weak:
            if hasattr(handler, '__self__'):
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (p, h, o) for p, h, o in self._handlers[event_type]
            if self._get_handler(h) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def has_subscribers(self, event_type: Enum) -> bool:
        return bool(self._handlers.get(event_type))

    def clear(self, event_type: Enum | None = None) -> None:
        """Clear handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        elif event_type in self._handlers:
            del self._handlers[event_type]

    def _dispatch(self, event: Event) -> None:
        if event.type not in self._handlers:
            return

        self._is_publishing = True
        # Handlers subscribed during dispatch run from the next publish on
        snapshot = list(self._handlers[event.type])
        to_remove = []

        try:
            for entry in snapshot:
                priority, handler_ref, one_shot = entry
                handler = self._get_handler(handler_ref)

                if handler is None:
                    to_remove.append(entry)
                    continue

                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error in event handler for {event.type}")

                if one_shot:
                    to_remove.append(entry)

                if event.consumed:
                    break

            if to_remove:
                current = self._handlers.get(event.type, [])
                current[:] = [e for e in current if not any(e is r for r in to_remove)]
        finally:
            self._is_publishing = False

        while self._event_queue:
            queued = self._event_queue.pop(0)
            self._dispatch(queued)

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
