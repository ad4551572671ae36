"""
Dialogue presenter - mirrors core notifications into view state.

The presenter owns no drawing code. A renderer reads `view` each frame
and draws the dialogue box, choice labels and highlight from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from dialogue_engine.core.events import DialogueEvent, Event, EventBus, TextRole


@dataclass
class DialogueView:
    """
    What the dialogue box currently shows.

    Attributes:
        visible: Whether the dialogue canvas is shown
        speaker: Speaker label of the current node
        text: Revealed dialogue text
        choices: Revealed choice labels by slot
        highlighted: Highlighted choice slot, if a choice is pending
        confirmed: Last confirmed choice slot
    """
    visible: bool = False
    speaker: str = ""
    text: str = ""
    choices: dict[int, str] = field(default_factory=dict)
    highlighted: Optional[int] = None
    confirmed: Optional[int] = None

    def choice_list(self) -> list[str]:
        """Choice labels ordered by slot."""
        return [self.choices[slot] for slot in sorted(self.choices)]


class DialoguePresenter:
    """
    Subscribes to a dialogue EventBus and keeps a DialogueView current.

    Handlers are held weakly by the bus; keep a reference to the
    presenter for as long as it should receive events.
    """

    def __init__(self, events: EventBus):
        self.events = events
        self.view = DialogueView()

        events.subscribe(DialogueEvent.DIALOGUE_STARTED, self._on_started)
        events.subscribe(DialogueEvent.DIALOGUE_ENDED, self._on_ended)
        events.subscribe(DialogueEvent.NODE_ENTERED, self._on_node_entered)
        events.subscribe(DialogueEvent.REVEAL_PROGRESS, self._on_reveal_progress)
        events.subscribe(DialogueEvent.CHOICE_HIGHLIGHTED, self._on_highlighted)
        events.subscribe(DialogueEvent.CHOICE_CONFIRMED, self._on_confirmed)

    def detach(self) -> None:
        """Stop receiving events."""
        self.events.unsubscribe(DialogueEvent.DIALOGUE_STARTED, self._on_started)
        self.events.unsubscribe(DialogueEvent.DIALOGUE_ENDED, self._on_ended)
        self.events.unsubscribe(DialogueEvent.NODE_ENTERED, self._on_node_entered)
        self.events.unsubscribe(DialogueEvent.REVEAL_PROGRESS, self._on_reveal_progress)
        self.events.unsubscribe(DialogueEvent.CHOICE_HIGHLIGHTED, self._on_highlighted)
        self.events.unsubscribe(DialogueEvent.CHOICE_CONFIRMED, self._on_confirmed)

    def _on_started(self, event: Event) -> None:
        self.view = DialogueView(visible=True)

    def _on_ended(self, event: Event) -> None:
        self.view.visible = False

    def _on_node_entered(self, event: Event) -> None:
        node = event["node"]
        self.view.speaker = node.speaker
        self.view.text = ""
        self.view.choices.clear()
        self.view.highlighted = None

    def _on_reveal_progress(self, event: Event) -> None:
        if event["role"] == TextRole.CHOICE_TEXT:
            self.view.choices[event["slot"]] = event["text"]
        else:
            self.view.text = event["text"]

    def _on_highlighted(self, event: Event) -> None:
        self.view.highlighted = event["index"]

    def _on_confirmed(self, event: Event) -> None:
        self.view.confirmed = event["index"]
