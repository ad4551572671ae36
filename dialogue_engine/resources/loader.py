"""
Dialogue loader.

Builds an immutable dialogue graph from a JSON document:

{
    "id": "first_dialogue",
    "start": "intro",
    "nodes": [
        {"id": "intro", "speaker": "Zopry", "text": "Hello.", "next": "question"},
        {"id": "question", "text": "Choose from",
         "choices": [{"text": "1", "next": "a"}, {"text": "2"}]},
        {"id": "a", "text": "Finale"}
    ]
}

A node with a "choices" key becomes a MultiWayDialogue, anything else a
OneWayDialogue. A missing "next" marks a terminal link. A node may not
carry both "next" and "choices".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import jsonschema

from dialogue_engine.core.errors import GraphConstructionError
from dialogue_engine.graph.nodes import DialogueNode, MultiWayDialogue, OneWayDialogue

logger = logging.getLogger(__name__)


DIALOGUE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["start", "nodes"],
    "properties": {
        "id": {"type": "string"},
        "start": {"type": "string"},
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "text"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "speaker": {"type": "string"},
                    "text": {"type": "string"},
                    "next": {"type": ["string", "null"]},
                    "choices": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["text"],
                            "properties": {
                                "text": {"type": "string"},
                                "next": {"type": ["string", "null"]},
                            },
                            "additionalProperties": False,
                        },
                    },
                },
                # A node is either linear or branching, never both
                "not": {"required": ["next", "choices"]},
                "additionalProperties": False,
            },
        },
    },
}


class DialogueLoader:
    """
    Loads dialogue graphs from JSON, with schema validation.

    Graphs are built leaves first, so every successor exists before the
    node that links to it. Cyclic content is rejected.
    """

    def __init__(self, schema: Optional[dict[str, Any]] = None):
        self.schema = schema or DIALOGUE_SCHEMA

    def load_file(self, path: Path | str) -> DialogueNode:
        """Load a dialogue file and return its start node."""
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GraphConstructionError(f"Invalid JSON in {path}: {e}") from e

        root = self.load(data)
        logger.info(f"Loaded dialogue {data.get('id', path.stem)!r} from {path}")
        return root

    def load(self, data: dict[str, Any]) -> DialogueNode:
        """Build a graph from an already-parsed document and return its start node."""
        try:
            jsonschema.validate(instance=data, schema=self.schema)
        except jsonschema.ValidationError as e:
            logger.error(f"Validation error in dialogue: {e.message}")
            raise GraphConstructionError(f"Invalid dialogue document: {e.message}") from e

        entries: dict[str, dict[str, Any]] = {}
        for node_data in data["nodes"]:
            node_id = node_data["id"]
            if node_id in entries:
                raise GraphConstructionError(f"Duplicate node id: {node_id!r}")
            entries[node_id] = node_data

        start = data["start"]
        if start not in entries:
            raise GraphConstructionError(f"Start node not found: {start!r}")

        built: dict[str, DialogueNode] = {}
        for node_id in entries:
            self._build_from(node_id, entries, built)

        logger.debug(f"Built {len(built)} dialogue nodes, start={start!r}")
        return built[start]

    def _build_from(
        self,
        root_id: str,
        entries: dict[str, dict[str, Any]],
        built: dict[str, DialogueNode],
    ) -> None:
        """Build `root_id` and everything it reaches, successors first."""
        if root_id in built:
            return

        stack = [root_id]
        # Ids on the stack; meeting one again means a cycle
        visiting = {root_id}

        while stack:
            node_id = stack[-1]
            pending = next(
                (t for t in self._targets(entries[node_id]) if t not in built),
                None,
            )

            if pending is None:
                built[node_id] = self._make_node(entries[node_id], built)
                visiting.discard(node_id)
                stack.pop()
                continue

            if pending in visiting:
                raise GraphConstructionError(f"Dialogue cycle detected at node {pending!r}")
            if pending not in entries:
                raise GraphConstructionError(f"Unknown successor node: {pending!r}")

            visiting.add(pending)
            stack.append(pending)

    @staticmethod
    def _targets(entry: dict[str, Any]) -> list[str]:
        if "choices" in entry:
            links = [choice.get("next") for choice in entry["choices"]]
        else:
            links = [entry.get("next")]
        return [target for target in links if target is not None]

    @staticmethod
    def _make_node(entry: dict[str, Any], built: dict[str, DialogueNode]) -> DialogueNode:
        speaker = entry.get("speaker", "")

        if "choices" in entry:
            labels = [choice["text"] for choice in entry["choices"]]
            successors = [
                built[choice["next"]] if choice.get("next") is not None else None
                for choice in entry["choices"]
            ]
            return MultiWayDialogue(entry["text"], labels, successors, speaker=speaker)

        target = entry.get("next")
        return OneWayDialogue(
            entry["text"],
            built[target] if target is not None else None,
            speaker=speaker,
        )


def load_dialogue(path: Path | str) -> DialogueNode:
    """Load a dialogue file with the default schema."""
    return DialogueLoader().load_file(path)
