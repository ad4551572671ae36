"""
Flow configuration.

Fixed at construction. The model is frozen, so a running controller
can never observe a changed interval or cooldown.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class FlowConfig(BaseModel):
    """
    Timing and layout settings for a dialogue session.

    Attributes:
        reveal_interval: Seconds between revealed characters
        columns: Column count of the choice grid
        cooldown: Anti-spam delay after each line is revealed
        choice_cooldown: Delay after each choice label is revealed
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    reveal_interval: float = Field(default=0.01, ge=0.0)
    columns: int = Field(default=2, ge=1)
    cooldown: float = Field(default=1.5, ge=0.0)
    choice_cooldown: float = Field(default=1.0, ge=0.0)


def load_config(path: Path | str) -> FlowConfig:
    """Read a FlowConfig from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return FlowConfig.model_validate(json.load(f))
