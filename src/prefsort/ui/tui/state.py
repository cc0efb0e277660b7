"""Ranking UI state — pure data, NO Textual imports.

File: src/prefsort/ui/tui/state.py

Owns the canonical state for the TUI controller layer.
All state mutations go through the controller; widgets read snapshots.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from prefsort.engine.oracle import ComparisonRequest

WAITING_STATUS: Final[str] = "Waiting for first comparison..."
CHOOSE_STATUS: Final[str] = "Use ← / → (or h / l) to choose. Enter q to quit."


class Side(enum.Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def prefers_first(self) -> bool:
        return self is Side.LEFT


class SessionPhase(enum.Enum):
    WAITING = "waiting"
    AWAITING_CHOICE = "awaiting_choice"
    FINISHED = "finished"
    QUITTING = "quitting"


@dataclass
class RankingState:
    """Root state object for the ranking TUI — mutated only by the controller."""

    total_items: int = 0
    max_comparisons: int = 0

    # Currently displayed pair (kept on screen after an answer until the next request)
    left: str = ""
    right: str = ""

    # The request awaiting an answer; None when idle
    pending: ComparisonRequest | None = None

    phase: SessionPhase = SessionPhase.WAITING
    status: str = WAITING_STATUS
    answered: int = 0

    no_color: bool = False

    @property
    def has_pair(self) -> bool:
        return bool(self.left or self.right)


__all__ = [
    "CHOOSE_STATUS",
    "RankingState",
    "SessionPhase",
    "Side",
    "WAITING_STATUS",
]
