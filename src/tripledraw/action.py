"""Opening actions and classification output."""

from dataclasses import dataclass
from enum import Enum
from typing import Self


class ActionType(Enum):
    """The two opening decisions the trainer asks about."""

    RAISE = "raise"
    FOLD = "fold"

    @classmethod
    def from_str(cls, s: str) -> Self:
        """Parse 'raise'/'fold' (or 'r'/'f')."""
        key = s.strip().lower()
        for action in cls:
            if key in (action.value, action.value[0]):
                return action
        raise ValueError(f"Unknown action: {s}")

    def __str__(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Classification:
    """The correct opening decision for a hand at a position.

    Attributes:
        is_playable: Whether the hand should be opened.
        correct_action: Raise when playable, fold otherwise.
        category: Short label, e.g. 'Pat 8-high' or 'Draw 1 (8653)'.
        explanation: Human-readable reasoning.
        rule_used: Which rule decided, e.g. 'Inherited Draw 2 (752+)'.
        benchmark: The pattern that decided, when there is one.
        minimum_raise_example: Weakest openers at the position (folds only).
    """

    is_playable: bool
    correct_action: ActionType
    category: str
    explanation: str
    rule_used: str
    benchmark: str | None = None
    minimum_raise_example: str | None = None
