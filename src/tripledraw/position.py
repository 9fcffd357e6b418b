"""Table position representation for six-handed triple draw."""

from enum import IntEnum
from typing import Self


class Position(IntEnum):
    """Seats at a six-handed table, ordered by opening action.

    UTG acts first; each later seat is allowed a wider opening range,
    which is why strategies inherit from the seat before them.
    """

    UTG = 0
    HJ = 1
    CO = 2
    BTN = 3
    SB = 4
    BB = 5

    @property
    def label(self) -> str:
        """Human-readable position name."""
        return {
            Position.UTG: "Under the Gun (UTG)",
            Position.HJ: "Hijack (HJ)",
            Position.CO: "Cutoff (CO)",
            Position.BTN: "Button (BTN)",
            Position.SB: "Small Blind (SB)",
            Position.BB: "Big Blind (BB)",
        }[self]

    @property
    def short(self) -> str:
        """Short abbreviation (e.g. 'UTG', 'BTN')."""
        return self.name

    @property
    def is_blind(self) -> bool:
        return self in (Position.SB, Position.BB)

    @classmethod
    def from_str(cls, s: str) -> Self:
        """Parse an abbreviation; 'BU' is accepted for the button."""
        key = s.strip().upper()
        if key == "BU":
            key = "BTN"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown position: {s}") from None

    def __str__(self) -> str:
        return self.short
