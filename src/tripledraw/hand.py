"""Five-card lowball hands and shape detection.

In 2-7 lowball pairs, flushes and straights all count against a hand,
and the ace only ever plays high. Everything here works on the hand's
value multiset; suits are consulted only for flushes.
"""

from collections import Counter
from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, Self

from .card import Card, value_symbol

HAND_SIZE = 5

# A-2-3-4-5 is not a run of consecutive values, but it still plays as a
# straight in 2-7.
WHEEL_VALUES = (2, 3, 4, 5, 14)


def is_straight(values: Iterable[int]) -> bool:
    """True if the distinct values contain five consecutive integers."""
    distinct = sorted(set(values))
    if len(distinct) < HAND_SIZE:
        return False
    for i in range(len(distinct) - HAND_SIZE + 1):
        window = distinct[i : i + HAND_SIZE]
        if window[-1] - window[0] == HAND_SIZE - 1:
            return True
    return False


def format_values(values: Iterable[int]) -> str:
    """Render values high-first in notation order, e.g. [2, 3, 6] -> '632'."""
    return "".join(value_symbol(v) for v in sorted(values, reverse=True))


@dataclass(frozen=True)
class Hand:
    """Exactly five distinct cards as dealt."""

    cards: tuple[Card, ...]

    def __post_init__(self) -> None:
        if len(self.cards) != HAND_SIZE:
            raise ValueError(f"Hand must have exactly {HAND_SIZE} cards, got {len(self.cards)}")
        if len(set(self.cards)) != HAND_SIZE:
            raise ValueError(f"Hand contains duplicate cards: {' '.join(map(str, self.cards))}")

    @classmethod
    def from_cards(cls, *cards: Card) -> Self:
        """Create a hand from cards."""
        return cls(cards=tuple(cards))

    def __str__(self) -> str:
        return " ".join(str(c) for c in self.cards)

    @cached_property
    def values(self) -> tuple[int, ...]:
        """Card values, lowest first."""
        return tuple(sorted(c.value for c in self.cards))

    @cached_property
    def distinct_values(self) -> tuple[int, ...]:
        """Distinct card values, lowest first."""
        return tuple(sorted(set(self.values)))

    @cached_property
    def value_counts(self) -> Counter[int]:
        return Counter(self.values)

    @property
    def high_card(self) -> int:
        return self.values[-1]

    @property
    def has_pair(self) -> bool:
        """Any value appears at least twice."""
        return any(count > 1 for count in self.value_counts.values())

    @property
    def has_flush(self) -> bool:
        """All five suits identical."""
        return len({c.suit for c in self.cards}) == 1

    @property
    def has_straight(self) -> bool:
        return is_straight(self.values)

    @property
    def has_wheel(self) -> bool:
        """Exactly A-2-3-4-5."""
        return self.values == WHEEL_VALUES

    @property
    def is_pat_eligible(self) -> bool:
        """No pair, flush, straight or wheel: a candidate to stand pat."""
        return not (self.has_pair or self.has_flush or self.has_straight or self.has_wheel)

    def count(self, value: int) -> int:
        """Number of cards of the given value."""
        return self.value_counts[value]
