"""Deck of cards and random hand dealing."""

import random
from dataclasses import dataclass, field
from typing import Self

from .card import Card, Rank, Suit
from .hand import Hand

# The trainer never deals face cards or aces.
TRAINING_RANKS = "23456789T"


def parse_rank_universe(ranks: str) -> tuple[Rank, ...]:
    """Parse a rank universe like '23456789T' into distinct ranks."""
    parsed: list[Rank] = []
    for token in ranks.replace(",", "").replace(" ", ""):
        rank = Rank.from_symbol(token)
        if rank not in parsed:
            parsed.append(rank)
    if len(parsed) * len(Suit) < 5:
        raise ValueError(f"Rank universe '{ranks}' has fewer than 5 cards")
    return tuple(parsed)


@dataclass
class Deck:
    """A deck built from a rank universe and all four suits."""

    ranks: tuple[Rank, ...] = field(default_factory=lambda: parse_rank_universe(TRAINING_RANKS))
    rng: random.Random = field(default_factory=random.Random, repr=False)
    cards: list[Card] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cards:
            self.reset()

    @classmethod
    def from_config(cls, ranks: str = TRAINING_RANKS, seed: int | None = None) -> Self:
        return cls(ranks=parse_rank_universe(ranks), rng=random.Random(seed))

    def reset(self) -> None:
        """Reset to the full deck for this rank universe."""
        self.cards = [Card(rank, suit) for suit in Suit for rank in self.ranks]

    def shuffle(self) -> None:
        """Shuffle the remaining cards."""
        self.rng.shuffle(self.cards)

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck."""
        if n > len(self.cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self.cards)} remaining")
        dealt = [self.cards.pop() for _ in range(n)]
        return dealt

    def deal_hand(self) -> Hand:
        """Deal a fresh five-card hand, highest card first.

        Every hand comes from a freshly shuffled full deck, so no two
        cards share rank and suit.
        """
        self.reset()
        self.shuffle()
        dealt = sorted(self.deal(5), key=lambda c: (c.value, c.suit), reverse=True)
        return Hand(tuple(dealt))

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, card: Card) -> bool:
        return card in self.cards
