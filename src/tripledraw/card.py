"""Card representations for 2-7 lowball."""

from enum import IntEnum
from dataclasses import dataclass
from typing import Self


class Suit(IntEnum):
    """Card suits. Suits only matter for flush detection."""

    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    @property
    def symbol(self) -> str:
        return "♣♦♥♠"[self]

    def __str__(self) -> str:
        return self.symbol


class Rank(IntEnum):
    """Card ranks. The enum value is the card's lowball value (ace is high)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        """Single-character rank token ("T" for ten)."""
        return RANK_SYMBOLS[self.value]

    @classmethod
    def from_symbol(cls, s: str) -> Self:
        """Parse a rank token like '7', 'T', '10' or 'a'."""
        token = s.strip().upper()
        if token == "10":
            token = "T"
        for value, symbol in RANK_SYMBOLS.items():
            if symbol == token:
                return cls(value)
        raise ValueError(f"Invalid rank: {s}")

    def __str__(self) -> str:
        return self.symbol


RANK_SYMBOLS: dict[int, str] = {
    2: "2", 3: "3", 4: "4", 5: "5", 6: "6", 7: "7", 8: "8", 9: "9",
    10: "T", 11: "J", 12: "Q", 13: "K", 14: "A",
}

_SUIT_MAP = {
    "C": Suit.CLUBS, "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS, "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS, "♥": Suit.HEARTS,
    "S": Suit.SPADES, "♠": Suit.SPADES,
}


def value_symbol(value: int) -> str:
    """Rank token for a bare integer value, e.g. 10 -> 'T'."""
    return RANK_SYMBOLS[value]


@dataclass(frozen=True, slots=True)
class Card:
    """A dealt playing card. Immutable."""

    rank: Rank
    suit: Suit

    @property
    def value(self) -> int:
        """Lowball value: 2-9 as printed, T=10 ... A=14."""
        return int(self.rank)

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"

    def __repr__(self) -> str:
        return f"card({str(self)!r})"

    @classmethod
    def from_str(cls, s: str) -> Self:
        """Parse a card from string like '7s', 'Th', '10d', '2♣'.

        Rank: 2-9, T (or 10), J, Q, K, A
        Suit: c(lubs), d(iamonds), h(earts), s(pades) or the suit symbol
        """
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        suit_char = s[-1]
        if suit_char not in _SUIT_MAP:
            raise ValueError(f"Invalid suit: {suit_char}")

        return cls(rank=Rank.from_symbol(s[:-1]), suit=_SUIT_MAP[suit_char])


def card(s: str) -> Card:
    """Shorthand for Card.from_str()."""
    return Card.from_str(s)


def cards(s: str) -> list[Card]:
    """Parse space or comma separated cards, e.g. '8s 6h 5d 3c 2s'."""
    return [card(p) for p in s.replace(",", " ").split() if p]
