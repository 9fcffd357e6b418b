"""Compact range notation for lowball opening ranges.

Grammar (one pattern per string):

  - ``8s+``   pat hand whose highest card is 8 or lower
  - ``8654+`` four-card draw equal to or better than 8-6-5-4
  - ``542+``  three-card draw equal to or better than 5-4-2
  - ``6322+`` 6 and 3 held together with at least two 2s (blocker pair)
  - ``all``   anything
  - ``7654``  literal hand; ``3222`` needs at least three 2s and a 3

Strings are parsed once into pattern objects. Anything outside the
grammar becomes a literal that never matches; with ``strict=True`` it is
rejected instead.
"""

from __future__ import annotations

import functools
import logging
import re
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

from .card import Rank
from .evaluator import compare_lowball, is_at_least
from .hand import format_values, is_straight

logger = logging.getLogger(__name__)

_TOKEN = "[2-9TJQKA]"
_THRESHOLD_RE = re.compile(rf"^(10|{_TOKEN})s\+$", re.IGNORECASE)
_FOUR_RE = re.compile(rf"^({_TOKEN}{{4}})\+$", re.IGNORECASE)
_THREE_RE = re.compile(rf"^({_TOKEN}{{3}})\+$", re.IGNORECASE)
_LITERAL_RE = re.compile(rf"^{_TOKEN}{{1,5}}$", re.IGNORECASE)

# Draw breakdowns only enumerate the ranks the trainer deals.
_EXPAND_VALUES = range(2, 10)


class NotationError(ValueError):
    """A range string outside the notation grammar (strict mode only)."""


def _values(tokens: str) -> tuple[int, ...]:
    return tuple(Rank.from_symbol(t).value for t in tokens)


@dataclass(frozen=True)
class Pattern:
    """A parsed range pattern.

    ``draw`` is the candidate being judged (the kept cards, or the whole
    hand for pat ranges). ``held`` is the full hand, used by patterns that
    care about extra copies of a card; it defaults to ``draw``.
    """

    text: str

    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        raise NotImplementedError

    def expand(self, limit: int | None = None) -> list[str]:
        """Example hands covered by this pattern, best first."""
        return [self.text]

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Wildcard(Pattern):
    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        return True


@dataclass(frozen=True)
class ThresholdHigh(Pattern):
    """``Ns+``: highest card at most N."""

    high: int

    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        return bool(draw) and max(draw) <= self.high

    def expand(self, limit: int | None = 10) -> list[str]:
        hands = [
            combo
            for combo in combinations(range(2, self.high + 1), 5)
            if not is_straight(combo)
        ]
        return _best_first(hands, limit)


@dataclass(frozen=True)
class Benchmark(Pattern):
    """``NNNN+`` / ``NNN+``: a draw equal to or better than the benchmark."""

    benchmark: tuple[int, ...]

    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        # A four-card benchmark says nothing about a three-card draw.
        if len(draw) != len(self.benchmark):
            return False
        return is_at_least(draw, self.benchmark)

    def expand(self, limit: int | None = None) -> list[str]:
        hands = [
            combo
            for combo in combinations(_EXPAND_VALUES, len(self.benchmark))
            if is_at_least(combo, self.benchmark)
        ]
        return _best_first(hands, limit)


@dataclass(frozen=True)
class FourCardBenchmark(Benchmark):
    def expand(self, limit: int | None = 15) -> list[str]:
        return super().expand(limit)


@dataclass(frozen=True)
class ThreeCardBenchmark(Benchmark):
    pass


@dataclass(frozen=True)
class BlockerBenchmark(Pattern):
    """``6322+``: both base cards held plus a pair of the low card."""

    base: tuple[int, int]
    pair: int

    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        cards = list(held if held is not None else draw)
        return (
            all(v in cards for v in self.base)
            and cards.count(self.pair) >= 2
        )

    def expand(self, limit: int | None = None) -> list[str]:
        pair = format_values([self.pair])
        return [f"{format_values(self.base)}{pair}({pair})"]


@dataclass(frozen=True)
class Literal(Pattern):
    """An explicit hand.

    Without repeated values the draw must be exactly this value set. With
    a repeated value (``3222``) the held hand needs at least that many
    copies plus the listed kickers. A literal with no values came from a
    malformed string and never matches.
    """

    values: tuple[int, ...] | None = None

    @property
    def is_malformed(self) -> bool:
        return self.values is None

    @property
    def is_paired(self) -> bool:
        return self.values is not None and len(set(self.values)) < len(self.values)

    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        if self.values is None:
            return False
        if self.is_paired:
            have = Counter(held if held is not None else draw)
            return all(have[v] >= n for v, n in Counter(self.values).items())
        return sorted(draw) == sorted(self.values)


def parse_pattern(text: str, strict: bool = False) -> Pattern:
    """Parse one range string into a pattern.

    Raises:
        NotationError: if strict and the string is outside the grammar
    """
    raw = text.strip()

    if raw.lower() == "all":
        return Wildcard(text=raw)

    if m := _THRESHOLD_RE.match(raw):
        return ThresholdHigh(text=raw, high=Rank.from_symbol(m.group(1)).value)

    if m := _FOUR_RE.match(raw):
        values = _values(m.group(1))
        if values[2] == values[3]:
            return BlockerBenchmark(text=raw, base=(values[0], values[1]), pair=values[2])
        return FourCardBenchmark(text=raw, benchmark=tuple(sorted(values)))

    if m := _THREE_RE.match(raw):
        return ThreeCardBenchmark(text=raw, benchmark=tuple(sorted(_values(m.group(1)))))

    if _LITERAL_RE.match(raw):
        return Literal(text=raw, values=_values(raw))

    if strict:
        raise NotationError(f"Unrecognised range notation: {text!r}")
    logger.info("Range notation %r is not recognised and will never match", text)
    return Literal(text=raw)


def parse_patterns(texts: Sequence[str], strict: bool = False) -> tuple[Pattern, ...]:
    return tuple(parse_pattern(t, strict=strict) for t in texts)


def expand(text: str, limit: int | None = None) -> list[str]:
    """Breakdown of a range string into example hands.

    ``limit`` overrides the per-pattern default (10 pat hands, 15
    four-card draws, every three-card draw).
    """
    pattern = parse_pattern(text)
    if limit is None:
        return pattern.expand()
    return pattern.expand(limit)


def _best_first(hands: list[tuple[int, ...]], limit: int | None) -> list[str]:
    ordered = sorted(hands, key=functools.cmp_to_key(compare_lowball))
    if limit is not None:
        ordered = ordered[:limit]
    return [format_values(h) for h in ordered]
