"""Position strategy store and inheritance resolver.

A ``StrategyBook`` holds one ``PositionStrategy`` per position. Range
strings are parsed once when the book is built; resolving a position
walks its parent chain root-first and concatenates each category's
entries, so ancestor patterns are always tried before the child's own.
Resolved ranges are memoized until the book changes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from .notation import Pattern, parse_patterns
from .position import Position
from .ranges import DrawCategory, HandRange, PositionStrategy

logger = logging.getLogger(__name__)


class StrategyError(ValueError):
    """Invalid strategy configuration."""


class UnknownPositionError(StrategyError):
    """A position (or parent reference) with no strategy record."""


class InheritanceCycleError(StrategyError):
    """The inheritsFrom chain loops back on itself."""


class StrategyImportError(StrategyError):
    """A persisted strategy payload could not be loaded."""


# Categories quoted back to the player as the minimum to open.
OPENING_CATEGORIES = (DrawCategory.PAT, DrawCategory.DRAW1, DrawCategory.DRAW2)


@dataclass(frozen=True)
class RangeEntry:
    """A parsed pattern and the position that declared it."""

    pattern: Pattern
    source: Position

    @property
    def text(self) -> str:
        return self.pattern.text

    def matches(self, draw: Sequence[int], held: Sequence[int] | None = None) -> bool:
        return self.pattern.matches(draw, held)


@dataclass(frozen=True)
class EffectiveRange:
    """A category's merged range: ancestors' entries first, own last."""

    includes: tuple[RangeEntry, ...] = ()
    excludes: tuple[RangeEntry, ...] = ()

    def first_include(self, draw: Sequence[int], held: Sequence[int] | None = None) -> RangeEntry | None:
        """The first include that matches, in declared order."""
        return next((e for e in self.includes if e.matches(draw, held)), None)

    def first_exclude(self, draw: Sequence[int], held: Sequence[int] | None = None) -> RangeEntry | None:
        return next((e for e in self.excludes if e.matches(draw, held)), None)

    def as_hand_range(self) -> HandRange:
        return HandRange(
            tuple(e.text for e in self.includes),
            tuple(e.text for e in self.excludes),
        )


@dataclass(frozen=True)
class EffectiveRangeSet:
    """Every category's effective range for one position."""

    position: Position
    chain: tuple[Position, ...]  # root first, ends with position
    ranges: dict[DrawCategory, EffectiveRange]

    def __getitem__(self, category: DrawCategory) -> EffectiveRange:
        return self.ranges[category]

    def minimum_raise_example(self) -> str:
        """First declared include of the pat, draw 1 and draw 2 ranges.

        e.g. 'Pat: 8s+, Draw1: 8654+, Draw2: 542+'.
        """
        examples = [
            f"{cat.short}: {self.ranges[cat].includes[0].text}"
            for cat in OPENING_CATEGORIES
            if self.ranges[cat].includes
        ]
        return ", ".join(examples) or "Minimum playable hand for this position"

_Compiled = dict[DrawCategory, tuple[tuple[Pattern, ...], tuple[Pattern, ...]]]


class StrategyBook:
    """Per-position range declarations with memoized inheritance."""

    def __init__(self, strategies: Iterable[PositionStrategy], strict: bool = False) -> None:
        self.strict = strict
        self._strategies: dict[Position, PositionStrategy] = {}
        self._compiled: dict[Position, _Compiled] = {}
        self._cache: dict[Position, EffectiveRangeSet] = {}
        self._load(list(strategies))

    def _load(self, strategies: list[PositionStrategy]) -> None:
        """Validate and compile a full strategy set, then swap it in."""
        table: dict[Position, PositionStrategy] = {}
        for strategy in strategies:
            if strategy.position in table:
                raise StrategyError(f"Duplicate strategy for {strategy.position.short}")
            table[strategy.position] = strategy

        for strategy in table.values():
            parent = strategy.inherits_from
            if parent is not None and parent not in table:
                raise UnknownPositionError(
                    f"{strategy.position.short} inherits from {parent.short}, which has no strategy"
                )
        for position in table:
            _walk_chain(table, position)

        compiled = {
            position: {
                cat: (
                    parse_patterns(strategy.range_for(cat).includes, strict=self.strict),
                    parse_patterns(strategy.range_for(cat).excludes, strict=self.strict),
                )
                for cat in DrawCategory
            }
            for position, strategy in table.items()
        }

        self._strategies = table
        self._compiled = compiled
        self.invalidate()

    # ── Store ───────────────────────────────────────────────

    @property
    def positions(self) -> list[Position]:
        return sorted(self._strategies)

    def get(self, position: Position) -> PositionStrategy:
        try:
            return self._strategies[position]
        except KeyError:
            raise UnknownPositionError(f"No strategy for {position.short}") from None

    def update(self, strategy: PositionStrategy) -> None:
        """Add or replace one position's strategy.

        The whole set is revalidated first; on error nothing changes.
        """
        others = [s for p, s in self._strategies.items() if p != strategy.position]
        self._load([*others, strategy])

    def replace_all(self, strategies: Iterable[PositionStrategy]) -> None:
        self._load(list(strategies))

    def invalidate(self) -> None:
        if self._cache:
            logger.debug("Dropping %d resolved strategies", len(self._cache))
        self._cache.clear()

    def __contains__(self, position: object) -> bool:
        return position in self._strategies

    def __iter__(self) -> Iterator[PositionStrategy]:
        return iter(self._strategies[p] for p in self.positions)

    def __len__(self) -> int:
        return len(self._strategies)

    # ── Resolver ────────────────────────────────────────────

    def chain(self, position: Position) -> tuple[Position, ...]:
        """Inheritance chain for a position, root first.

        Raises:
            UnknownPositionError: if a position in the chain has no strategy
            InheritanceCycleError: if the chain does not terminate
        """
        return _walk_chain(self._strategies, position)

    def resolve(self, position: Position) -> EffectiveRangeSet:
        """Effective ranges for a position, merged along its parent chain."""
        cached = self._cache.get(position)
        if cached is not None:
            return cached

        chain = self.chain(position)
        ranges = {}
        for cat in DrawCategory:
            includes: list[RangeEntry] = []
            excludes: list[RangeEntry] = []
            for source in chain:
                own_includes, own_excludes = self._compiled[source][cat]
                includes.extend(RangeEntry(p, source) for p in own_includes)
                excludes.extend(RangeEntry(p, source) for p in own_excludes)
            ranges[cat] = EffectiveRange(tuple(includes), tuple(excludes))

        resolved = EffectiveRangeSet(position=position, chain=chain, ranges=ranges)
        self._cache[position] = resolved
        logger.debug("Resolved %s via %s", position, " <- ".join(p.short for p in chain))
        return resolved

    # ── Persistence ─────────────────────────────────────────

    def to_json(self) -> str:
        return json.dumps([s.to_data() for s in self], indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str, strict: bool = False) -> StrategyBook:
        """Build a book from a persisted JSON array of strategy records.

        Raises:
            StrategyImportError: on any malformed or inconsistent payload
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise StrategyImportError(f"Invalid strategy JSON: {e}") from e
        if not isinstance(payload, list):
            raise StrategyImportError("Strategy JSON must be an array of position records")

        try:
            return cls([PositionStrategy.from_data(item) for item in payload], strict=strict)
        except StrategyImportError:
            raise
        except ValueError as e:
            raise StrategyImportError(f"Invalid strategy: {e}") from e

    def import_json(self, text: str) -> None:
        """Replace every strategy from JSON; on failure keep the current set."""
        imported = StrategyBook.from_json(text, strict=self.strict)
        self._load(list(imported))
        logger.info("Imported strategies for %s", ", ".join(p.short for p in self.positions))

    @classmethod
    def load(cls, path: Path, strict: bool = False) -> StrategyBook:
        return cls.from_json(path.read_text(encoding="utf-8"), strict=strict)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json() + "\n", encoding="utf-8")


def _walk_chain(
    table: dict[Position, PositionStrategy], position: Position
) -> tuple[Position, ...]:
    """Follow inheritsFrom links to the root; at most len(table) steps."""
    chain: list[Position] = []
    current: Position | None = position
    while current is not None:
        if current not in table:
            raise UnknownPositionError(f"No strategy for {current.short}")
        if current in chain or len(chain) >= len(table):
            loop = " -> ".join(p.short for p in [*chain, current])
            raise InheritanceCycleError(f"Inheritance cycle: {loop}")
        chain.append(current)
        current = table[current].inherits_from
    chain.reverse()
    return tuple(chain)
