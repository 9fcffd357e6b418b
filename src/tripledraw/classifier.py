"""Opening-hand classifier for 2-7 triple draw.

A hand is run through an ordered chain of named rules; the first rule
that returns a result decides. The chain order is part of the contract:

    1. pat-hand          pat hand inside the pat range
    2. trap-hand         7-6-5-4 draws always fold
    3. draw-1            best four cards against the draw 1 range
    4. blocker-632-762   632/762 with a high kicker needs a pair of 2s
    5. draw-2            2 plus the two lowest others against draw 2
    6. draw-3-blockers   paired low cards against the draw 3 range
    7. (fold)            nothing matched

Rules 4 and 6 only run for the single-position variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .action import ActionType, Classification
from .card import value_symbol
from .hand import Hand, format_values, is_straight
from .notation import Literal
from .position import Position
from .ranges import MULTI_POSITION_STRATEGIES, SINGLE_POSITION_STRATEGIES, DrawCategory, PositionStrategy
from .strategy import EffectiveRangeSet, RangeEntry, StrategyBook

TRAP_DRAW = (4, 5, 6, 7)
TRAP_STRAIGHT = (3, 4, 5, 6, 7)


@dataclass(frozen=True)
class _Context:
    hand: Hand
    position: Position
    ranges: EffectiveRangeSet

    def inherited(self, entry: RangeEntry) -> bool:
        return entry.source != self.position

    def raise_(self, category: DrawCategory, label: str, entry: RangeEntry) -> Classification:
        inherited = self.inherited(entry)
        if isinstance(entry.pattern, Literal) and not entry.pattern.is_paired:
            explanation = f"{entry.text} is specifically included in the {entry.source.short} range."
            rule = f"{entry.source.short} {category.label} Specific"
        else:
            origin = "Inherited from parent position." if inherited else "Standard range."
            explanation = f"This {category.label.lower()} meets the {entry.text} requirement. {origin}"
            rule = f"{'Inherited ' if inherited else ''}{category.label} ({entry.text})"
        return Classification(
            is_playable=True,
            correct_action=ActionType.RAISE,
            category=label,
            explanation=explanation,
            rule_used=rule,
            benchmark=entry.text,
        )

    def fold(self, category: str, explanation: str, rule: str, benchmark: str) -> Classification:
        return Classification(
            is_playable=False,
            correct_action=ActionType.FOLD,
            category=category,
            explanation=explanation,
            rule_used=rule,
            benchmark=benchmark,
            minimum_raise_example=self.ranges.minimum_raise_example(),
        )

    def excluded(self, category: DrawCategory, draw: str, entry: RangeEntry) -> Classification:
        return self.fold(
            f"{category.label} Excluded ({draw})",
            f"{draw} is specifically excluded from the {category.label} range.",
            f"{entry.source.short} {category.label} Exclusion",
            f"{entry.text} excluded",
        )


@dataclass(frozen=True)
class Rule:
    """A named step in the classification chain."""

    name: str
    check: Callable[[_Context], Classification | None]


def four_best_cards(hand: Hand) -> tuple[int, ...] | None:
    """The four-card draw: the four distinct values, or the lowest four of five."""
    distinct = hand.distinct_values
    if len(distinct) == 4:
        four = distinct
    elif len(distinct) == 5:
        four = distinct[:4]
    else:
        return None
    if is_straight(four):
        return None
    return four


def three_card_draw(hand: Hand) -> tuple[int, ...] | None:
    """The draw 2 candidate: a 2 with the two lowest other distinct values."""
    if 2 not in hand.values:
        return None
    others = [v for v in hand.distinct_values if v != 2]
    if len(others) < 2:
        return None
    return (2, others[0], others[1])


# ── Rules ───────────────────────────────────────────────────


def _pat_hand(ctx: _Context) -> Classification | None:
    hand = ctx.hand
    if not hand.is_pat_eligible:
        return None
    pat = ctx.ranges[DrawCategory.PAT]
    if entry := pat.first_exclude(hand.values):
        return ctx.excluded(DrawCategory.PAT, format_values(hand.values), entry)
    if entry := pat.first_include(hand.values):
        return ctx.raise_(DrawCategory.PAT, f"Pat {value_symbol(hand.high_card)}-high", entry)
    return None


def _trap_hand(ctx: _Context) -> Classification | None:
    hand = ctx.hand
    if hand.distinct_values[:4] != TRAP_DRAW and hand.values != TRAP_STRAIGHT:
        return None
    return ctx.fold(
        "Draw 1 Excluded (7654)",
        "7654 is a trap draw: a 3 makes a straight, so it folds whatever the fifth card.",
        f"{ctx.position.short} Draw 1 Exclusion",
        "7654 excluded",
    )


def _draw_one(ctx: _Context) -> Classification | None:
    four = four_best_cards(ctx.hand)
    if four is None:
        return None
    draw1 = ctx.ranges[DrawCategory.DRAW1]
    label = format_values(four)
    if entry := draw1.first_exclude(four, ctx.hand.values):
        return ctx.excluded(DrawCategory.DRAW1, label, entry)
    if entry := draw1.first_include(four, ctx.hand.values):
        return ctx.raise_(DrawCategory.DRAW1, f"Draw 1 ({label})", entry)
    return None


def _blocker_pair(ctx: _Context) -> Classification | None:
    hand = ctx.hand
    held = set(hand.values)
    if hand.high_card <= 8:
        return None
    if {6, 3, 2} <= held:
        shape = "632"
    elif {7, 6, 2} <= held:
        shape = "762"
    else:
        return None

    if hand.count(2) >= 2:
        return Classification(
            is_playable=True,
            correct_action=ActionType.RAISE,
            category=f"Draw 2 ({shape}) with 22 blocker",
            explanation=(
                f"{shape} with a {value_symbol(hand.high_card)} kicker opens only because "
                "the pair of 2s blocks the best draws."
            ),
            rule_used=f"{ctx.position.short} Blocker Exception ({shape[:2]}22)",
            benchmark=f"{shape[:2]}22+",
        )
    return ctx.fold(
        f"Draw 2 ({shape}) without blocker",
        f"{shape} with a {value_symbol(hand.high_card)} kicker needs a pair of 2s to open.",
        f"{ctx.position.short} Blocker Requirement",
        f"{shape[:2]}22+",
    )


def _draw_two(ctx: _Context) -> Classification | None:
    three = three_card_draw(ctx.hand)
    if three is None:
        return None
    draw2 = ctx.ranges[DrawCategory.DRAW2]
    label = format_values(three)
    if entry := draw2.first_exclude(three, ctx.hand.values):
        return ctx.excluded(DrawCategory.DRAW2, label, entry)
    if entry := draw2.first_include(three, ctx.hand.values):
        return ctx.raise_(DrawCategory.DRAW2, f"Draw 2 ({label})", entry)
    return None


def _draw_three_blockers(ctx: _Context) -> Classification | None:
    hand = ctx.hand
    two = hand.distinct_values[:2]
    draw3 = ctx.ranges[DrawCategory.DRAW3]
    if entry := draw3.first_exclude(two, hand.values):
        return ctx.excluded(DrawCategory.DRAW3, format_values(two), entry)
    entry = draw3.first_include(two, hand.values)
    if entry is None:
        return None
    return Classification(
        is_playable=True,
        correct_action=ActionType.RAISE,
        category=f"Draw 3 ({entry.text}) with blockers",
        explanation=(
            f"The draw itself is weak, but holding {entry.text} removes the low cards "
            "opponents need."
        ),
        rule_used=f"{'Inherited ' if ctx.inherited(entry) else ''}Draw 3 Blockers ({entry.text})",
        benchmark=entry.text,
    )


PAT_HAND = Rule("pat-hand", _pat_hand)
TRAP_HAND = Rule("trap-hand", _trap_hand)
DRAW_ONE = Rule("draw-1", _draw_one)
BLOCKER_PAIR = Rule("blocker-632-762", _blocker_pair)
DRAW_TWO = Rule("draw-2", _draw_two)
DRAW_THREE_BLOCKERS = Rule("draw-3-blockers", _draw_three_blockers)


class Variant(Enum):
    """Which trainer the classifier serves."""

    MULTI = "multi"
    SINGLE = "single"

    @property
    def rules(self) -> tuple[Rule, ...]:
        if self is Variant.SINGLE:
            return (PAT_HAND, TRAP_HAND, DRAW_ONE, BLOCKER_PAIR, DRAW_TWO, DRAW_THREE_BLOCKERS)
        return (PAT_HAND, TRAP_HAND, DRAW_ONE, DRAW_TWO)

    @property
    def default_strategies(self) -> tuple[PositionStrategy, ...]:
        if self is Variant.SINGLE:
            return SINGLE_POSITION_STRATEGIES
        return MULTI_POSITION_STRATEGIES

    @property
    def default_positions(self) -> tuple[Position, ...]:
        if self is Variant.SINGLE:
            return (Position.UTG,)
        return (Position.UTG, Position.HJ)


class HandClassifier:
    """Decides raise or fold for a dealt hand at a position."""

    def __init__(self, book: StrategyBook | None = None, variant: Variant = Variant.MULTI) -> None:
        self.variant = variant
        self.book = book if book is not None else StrategyBook(variant.default_strategies)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self.variant.rules

    def classify(self, hand: Hand, position: Position) -> Classification:
        """Run the rule chain; the first rule with a result wins."""
        ctx = _Context(hand, position, self.book.resolve(position))
        for rule in self.rules:
            result = rule.check(ctx)
            if result is not None:
                return result
        return ctx.fold(
            "Fold",
            f"This hand does not meet the minimum requirements for {position.short}.",
            f"{position.short} Minimum Standards",
            f"Below {position.short} threshold",
        )

    def trace(self, hand: Hand, position: Position) -> list[tuple[str, Classification | None]]:
        """Every rule's verdict in chain order, without short-circuiting."""
        ctx = _Context(hand, position, self.book.resolve(position))
        return [(rule.name, rule.check(ctx)) for rule in self.rules]
