"""Training session state: scoring, mistake tracking and drill replay.

State is an immutable ``TrainerState``; every event is a pure function
taking the old state and returning a new one:

    learning --start_drill--> drill (only with at least one mistake)
    drill --next_hand--> drill (more mistakes left)
    drill --next_hand / exit_drill--> learning (fresh hand dealt)

In learning every wrong answer is recorded as a mistake. In drill mode
answers only update the review stats.

``Trainer`` wraps the transitions with a deck, a classifier and a clock
for interactive use.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Sequence

from .action import ActionType, Classification
from .classifier import HandClassifier
from .deck import Deck
from .hand import Hand
from .position import Position
from .strategy import EffectiveRangeSet

logger = logging.getLogger(__name__)


class Phase(Enum):
    LEARNING = "learning"
    DRILL = "drill"


class InvalidTransitionError(ValueError):
    """An event that is not allowed in the current state."""


@dataclass(frozen=True)
class Deal:
    """A hand put in front of the player, with its answer."""

    hand: Hand
    position: Position
    classification: Classification


@dataclass(frozen=True)
class MistakeRecord:
    """Snapshot of one wrong decision. Never modified after creation."""

    id: str
    hand: Hand
    user_action: ActionType
    correct_action: ActionType
    category: str
    explanation: str
    timestamp: float
    position: Position

    def to_deal(self) -> Deal:
        """Replay this mistake with its recorded answer."""
        return Deal(
            hand=self.hand,
            position=self.position,
            classification=Classification(
                is_playable=self.correct_action is ActionType.RAISE,
                correct_action=self.correct_action,
                category=self.category,
                explanation=self.explanation,
                rule_used="Mistake Review",
            ),
        )


@dataclass(frozen=True)
class Score:
    correct: int = 0
    total: int = 0

    @property
    def percent(self) -> int:
        return round(self.correct / self.total * 100) if self.total else 0

    def add(self, is_correct: bool) -> Score:
        return Score(self.correct + int(is_correct), self.total + 1)

    def __str__(self) -> str:
        return f"{self.correct}/{self.total} ({self.percent}%)"


@dataclass(frozen=True)
class DrillState:
    """Mistake replay progress. Inactive unless a drill is running."""

    is_active: bool = False
    mistake_pool: tuple[MistakeRecord, ...] = ()
    current_index: int = 0
    review: Score = field(default_factory=Score)

    @property
    def current(self) -> MistakeRecord | None:
        if not self.is_active:
            return None
        return self.mistake_pool[self.current_index]

    @property
    def remaining(self) -> int:
        return len(self.mistake_pool) - self.current_index - 1 if self.is_active else 0


@dataclass(frozen=True)
class TrainerState:
    phase: Phase = Phase.LEARNING
    current: Deal | None = None
    player_action: ActionType | None = None
    score: Score = field(default_factory=Score)
    mistakes: tuple[MistakeRecord, ...] = ()
    drill: DrillState = field(default_factory=DrillState)

    @property
    def show_answer(self) -> bool:
        return self.player_action is not None

    @property
    def is_correct(self) -> bool | None:
        if self.current is None or self.player_action is None:
            return None
        return self.player_action is self.current.classification.correct_action


# ── Transitions ─────────────────────────────────────────────


def deal(state: TrainerState, new_deal: Deal) -> TrainerState:
    """Put a fresh hand in front of the player (learning only)."""
    if state.phase is not Phase.LEARNING:
        raise InvalidTransitionError("Cannot deal a fresh hand during a drill")
    return replace(state, current=new_deal, player_action=None)


def submit_action(
    state: TrainerState, action: ActionType, timestamp: float, mistake_id: str | None = None
) -> tuple[TrainerState, MistakeRecord | None]:
    """Answer the current hand.

    Returns the new state and, for a wrong answer while learning, the
    mistake that was recorded.
    """
    if state.current is None:
        raise InvalidTransitionError("No hand has been dealt")
    if state.player_action is not None:
        raise InvalidTransitionError("This hand has already been answered")

    current = state.current
    is_correct = action is current.classification.correct_action

    if state.phase is Phase.DRILL:
        drill = replace(state.drill, review=state.drill.review.add(is_correct))
        return replace(state, player_action=action, drill=drill), None

    mistake = None
    mistakes = state.mistakes
    if not is_correct:
        mistake = MistakeRecord(
            id=mistake_id or f"mistake_{int(timestamp * 1000)}",
            hand=current.hand,
            user_action=action,
            correct_action=current.classification.correct_action,
            category=current.classification.category,
            explanation=current.classification.explanation,
            timestamp=timestamp,
            position=current.position,
        )
        mistakes = (*mistakes, mistake)

    new_state = replace(
        state,
        player_action=action,
        score=state.score.add(is_correct),
        mistakes=mistakes,
    )
    return new_state, mistake


def start_drill(state: TrainerState) -> TrainerState:
    """Begin replaying mistakes. Does nothing without mistakes or mid-drill."""
    if state.phase is Phase.DRILL or not state.mistakes:
        return state
    drill = DrillState(is_active=True, mistake_pool=state.mistakes)
    return replace(
        state,
        phase=Phase.DRILL,
        drill=drill,
        current=drill.mistake_pool[0].to_deal(),
        player_action=None,
    )


def next_hand(state: TrainerState, fresh: Deal) -> TrainerState:
    """Move on after an answer.

    In a drill this loads the next mistake, or ends the drill and shows
    ``fresh`` once the pool is exhausted. In learning it shows ``fresh``.
    """
    if state.phase is Phase.LEARNING:
        return deal(state, fresh)

    drill = state.drill
    if drill.current_index + 1 < len(drill.mistake_pool):
        drill = replace(drill, current_index=drill.current_index + 1)
        return replace(state, drill=drill, current=drill.mistake_pool[drill.current_index].to_deal(),
                       player_action=None)
    return exit_drill(state, fresh)


def exit_drill(state: TrainerState, fresh: Deal) -> TrainerState:
    """Leave drill mode and return to learning with a fresh hand."""
    if state.phase is not Phase.DRILL:
        return state
    return replace(state, phase=Phase.LEARNING, drill=DrillState(), current=fresh, player_action=None)


# ── Session ─────────────────────────────────────────────────


class Trainer:
    """An interactive training session."""

    def __init__(
        self,
        classifier: HandClassifier,
        deck: Deck | None = None,
        positions: Sequence[Position] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.classifier = classifier
        self.deck = deck or Deck()
        self.positions = tuple(positions or classifier.variant.default_positions)
        if not self.positions:
            raise ValueError("At least one dealing position is required")
        self.rng = rng or random.Random()
        self.clock = clock
        self.state = TrainerState()
        self._mistake_seq = 0

    def deal_hand(self) -> Hand:
        return self.deck.deal_hand()

    def classify(self, hand: Hand, position: Position) -> Classification:
        return self.classifier.classify(hand, position)

    def resolve_strategy(self, position: Position) -> EffectiveRangeSet:
        return self.classifier.book.resolve(position)

    def _fresh_deal(self) -> Deal:
        hand = self.deal_hand()
        position = self.rng.choice(self.positions)
        return Deal(hand, position, self.classify(hand, position))

    @property
    def current(self) -> Deal | None:
        return self.state.current

    def start(self) -> Deal:
        """Deal the first hand."""
        self.state = deal(self.state, self._fresh_deal())
        return self.state.current  # type: ignore[return-value]

    def record_action(self, action: ActionType) -> tuple[MistakeRecord | None, Score]:
        """Answer the current hand; returns any new mistake and the score."""
        self._mistake_seq += 1
        now = self.clock()
        self.state, mistake = submit_action(
            self.state, action, now, mistake_id=f"mistake_{int(now * 1000)}_{self._mistake_seq}"
        )
        if mistake is not None:
            logger.debug("Recorded mistake %s (%s)", mistake.id, mistake.category)
        return mistake, self.state.score

    def next_hand(self) -> Deal:
        if not self.state.show_answer:
            raise InvalidTransitionError("Answer the current hand first")
        self.state = next_hand(self.state, self._fresh_deal())
        return self.state.current  # type: ignore[return-value]

    def start_drill(self) -> bool:
        """Start replaying mistakes. Returns False if there are none."""
        self.state = start_drill(self.state)
        return self.state.phase is Phase.DRILL

    def exit_drill(self) -> Deal:
        self.state = exit_drill(self.state, self._fresh_deal())
        return self.state.current  # type: ignore[return-value]
