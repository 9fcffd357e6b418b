"""Tripledraw - Opening-hand trainer for 2-7 triple draw lowball."""

__version__ = "0.1.0"

from .action import ActionType, Classification
from .card import Card, Rank, Suit, card, cards
from .classifier import HandClassifier, Variant
from .deck import Deck
from .drill import DrillState, MistakeRecord, Phase, Score, Trainer, TrainerState
from .evaluator import compare_lowball
from .hand import Hand, is_straight
from .notation import NotationError, Pattern, expand, parse_pattern
from .position import Position
from .ranges import DrawCategory, HandRange, PositionStrategy
from .strategy import (
    EffectiveRangeSet,
    InheritanceCycleError,
    StrategyBook,
    StrategyError,
    StrategyImportError,
    UnknownPositionError,
)

__all__ = [
    "ActionType",
    "Card",
    "Classification",
    "Deck",
    "DrawCategory",
    "DrillState",
    "EffectiveRangeSet",
    "Hand",
    "HandClassifier",
    "HandRange",
    "InheritanceCycleError",
    "MistakeRecord",
    "NotationError",
    "Pattern",
    "Phase",
    "Position",
    "PositionStrategy",
    "Rank",
    "Score",
    "StrategyBook",
    "StrategyError",
    "StrategyImportError",
    "Suit",
    "Trainer",
    "TrainerState",
    "UnknownPositionError",
    "Variant",
    "card",
    "cards",
    "compare_lowball",
    "expand",
    "is_straight",
    "parse_pattern",
]
