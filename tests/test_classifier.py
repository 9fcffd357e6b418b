"""Tests for the opening-hand classifier."""

from tripledraw.action import ActionType
from tripledraw.card import cards
from tripledraw.classifier import HandClassifier, Variant, four_best_cards, three_card_draw
from tripledraw.deck import Deck
from tripledraw.hand import Hand
from tripledraw.position import Position
from tripledraw.ranges import DrawCategory, HandRange, PositionStrategy
from tripledraw.strategy import StrategyBook


def hand(s: str) -> Hand:
    return Hand.from_cards(*cards(s))


def book_with(*strategies: PositionStrategy) -> StrategyBook:
    return StrategyBook(strategies)


multi = HandClassifier()
single = HandClassifier(variant=Variant.SINGLE)


class TestDrawExtraction:
    def test_four_best_cards(self):
        assert four_best_cards(hand("Ks 8h 6d 5c 3s")) == (3, 5, 6, 8)
        assert four_best_cards(hand("8s 8h 6d 5c 3s")) == (3, 5, 6, 8)
        assert four_best_cards(hand("8s 8h 6d 6c 3s")) is None

    def test_three_card_draw(self):
        assert three_card_draw(hand("Ks Qh 5d 4c 2s")) == (2, 4, 5)
        assert three_card_draw(hand("Ks Qh 5d 4c 3s")) is None
        assert three_card_draw(hand("2s 2h 2d 2c 9s")) is None


class TestPatHands:
    def test_pat_eight_raises(self):
        result = multi.classify(hand("8s 6h 5d 3c 2s"), Position.UTG)
        assert result.is_playable
        assert result.correct_action == ActionType.RAISE
        assert result.category == "Pat 8-high"
        assert result.rule_used == "Pat (8s+)"
        assert result.benchmark == "8s+"
        assert "Standard range" in result.explanation

    def test_pat_inherited(self):
        result = multi.classify(hand("8s 6h 5d 3c 2s"), Position.HJ)
        assert result.rule_used == "Inherited Pat (8s+)"
        assert "Inherited from parent position" in result.explanation

    def test_pat_literal(self):
        result = multi.classify(hand("9s 6h 5d 4c 3s"), Position.CO)
        assert result.category == "Pat 9-high"
        assert result.rule_used == "CO Pat Specific"

    def test_nine_high_falls_through_to_draw(self):
        result = multi.classify(hand("9s 6h 5d 3c 2s"), Position.UTG)
        assert result.category == "Draw 1 (6532)"

    def test_flush_is_not_pat(self):
        result = multi.classify(hand("8s 6s 5s 3s 2s"), Position.UTG)
        assert result.category == "Draw 1 (6532)"

    def test_wheel_is_never_pat(self):
        permissive = HandClassifier(book_with(
            PositionStrategy(Position.UTG, ranges={DrawCategory.PAT: HandRange.of(["all"])}),
        ))
        result = permissive.classify(hand("As 2d 3h 4c 5s"), Position.UTG)
        assert not result.category.startswith("Pat")
        assert multi.classify(hand("As 2d 3h 4c 5s"), Position.UTG).category == "Draw 1 (5432)"


class TestTrapHand:
    def test_seven_six_five_four_three_folds(self):
        result = multi.classify(hand("7s 6h 5d 4c 3s"), Position.UTG)
        assert result.correct_action == ActionType.FOLD
        assert result.category == "Draw 1 Excluded (7654)"
        assert result.rule_used == "UTG Draw 1 Exclusion"
        assert result.benchmark == "7654 excluded"

    def test_any_fifth_card_folds(self):
        for fifth in ["3s", "4s", "5s", "6s", "7d", "8s", "9s", "Ts", "Js", "Qs", "Ks", "As"]:
            for position in (Position.UTG, Position.HJ):
                result = multi.classify(hand(f"7c 6h 5d 4c {fifth}"), position)
                assert result.correct_action == ActionType.FOLD, fifth
                assert result.category == "Draw 1 Excluded (7654)", fifth

    def test_folds_even_when_draw1_is_wide_open(self):
        result = multi.classify(hand("7s 6h 5d 4c 8s"), Position.BTN)
        assert result.category == "Draw 1 Excluded (7654)"


class TestDrawOne:
    def test_benchmark(self):
        result = multi.classify(hand("Ks 8h 6d 5c 3s"), Position.UTG)
        assert result.is_playable
        assert result.category == "Draw 1 (8653)"
        assert result.rule_used == "Draw 1 (8654+)"

    def test_specific_literal(self):
        result = multi.classify(hand("8s 7h 5d 3c Ks"), Position.HJ)
        assert result.category == "Draw 1 (8753)"
        assert result.explanation == "8753 is specifically included in the HJ range."
        assert result.rule_used == "HJ Draw 1 Specific"

    def test_literal_not_available_earlier(self):
        assert not multi.classify(hand("8s 7h 5d 3c Ks"), Position.UTG).is_playable

    def test_exclusion(self):
        classifier = HandClassifier(book_with(
            PositionStrategy(Position.UTG, ranges={DrawCategory.DRAW1: HandRange.of(["8654+"], ["8653"])}),
        ))
        result = classifier.classify(hand("8s 6h 5d 3c Ks"), Position.UTG)
        assert result.correct_action == ActionType.FOLD
        assert result.category == "Draw 1 Excluded (8653)"
        assert result.rule_used == "UTG Draw 1 Exclusion"
        assert result.benchmark == "8653 excluded"


class TestDrawTwo:
    def test_benchmark(self):
        result = multi.classify(hand("Ks Qh 5d 4c 2s"), Position.UTG)
        assert result.category == "Draw 2 (542)"
        assert result.rule_used == "Draw 2 (542+)"

    def test_second_benchmark(self):
        result = multi.classify(hand("Ks Qh 7d 3c 2s"), Position.UTG)
        assert result.category == "Draw 2 (732)"
        assert result.rule_used == "Draw 2 (752+)"

    def test_first_matching_include_wins(self):
        strategy = PositionStrategy(Position.UTG, ranges={DrawCategory.DRAW2: HandRange.of(["632", "752+"])})
        result = HandClassifier(book_with(strategy)).classify(hand("Ks Qh 6d 3c 2s"), Position.UTG)
        assert result.benchmark == "632"
        assert result.rule_used == "UTG Draw 2 Specific"

        strategy = PositionStrategy(Position.UTG, ranges={DrawCategory.DRAW2: HandRange.of(["752+", "632"])})
        result = HandClassifier(book_with(strategy)).classify(hand("Ks Qh 6d 3c 2s"), Position.UTG)
        assert result.benchmark == "752+"

    def test_parent_entries_win(self):
        classifier = HandClassifier(book_with(
            PositionStrategy(Position.UTG, ranges={DrawCategory.DRAW2: HandRange.of(["752+"])}),
            PositionStrategy(Position.HJ, ranges={DrawCategory.DRAW2: HandRange.of(["632"])},
                             inherits_from=Position.UTG),
        ))
        result = classifier.classify(hand("Ks Qh 6d 3c 2s"), Position.HJ)
        assert result.rule_used == "Inherited Draw 2 (752+)"

    def test_wildcard_inherited_by_blinds(self):
        assert multi.classify(hand("Ks Kh Kd 3c 2s"), Position.BTN).rule_used == "Draw 2 (all)"
        result = multi.classify(hand("Ks Kh Kd 3c 2s"), Position.SB)
        assert result.category == "Draw 2 (K32)"
        assert result.rule_used == "Inherited Draw 2 (all)"

    def test_multi_has_no_blocker_carve_out(self):
        result = multi.classify(hand("9s 6h 3d 2c 2s"), Position.UTG)
        assert result.category == "Draw 2 (632)"
        assert result.rule_used == "Draw 2 (752+)"


class TestFold:
    def test_below_threshold(self):
        result = multi.classify(hand("As 9h 7d 6c 5s"), Position.UTG)
        assert not result.is_playable
        assert result.correct_action == ActionType.FOLD
        assert result.category == "Fold"
        assert result.rule_used == "UTG Minimum Standards"
        assert result.benchmark == "Below UTG threshold"
        assert result.minimum_raise_example == "Pat: 8s+, Draw1: 8654+, Draw2: 542+"

    def test_minimum_example_never_names_an_unchecked_range(self):
        result = multi.classify(hand("Ks 3h 2d 2c 2s"), Position.UTG)
        assert result.category == "Fold"
        assert "Draw3" not in result.minimum_raise_example
        assert "Draw4" not in result.minimum_raise_example

    def test_raise_has_no_minimum_example(self):
        assert multi.classify(hand("8s 6h 5d 3c 2s"), Position.UTG).minimum_raise_example is None

    def test_multi_ignores_draw3(self):
        assert multi.classify(hand("Ks 3h 3d 2c 2s"), Position.UTG).category == "Fold"


class TestSingleVariant:
    def test_blocker_pair_raises(self):
        result = single.classify(hand("9s 6h 3d 2c 2s"), Position.UTG)
        assert result.is_playable
        assert result.category == "Draw 2 (632) with 22 blocker"
        assert result.rule_used == "UTG Blocker Exception (6322)"

    def test_762_blocker_pair(self):
        result = single.classify(hand("Ts 7h 6d 2c 2s"), Position.UTG)
        assert result.category == "Draw 2 (762) with 22 blocker"

    def test_without_blocker_folds(self):
        result = single.classify(hand("Ts 9h 6d 3c 2s"), Position.UTG)
        assert result.correct_action == ActionType.FOLD
        assert result.category == "Draw 2 (632) without blocker"
        assert result.rule_used == "UTG Blocker Requirement"

    def test_low_kicker_is_a_draw_one(self):
        assert single.classify(hand("8s 6h 3d 2c 2s"), Position.UTG).category == "Draw 1 (8632)"

    def test_draw3_blockers(self):
        result = single.classify(hand("Ks 3h 3d 2c 2s"), Position.UTG)
        assert result.is_playable
        assert result.category == "Draw 3 (3322) with blockers"
        assert result.rule_used == "Draw 3 Blockers (3322)"

        result = single.classify(hand("Ks 7h 2d 2c 2s"), Position.UTG)
        assert result.category == "Draw 3 (7222) with blockers"

    def test_draw3_without_match_folds(self):
        assert single.classify(hand("Ks 9h 2d 2c 2s"), Position.UTG).category == "Fold"

    def test_default_table(self):
        assert single.book.positions == [Position.UTG]


class TestTrace:
    def test_rule_order(self):
        names = [name for name, _ in multi.trace(hand("8s 6h 5d 3c 2s"), Position.UTG)]
        assert names == ["pat-hand", "trap-hand", "draw-1", "draw-2"]

        names = [name for name, _ in single.trace(hand("8s 6h 5d 3c 2s"), Position.UTG)]
        assert names == ["pat-hand", "trap-hand", "draw-1", "blocker-632-762", "draw-2", "draw-3-blockers"]

    def test_every_verdict(self):
        verdicts = dict(multi.trace(hand("8s 6h 5d 3c 2s"), Position.UTG))
        assert verdicts["pat-hand"].category == "Pat 8-high"
        assert verdicts["trap-hand"] is None
        assert verdicts["draw-1"].category == "Draw 1 (6532)"


class TestProperties:
    def test_total_over_dealt_hands(self):
        deck = Deck.from_config(seed=11)
        for _ in range(300):
            h = deck.deal_hand()
            for position in Position:
                result = multi.classify(h, position)
                assert result.is_playable == (result.correct_action == ActionType.RAISE)

    def test_later_positions_open_at_least_as_wide(self):
        deck = Deck.from_config(seed=5)
        order = list(Position)
        for _ in range(300):
            h = deck.deal_hand()
            for parent, child in zip(order, order[1:]):
                if multi.classify(h, parent).is_playable:
                    assert multi.classify(h, child).is_playable, (str(h), parent.short)
