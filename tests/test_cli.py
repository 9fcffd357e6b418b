"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner
from tripledraw.classifier import HandClassifier
from tripledraw.cli import app
from tripledraw.deck import Deck
from tripledraw.position import Position
from tripledraw.ranges import MULTI_POSITION_STRATEGIES
from tripledraw.strategy import StrategyBook

runner = CliRunner()


class TestClassify:
    def test_pat_hand(self):
        result = runner.invoke(app, ["classify", "8s 6h 5d 3c 2s"])
        assert result.exit_code == 0
        assert "Raise" in result.output
        assert "Pat 8-high" in result.output

    def test_position_and_variant(self):
        result = runner.invoke(app, ["classify", "9s 6h 3d 2c 2s", "--variant", "single"])
        assert result.exit_code == 0
        assert "22 blocker" in result.output

        result = runner.invoke(app, ["classify", "8s 7h 5d 3c Ks", "-P", "HJ"])
        assert "Draw 1 (8753)" in result.output

    def test_fold_shows_minimum(self):
        result = runner.invoke(app, ["classify", "As 9h 7d 6c 5s"])
        assert "Fold" in result.output
        assert "Minimum to open" in result.output

    def test_trace(self):
        result = runner.invoke(app, ["classify", "8s 6h 5d 3c 2s", "--trace"])
        assert "trap-hand" in result.output

    def test_invalid_hand(self):
        result = runner.invoke(app, ["classify", "8s 8s 5d 3c 2s"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_position(self):
        result = runner.invoke(app, ["classify", "8s 6h 5d 3c 2s", "-P", "MP"])
        assert result.exit_code == 1


class TestOtherCommands:
    def test_deal(self):
        result = runner.invoke(app, ["deal", "-n", "3", "-P", "UTG"])
        assert result.exit_code == 0
        assert "Dealt Hands" in result.output

    def test_ranges(self):
        result = runner.invoke(app, ["ranges", "HJ"])
        assert result.exit_code == 0
        assert "8753" in result.output
        assert "inherits from UTG" in result.output

    def test_expand(self):
        result = runner.invoke(app, ["expand", "542+"])
        assert result.exit_code == 0
        assert "432, 532, 542" in result.output

    def test_export(self):
        result = runner.invoke(app, ["export"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [r["position"] for r in data] == ["UTG", "HJ", "CO", "BTN", "SB", "BB"]

    def test_export_to_file(self, tmp_path):
        path = tmp_path / "ranges.json"
        result = runner.invoke(app, ["export", str(path)])
        assert result.exit_code == 0
        assert len(StrategyBook.load(path)) == 6

    def test_check_strategy(self, tmp_path):
        path = tmp_path / "ranges.json"
        StrategyBook(MULTI_POSITION_STRATEGIES).save(path)
        result = runner.invoke(app, ["check-strategy", str(path)])
        assert result.exit_code == 0
        assert "OK: 6 strategies" in result.output

        result = runner.invoke(app, ["check-strategy", str(path), "--strict"])
        assert result.exit_code == 1

    def test_check_strategy_cycle(self, tmp_path):
        path = tmp_path / "ranges.json"
        path.write_text(json.dumps([
            {"position": "UTG", "inheritsFrom": "HJ"},
            {"position": "HJ", "inheritsFrom": "UTG"},
        ]))
        result = runner.invoke(app, ["check-strategy", str(path)])
        assert result.exit_code == 1
        assert "cycle" in result.output

    def test_train_quit(self):
        result = runner.invoke(app, ["train"], input="quit\n")
        assert result.exit_code == 0
        assert "Final score: 0/0 (0%)" in result.output



SEED = 4


@pytest.fixture
def seeded_session(tmp_path, monkeypatch):
    """Deal a known first hand at UTG; returns (right, wrong) answer keys."""
    (tmp_path / "tripledraw.toml").write_text(f'[trainer]\nseed = {SEED}\npositions = ["UTG"]\n')
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("tripledraw.config._config", None)

    first = Deck.from_config(seed=SEED).deal_hand()
    playable = HandClassifier().classify(first, Position.UTG).is_playable
    return ("r", "f") if playable else ("f", "r")


class TestTrain:
    def test_correct_answer(self, seeded_session):
        right, _ = seeded_session
        result = runner.invoke(app, ["train"], input=f"{right}\nquit\n")
        assert result.exit_code == 0
        assert "✓ CORRECT!" in result.output
        assert "INCORRECT" not in result.output
        assert "Final score: 1/1 (100%)" in result.output

    def test_wrong_answer(self, seeded_session):
        _, wrong = seeded_session
        result = runner.invoke(app, ["train"], input=f"{wrong}\nquit\n")
        assert result.exit_code == 0
        assert "✗ INCORRECT" in result.output
        assert "Final score: 0/1 (0%)" in result.output

    def test_drill_then_exit(self, seeded_session):
        right, wrong = seeded_session
        # miss the hand, drill it, answer it right, leave the drill, quit
        result = runner.invoke(app, ["train"], input=f"{wrong}\nd\n{right}\nx\nquit\n")
        assert result.exit_code == 0
        assert "Drill 1/1" in result.output
        assert "✓ CORRECT!" in result.output
        assert "Drill complete: 1/1 correct on review" in result.output
        assert "Final score: 0/1 (0%)" in result.output

    def test_drill_without_mistakes(self, seeded_session):
        right, _ = seeded_session
        result = runner.invoke(app, ["train"], input=f"{right}\nd\nquit\n")
        assert result.exit_code == 0
        assert "No mistakes to review yet." in result.output
        assert "Drill 1/1" not in result.output
