"""Application configuration for tripledraw."""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from .classifier import HandClassifier, Variant
from .deck import TRAINING_RANKS, Deck, parse_rank_universe
from .position import Position
from .strategy import StrategyBook


@dataclass
class TrainerConfig:
    """What gets dealt and which classifier judges it."""

    variant: Variant = Variant.MULTI
    ranks: str = TRAINING_RANKS
    positions: tuple[Position, ...] = ()
    seed: int | None = None

    @property
    def dealing_positions(self) -> tuple[Position, ...]:
        return self.positions or self.variant.default_positions


@dataclass
class StrategyConfig:
    """Where opening ranges come from."""

    file: Path | None = None
    strict_notation: bool = False


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class Config:
    """Application configuration."""

    trainer: TrainerConfig = field(default_factory=TrainerConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls) -> Self:
        """Load config from file, falling back to defaults."""
        config_paths = [
            Path.cwd() / "tripledraw.toml",
            Path.cwd() / ".tripledraw.toml",
            Path.home() / ".config" / "tripledraw" / "config.toml",
            Path.home() / ".tripledraw.toml",
        ]

        for path in config_paths:
            if path.exists():
                return cls._from_file(path)

        return cls()

    @classmethod
    def _from_file(cls, path: Path) -> Self:
        """Load config from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data, base_dir=path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_dir: Path | None = None) -> Self:
        """Build config from parsed TOML data.

        Raises:
            ValueError: on an unknown variant, position or rank
        """
        trainer_data = data.get("trainer", {})
        try:
            variant = Variant(trainer_data.get("variant", Variant.MULTI.value))
        except ValueError:
            raise ValueError(f"Unknown variant: {trainer_data.get('variant')!r}") from None
        ranks = trainer_data.get("ranks", TRAINING_RANKS)
        parse_rank_universe(ranks)
        trainer = TrainerConfig(
            variant=variant,
            ranks=ranks,
            positions=tuple(Position.from_str(p) for p in trainer_data.get("positions", [])),
            seed=trainer_data.get("seed"),
        )

        strategy_data = data.get("strategy", {})
        file = strategy_data.get("file")
        if file is not None:
            file = Path(file).expanduser()
            if base_dir is not None and not file.is_absolute():
                file = base_dir / file
        strategy = StrategyConfig(
            file=file,
            strict_notation=strategy_data.get("strict_notation", False),
        )

        log_data = data.get("logging", {})
        log = LoggingConfig(level=str(log_data.get("level", "WARNING")).upper())

        return cls(trainer=trainer, strategy=strategy, logging=log)

    @property
    def log_level(self) -> int:
        return logging.getLevelNamesMapping().get(self.logging.level, logging.WARNING)

    def build_book(self) -> StrategyBook:
        """Strategies from the configured file, or the variant's defaults."""
        if self.strategy.file is not None:
            return StrategyBook.load(self.strategy.file, strict=self.strategy.strict_notation)
        return StrategyBook(self.trainer.variant.default_strategies, strict=self.strategy.strict_notation)

    def build_classifier(self) -> HandClassifier:
        return HandClassifier(self.build_book(), variant=self.trainer.variant)

    def build_deck(self) -> Deck:
        return Deck.from_config(self.trainer.ranks, seed=self.trainer.seed)


# Global config instance (loaded lazily)
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config
