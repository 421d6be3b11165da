"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

from blackjack.rng import FIXED_SEED
from blackjack.rules import MIN_BET, STARTING_BANK, RuleSet


def _env_flag(name: str, default: str = "0") -> bool:
    """Parse a boolean environment variable ("1"/"true"/"yes" are true)."""
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class GameConfig:
    """Table and shoe configuration."""

    starting_bank: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_BANK", str(STARTING_BANK)))
    )
    min_bet: int = MIN_BET
    seeded: bool = field(default_factory=lambda: os.getenv("BLACKJACK_SEEDED") == "1")
    seed: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_SEED", str(FIXED_SEED)))
    )
    shoe_file: str | None = field(
        default_factory=lambda: os.getenv("BLACKJACK_SHOE_FILE") or None
    )
    reshuffle_each_round: bool = field(
        default_factory=lambda: _env_flag("BLACKJACK_RESHUFFLE")
    )

    def rules(self) -> RuleSet:
        """Build the rule set for a game."""
        return RuleSet(
            min_bet=self.min_bet,
            starting_bank=self.starting_bank,
            reshuffle_each_round=self.reshuffle_each_round,
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()
