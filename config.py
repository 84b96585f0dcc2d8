"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field
from random import Random


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    return int(os.getenv(name, str(default)))


def _parse_seed() -> int | None:
    """Parse BLACKJACK_SEED; unset or empty means unseeded."""
    seed = os.getenv("BLACKJACK_SEED", "").strip()
    return int(seed) if seed else None


@dataclass(frozen=True)
class TableConfig:
    """Default table configuration."""

    num_players: int = field(default_factory=lambda: _env_int("BLACKJACK_PLAYERS", 1))
    num_decks: int = field(default_factory=lambda: _env_int("BLACKJACK_DECKS", 6))
    table_min: int = field(default_factory=lambda: _env_int("BLACKJACK_TABLE_MIN", 10))
    table_max: int = field(default_factory=lambda: _env_int("BLACKJACK_TABLE_MAX", 10000))
    starting_wealth: int = field(
        default_factory=lambda: _env_int("BLACKJACK_STARTING_WEALTH", 500)
    )

    @property
    def wallets(self) -> list[int]:
        """Starting wealth for every seat."""
        return [self.starting_wealth] * self.num_players


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "").upper())
    seed: int | None = field(default_factory=_parse_seed)

    table: TableConfig = field(default_factory=TableConfig)

    @property
    def effective_log_level(self) -> str:
        """LOG_LEVEL if set, otherwise DEBUG in debug mode and INFO elsewhere."""
        if self.log_level:
            return self.log_level
        return "DEBUG" if self.debug else "INFO"

    def make_rng(self) -> Random:
        """Create the random source for a game, seeded when a seed is configured."""
        return Random(self.seed)


def configure_logging(app_config: AppConfig | None = None) -> None:
    """Set up root logging for a host application; the engine never calls this."""
    app_config = app_config or config
    logging.basicConfig(
        level=app_config.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global configuration instance
config = AppConfig()
