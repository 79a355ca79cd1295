"""Game configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SEVENS_"


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Table settings for one game.

    Attributes:
        player_count: Seats at the table (2-6). Four or more plays with two decks.
        max_score: The game ends after the round in which any score reaches this.
        hand_size: Cards dealt to each seat at the start of a round.
        knock_threshold: Highest unpenalized hand total that may knock.
        claim_window_seconds: How long other seats have to claim a discard.
        bot_delay_seconds: Pause before a bot seat takes its turn.
        seed: Seed for deck shuffles (None for a fresh random game).
    """

    player_count: int = 4
    max_score: int = 250
    hand_size: int = 7
    knock_threshold: int = 5
    claim_window_seconds: float = 10.0
    bot_delay_seconds: float = 1.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if not 2 <= self.player_count <= 6:
            raise ValueError(f"player_count must be between 2 and 6, got {self.player_count}")
        if self.max_score <= 0:
            raise ValueError("max_score must be positive")
        if self.hand_size <= 0:
            raise ValueError("hand_size must be positive")
        if self.knock_threshold < 0:
            raise ValueError("knock_threshold cannot be negative")
        if self.claim_window_seconds < 0 or self.bot_delay_seconds < 0:
            raise ValueError("delays cannot be negative")

    def round_seed(self, round_number: int) -> int | None:
        """Shuffle seed for a given round, derived from the game seed."""
        if self.seed is None:
            return None
        return self.seed * 1000 + round_number

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> GameConfig:
        """Build a config from ``SEVENS_*`` environment variables.

        A ``.env`` file is loaded first if present; real environment
        variables take precedence over it.
        """
        load_dotenv(env_file)

        def _get(name: str, cast, default):
            raw = os.environ.get(f"{ENV_PREFIX}{name}")
            if raw is None or raw == "":
                return default
            return cast(raw)

        defaults = cls()
        return cls(
            player_count=_get("PLAYER_COUNT", int, defaults.player_count),
            max_score=_get("MAX_SCORE", int, defaults.max_score),
            hand_size=_get("HAND_SIZE", int, defaults.hand_size),
            knock_threshold=_get("KNOCK_THRESHOLD", int, defaults.knock_threshold),
            claim_window_seconds=_get(
                "CLAIM_WINDOW_SECONDS", float, defaults.claim_window_seconds
            ),
            bot_delay_seconds=_get("BOT_DELAY_SECONDS", float, defaults.bot_delay_seconds),
            seed=_get("SEED", int, defaults.seed),
        )
