"""Environment-driven settings for applications embedding Tic-Tac-Time."""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import Mapping, Optional

from .ai import AIPlayer, Difficulty
from .game import Player

ENV_PREFIX = "TICTACTIME_"


@dataclass(frozen=True)
class Settings:
    difficulty: Difficulty = Difficulty.MEDIUM
    ai_seed: Optional[int] = None
    search_deadline_ms: Optional[float] = None
    log_level: str = "WARNING"

    def make_ai(self, player: Player = "O") -> AIPlayer:
        """Build the computer opponent these settings describe."""

        return AIPlayer(
            player=player,
            difficulty=self.difficulty,
            rng=random.Random(self.ai_seed),
            deadline_ms=self.search_deadline_ms,
        )


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(ENV_PREFIX + name, "").strip()
    return value or None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read ``TICTACTIME_*`` variables, falling back to defaults when unset."""

    env = os.environ if environ is None else environ

    raw_difficulty = _get(env, "DIFFICULTY")
    try:
        difficulty = (
            Difficulty(raw_difficulty.lower()) if raw_difficulty else Difficulty.MEDIUM
        )
    except ValueError as exc:
        raise ValueError(
            f"Unsupported difficulty {raw_difficulty!r}. "
            f"Choose one of {', '.join(d.value for d in Difficulty)}."
        ) from exc

    raw_seed = _get(env, "AI_SEED")
    seed = int(raw_seed) if raw_seed is not None else None

    raw_deadline = _get(env, "SEARCH_DEADLINE_MS")
    deadline = float(raw_deadline) if raw_deadline is not None else None
    if deadline is not None and deadline <= 0:
        raise ValueError(f"Search deadline must be positive, got {deadline}")

    log_level = (_get(env, "LOG_LEVEL") or "WARNING").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown log level {log_level!r}")

    return Settings(
        difficulty=difficulty,
        ai_seed=seed,
        search_deadline_ms=deadline,
        log_level=log_level,
    )


def configure_logging(settings: Settings) -> None:
    """Apply the configured level to the package logger."""

    logging.getLogger("tictactime").setLevel(settings.log_level)
