"""Game sessions and headless simulation."""

from simulation.runner import (
    GameResult,
    GameLog,
    GameRunner,
    save_game_log,
    run_batch,
)
from simulation.session import (
    GameSession,
    MoveResult,
    PendingTimer,
    TimerKind,
)

__all__ = [
    # runner
    "GameResult",
    "GameLog",
    "GameRunner",
    "save_game_log",
    "run_batch",
    # session
    "GameSession",
    "MoveResult",
    "PendingTimer",
    "TimerKind",
]
