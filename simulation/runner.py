"""Headless Sevens games between computer seats.

The runner drives a :class:`~simulation.session.GameSession` with every delay
set to zero, so a whole game plays out synchronously. Results and per-game
logs are plain dataclasses that serialize straight to JSON.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from sevens_engine.config import GameConfig
from sevens_engine.state import TurnPhase, create_initial_state
from simulation.session import GameSession

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from sevens_engine.state import GameState
    from strategies.base import Strategy

DEFAULT_MAX_ROUNDS = 200


@dataclass
class GameResult:
    """Summary of one finished (or abandoned) game."""

    game_id: str
    winner: int | None  # None if the round limit was hit first
    rounds: int
    final_scores: tuple[int, ...]
    player_strategies: tuple[str, ...]
    seed: int | None
    duration_ms: float
    move_count: int


@dataclass
class GameLog:
    """Everything that happened in one game, round by round."""

    game_id: str
    started_at: str
    seed: int | None
    player_strategies: tuple[str, ...]
    moves: list[dict[str, Any]] = field(default_factory=list)
    round_results: list[dict[str, Any]] = field(default_factory=list)
    result: GameResult | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["rounds"] = data.pop("round_results")
        return data


def round_summary(state: GameState) -> dict[str, Any]:
    """JSON-friendly record of the round that just ended."""
    outcome = state.last_round
    return {
        "round": state.round,
        "knocker": outcome.knocker_index if outcome else None,
        "undercut": outcome.undercut if outcome else None,
        "round_points": list(outcome.round_points) if outcome else [],
        "scores": [p.score for p in state.players],
    }


class GameRunner:
    """Plays complete games with one strategy per seat.

    Args:
        strategies: One strategy per seat, in seat order.
        config: Table settings; ``player_count`` must match ``strategies``.
            Claim windows and bot delays are always zeroed.
        max_rounds: Abandon a game that has not ended after this many rounds.
    """

    def __init__(
        self,
        strategies: Sequence[Strategy],
        config: GameConfig | None = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ):
        base = config or GameConfig(player_count=len(strategies))
        if base.player_count != len(strategies):
            raise ValueError(
                f"Config has {base.player_count} seats but {len(strategies)} strategies given"
            )
        self.config = replace(base, claim_window_seconds=0.0, bot_delay_seconds=0.0)
        self.strategies = tuple(strategies)
        self.max_rounds = max_rounds

    @property
    def strategy_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.strategies)

    def new_session(self, seed: int | None = None) -> GameSession:
        """A fresh session for one game, dealt from ``seed``."""
        config = replace(self.config, seed=seed)
        names = [f"{name} {seat}" for seat, name in enumerate(self.strategy_names)]
        return GameSession(state=create_initial_state(config, names=names), strategies=self.strategies)

    def run_game(self, seed: int | None = None) -> tuple[GameResult, GameLog]:
        """Play one game to the end.

        Returns:
            ``(result, log)`` for the game.
        """
        started = time.perf_counter()
        session = self.new_session(seed)
        log = GameLog(
            game_id=session.id,
            started_at=datetime.now().isoformat(),
            seed=seed,
            player_strategies=self.strategy_names,
        )

        while True:
            session.advance()
            if session.state.phase not in (TurnPhase.ROUND_OVER, TurnPhase.GAME_OVER):
                logger.warning(f"Game {session.id} stalled in {session.state.phase.name}")
                break
            log.round_results.append(round_summary(session.state))
            if session.state.is_game_over:
                break
            if len(log.round_results) >= self.max_rounds:
                logger.warning(f"Game {session.id} abandoned after {self.max_rounds} rounds")
                break
            session.start_next_round()

        state = session.state
        log.moves = list(session.move_history)
        log.result = GameResult(
            game_id=session.id,
            winner=state.winner,
            rounds=len(log.round_results),
            final_scores=tuple(p.score for p in state.players),
            player_strategies=log.player_strategies,
            seed=seed,
            duration_ms=(time.perf_counter() - started) * 1000,
            move_count=len(log.moves),
        )
        logger.debug(
            f"Game {session.id}: winner={state.winner}, rounds={log.result.rounds}, "
            f"scores={log.result.final_scores}"
        )
        return log.result, log


def save_game_log(log: GameLog, base_dir: str | Path = "logs/games") -> Path:
    """Write ``log`` as JSON under ``base_dir/<date>/`` and return the path."""
    day_dir = Path(base_dir) / log.started_at[:10]
    day_dir.mkdir(parents=True, exist_ok=True)
    path = day_dir / f"game_{log.game_id}.json"
    path.write_text(json.dumps(log.to_dict(), indent=2))
    return path


def run_batch(
    strategies: Sequence[Strategy],
    num_games: int,
    start_seed: int = 0,
    config: GameConfig | None = None,
) -> list[GameResult]:
    """Play ``num_games`` games with consecutive seeds from ``start_seed``."""
    runner = GameRunner(strategies, config=config)
    results = [runner.run_game(seed=start_seed + i)[0] for i in range(num_games)]
    finished = sum(1 for r in results if r.winner is not None)
    logger.info(f"Batch of {num_games} games done, {finished} finished")
    return results
