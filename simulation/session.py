"""Live game session: the one mutable handle on a game.

A session owns the current immutable ``GameState`` and replaces it wholesale
on every accepted move. Time is advanced explicitly with :meth:`tick`, which
drives the two kinds of delay the game has: the claim window after a discard
and the pause before a computer seat plays. Only one of them is ever pending.

A discard is offered to the seats that can claim it in turn order after the
discarder. Computer seats answer at once; the offer stops at the first person,
whose window must be passed (or run out) before later seats are asked.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

from sevens_engine.errors import IllegalMoveError
from sevens_engine.executor import execute_move
from sevens_engine.move_generator import claim_candidates, generate_legal_moves
from sevens_engine.moves import Discard, Draw, Knock, PassClaim, StartNextRound
from sevens_engine.state import TurnPhase

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from sevens_engine.moves import Move
    from sevens_engine.state import GameState
    from strategies.base import Strategy
    from strategies.llm.advisor import StrategyAdvisor


class TimerKind(str, Enum):
    """What a pending delay is waiting for."""
    CLAIM_WINDOW = "claim_window"
    BOT_TURN = "bot_turn"


@dataclass
class PendingTimer:
    """The single outstanding delay.

    Attributes:
        kind: What happens when it expires.
        remaining: Seconds left.
        card_id: For claim windows, the discard the window belongs to.
    """
    kind: TimerKind
    remaining: float
    card_id: str | None = None


@dataclass
class MoveResult:
    """Outcome of a submitted move."""
    accepted: bool
    message: str
    state: GameState


@dataclass
class GameSession:
    """An active game.

    Args:
        state: Starting state.
        strategies: One entry per seat; None marks a human seat.
        advisor: Optional hint service for human seats.
    """

    state: GameState
    strategies: Sequence[Strategy | None]
    advisor: StrategyAdvisor | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)
    move_history: list[dict[str, Any]] = field(default_factory=list)
    timer: PendingTimer | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _claim_queue: list[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if len(self.strategies) != self.state.player_count:
            raise ValueError(
                f"Expected {self.state.player_count} strategies, got {len(self.strategies)}"
            )
        self._schedule()

    # --- Queries ---

    def is_human(self, seat: int) -> bool:
        return self.strategies[seat] is None

    @property
    def is_human_turn(self) -> bool:
        """Whether the game is waiting on a person in ACTION or DISCARD."""
        return (
            self.state.phase in (TurnPhase.ACTION, TurnPhase.DISCARD)
            and self.is_human(self.state.current_player_index)
        )

    @property
    def legal_moves(self) -> list[Move]:
        return generate_legal_moves(self.state)

    @property
    def claim_seconds_left(self) -> float | None:
        """Countdown for the open claim window, if any."""
        if self.timer is not None and self.timer.kind == TimerKind.CLAIM_WINDOW:
            return self.timer.remaining
        return None

    # --- Transitions ---

    def submit(self, move: Move) -> MoveResult:
        """Apply a move from a person. Illegal moves are rejected, not raised."""
        with self._lock:
            if isinstance(move, PassClaim):
                if self.pass_claim(move.card_id):
                    return MoveResult(accepted=True, message=str(move), state=self.state)
                return MoveResult(
                    accepted=False, message="No open claim window for that card", state=self.state
                )
            try:
                new_state = execute_move(self.state, move)
            except IllegalMoveError as e:
                logger.warning(f"Rejected {move}: {e}")
                return MoveResult(accepted=False, message=str(e), state=self.state)

            self._commit(new_state, [move])
            return MoveResult(accepted=True, message=str(move), state=self.state)

    def pass_claim(self, card_id: str | None = None) -> bool:
        """Decline the discard ``card_id`` (the open one by default).

        Seats after the passing person are then offered the card; the
        discard is dropped once nobody is left to ask.

        Returns:
            False if that window was already closed, so a manual pass and
            the countdown expiring can race harmlessly.
        """
        with self._lock:
            pending = self.state.pending_claim
            if self.state.phase != TurnPhase.PENDING_CLAIM or pending is None:
                return False
            if card_id is not None and card_id != pending.card.id:
                return False
            self.timer = None
            self._offer_claim()
            return True

    def start_next_round(self) -> MoveResult:
        return self.submit(StartNextRound())

    def tick(self, seconds: float) -> None:
        """Let ``seconds`` pass, firing the pending delay if it runs out."""
        with self._lock:
            left = seconds
            while self.timer is not None and self.timer.remaining <= left:
                left -= self.timer.remaining
                self._fire()
            if self.timer is not None:
                self.timer.remaining -= left

    def step(self) -> bool:
        """Fire the pending delay now. Returns False if nothing was pending."""
        with self._lock:
            if self.timer is None:
                return False
            self._fire()
            return True

    def advance(self) -> None:
        """Fire pending delays immediately until a person must act or the round ends.

        A person's open claim window counts as having to act, so it is left
        running rather than passed.
        """
        with self._lock:
            while self.timer is not None and self.timer.kind != TimerKind.CLAIM_WINDOW:
                self._fire()

    def request_hint(self, seat: int) -> str:
        """Ask the advisor for a hint for ``seat``. Never affects the game."""
        from strategies.llm.advisor import UNAVAILABLE_MESSAGE

        if self.advisor is None:
            return UNAVAILABLE_MESSAGE
        return self.advisor.suggest(self.state, seat)

    # --- Internals ---

    def _commit(self, new_state: GameState, moves: Sequence[Move]) -> None:
        actor = self.state.current_player_index
        for move in moves:
            self.move_history.append(
                {
                    "round": self.state.round,
                    "player": getattr(move, "player", actor),
                    "move": str(move),
                    "move_type": move.move_type.name,
                    "timestamp": datetime.now().isoformat(),
                }
            )
        self.state = new_state
        self.timer = None
        self._schedule()

    def _schedule(self) -> None:
        """Set up whatever delay the new state calls for."""
        state = self.state
        config = state.config

        if state.phase == TurnPhase.PENDING_CLAIM and state.pending_claim is not None:
            self._open_claim_window()
        elif state.phase == TurnPhase.ACTION and not self.is_human(state.current_player_index):
            self.timer = PendingTimer(TimerKind.BOT_TURN, config.bot_delay_seconds)

    def _open_claim_window(self) -> None:
        self._claim_queue = claim_candidates(self.state)
        self._offer_claim()

    def _offer_claim(self) -> None:
        """Offer the pending discard to the next candidates in seat order.

        Computer seats answer immediately. A person gets a countdown and the
        offer resumes from the following seat when they pass.
        """
        state = self.state
        pending = state.pending_claim

        while self._claim_queue:
            seat = self._claim_queue.pop(0)
            strategy = self.strategies[seat]
            if strategy is None:
                self.timer = PendingTimer(
                    TimerKind.CLAIM_WINDOW,
                    state.config.claim_window_seconds,
                    card_id=pending.card.id,
                )
                return

            claim = strategy.choose_claim(state, seat)
            if claim is None:
                continue
            try:
                new_state = execute_move(state, claim)
            except IllegalMoveError as e:
                logger.warning(f"{strategy.name} made an illegal claim for seat {seat}: {e}")
                continue
            logger.info(f"{state.players[seat].name} ({strategy.name}) claims {pending.card}")
            self._commit(new_state, [claim])
            return

        move = PassClaim(card_id=pending.card.id)
        self._commit(execute_move(state, move), [move])

    def _fire(self) -> None:
        timer = self.timer
        self.timer = None
        if timer is None:
            return

        if timer.kind == TimerKind.CLAIM_WINDOW:
            if not self.pass_claim(timer.card_id):
                logger.debug(f"Claim window for {timer.card_id} already closed")
            return

        self._run_bot_turn()

    def _run_bot_turn(self) -> None:
        """Apply a bot's whole turn as one state replacement.

        A plan the rules reject, or one that leaves the turn unfinished, is
        replaced by drawing and dropping the highest card.
        """
        state = self.state
        seat = state.current_player_index
        strategy = self.strategies[seat]
        if state.phase != TurnPhase.ACTION or strategy is None:
            return

        moves = strategy.plan_turn(state)
        try:
            final = state
            for move in moves:
                final = execute_move(final, move)
            if final.phase == TurnPhase.ACTION and final.current_player_index == seat:
                raise IllegalMoveError("Plan does not end the turn")
        except IllegalMoveError as e:
            logger.warning(f"{strategy.name} planned an illegal turn for seat {seat}: {e}")
            moves, final = _fallback_turn(state)

        logger.info(
            f"Bot turn: player={seat}, strategy={strategy.name}, "
            f"moves={', '.join(str(m) for m in moves)}"
        )
        self._commit(final, moves)


def _fallback_turn(state: GameState) -> tuple[list[Move], GameState]:
    """Draw and discard the highest card, or knock when there is nothing to draw."""
    legal = generate_legal_moves(state)
    first = next(m for m in legal if isinstance(m, (Draw, Knock)))
    moves: list[Move] = [first]
    final = execute_move(state, first)
    if final.phase == TurnPhase.DISCARD:
        discard = Discard(card=final.current_player.hand[-1])
        moves.append(discard)
        final = execute_move(final, discard)
    return moves, final
