"""Base strategy interface for Sevens players."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from sevens_engine.executor import execute_move

if TYPE_CHECKING:
    from sevens_engine.moves import Claim, Move
    from sevens_engine.state import GameState


class Strategy(ABC):
    """Abstract base class for computer-controlled seats."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this strategy."""
        ...

    @abstractmethod
    def plan_turn(self, state: GameState) -> list[Move]:
        """Plan the current seat's whole turn.

        Args:
            state: Game state at the start of the turn (ACTION phase).

        Returns:
            Moves to apply in order, ending with a knock or a discard.
        """
        ...

    def choose_claim(self, state: GameState, player_index: int) -> Claim | None:
        """Decide whether ``player_index`` claims the pending discard.

        Override to claim; the default never does.

        Args:
            state: State with a pending claim.
            player_index: Seat being asked.

        Returns:
            A claim move, or None to let the discard go.
        """
        return None

    def play_turn(self, state: GameState) -> GameState:
        """Apply a planned turn and return only the final state."""
        for move in self.plan_turn(state):
            state = execute_move(state, move)
        return state
