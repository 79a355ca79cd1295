"""Greedy heuristic strategy for computer seats.

The bot empties its hand as fast as it can, then either knocks or draws and
throws away its most expensive card:

1. Meld any rank it holds three naturals of
2. Start a suit with its seven
3. Extend any run with a natural card
4. Put a wild on the first suit with room, one past the high end (or one
   below the low end if the high end is a King)
5. Knock if the hand is now worth 5 points or fewer
6. Otherwise draw, then discard the highest-value card

Every play in the greedy loop removes at least one card from the hand, so the
loop runs at most ``len(hand)`` plays before it finds nothing to do.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from sevens_engine.board import wild_targets
from sevens_engine.cards import SEQUENCE_START_RANK, Card, Rank
from sevens_engine.executor import execute_move
from sevens_engine.melds import WildIdentity
from sevens_engine.moves import Claim, Discard, Draw, Knock, PlayCard, PlayMeld, PlayWild
from sevens_engine.scoring import can_knock
from sevens_engine.state import TurnPhase
from strategies.base import Strategy

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from sevens_engine.moves import Move
    from sevens_engine.state import GameState


class HeuristicStrategy(Strategy):
    """Deterministic greedy player.

    Args:
        claims: Whether to claim discards when two matching naturals are in
            hand. Wilds are never spent on a claim.
    """

    def __init__(self, claims: bool = True):
        self._claims = claims

    @property
    def name(self) -> str:
        return "Heuristic"

    def plan_turn(self, state: GameState) -> list[Move]:
        """Plan plays, then a knock or a draw and discard."""
        if state.phase != TurnPhase.ACTION:
            raise ValueError(f"Cannot plan a turn in {state.phase.name} phase")

        moves: list[Move] = []
        scratch = state
        # Each play shrinks the hand, so this bound is never the reason we stop
        for _ in range(len(state.current_player.hand) + 1):
            move = self.next_play(scratch)
            if move is None:
                break
            scratch = execute_move(scratch, move)
            moves.append(move)

        hand = scratch.current_player.hand
        if can_knock(hand, state.config.knock_threshold):
            moves.append(Knock())
            return moves

        moves.append(Draw())
        scratch = execute_move(scratch, Draw())
        moves.append(Discard(card=self.pick_discard(scratch.current_player.hand)))

        logger.debug(f"{state.current_player.name} planned: {', '.join(str(m) for m in moves)}")
        return moves

    def next_play(self, state: GameState) -> Move | None:
        """The next single play in the greedy loop, or None when stuck."""
        hand = state.current_player.hand
        board = state.board

        meld = self._natural_meld(hand)
        if meld is not None:
            return PlayMeld(cards=meld)

        for card in hand:
            if card.rank == SEQUENCE_START_RANK and board[card.suit].accepts(card.sort_order):
                return PlayCard(card=card)

        for card in hand:
            if not card.is_wild and board[card.suit].accepts(card.sort_order):
                return PlayCard(card=card)

        wild = next((c for c in hand if c.is_wild), None)
        if wild is not None:
            targets = wild_targets(board)
            if targets:
                suit, rank = targets[0]
                return PlayWild(card=wild, identity=WildIdentity(suit=suit, rank=rank))

        return None

    def pick_discard(self, hand: tuple[Card, ...]) -> Card:
        """The first card with the highest point value."""
        if not hand:
            raise ValueError("Nothing to discard")
        return max(hand, key=lambda c: c.point_value)

    def choose_claim(self, state: GameState, player_index: int) -> Claim | None:
        """Claim with two natural matches; never spend wilds on it."""
        pending = state.pending_claim
        if not self._claims or pending is None or pending.card.is_wild:
            return None
        if player_index == pending.discarder_index:
            return None
        matches = [
            c
            for c in state.players[player_index].hand
            if not c.is_wild and c.rank == pending.card.rank
        ]
        if len(matches) >= 2:
            return Claim(player=player_index)
        return None

    @staticmethod
    def _natural_meld(hand: tuple[Card, ...]) -> tuple[Card, ...] | None:
        by_rank: dict[Rank, list[Card]] = defaultdict(list)
        for card in hand:
            if not card.is_wild:
                by_rank[card.rank].append(card)
        for cards in by_rank.values():
            if len(cards) >= 3:
                return tuple(cards[:3])
        return None
