"""Legal move generation for Sevens."""

from __future__ import annotations

from collections import defaultdict

from sevens_engine.board import wild_targets
from sevens_engine.cards import SEQUENCE_START_RANK, STANDARD_RANKS, Card, Rank
from sevens_engine.melds import (
    WildIdentity,
    can_claim,
    default_group_identities,
    select_claim_cards,
)
from sevens_engine.moves import (
    Claim,
    Discard,
    Draw,
    Knock,
    Move,
    PassClaim,
    PlayCard,
    PlayMeld,
    PlayWild,
    StartNextRound,
)
from sevens_engine.scoring import can_knock
from sevens_engine.state import GameState, TurnPhase


def generate_legal_moves(state: GameState) -> list[Move]:
    """Generate legal moves for the current game state.

    Melds and claims are listed once per distinct shape, using the first
    matching cards in hand and default wild identities; any other legal
    choice of cards or identities is accepted by the executor as well.

    Args:
        state: Current game state.

    Returns:
        Legal moves for whoever may act in the current phase.
    """
    match state.phase:
        case TurnPhase.ACTION:
            return _generate_action_moves(state)
        case TurnPhase.DISCARD:
            return [Discard(card=c) for c in state.current_player.hand]
        case TurnPhase.PENDING_CLAIM:
            return _generate_claim_moves(state)
        case TurnPhase.ROUND_OVER:
            return [StartNextRound()]
        case TurnPhase.GAME_OVER:
            return []

    return []


def _generate_action_moves(state: GameState) -> list[Move]:
    """Generate moves for the action phase of a turn."""
    moves: list[Move] = []
    player = state.current_player
    wilds = [c for c in player.hand if c.is_wild]

    for card in player.hand:
        if not card.is_wild and state.board[card.suit].accepts(card.sort_order):
            moves.append(PlayCard(card=card))

    targets = wild_targets(state.board)
    for card in wilds:
        for suit, rank in targets:
            moves.append(PlayWild(card=card, identity=WildIdentity(suit=suit, rank=rank)))

    moves.extend(_generate_meld_moves(player.hand, wilds))

    if state.deck or player.hand:
        moves.append(Draw())
    if can_knock(player.hand, state.config.knock_threshold):
        moves.append(Knock())

    return moves


def _generate_meld_moves(hand: tuple[Card, ...], wilds: list[Card]) -> list[Move]:
    by_rank: dict[Rank, list[Card]] = defaultdict(list)
    for card in hand:
        if not card.is_wild:
            by_rank[card.rank].append(card)

    moves: list[Move] = []
    for rank, naturals in by_rank.items():
        if len(naturals) >= 3:
            moves.append(PlayMeld(cards=tuple(naturals[:3])))
        if rank == SEQUENCE_START_RANK:
            continue
        for natural_count in (2, 1):
            wild_count = 3 - natural_count
            if len(naturals) >= natural_count and len(wilds) >= wild_count:
                group = tuple(naturals[:natural_count]) + tuple(wilds[:wild_count])
                identities = default_group_identities(group, rank)
                if len(identities) == wild_count:
                    moves.append(PlayMeld(cards=group, identities=identities))

    if len(wilds) >= 3:
        group = tuple(wilds[:3])
        for rank in STANDARD_RANKS:
            if rank != SEQUENCE_START_RANK:
                moves.append(
                    PlayMeld(
                        cards=group,
                        anchor=rank,
                        identities=default_group_identities(group, rank),
                    )
                )
    return moves


def claim_candidates(state: GameState) -> list[int]:
    """Seats that may claim the pending discard, in turn order after the discarder."""
    pending = state.pending_claim
    if state.phase != TurnPhase.PENDING_CLAIM or pending is None:
        return []
    n = state.player_count
    seats = [(pending.discarder_index + offset) % n for offset in range(1, n)]
    return [i for i in seats if can_claim(state.players[i].hand, pending.card)]


def default_claim(state: GameState, player: int) -> Claim:
    """A claim for ``player`` with default identities for any wilds it uses."""
    pending = state.pending_claim
    if pending is None:
        raise ValueError("No pending claim")
    chosen = select_claim_cards(state.players[player].hand, pending.card)
    if chosen is None:
        raise ValueError(f"Player {player} cannot claim {pending.card}")
    group = (*chosen, pending.card)
    return Claim(player=player, identities=default_group_identities(group, pending.card.rank))


def _generate_claim_moves(state: GameState) -> list[Move]:
    pending = state.pending_claim
    if pending is None:
        return []
    moves: list[Move] = [default_claim(state, i) for i in claim_candidates(state)]
    moves.append(PassClaim(card_id=pending.card.id))
    return moves
