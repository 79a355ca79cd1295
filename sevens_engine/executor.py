"""Move execution for Sevens."""

from __future__ import annotations

import logging

from sevens_engine.board import place_identity
from sevens_engine.cards import SEQUENCE_START_RANK, Card, sort_hand
from sevens_engine.errors import DeckExhaustedError, IllegalMoveError
from sevens_engine.melds import (
    select_claim_cards,
    validate_board_declaration,
    validate_group_declarations,
    validate_meld,
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
from sevens_engine.scoring import apply_round_result, can_knock, pick_winner, score_round
from sevens_engine.state import GameState, PendingClaim, TurnPhase, start_next_round

logger = logging.getLogger(__name__)

__all__ = ["IllegalMoveError", "execute_move"]


def execute_move(state: GameState, move: Move) -> GameState:
    """Execute a move and return the new game state.

    Args:
        state: Current game state.
        move: Move to execute.

    Returns:
        New game state after the move. ``state`` itself is never modified.

    Raises:
        IllegalMoveError: If the move is not legal. ``InvalidDeclarationError``
            (a subclass) if a wild's declared identity is not allowed.
    """
    if state.is_game_over:
        raise IllegalMoveError("Game is already over")

    match move:
        case PlayCard():
            return _execute_play_card(state, move)
        case PlayWild():
            return _execute_play_wild(state, move)
        case PlayMeld():
            return _execute_play_meld(state, move)
        case Draw():
            return _execute_draw(state)
        case Knock():
            return _execute_knock(state)
        case Discard():
            return _execute_discard(state, move)
        case Claim():
            return _execute_claim(state, move)
        case PassClaim():
            return _execute_pass_claim(state, move)
        case StartNextRound():
            return _execute_start_next_round(state)
        case _:
            raise IllegalMoveError(f"Unknown move type: {type(move)}")


def _require_phase(state: GameState, phase: TurnPhase, action: str) -> None:
    if state.phase != phase:
        raise IllegalMoveError(f"Can only {action} during {phase.name} phase")


def _require_in_hand(state: GameState, cards: tuple[Card, ...] | list[Card]) -> None:
    player = state.current_player
    for card in cards:
        if not player.holds(card):
            raise IllegalMoveError(f"Card {card} not in hand")


def _execute_play_card(state: GameState, move: PlayCard) -> GameState:
    """Execute playing a natural card onto the board."""
    _require_phase(state, TurnPhase.ACTION, "play cards")
    _require_in_hand(state, [move.card])

    card = move.card
    if card.is_wild:
        raise IllegalMoveError("Wild cards must be played with a declared identity")
    if not state.board[card.suit].accepts(card.sort_order):
        if card.rank == SEQUENCE_START_RANK:
            raise IllegalMoveError(f"The {card.suit.name} seven is already on the board")
        raise IllegalMoveError(f"{card} does not extend the {card.suit.name} sequence")

    player = state.current_player
    new_board = place_identity(state.board, card.suit, card.rank)
    new_player = player.with_hand(player.without([card]))

    logger.debug(f"{player.name} played {card}")
    return state.with_player(state.current_player_index, new_player).with_board(new_board)


def _execute_play_wild(state: GameState, move: PlayWild) -> GameState:
    """Execute playing a wild onto the board as a declared identity."""
    _require_phase(state, TurnPhase.ACTION, "play cards")
    _require_in_hand(state, [move.card])

    declaration = validate_board_declaration(move.card, move.identity, state.board)

    player = state.current_player
    new_board = place_identity(state.board, declaration.suit, declaration.rank)
    new_player = player.with_hand(player.without([move.card]))

    logger.debug(f"{player.name} played a wild as {move.identity}")
    return (
        state.with_player(state.current_player_index, new_player)
        .with_board(new_board)
        .with_declarations([declaration])
    )


def _execute_play_meld(state: GameState, move: PlayMeld) -> GameState:
    """Execute melding three cards of a kind from hand."""
    _require_phase(state, TurnPhase.ACTION, "meld")
    anchor = validate_meld(move.cards, move.anchor)
    _require_in_hand(state, move.cards)
    declarations = validate_group_declarations(move.cards, anchor, move.identities)

    player = state.current_player
    new_player = player.with_hand(player.without(move.cards)).with_melds(
        player.melds + (tuple(move.cards),)
    )

    logger.debug(f"{player.name} melded three {anchor.name}s")
    return state.with_player(state.current_player_index, new_player).with_declarations(
        declarations
    )


def _draw_top(deck: tuple[Card, ...]) -> tuple[Card, tuple[Card, ...]]:
    if not deck:
        raise DeckExhaustedError("Deck is empty")
    return deck[0], deck[1:]


def _execute_draw(state: GameState) -> GameState:
    """Execute a draw. An empty deck skips straight to the discard phase."""
    _require_phase(state, TurnPhase.ACTION, "draw")
    player = state.current_player

    try:
        drawn, new_deck = _draw_top(state.deck)
    except DeckExhaustedError:
        if not player.hand:
            raise IllegalMoveError("Deck is empty and there is nothing to discard; knock instead")
        logger.warning(f"Deck empty, {player.name} skips the draw")
        return state.with_phase(TurnPhase.DISCARD)

    new_player = player.with_hand(sort_hand(player.hand + (drawn,)))
    return (
        state.with_player(state.current_player_index, new_player)
        .with_deck(new_deck)
        .with_phase(TurnPhase.DISCARD)
    )


def _execute_knock(state: GameState) -> GameState:
    """Execute a knock: score the round and end it (or the game)."""
    _require_phase(state, TurnPhase.ACTION, "knock")
    player = state.current_player
    threshold = state.config.knock_threshold

    if not can_knock(player.hand, threshold):
        raise IllegalMoveError(
            f"Cannot knock with {player.hand_points} points (need {threshold} or fewer)"
        )

    result = score_round(
        state.players, state.current_player_index, state.joker_declarations, state.round
    )
    new_players = apply_round_result(state.players, result)
    new_state = (
        state.with_players(new_players)
        .with_round_result(result)
        .with_pending_claim(None)
        .with_phase(TurnPhase.ROUND_OVER)
    )

    logger.info(
        f"Round {state.round}: {player.name} knocked with {player.hand_points} points"
        f"{' and was undercut' if result.undercut else ''}; round points {result.round_points}"
    )

    if any(p.score >= state.config.max_score for p in new_players):
        winner = pick_winner(new_players)
        logger.info(f"Game over after round {state.round}, winner: {new_players[winner].name}")
        return new_state.with_winner(winner)
    return new_state


def _execute_discard(state: GameState, move: Discard) -> GameState:
    """Execute a discard, opening the claim window for the other seats."""
    _require_phase(state, TurnPhase.DISCARD, "discard")
    _require_in_hand(state, [move.card])

    player = state.current_player
    new_player = player.with_hand(player.without([move.card]))

    logger.debug(f"{player.name} discarded {move.card}")
    return (
        state.with_player(state.current_player_index, new_player)
        .with_discard_pile((move.card,) + state.discard_pile)
        .with_pending_claim(PendingClaim(card=move.card, discarder_index=state.current_player_index))
        .with_current_player(state.next_player_index)
        .with_phase(TurnPhase.PENDING_CLAIM)
    )


def _execute_claim(state: GameState, move: Claim) -> GameState:
    """Execute a claim: the claimant melds the discard and takes the turn."""
    _require_phase(state, TurnPhase.PENDING_CLAIM, "claim")
    pending = state.pending_claim
    if pending is None or state.top_discard is None or state.top_discard.id != pending.card.id:
        raise IllegalMoveError("There is no discard to claim")
    if not 0 <= move.player < state.player_count:
        raise IllegalMoveError(f"No such player: {move.player}")
    if move.player == pending.discarder_index:
        raise IllegalMoveError("You cannot claim your own discard")

    claimant = state.players[move.player]
    discard = pending.card
    chosen = select_claim_cards(claimant.hand, discard)
    if chosen is None:
        raise IllegalMoveError(f"{claimant.name} has no pair to claim {discard} with")

    group = (*chosen, discard)
    anchor = validate_meld(group)
    declarations = validate_group_declarations(group, anchor, move.identities)

    new_claimant = claimant.with_hand(claimant.without(chosen)).with_melds(
        claimant.melds + (group,)
    )

    logger.info(f"{claimant.name} claimed {discard} from {state.players[pending.discarder_index].name}")
    return (
        state.with_player(move.player, new_claimant)
        .with_discard_pile(state.discard_pile[1:])
        .with_declarations(declarations)
        .with_pending_claim(None)
        .with_current_player(move.player)
        .with_phase(TurnPhase.ACTION)
    )


def _execute_pass_claim(state: GameState, move: PassClaim) -> GameState:
    """Close the claim window; play continues with the seat after the discarder."""
    _require_phase(state, TurnPhase.PENDING_CLAIM, "pass")
    if state.pending_claim is None or state.pending_claim.card.id != move.card_id:
        raise IllegalMoveError("That claim window is no longer open")
    return state.with_pending_claim(None).with_phase(TurnPhase.ACTION)


def _execute_start_next_round(state: GameState) -> GameState:
    """Deal the next round after a knock."""
    _require_phase(state, TurnPhase.ROUND_OVER, "start the next round")
    new_state = start_next_round(state)
    logger.info(
        f"Round {new_state.round} started, {new_state.current_player.name} to act"
    )
    return new_state
