"""Immutable game state models for Sevens."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Sequence

from sevens_engine.board import BoardSequence, initial_sequences
from sevens_engine.cards import build_deck, sort_hand
from sevens_engine.config import GameConfig
from sevens_engine.scoring import RoundResult, hand_points

if TYPE_CHECKING:
    from sevens_engine.cards import Card, Suit
    from sevens_engine.melds import JokerDeclaration


class TurnPhase(IntEnum):
    """Current phase of the turn."""

    ACTION = auto()  # Play cards and melds, then draw or knock
    DISCARD = auto()  # Must discard exactly one card
    PENDING_CLAIM = auto()  # Other seats may claim the discard
    ROUND_OVER = auto()  # Knock scored, waiting for the next round
    GAME_OVER = auto()  # A score reached the ceiling


@dataclass(frozen=True, slots=True)
class PlayerState:
    """State of a single seat.

    Attributes:
        id: Seat number.
        name: Display name.
        hand: Cards held, ordered by sort order.
        score: Cumulative score (lower is better).
        melds: 3-card groups removed from the hand this round.
        is_human: Whether moves come from a person rather than a strategy.
    """

    id: int
    name: str
    hand: tuple[Card, ...] = ()
    score: int = 0
    melds: tuple[tuple[Card, ...], ...] = ()
    is_human: bool = False

    @property
    def hand_points(self) -> int:
        """Unpenalized points in hand."""
        return hand_points(self.hand)

    def find(self, card_id: str) -> Card | None:
        """The card in hand with ``card_id``, if held."""
        return next((c for c in self.hand if c.id == card_id), None)

    def holds(self, card: Card) -> bool:
        return any(c.id == card.id for c in self.hand)

    def without(self, cards: Sequence[Card]) -> tuple[Card, ...]:
        """Hand with ``cards`` removed (matched by id)."""
        ids = {c.id for c in cards}
        return tuple(c for c in self.hand if c.id not in ids)

    def with_hand(self, hand: tuple[Card, ...]) -> PlayerState:
        """Return new state with updated hand."""
        return replace(self, hand=hand)

    def with_melds(self, melds: tuple[tuple[Card, ...], ...]) -> PlayerState:
        """Return new state with updated melds."""
        return replace(self, melds=melds)

    def with_score(self, score: int) -> PlayerState:
        """Return new state with updated score."""
        return replace(self, score=score)


@dataclass(frozen=True, slots=True)
class PendingClaim:
    """A discard other seats may still claim.

    Attributes:
        card: The discarded card (top of the discard pile).
        discarder_index: Seat that discarded it; it may not claim it back.
    """

    card: Card
    discarder_index: int


@dataclass(frozen=True, slots=True)
class GameState:
    """Complete immutable game state.

    Attributes:
        players: Seats in turn order.
        current_player_index: Seat whose turn it is.
        deck: Draw pile, drawn from the front.
        discard_pile: Discards, most recent first.
        board: One run per standard suit.
        phase: Current turn phase.
        round: Round counter, starting at 1.
        winner: Winning seat once the game is over.
        pending_claim: Present while a discard may be claimed.
        joker_declarations: Identities declared for wilds played this round.
        config: Table settings.
        last_round: Scoring of the most recent knock.
    """

    players: tuple[PlayerState, ...]
    current_player_index: int
    deck: tuple[Card, ...]
    discard_pile: tuple[Card, ...] = ()
    board: dict[Suit, BoardSequence] = field(default_factory=initial_sequences)
    phase: TurnPhase = TurnPhase.ACTION
    round: int = 1
    winner: int | None = None
    pending_claim: PendingClaim | None = None
    joker_declarations: tuple[JokerDeclaration, ...] = ()
    config: GameConfig = field(default_factory=GameConfig)
    last_round: RoundResult | None = None

    @property
    def current_player(self) -> PlayerState:
        """State of the seat whose turn it is."""
        return self.players[self.current_player_index]

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def next_player_index(self) -> int:
        return (self.current_player_index + 1) % len(self.players)

    @property
    def is_game_over(self) -> bool:
        """Whether the game has ended."""
        return self.phase == TurnPhase.GAME_OVER

    @property
    def top_discard(self) -> Card | None:
        return self.discard_pile[0] if self.discard_pile else None

    def with_player(self, index: int, player: PlayerState) -> GameState:
        """Return new state with one seat replaced."""
        players = list(self.players)
        players[index] = player
        return replace(self, players=tuple(players))

    def with_players(self, players: tuple[PlayerState, ...]) -> GameState:
        """Return new state with updated players."""
        return replace(self, players=players)

    def with_deck(self, deck: tuple[Card, ...]) -> GameState:
        """Return new state with updated deck."""
        return replace(self, deck=deck)

    def with_discard_pile(self, discard_pile: tuple[Card, ...]) -> GameState:
        """Return new state with updated discard pile."""
        return replace(self, discard_pile=discard_pile)

    def with_board(self, board: dict[Suit, BoardSequence]) -> GameState:
        """Return new state with updated board."""
        return replace(self, board=board)

    def with_phase(self, phase: TurnPhase) -> GameState:
        """Return new state with updated phase."""
        return replace(self, phase=phase)

    def with_current_player(self, index: int) -> GameState:
        """Return new state with updated current player."""
        return replace(self, current_player_index=index)

    def with_pending_claim(self, pending_claim: PendingClaim | None) -> GameState:
        """Return new state with updated pending claim."""
        return replace(self, pending_claim=pending_claim)

    def with_declarations(self, declarations: Sequence[JokerDeclaration]) -> GameState:
        """Return new state with ``declarations`` appended to the log."""
        return replace(
            self, joker_declarations=self.joker_declarations + tuple(declarations)
        )

    def with_round_result(self, result: RoundResult) -> GameState:
        """Return new state with the latest round result."""
        return replace(self, last_round=result)

    def with_winner(self, winner: int | None) -> GameState:
        """Return new state with winner set."""
        return replace(
            self,
            winner=winner,
            phase=TurnPhase.GAME_OVER if winner is not None else self.phase,
        )


def deal(
    players: Sequence[PlayerState], deck: Sequence[Card], hand_size: int
) -> tuple[tuple[PlayerState, ...], tuple[Card, ...]]:
    """Deal ``hand_size`` cards to every seat from the front of ``deck``.

    Melds from any previous round are cleared.
    """
    dealt = []
    remaining = tuple(deck)
    for player in players:
        hand, remaining = remaining[:hand_size], remaining[hand_size:]
        dealt.append(replace(player, hand=sort_hand(hand), melds=()))
    return tuple(dealt), remaining


def create_initial_state(
    config: GameConfig | None = None,
    names: Sequence[str] | None = None,
    human_seats: Sequence[int] = (),
    deck: Sequence[Card] | None = None,
) -> GameState:
    """Create the initial game state.

    Args:
        config: Table settings. Defaults to ``GameConfig()``.
        names: Optional display names, one per seat.
        human_seats: Seats controlled by people.
        deck: Optional pre-ordered deck. If None, a shuffled one is built.

    Returns:
        Round 1 state with hands dealt and seat 0 to act.
    """
    config = config or GameConfig()
    if names is not None and len(names) != config.player_count:
        raise ValueError(f"Expected {config.player_count} names, got {len(names)}")

    if deck is None:
        deck = build_deck(config.player_count, config.round_seed(1))

    seats = [
        PlayerState(
            id=i,
            name=names[i] if names else f"Player {i}",
            is_human=i in human_seats,
        )
        for i in range(config.player_count)
    ]
    players, remaining = deal(seats, deck, config.hand_size)

    return GameState(
        players=players,
        current_player_index=0,
        deck=remaining,
        config=config,
    )


def start_next_round(state: GameState, deck: Sequence[Card] | None = None) -> GameState:
    """Begin the round after ``state``'s, keeping scores.

    The board, discard pile and wild declarations start over, and the
    opening seat rotates with the round number.
    """
    next_round = state.round + 1
    if deck is None:
        deck = build_deck(state.player_count, state.config.round_seed(next_round))

    players, remaining = deal(state.players, deck, state.config.hand_size)

    return GameState(
        players=players,
        current_player_index=state.round % state.player_count,
        deck=remaining,
        round=next_round,
        config=state.config,
        last_round=state.last_round,
    )
