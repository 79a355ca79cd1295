"""Per-suit board sequences and the legality predicate for extending them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping

from sevens_engine.cards import (
    SEQUENCE_START_RANK,
    STANDARD_SUITS,
    Card,
    Rank,
    Suit,
)

LOWEST_ORDER = Rank.ACE.value
HIGHEST_ORDER = Rank.KING.value
START_ORDER = SEQUENCE_START_RANK.value


@dataclass(frozen=True, slots=True)
class BoardSequence:
    """The contiguous run on the table for one suit.

    Attributes:
        suit: Suit this run belongs to.
        low: Lowest sort order on the table (7 until extended downward).
        high: Highest sort order on the table (7 until extended upward).
        has_seven: Whether the suit's seven has been placed.
    """

    suit: Suit
    low: int = START_ORDER
    high: int = START_ORDER
    has_seven: bool = False

    @property
    def has_room(self) -> bool:
        """Whether the run can still grow in either direction."""
        return self.has_seven and (self.high < HIGHEST_ORDER or self.low > LOWEST_ORDER)

    def accepts(self, sort_order: int) -> bool:
        """Whether a natural of this suit with ``sort_order`` extends the run."""
        if sort_order == START_ORDER:
            return not self.has_seven
        if not self.has_seven:
            return False
        return sort_order == self.high + 1 or sort_order == self.low - 1

    def __str__(self) -> str:
        if not self.has_seven:
            return f"{self.suit}: -"
        return f"{self.suit}: {Rank(self.low).symbol}-{Rank(self.high).symbol}"


Sequences = Mapping[Suit, BoardSequence]


def initial_sequences() -> dict[Suit, BoardSequence]:
    """A fresh board with no sevens placed."""
    return {suit: BoardSequence(suit=suit) for suit in STANDARD_SUITS}


def is_playable_identity(suit: Suit, rank: Rank, sequences: Sequences) -> bool:
    """Whether a natural card of ``rank``/``suit`` could be played right now."""
    if suit not in sequences or rank == Rank.WILD:
        return False
    return sequences[suit].accepts(rank.value)


def is_playable(card: Card, sequences: Sequences) -> bool:
    """Whether ``card`` may be played singly onto the board.

    A wild is structurally playable as soon as any suit has its seven; the
    exact identity is checked when it is declared.
    """
    if card.is_wild:
        return any(seq.has_seven for seq in sequences.values())
    return is_playable_identity(card.suit, card.rank, sequences)


def get_playable_cards(hand: Iterable[Card], sequences: Sequences) -> list[Card]:
    """Cards in ``hand`` that are legal single plays."""
    return [card for card in hand if is_playable(card, sequences)]


def start_sequence(sequences: Sequences, suit: Suit) -> dict[Suit, BoardSequence]:
    """Return a new board with ``suit``'s seven placed."""
    seq = sequences[suit]
    if seq.has_seven:
        raise ValueError(f"{suit.name} already has its seven")
    return {**sequences, suit: replace(seq, has_seven=True)}


def apply_extension(
    sequences: Sequences, suit: Suit, sort_order: int
) -> dict[Suit, BoardSequence]:
    """Return a new board with ``suit``'s run extended to ``sort_order``.

    Callers check playability first; a value that is not adjacent to either
    end means the engine has been misused.
    """
    seq = sequences[suit]
    if not seq.has_seven:
        raise ValueError(f"{suit.name} cannot be extended before its seven")
    if sort_order == seq.high + 1:
        new_seq = replace(seq, high=sort_order)
    elif sort_order == seq.low - 1:
        new_seq = replace(seq, low=sort_order)
    else:
        raise ValueError(
            f"{sort_order} is not adjacent to {suit.name} run {seq.low}-{seq.high}"
        )
    return {**sequences, suit: new_seq}


def place_identity(sequences: Sequences, suit: Suit, rank: Rank) -> dict[Suit, BoardSequence]:
    """Apply a play of ``rank``/``suit`` (a seven or an extension)."""
    if rank == SEQUENCE_START_RANK:
        return start_sequence(sequences, suit)
    return apply_extension(sequences, suit, rank.value)


def wild_targets(sequences: Sequences) -> list[tuple[Suit, Rank]]:
    """Every identity a wild may take on the board, high side first."""
    targets = []
    for suit in STANDARD_SUITS:
        seq = sequences[suit]
        if not seq.has_seven:
            continue
        if seq.high < HIGHEST_ORDER:
            targets.append((suit, Rank(seq.high + 1)))
        if seq.low > LOWEST_ORDER:
            targets.append((suit, Rank(seq.low - 1)))
    return targets
