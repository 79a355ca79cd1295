"""Card, Suit, and Rank models for Sevens."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum


class Suit(IntEnum):
    """Card suits in board order. WILD is only ever carried by wild cards."""

    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3
    WILD = 4

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        return {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
            Suit.WILD: "★",
        }[self]

    @property
    def letter(self) -> str:
        return self.name[0]


# Suits that own a board sequence
STANDARD_SUITS: tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)


class Rank(IntEnum):
    """Card ranks. The value doubles as the sort order (Wild sorts last)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    WILD = 99

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        if self == Rank.WILD:
            return "★"
        if self.value == 1:
            return "A"
        elif self.value <= 10:
            return str(self.value)
        else:
            return self.name[0]

    @property
    def point_value(self) -> int:
        """Penalty points for holding a card of this rank at round end."""
        if self == Rank.WILD:
            return 30
        if self == Rank.SEVEN:
            return 15
        if self.value >= 11:
            return 10
        return self.value


# Ranks a natural card can have, in sort order
STANDARD_RANKS: tuple[Rank, ...] = tuple(r for r in Rank if r != Rank.WILD)

# The rank that must be placed before a suit's run can grow
SEQUENCE_START_RANK = Rank.SEVEN

WILDS_PER_DECK = 2


@dataclass(frozen=True, slots=True)
class Card:
    """A single physical card.

    Two decks may be in play, so identity is carried by ``id`` rather than by
    rank and suit. Use :meth:`natural` and :meth:`wild` to build cards with
    the canonical id format.
    """

    rank: Rank
    suit: Suit
    id: str

    @classmethod
    def natural(cls, rank: Rank, suit: Suit, deck: int = 0) -> Card:
        if rank == Rank.WILD or suit == Suit.WILD:
            raise ValueError("Use Card.wild() for wild cards")
        return cls(rank, suit, f"{suit.letter}{rank.symbol}-{deck}")

    @classmethod
    def wild(cls, number: int = 1, deck: int = 0) -> Card:
        return cls(Rank.WILD, Suit.WILD, f"W{number}-{deck}")

    @property
    def is_wild(self) -> bool:
        return self.rank == Rank.WILD

    @property
    def point_value(self) -> int:
        return self.rank.point_value

    @property
    def sort_order(self) -> int:
        return self.rank.value

    @property
    def identity(self) -> tuple[Suit, Rank]:
        return (self.suit, self.rank)

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name}, {self.id!r})"

    def __str__(self) -> str:
        if self.is_wild:
            return "★"
        return f"{self.rank.symbol}{self.suit.symbol}"


def deck_count(player_count: int) -> int:
    """Number of 54-card decks combined for a table of this size."""
    return 2 if player_count >= 4 else 1


def create_deck(player_count: int) -> list[Card]:
    """Create the unshuffled deck for ``player_count`` players."""
    if not 2 <= player_count <= 6:
        raise ValueError(f"player_count must be between 2 and 6, got {player_count}")

    deck: list[Card] = []
    for d in range(deck_count(player_count)):
        for suit in STANDARD_SUITS:
            for rank in STANDARD_RANKS:
                deck.append(Card.natural(rank, suit, deck=d))
        for n in range(1, WILDS_PER_DECK + 1):
            deck.append(Card.wild(n, deck=d))
    return deck


def shuffle_deck(deck: list[Card], seed: int | None = None) -> list[Card]:
    """Return a shuffled copy of the deck."""
    rng = random.Random(seed)
    shuffled = deck.copy()
    rng.shuffle(shuffled)
    return shuffled


def build_deck(player_count: int, seed: int | None = None) -> tuple[Card, ...]:
    """Create and shuffle the deck for a new round."""
    return tuple(shuffle_deck(create_deck(player_count), seed))


def sort_hand(hand: tuple[Card, ...] | list[Card]) -> tuple[Card, ...]:
    """Return the hand ordered by sort order (stable for equal ranks)."""
    return tuple(sorted(hand, key=lambda c: c.sort_order))
