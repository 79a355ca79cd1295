"""Move types for Sevens."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sevens_engine.cards import Card, Rank
    from sevens_engine.melds import WildIdentity


class MoveType(IntEnum):
    """Type of move."""

    PLAY_CARD = auto()  # Natural card onto the board
    PLAY_WILD = auto()  # Wild card onto the board as a declared identity
    PLAY_MELD = auto()  # 3-of-a-kind from hand
    DRAW = auto()
    KNOCK = auto()
    DISCARD = auto()
    CLAIM = auto()  # Take the pending discard into a meld (pong)
    PASS_CLAIM = auto()  # Close the claim window
    START_NEXT_ROUND = auto()


@dataclass(frozen=True, slots=True)
class Move(ABC):
    """Base class for all moves."""

    @property
    @abstractmethod
    def move_type(self) -> MoveType:
        """The type of this move."""
        ...

    @abstractmethod
    def __str__(self) -> str:
        """Human-readable move description."""
        ...


@dataclass(frozen=True, slots=True)
class PlayCard(Move):
    """Play a natural card onto its suit's run."""

    card: Card

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLAY_CARD

    def __str__(self) -> str:
        return f"Play {self.card}"


@dataclass(frozen=True, slots=True)
class PlayWild(Move):
    """Play a wild onto the board as ``identity``."""

    card: Card
    identity: WildIdentity

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLAY_WILD

    def __str__(self) -> str:
        return f"Play {self.card} as {self.identity}"


@dataclass(frozen=True, slots=True)
class PlayMeld(Move):
    """Meld three cards of a kind from hand."""

    cards: tuple[Card, ...]
    anchor: Rank | None = None  # Only needed when all three are wild
    identities: tuple[WildIdentity, ...] = ()

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLAY_MELD

    def __str__(self) -> str:
        cards = " ".join(str(c) for c in self.cards)
        if self.identities:
            declared = ", ".join(str(i) for i in self.identities)
            return f"Meld {cards} (wilds as {declared})"
        return f"Meld {cards}"


@dataclass(frozen=True, slots=True)
class Draw(Move):
    """Draw the top card of the deck and move to the discard phase."""

    @property
    def move_type(self) -> MoveType:
        return MoveType.DRAW

    def __str__(self) -> str:
        return "Draw"


@dataclass(frozen=True, slots=True)
class Knock(Move):
    """End the round with a low hand."""

    @property
    def move_type(self) -> MoveType:
        return MoveType.KNOCK

    def __str__(self) -> str:
        return "Knock"


@dataclass(frozen=True, slots=True)
class Discard(Move):
    """Discard one card, ending the turn."""

    card: Card

    @property
    def move_type(self) -> MoveType:
        return MoveType.DISCARD

    def __str__(self) -> str:
        return f"Discard {self.card}"


@dataclass(frozen=True, slots=True)
class Claim(Move):
    """Claim the pending discard out of turn (pong)."""

    player: int
    identities: tuple[WildIdentity, ...] = ()

    @property
    def move_type(self) -> MoveType:
        return MoveType.CLAIM

    def __str__(self) -> str:
        if self.identities:
            declared = ", ".join(str(i) for i in self.identities)
            return f"Player {self.player} claims (wilds as {declared})"
        return f"Player {self.player} claims"


@dataclass(frozen=True, slots=True)
class PassClaim(Move):
    """Close the claim window for ``card_id`` without a claim."""

    card_id: str

    @property
    def move_type(self) -> MoveType:
        return MoveType.PASS_CLAIM

    def __str__(self) -> str:
        return "Pass"


@dataclass(frozen=True, slots=True)
class StartNextRound(Move):
    """Deal the next round after a knock."""

    @property
    def move_type(self) -> MoveType:
        return MoveType.START_NEXT_ROUND

    def __str__(self) -> str:
        return "Start next round"
