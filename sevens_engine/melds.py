"""Melds, discard claims and wild-card identity declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sevens_engine.board import Sequences, is_playable_identity
from sevens_engine.cards import SEQUENCE_START_RANK, STANDARD_SUITS, Card, Rank, Suit
from sevens_engine.errors import IllegalMoveError, InvalidDeclarationError

MELD_SIZE = 3
CLAIM_HAND_CARDS = 2


@dataclass(frozen=True, slots=True)
class WildIdentity:
    """A player's nomination of what a wild card stands for."""

    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"


@dataclass(frozen=True, slots=True)
class JokerDeclaration:
    """Recorded identity of a wild card that has been played.

    Scoring consults these for every hand, regardless of who declared them.
    """

    card_id: str
    suit: Suit
    rank: Rank

    @property
    def identity(self) -> tuple[Suit, Rank]:
        return (self.suit, self.rank)


def validate_meld(cards: Sequence[Card], anchor: Rank | None = None) -> Rank:
    """Check a 3-of-a-kind group and return its anchor rank.

    Args:
        cards: The three cards of the group.
        anchor: Rank nominated for an all-wild group. Ignored when the group
            holds a natural card, unless it disagrees with the naturals.

    Raises:
        IllegalMoveError: If the group is not a legal meld.
    """
    if len(cards) != MELD_SIZE:
        raise IllegalMoveError(f"A meld needs exactly {MELD_SIZE} cards, got {len(cards)}")
    if len({c.id for c in cards}) != len(cards):
        raise IllegalMoveError("A meld cannot use the same card twice")

    naturals = [c for c in cards if not c.is_wild]
    wild_count = len(cards) - len(naturals)

    if not naturals:
        if anchor is None:
            raise IllegalMoveError("An all-wild meld needs a nominated rank")
        if anchor in (SEQUENCE_START_RANK, Rank.WILD):
            raise IllegalMoveError(f"Wilds cannot be melded as {anchor.name}")
        return anchor

    natural_rank = naturals[0].rank
    if any(c.rank != natural_rank for c in naturals):
        raise IllegalMoveError("Invalid meld: ranks do not match")
    if anchor is not None and anchor != natural_rank:
        raise IllegalMoveError(
            f"Nominated rank {anchor.name} does not match the meld's {natural_rank.name}s"
        )
    if natural_rank == SEQUENCE_START_RANK and wild_count > 0:
        raise IllegalMoveError("A wild cannot stand in for a seven")
    return natural_rank


def validate_group_declarations(
    cards: Sequence[Card],
    anchor: Rank,
    identities: Sequence[WildIdentity],
) -> tuple[JokerDeclaration, ...]:
    """Check the identities nominated for the wilds in a meld or claim.

    Identities pair up with the group's wilds in order.

    Raises:
        InvalidDeclarationError: If any identity breaks a declaration rule.
    """
    wilds = [c for c in cards if c.is_wild]
    if len(identities) != len(wilds):
        raise InvalidDeclarationError(
            f"Expected {len(wilds)} wild declaration(s), got {len(identities)}"
        )

    natural_suits = {c.suit for c in cards if not c.is_wild}
    seen_suits: set[Suit] = set()
    for identity in identities:
        if identity.rank == SEQUENCE_START_RANK:
            raise InvalidDeclarationError("A wild cannot be declared as a seven")
        if identity.rank != anchor:
            raise InvalidDeclarationError(
                f"Wild declared as {identity.rank.name} in a meld of {anchor.name}s"
            )
        if identity.suit not in STANDARD_SUITS:
            raise InvalidDeclarationError(f"{identity.suit.name} is not a declarable suit")
        if identity.suit in natural_suits:
            raise InvalidDeclarationError(
                f"{identity.suit.name} is already held by a natural card in the meld"
            )
        if identity.suit in seen_suits:
            raise InvalidDeclarationError(
                f"Two wilds in the same meld cannot both be {identity.suit.name}"
            )
        seen_suits.add(identity.suit)

    return tuple(
        JokerDeclaration(card_id=w.id, suit=i.suit, rank=i.rank)
        for w, i in zip(wilds, identities)
    )


def validate_board_declaration(
    card: Card, identity: WildIdentity, sequences: Sequences
) -> JokerDeclaration:
    """Check a wild played singly to the board as ``identity``.

    Raises:
        InvalidDeclarationError: If the identity is not a legal extension.
    """
    if not card.is_wild:
        raise IllegalMoveError(f"{card} is not a wild card")
    if identity.rank == SEQUENCE_START_RANK:
        raise InvalidDeclarationError("A wild cannot be declared as a seven")
    if not is_playable_identity(identity.suit, identity.rank, sequences):
        raise InvalidDeclarationError(f"{identity} does not extend any sequence")
    return JokerDeclaration(card_id=card.id, suit=identity.suit, rank=identity.rank)


def default_group_identities(cards: Sequence[Card], anchor: Rank) -> tuple[WildIdentity, ...]:
    """Assign each wild in the group the first suit not yet represented."""
    used = {c.suit for c in cards if not c.is_wild}
    free = [s for s in STANDARD_SUITS if s not in used]
    wild_count = sum(1 for c in cards if c.is_wild)
    return tuple(WildIdentity(suit=s, rank=anchor) for s in free[:wild_count])


def select_claim_cards(hand: Sequence[Card], discard: Card) -> tuple[Card, Card] | None:
    """Pick the two hand cards that complete a meld with ``discard``.

    Matching naturals are used first; wilds make up any shortfall. Returns
    None when the hand cannot complete a meld.
    """
    if discard.is_wild:
        return None
    naturals = [c for c in hand if not c.is_wild and c.rank == discard.rank]
    wilds = [c for c in hand if c.is_wild]
    chosen = (naturals + wilds)[:CLAIM_HAND_CARDS]
    if len(chosen) < CLAIM_HAND_CARDS:
        return None
    return chosen[0], chosen[1]


def can_claim(hand: Sequence[Card], discard: Card) -> bool:
    """Whether ``hand`` may legally claim ``discard``."""
    chosen = select_claim_cards(hand, discard)
    if chosen is None:
        return False
    if discard.rank == SEQUENCE_START_RANK and any(c.is_wild for c in chosen):
        return False
    return True
