"""Round-end scoring: hand points, declared-identity penalty and undercuts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from sevens_engine.cards import Card
    from sevens_engine.melds import JokerDeclaration
    from sevens_engine.state import PlayerState

DECLARED_IDENTITY_PENALTY = 30
DEFAULT_KNOCK_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Outcome of a knock.

    Attributes:
        round: Round number that ended.
        knocker_index: Seat that knocked.
        raw_points: Unpenalized hand points per seat.
        adjusted_points: Hand points plus declared-identity penalties.
        round_points: How much each seat's score went up.
        undercut: Whether another seat matched or beat the knocker.
    """

    round: int
    knocker_index: int
    raw_points: tuple[int, ...]
    adjusted_points: tuple[int, ...]
    round_points: tuple[int, ...]
    undercut: bool


def hand_points(hand: Iterable[Card]) -> int:
    """Sum of point values of the cards held."""
    return sum(card.point_value for card in hand)


def penalized_cards(hand: Iterable[Card], declarations: Sequence[JokerDeclaration]) -> list[Card]:
    """Naturals in ``hand`` whose identity some wild has impersonated."""
    declared = {d.identity for d in declarations}
    return [c for c in hand if not c.is_wild and c.identity in declared]


def adjusted_points(hand: Sequence[Card], declarations: Sequence[JokerDeclaration]) -> int:
    """Hand points plus the penalty for every declared identity still held."""
    penalty = DECLARED_IDENTITY_PENALTY * len(penalized_cards(hand, declarations))
    return hand_points(hand) + penalty


def can_knock(hand: Iterable[Card], threshold: int = DEFAULT_KNOCK_THRESHOLD) -> bool:
    """Whether unpenalized hand points are low enough to knock."""
    return hand_points(hand) <= threshold


def score_round(
    players: Sequence[PlayerState],
    knocker_index: int,
    declarations: Sequence[JokerDeclaration],
    round_number: int = 1,
) -> RoundResult:
    """Work out what each seat scores for the round a knock ended.

    An undercut happens when any other seat's adjusted total is less than or
    equal to the knocker's. The knocker then takes the sum of every seat's
    adjusted total (their own included) and nobody else scores. Otherwise
    every seat takes its own adjusted total.
    """
    raw = tuple(hand_points(p.hand) for p in players)
    adjusted = tuple(adjusted_points(p.hand, declarations) for p in players)
    knocker_total = adjusted[knocker_index]

    undercut = any(
        total <= knocker_total
        for i, total in enumerate(adjusted)
        if i != knocker_index
    )

    if undercut:
        round_points = tuple(
            sum(adjusted) if i == knocker_index else 0 for i in range(len(players))
        )
    else:
        round_points = adjusted

    return RoundResult(
        round=round_number,
        knocker_index=knocker_index,
        raw_points=raw,
        adjusted_points=adjusted,
        round_points=round_points,
        undercut=undercut,
    )


def apply_round_result(
    players: Sequence[PlayerState], result: RoundResult
) -> tuple[PlayerState, ...]:
    """Return players with the round's points added to their scores."""
    return tuple(
        p.with_score(p.score + points) for p, points in zip(players, result.round_points)
    )


def resolve_knock(
    players: Sequence[PlayerState],
    knocker_index: int,
    declarations: Sequence[JokerDeclaration],
) -> tuple[PlayerState, ...]:
    """Score a knock and return the players with updated scores."""
    result = score_round(players, knocker_index, declarations)
    return apply_round_result(players, result)


def pick_winner(players: Sequence[PlayerState]) -> int:
    """Index of the lowest score; ties go to the lowest seat."""
    return min(range(len(players)), key=lambda i: (players[i].score, i))
