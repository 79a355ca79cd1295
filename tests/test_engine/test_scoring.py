"""Tests for round scoring."""

from sevens_engine.cards import Card, Rank, Suit
from sevens_engine.melds import JokerDeclaration
from sevens_engine.scoring import (
    DECLARED_IDENTITY_PENALTY,
    adjusted_points,
    apply_round_result,
    can_knock,
    hand_points,
    penalized_cards,
    pick_winner,
    resolve_knock,
    score_round,
)
from sevens_engine.state import PlayerState


def player(i, *cards, score=0):
    return PlayerState(id=i, name=f"P{i}", hand=tuple(cards), score=score)


ACE_H = Card.natural(Rank.ACE, Suit.HEARTS)
THREE_S = Card.natural(Rank.THREE, Suit.SPADES)
TWO_C = Card.natural(Rank.TWO, Suit.CLUBS)
NINE_H = Card.natural(Rank.NINE, Suit.HEARTS)
KINGS = [Card.natural(Rank.KING, s) for s in (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)]


class TestHandPoints:
    def test_sum(self):
        assert hand_points([ACE_H, THREE_S]) == 4
        assert hand_points([Card.wild(), Card.natural(Rank.SEVEN, Suit.HEARTS)]) == 45
        assert hand_points([]) == 0

    def test_can_knock_threshold(self):
        assert can_knock([ACE_H, THREE_S])
        assert can_knock([Card.natural(Rank.FIVE, Suit.CLUBS)])
        assert not can_knock([Card.natural(Rank.SIX, Suit.CLUBS)])
        assert can_knock([])
        assert can_knock([Card.natural(Rank.SIX, Suit.CLUBS)], threshold=6)


class TestDeclaredIdentityPenalty:
    def test_declared_nine_of_hearts(self):
        declarations = [JokerDeclaration(card_id="W1-0", suit=Suit.HEARTS, rank=Rank.NINE)]
        hand = [NINE_H, TWO_C]
        assert penalized_cards(hand, declarations) == [NINE_H]
        assert adjusted_points(hand, declarations) == 11 + DECLARED_IDENTITY_PENALTY

    def test_penalty_per_copy(self):
        declarations = [JokerDeclaration(card_id="W1-0", suit=Suit.HEARTS, rank=Rank.NINE)]
        other_copy = Card.natural(Rank.NINE, Suit.HEARTS, deck=1)
        assert adjusted_points([NINE_H, other_copy], declarations) == 18 + 60

    def test_other_identities_unaffected(self):
        declarations = [JokerDeclaration(card_id="W1-0", suit=Suit.HEARTS, rank=Rank.NINE)]
        nine_s = Card.natural(Rank.NINE, Suit.SPADES)
        assert adjusted_points([nine_s], declarations) == 9

    def test_wilds_never_penalized(self):
        declarations = [JokerDeclaration(card_id="W1-0", suit=Suit.HEARTS, rank=Rank.NINE)]
        assert adjusted_points([Card.wild(2)], declarations) == 30


class TestScoreRound:
    def test_knock_stands(self):
        players = [player(0, ACE_H, THREE_S), player(1, *KINGS)]
        result = score_round(players, 0, [])
        assert not result.undercut
        assert result.raw_points == (4, 40)
        assert result.round_points == (4, 40)

        scored = apply_round_result(players, result)
        assert [p.score for p in scored] == [4, 40]

    def test_undercut(self):
        players = [player(0, ACE_H, THREE_S), player(1, TWO_C)]
        result = score_round(players, 0, [])
        assert result.undercut
        assert result.round_points == (6, 0)

    def test_tie_is_undercut(self):
        four_c = Card.natural(Rank.FOUR, Suit.CLUBS)
        players = [player(0, ACE_H, THREE_S), player(1, four_c)]
        assert score_round(players, 0, []).undercut

    def test_undercut_charges_every_seat_total(self):
        players = [player(0, *KINGS), player(1, ACE_H, THREE_S), player(2, TWO_C)]
        result = score_round(players, 1, [])
        assert result.undercut
        assert result.round_points == (0, 46, 0)

    def test_penalty_can_save_knocker(self):
        """A declared identity held by the opponent lifts them above the knocker."""
        declarations = [JokerDeclaration(card_id="W1-0", suit=Suit.HEARTS, rank=Rank.NINE)]
        players = [player(0, ACE_H, THREE_S), player(1, NINE_H)]
        result = score_round(players, 0, declarations)
        assert result.adjusted_points == (4, 39)
        assert not result.undercut

    def test_knocker_penalty_counts(self):
        declarations = [JokerDeclaration(card_id="W1-0", suit=Suit.SPADES, rank=Rank.THREE)]
        players = [player(0, ACE_H, THREE_S), player(1, *KINGS)]
        result = score_round(players, 0, declarations)
        assert result.adjusted_points == (34, 40)
        assert result.round_points == (34, 40)

    def test_resolve_knock_adds_to_scores(self):
        players = [player(0, ACE_H, THREE_S, score=10), player(1, *KINGS, score=5)]
        scored = resolve_knock(players, 0, [])
        assert [p.score for p in scored] == [14, 45]


class TestPickWinner:
    def test_lowest_score_wins(self):
        players = [player(0, score=260), player(1, score=30), player(2, score=90)]
        assert pick_winner(players) == 1

    def test_tie_goes_to_lowest_seat(self):
        players = [player(0, score=250), player(1, score=40), player(2, score=40)]
        assert pick_winner(players) == 1
