"""Tests for melds, claims and wild declarations."""

import pytest

from sevens_engine.board import BoardSequence, initial_sequences
from sevens_engine.cards import Card, Rank, Suit
from sevens_engine.errors import IllegalMoveError, InvalidDeclarationError
from sevens_engine.melds import (
    WildIdentity,
    can_claim,
    default_group_identities,
    select_claim_cards,
    validate_board_declaration,
    validate_group_declarations,
    validate_meld,
)

H9 = Card.natural(Rank.NINE, Suit.HEARTS)
D9 = Card.natural(Rank.NINE, Suit.DIAMONDS)
C9 = Card.natural(Rank.NINE, Suit.CLUBS)
S9 = Card.natural(Rank.NINE, Suit.SPADES)
W1 = Card.wild(1)
W2 = Card.wild(2)
W3 = Card.wild(1, deck=1)


class TestValidateMeld:
    def test_three_naturals(self):
        assert validate_meld([H9, D9, C9]) == Rank.NINE

    def test_mixed_ranks_rejected(self):
        with pytest.raises(IllegalMoveError):
            validate_meld([H9, D9, Card.natural(Rank.TEN, Suit.CLUBS)])

    def test_wrong_size_rejected(self):
        with pytest.raises(IllegalMoveError):
            validate_meld([H9, D9])
        with pytest.raises(IllegalMoveError):
            validate_meld([H9, D9, C9, S9])

    def test_same_card_twice_rejected(self):
        with pytest.raises(IllegalMoveError):
            validate_meld([H9, H9, D9])

    def test_wild_fills_in(self):
        assert validate_meld([H9, D9, W1]) == Rank.NINE
        assert validate_meld([H9, W1, W2]) == Rank.NINE

    def test_all_wild_needs_anchor(self):
        with pytest.raises(IllegalMoveError):
            validate_meld([W1, W2, W3])
        assert validate_meld([W1, W2, W3], anchor=Rank.QUEEN) == Rank.QUEEN

    def test_all_wild_cannot_be_sevens(self):
        with pytest.raises(IllegalMoveError):
            validate_meld([W1, W2, W3], anchor=Rank.SEVEN)

    def test_anchor_must_match_naturals(self):
        with pytest.raises(IllegalMoveError):
            validate_meld([H9, D9, W1], anchor=Rank.TEN)

    def test_sevens_with_wild_rejected(self):
        h7 = Card.natural(Rank.SEVEN, Suit.HEARTS)
        d7 = Card.natural(Rank.SEVEN, Suit.DIAMONDS)
        with pytest.raises(IllegalMoveError):
            validate_meld([h7, d7, W1])

    def test_three_natural_sevens_allowed(self):
        sevens = [Card.natural(Rank.SEVEN, s) for s in (Suit.HEARTS, Suit.CLUBS, Suit.SPADES)]
        assert validate_meld(sevens) == Rank.SEVEN


class TestGroupDeclarations:
    def test_valid_declaration(self):
        declarations = validate_group_declarations(
            [H9, D9, W1], Rank.NINE, [WildIdentity(Suit.SPADES, Rank.NINE)]
        )
        assert len(declarations) == 1
        assert declarations[0].card_id == W1.id
        assert declarations[0].identity == (Suit.SPADES, Rank.NINE)

    def test_count_must_match_wilds(self):
        with pytest.raises(InvalidDeclarationError):
            validate_group_declarations([H9, D9, W1], Rank.NINE, [])

    def test_rank_must_match_anchor(self):
        with pytest.raises(InvalidDeclarationError):
            validate_group_declarations(
                [H9, D9, W1], Rank.NINE, [WildIdentity(Suit.SPADES, Rank.TEN)]
            )

    def test_suit_taken_by_natural(self):
        with pytest.raises(InvalidDeclarationError):
            validate_group_declarations(
                [H9, D9, W1], Rank.NINE, [WildIdentity(Suit.HEARTS, Rank.NINE)]
            )

    def test_two_wilds_need_different_suits(self):
        with pytest.raises(InvalidDeclarationError):
            validate_group_declarations(
                [H9, W1, W2],
                Rank.NINE,
                [WildIdentity(Suit.CLUBS, Rank.NINE), WildIdentity(Suit.CLUBS, Rank.NINE)],
            )

    def test_wild_suit_not_declarable(self):
        with pytest.raises(InvalidDeclarationError):
            validate_group_declarations(
                [H9, D9, W1], Rank.NINE, [WildIdentity(Suit.WILD, Rank.NINE)]
            )

    def test_declaration_error_is_illegal_move(self):
        assert issubclass(InvalidDeclarationError, IllegalMoveError)

    def test_default_identities(self):
        identities = default_group_identities([H9, W1, W2], Rank.NINE)
        assert identities == (
            WildIdentity(Suit.DIAMONDS, Rank.NINE),
            WildIdentity(Suit.CLUBS, Rank.NINE),
        )
        validate_group_declarations([H9, W1, W2], Rank.NINE, identities)


class TestBoardDeclaration:
    def test_declared_extension(self):
        board = initial_sequences()
        board[Suit.HEARTS] = BoardSequence(Suit.HEARTS, low=7, high=8, has_seven=True)
        declaration = validate_board_declaration(W1, WildIdentity(Suit.HEARTS, Rank.NINE), board)
        assert declaration.identity == (Suit.HEARTS, Rank.NINE)

    def test_cannot_declare_seven(self):
        with pytest.raises(InvalidDeclarationError):
            validate_board_declaration(
                W1, WildIdentity(Suit.HEARTS, Rank.SEVEN), initial_sequences()
            )

    def test_identity_must_extend(self):
        board = initial_sequences()
        board[Suit.HEARTS] = BoardSequence(Suit.HEARTS, has_seven=True)
        with pytest.raises(InvalidDeclarationError):
            validate_board_declaration(W1, WildIdentity(Suit.HEARTS, Rank.TEN), board)
        with pytest.raises(InvalidDeclarationError):
            validate_board_declaration(W1, WildIdentity(Suit.CLUBS, Rank.EIGHT), board)


class TestClaimSelection:
    def test_naturals_first(self):
        hand = [W1, H9, Card.natural(Rank.TWO, Suit.CLUBS), D9]
        assert select_claim_cards(hand, S9) == (H9, D9)

    def test_wild_makes_up_shortfall(self):
        hand = [H9, Card.natural(Rank.TWO, Suit.CLUBS), W1]
        assert select_claim_cards(hand, S9) == (H9, W1)

    def test_not_enough_cards(self):
        assert select_claim_cards([H9, Card.natural(Rank.TWO, Suit.CLUBS)], S9) is None

    def test_wild_discard_cannot_be_claimed(self):
        assert select_claim_cards([W2, W3], W1) is None

    def test_seven_claim_with_wild_always_rejected(self):
        s7 = Card.natural(Rank.SEVEN, Suit.SPADES)
        h7 = Card.natural(Rank.SEVEN, Suit.HEARTS)
        assert not can_claim([h7, W1], s7)
        assert not can_claim([W1, W2], s7)
        assert not can_claim([h7, W1, W2, H9], s7)

    def test_seven_claim_with_naturals(self):
        s7 = Card.natural(Rank.SEVEN, Suit.SPADES)
        hand = [Card.natural(Rank.SEVEN, Suit.HEARTS), Card.natural(Rank.SEVEN, Suit.CLUBS)]
        assert can_claim(hand, s7)
