"""Sevens card game engine."""

from sevens_engine.board import BoardSequence
from sevens_engine.cards import Card, Rank, Suit
from sevens_engine.config import GameConfig
from sevens_engine.errors import IllegalMoveError, InvalidDeclarationError
from sevens_engine.melds import JokerDeclaration, WildIdentity
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
from sevens_engine.state import GameState, PendingClaim, PlayerState, TurnPhase

__all__ = [
    "BoardSequence",
    "Card",
    "Rank",
    "Suit",
    "GameConfig",
    "IllegalMoveError",
    "InvalidDeclarationError",
    "JokerDeclaration",
    "WildIdentity",
    "GameState",
    "PendingClaim",
    "PlayerState",
    "TurnPhase",
    "Move",
    "PlayCard",
    "PlayWild",
    "PlayMeld",
    "Draw",
    "Knock",
    "Discard",
    "Claim",
    "PassClaim",
    "StartNextRound",
]
