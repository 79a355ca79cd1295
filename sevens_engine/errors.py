"""Exceptions raised by the Sevens engine."""


class GameError(Exception):
    """Base class for recoverable rule violations."""

    pass


class IllegalMoveError(GameError):
    """Raised when a card, meld or claim fails a legality check."""

    pass


class InvalidDeclarationError(IllegalMoveError):
    """Raised when a wild card's declared identity breaks a declaration rule."""

    pass


class DeckExhaustedError(GameError):
    """Raised when a draw is requested from an empty deck."""

    pass


class AdvisoryUnavailableError(GameError):
    """Raised when the strategy advisor cannot reach its backend."""

    pass
