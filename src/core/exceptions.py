"""
Custom exceptions shared across layers.

Everything raised on purpose by this package derives from GameError, so a presentation layer can catch a single type.
"""


class GameError(Exception):
    """Top-level exception of the Oxono package"""


class InvalidBoardSizeError(GameError):
    """Board size must be an even integer of at least 6. Rejected when constructing a game."""


class InvalidNotationError(GameError):
    """The text notation of a board could not be parsed."""


class GameStateError(GameError):
    """Requested operation is not allowed in the current state/phase of the game."""


class IllegalMoveError(GameError):
    """A requested totem move or token placement breaks the rules."""


class OutOfTokensError(GameError):
    """A player was asked for a token of a shape they no longer hold."""


class InvalidRequestError(GameError):
    """Request model validation failed.

    NOTE: not a ValueError on purpose: pydantic would wrap it in a ValidationError otherwise.
    """
