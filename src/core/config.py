"""
Construction parameters of a game session.

Validated once, when the session is created. A bad board size is the only fatal input of the rules engine.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.core.exceptions import InvalidBoardSizeError

MIN_BOARD_SIZE = 6
DEFAULT_BOARD_SIZE = 6
TOKENS_PER_SHAPE = 4
MAX_TOKENS_PER_SHAPE = 8


def validate_board_size(size: int) -> int:
    """Board must be square with an even side of at least MIN_BOARD_SIZE (the two totems start around the centre)."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidBoardSizeError(f"Board size must be an integer, got {size!r}.")
    if size < MIN_BOARD_SIZE:
        raise InvalidBoardSizeError(
            f"Board size must be at least {MIN_BOARD_SIZE}, got {size}."
        )
    if size % 2 != 0:
        raise InvalidBoardSizeError(f"Board size must be even, got {size}.")
    return size


class GameSettings(BaseModel):
    board_size: int = DEFAULT_BOARD_SIZE
    ai_level: int = Field(default=0, ge=0)
    vs_computer: bool = True
    tokens_per_shape: int = Field(default=TOKENS_PER_SHAPE, ge=1, le=MAX_TOKENS_PER_SHAPE)
    seed: Optional[int] = None

    @field_validator("board_size", mode="before")
    @classmethod
    def check_board_size(cls, value: int) -> int:
        return validate_board_size(value)
