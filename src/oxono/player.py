"""A player and the tokens they still hold"""

from dataclasses import dataclass, field
from typing import Self

from src.core.config import TOKENS_PER_SHAPE
from src.core.exceptions import OutOfTokensError
from src.oxono.pieces import Color, Shape, Token


@dataclass
class Player:
    color: Color
    tokens: dict[Shape, int] = field(default_factory=dict)

    @classmethod
    def with_tokens(cls, color: Color, per_shape: int = TOKENS_PER_SHAPE) -> Self:
        """Fresh inventory: the same number of tokens for every shape, in the player's color."""
        return cls(color, {shape: per_shape for shape in Shape})

    @property
    def name(self) -> str:
        return self.color.name.title()

    def token_count(self, shape: Shape) -> int:
        return self.tokens.get(shape, 0)

    def total_tokens(self) -> int:
        return sum(self.tokens.values())

    def has_token_shape(self, shape: Shape) -> bool:
        return self.token_count(shape) > 0

    def has_tokens(self) -> bool:
        return self.total_tokens() > 0

    def take_token(self, shape: Shape) -> Token:
        """Remove one token of the given shape from the inventory and hand it over."""
        if not self.has_token_shape(shape):
            raise OutOfTokensError(
                f"{self.name} has no {shape.name.lower()} token left."
            )
        self.tokens[shape] -= 1
        return Token(self.color, shape)

    def return_token(self, token: Token) -> None:
        """Give a token back (undo of a placement)."""
        self.tokens[token.shape] = self.token_count(token.shape) + 1

    def __str__(self) -> str:
        return self.name
