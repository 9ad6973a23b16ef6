"""Defines what can occupy a cell: nothing, a player's token, or one of the two totems"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from src.oxono.cell import Cell


class OccupantKind(Enum):
    EMPTY = auto()
    TOKEN = auto()
    TOTEM = auto()


class Color(Enum):
    PINK = auto()
    BLACK = auto()
    # marker color of the totems, never owned by a player
    BLUE = auto()


class Shape(Enum):
    CROSS = auto()
    CIRCLE = auto()

    @property
    def symbol(self) -> str:
        return "X" if self == Shape.CROSS else "O"


PLAYER_COLORS: tuple[Color, ...] = (Color.PINK, Color.BLACK)


@dataclass(frozen=True)
class Empty:
    kind: OccupantKind = field(default=OccupantKind.EMPTY, init=False)


@dataclass(frozen=True)
class Token:
    """A player's token. Never mutated once placed: only added to or removed from the board."""

    color: Color
    shape: Shape
    kind: OccupantKind = field(default=OccupantKind.TOKEN, init=False)

    def __str__(self) -> str:
        return f"{self.color.name.title()} {self.shape.symbol}"


@dataclass(eq=False)
class Totem:
    """
    One of the two shared pieces. Exactly one exists per shape for the lifetime of a board.

    NOTE: The position is mutable, so a totem is compared by identity and never hashed by value.
    """

    shape: Shape
    cell: Cell
    color: Color = field(default=Color.BLUE, init=False)
    kind: OccupantKind = field(default=OccupantKind.TOTEM, init=False)

    @property
    def x(self) -> int:
        return self.cell.x

    @property
    def y(self) -> int:
        return self.cell.y

    def __str__(self) -> str:
        return f"Totem {self.shape.symbol}"


EMPTY = Empty()

Occupant = Union[Empty, Token, Totem]
