"""Phases of a turn. Needed by both the Game and the commands stored in its history."""

from enum import Enum, auto


class Phase(Enum):
    MOVE = auto()  # a totem must be relocated
    INSERT = auto()  # a token must be placed next to the moved totem
    CHOICE = auto()  # game over (victory or abandon)
