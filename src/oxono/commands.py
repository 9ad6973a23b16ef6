"""
Reversible mutations of a game.

Each command stores, when it is created, everything needed to undo it exactly.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Protocol

from src.oxono.board import Board
from src.oxono.cell import Cell
from src.oxono.phase import Phase
from src.oxono.pieces import Color, Token, Totem
from src.oxono.player import Player


class Command(Protocol):
    # who issued the command, and the phase before/after it was executed
    player_color: Color
    phase_before: ClassVar[Phase]
    phase_after: ClassVar[Phase]

    def execute(self) -> None: ...
    def undo(self) -> None: ...


@dataclass
class MoveTotemCommand:
    board: Board
    totem: Totem
    from_cell: Cell
    to_cell: Cell
    previous_moved_totem: Optional[Totem]
    player_color: Color

    phase_before: ClassVar[Phase] = Phase.MOVE
    phase_after: ClassVar[Phase] = Phase.INSERT

    def execute(self) -> None:
        self.board.last_moved_totem = self.totem
        self.board.move_totem(self.totem, self.to_cell)

    def undo(self) -> None:
        self.board.last_moved_totem = self.previous_moved_totem
        self.board.move_totem(self.totem, self.from_cell)


@dataclass
class PlaceTokenCommand:
    """Placing also consumes the token from the player's inventory (and undo gives it back)."""

    board: Board
    player: Player
    cell: Cell
    token: Token
    previous_placed: Optional[Cell]

    phase_before: ClassVar[Phase] = Phase.INSERT
    phase_after: ClassVar[Phase] = Phase.MOVE

    @property
    def player_color(self) -> Color:
        return self.player.color

    def execute(self) -> None:
        self.player.take_token(self.token.shape)
        self.board.place_token(self.cell, self.token)
        self.board.last_placed = self.cell

    def undo(self) -> None:
        self.board.remove_token(self.cell)
        self.player.return_token(self.token)
        self.board.last_placed = self.previous_placed
