"""The board only knows grid mechanics (bounds, occupancy, moving the totems). All game rules live in rules.py / game.py"""

import random
from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.core.config import DEFAULT_BOARD_SIZE, validate_board_size
from src.oxono.cell import Cell
from src.oxono.notation import (
    EMPTY_SYMBOL,
    ROW_SEPARATOR,
    TEXT_TO_TOKEN,
    TEXT_TO_TOTEM,
    TOKEN_TO_TEXT,
    TOTEM_TO_TEXT,
    parse_board,
    render_row,
)
from src.oxono.pieces import EMPTY, Occupant, OccupantKind, Shape, Token, Totem


@dataclass
class Board:
    size: int
    grid: dict[Cell, Occupant]
    totems: dict[Shape, Totem]
    last_moved_totem: Optional[Totem] = None
    last_placed: Optional[Cell] = None

    @classmethod
    def new(
        cls, size: int = DEFAULT_BOARD_SIZE, rng: Optional[random.Random] = None
    ) -> Self:
        """
        Empty board with the two totems in the centre: on (half-1, half-1) and (half, half).
        A coin flip decides which totem goes where.
        """
        validate_board_size(size)
        rng = rng or random.Random()

        half = size // 2
        upper_left, lower_right = Cell(half - 1, half - 1), Cell(half, half)
        if rng.random() < 0.5:
            cross_cell, circle_cell = upper_left, lower_right
        else:
            cross_cell, circle_cell = lower_right, upper_left

        grid: dict[Cell, Occupant] = {cell: EMPTY for cell in _all_cells(size)}
        totems = {
            Shape.CROSS: Totem(Shape.CROSS, cross_cell),
            Shape.CIRCLE: Totem(Shape.CIRCLE, circle_cell),
        }
        for totem in totems.values():
            grid[totem.cell] = totem
        return cls(size, grid, totems)

    @classmethod
    def from_text(cls, text: str) -> Self:
        """Construct a board from its text notation (see notation.py)"""
        rows = parse_board(text)
        size = len(rows)
        grid: dict[Cell, Occupant] = {}
        totems: dict[Shape, Totem] = {}
        for y, row in enumerate(rows):
            for x, symbol in enumerate(row):
                cell = Cell(x, y)
                if symbol == EMPTY_SYMBOL:
                    grid[cell] = EMPTY
                elif symbol in TEXT_TO_TOTEM:
                    totem = Totem(TEXT_TO_TOTEM[symbol], cell)
                    totems[totem.shape] = totem
                    grid[cell] = totem
                else:
                    color, shape = TEXT_TO_TOKEN[symbol]
                    grid[cell] = Token(color, shape)
        return cls(size, grid, totems)

    def to_text(self) -> str:
        return ROW_SEPARATOR.join(
            render_row([self._symbol(Cell(x, y)) for x in range(self.size)])
            for y in range(self.size)
        )

    def _symbol(self, cell: Cell) -> Optional[str]:
        occupant = self.occupant(cell)
        match occupant:
            case Token(color=color, shape=shape):
                return TOKEN_TO_TEXT[(color, shape)]
            case Totem(shape=shape):
                return TOTEM_TO_TEXT[shape]
            case _:
                return None

    # --- QUERIES ---
    def cells(self) -> Iterator[Cell]:
        return _all_cells(self.size)

    def occupant(self, cell: Cell) -> Occupant:
        return self.grid[cell]

    def totem(self, shape: Shape) -> Totem:
        return self.totems[shape]

    def is_valid_position(self, cell: Cell) -> bool:
        return cell.is_within(self.size)

    def is_cell_empty(self, cell: Cell) -> bool:
        """Cells outside the board are never empty"""
        occupant = self.grid.get(cell)
        return occupant is not None and occupant.kind == OccupantKind.EMPTY

    def all_empty_cells(self) -> list[Cell]:
        """Scanned column by column (x, then y). The opponent policies rely on this order being stable."""
        return [cell for cell in self.cells() if self.is_cell_empty(cell)]

    def occupied_count(self) -> int:
        return self.size * self.size - len(self.all_empty_cells())

    def placed_tokens(self) -> list[Token]:
        return [
            occupant
            for occupant in self.grid.values()
            if isinstance(occupant, Token)
        ]

    def row(self, y: int) -> list[Occupant]:
        return [self.grid[Cell(x, y)] for x in range(self.size)]

    def column(self, x: int) -> list[Occupant]:
        return [self.grid[Cell(x, y)] for y in range(self.size)]

    # --- GRID MECHANICS (no rules checked here) ---
    def place_token(self, cell: Cell, occupant: Occupant) -> None:
        """Silently ignored if the cell is taken"""
        if self.is_cell_empty(cell):
            self.grid[cell] = occupant

    def remove_token(self, cell: Cell) -> None:
        if self.is_valid_position(cell):
            self.grid[cell] = EMPTY

    def move_totem(self, totem: Totem, cell: Cell) -> None:
        """Silently ignored if the target cell is taken"""
        if not self.is_cell_empty(cell):
            return
        self.grid[totem.cell] = EMPTY
        totem.cell = cell
        self.grid[cell] = totem


def _all_cells(size: int) -> Iterator[Cell]:
    for x in range(size):
        for y in range(size):
            yield Cell(x, y)
