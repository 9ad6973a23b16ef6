"""
Legality rules of Oxono: totem movement, enclaves, token placement and alignments.

All functions are pure queries on a board: nothing here mutates state.
The Game class wraps them and adds the player-dependent parts (which tokens the current player still holds).
"""

from typing import Iterable, Protocol

from src.oxono.cell import Cell
from src.oxono.pieces import Occupant, OccupantKind, Totem

WINNING_RUN = 4


class Board(Protocol):
    """Just the parts the rules need"""

    size: int

    def occupant(self, cell: Cell) -> Occupant: ...
    def is_valid_position(self, cell: Cell) -> bool: ...
    def is_cell_empty(self, cell: Cell) -> bool: ...
    def row(self, y: int) -> list[Occupant]: ...
    def column(self, x: int) -> list[Occupant]: ...


# --- ADJACENCY ---
def free_adjacent_cells(board: Board, cell: Cell) -> list[Cell]:
    """Empty orthogonal neighbours, listed down, right, up, left"""
    return [
        neighbour
        for neighbour in cell.neighbours()
        if board.is_valid_position(neighbour) and board.is_cell_empty(neighbour)
    ]


def is_totem_enclaved(board: Board, totem: Totem) -> bool:
    """No free orthogonal neighbour. The edge of the board does not count as free."""
    return not free_adjacent_cells(board, totem.cell)


def are_rows_and_columns_occupied(board: Board, totem: Totem) -> bool:
    """The entire row AND the entire column through the totem are full."""
    row_full = all(
        not board.is_cell_empty(Cell(x, totem.y)) for x in range(board.size)
    )
    column_full = all(
        not board.is_cell_empty(Cell(totem.x, y)) for y in range(board.size)
    )
    return row_full and column_full


# --- TOTEM MOVEMENT ---
def is_move_totem_possible(board: Board, target: Cell, totem: Totem) -> bool:
    """
    Can the totem go to the target cell?
    ----

    The rules are evaluated in this exact order, the first one that decides wins:

    1. target must be on the board, empty, and different from where the totem stands.
    2. no diagonal (or any non-straight) move, unless the row AND column of the totem are full.
    3. row AND column full: the totem may jump to any empty cell of the board.
    4. straight move, with at least one free neighbour: fine if the target is one of the free neighbours,
       or if every cell in between is empty.
    5. straight move, no free neighbour at all: the cells in between must be either all empty or all occupied
       (the totem jumps over one block of pieces to the first free cell behind it).
    """
    current = totem.cell

    # 1
    if not board.is_valid_position(target) or not board.is_cell_empty(target):
        return False
    if target == current:
        return False

    enclosed = are_rows_and_columns_occupied(board, totem)

    # 2
    if not current.is_aligned_with(target) and not enclosed:
        return False

    # 3
    if enclosed:
        return True

    # 4
    free_neighbours = free_adjacent_cells(board, current)
    if free_neighbours:
        if target in free_neighbours:
            return True
        return _is_path_empty(board, current, target)

    # 5
    return _is_path_uniform(board, current, target)


def _is_path_empty(board: Board, start: Cell, end: Cell) -> bool:
    return all(board.is_cell_empty(cell) for cell in start.cells_between(end))


def _is_path_uniform(board: Board, start: Cell, end: Cell) -> bool:
    """All cells in between empty, or all of them occupied. A mixed path is blocked."""
    path = start.cells_between(end)
    if all(board.is_cell_empty(cell) for cell in path):
        return True
    return all(not board.is_cell_empty(cell) for cell in path)


# --- TOKEN PLACEMENT ---
def is_adjacent_to_totem(cell: Cell, totem: Totem) -> bool:
    return cell.is_adjacent_to(totem.cell)


# --- VICTORY ---
def check_victory(board: Board, cell: Cell) -> bool:
    """
    Four tokens in a row (horizontal or vertical) through the given cell, sharing either the color or the shape.

    NOTE: Only the lines through the cell are scanned. Pass the cell of the token that was just placed:
    it is the only one that can have completed a new alignment.
    """
    return _has_winning_run(board.row(cell.y)) or _has_winning_run(
        board.column(cell.x)
    )


def _has_winning_run(line: Iterable[Occupant]) -> bool:
    """
    Scan one row/column with two independent counters (same color, same shape).

    A counter restarts at 1 when the property changes, and at 0 on an empty cell or a totem.
    """
    color_count = 0
    shape_count = 0
    color_reference = None
    shape_reference = None
    for occupant in line:
        if occupant.kind != OccupantKind.TOKEN:
            color_count = shape_count = 0
            color_reference = shape_reference = None
            continue

        if color_reference is None or color_reference != occupant.color:
            color_count = 1
            color_reference = occupant.color
        else:
            color_count += 1
            if color_count == WINNING_RUN:
                return True

        if shape_reference is None or shape_reference != occupant.shape:
            shape_count = 1
            shape_reference = occupant.shape
        else:
            shape_count += 1
            if shape_count == WINNING_RUN:
                return True
    return False
