"""
A cell on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

Vector = tuple[int, int]

# Order matters: neighbours are always listed down, right, up, left.
ORTHOGONAL_DIRECTIONS: tuple[Vector, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


@dataclass(frozen=True)
class Cell:
    x: int
    y: int

    def is_within(self, size: int) -> bool:
        return (0 <= self.x < size) and (0 <= self.y < size)

    def shifted(self, dx: int, dy: int) -> Cell:
        return Cell(self.x + dx, self.y + dy)

    def neighbours(self) -> list[Cell]:
        """The four orthogonal neighbours. NOTE: may lie outside the board, callers check the bounds."""
        return [self.shifted(dx, dy) for dx, dy in ORTHOGONAL_DIRECTIONS]

    def distance(self, other: Cell) -> int:
        """Manhattan distance"""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_adjacent_to(self, other: Cell) -> bool:
        return self.distance(other) == 1

    def is_aligned_with(self, other: Cell) -> bool:
        """Same row or same column"""
        return self.x == other.x or self.y == other.y

    def cells_between(self, other: Cell) -> list[Cell]:
        """Cells strictly between two cells on the same row or column (empty list otherwise)."""
        if self.x == other.x:
            low, high = sorted((self.y, other.y))
            return [Cell(self.x, y) for y in range(low + 1, high)]
        if self.y == other.y:
            low, high = sorted((self.x, other.x))
            return [Cell(x, self.y) for x in range(low + 1, high)]
        return []

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)
