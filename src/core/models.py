"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The Game produces a GameModel snapshot after every request; the Service turns it into a response for the presentation layer.
(Decouples the domain objects (Board, Totem, Player, ...) from the information needed to render a game)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PlayerName = str
ShapeName = str
Coordinate = tuple[int, int]


@dataclass
class GameModel:
    """Transport-safe representation of an Oxono session."""

    board: str
    board_size: int
    phase: str
    current_player: PlayerName
    opponent_player: PlayerName
    current_tokens: dict[ShapeName, int]
    opponent_tokens: dict[ShapeName, int]
    totems: dict[ShapeName, Coordinate]
    winner: Optional[PlayerName] = None
    last_placed: Optional[Coordinate] = None
    last_moved_totem: Optional[ShapeName] = None
    can_undo: bool = False
    can_redo: bool = False
    empty_cells: int = field(default=0)
