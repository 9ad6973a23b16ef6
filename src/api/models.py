"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.config import GameSettings
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Phase, Shape

PlayerName = str
ShapeName = str
Coordinate = tuple[int, int]


# --- REQUEST MODELS ---
class NewGameRequest(GameSettings):
    starting_board: Optional[str] = None

    @field_validator("starting_board")
    @classmethod
    def validate_starting_board(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        if "/" not in value.strip():
            raise InvalidRequestError(
                "Board notation must contain rows separated by '/'."
            )
        return value.strip()


class CellRequest(BaseModel):
    x: int
    y: int

    @field_validator(*["x", "y"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Coordinates cannot be negative, got {value}.")
        return value


class MoveTotemRequest(CellRequest):
    shape: Shape


class PlaceTokenRequest(CellRequest):
    pass


class LegalMovesRequest(BaseModel):
    shape: Optional[Shape] = None


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    board: str
    board_size: int
    phase: Phase
    current_player: PlayerName
    opponent_player: PlayerName
    current_tokens: dict[ShapeName, int]
    opponent_tokens: dict[ShapeName, int]
    totems: dict[ShapeName, Coordinate]
    winner: Optional[PlayerName]
    last_placed: Optional[Coordinate]
    last_moved_totem: Optional[ShapeName]
    can_undo: bool
    can_redo: bool
    empty_cells: int


class LegalMovesResponse(BaseModel):
    phase: Phase
    player_name: PlayerName
    cells: list[Coordinate]
