"""Orchestration between a presentation layer (console, GUI, ...) and the Game. One service instance drives one session."""

import logging
from typing import Optional

from src.api.models import (
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveTotemRequest,
    NewGameRequest,
    PlaceTokenRequest,
)
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.models import GameModel
from src.oxono.cell import Cell
from src.oxono.game import Game, Observer
from src.oxono.phase import Phase
from src.oxono.pieces import Shape

logger = logging.getLogger(__name__)


class OxonoService:
    """Validates requests before handing them to the Game (whose commands assume legal input)."""

    def __init__(self) -> None:
        self._game: Optional[Game] = None
        self._observers: list[Observer] = []

    # -- Session ---
    def new_game(self, request: NewGameRequest) -> GameResponse:
        """Start (or replace) the session with the requested settings."""
        self._game = Game.from_settings(request, starting_board=request.starting_board)
        for observer in self._observers:
            self._game.add_observer(observer)
        return self._create_game_response(self._game.to_model())

    def restart(self) -> GameResponse:
        """Same settings, fresh board."""
        game = self._fetch_game()
        game.start()
        return self._create_game_response(game.to_model())

    def get_state(self) -> GameResponse:
        game = self._fetch_game()
        return self._create_game_response(game.to_model())

    def add_observer(self, observer: Observer) -> None:
        """Observers survive a new game: they are attached to every session this service creates."""
        self._observers.append(observer)
        if self._game is not None:
            self._game.add_observer(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
        if self._game is not None:
            self._game.remove_observer(observer)

    # -- Turn ---
    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """
        MOVE phase: destinations of the totem with the requested shape.
        INSERT phase: cells where the token may go.
        """
        game = self._fetch_game()
        if game.phase == Phase.MOVE:
            if request.shape is None:
                raise GameStateError("Pick a totem shape to list its moves.")
            totem = game.totem(Shape[request.shape.name])
            cells = game.legal_totem_moves(totem)
        else:
            cells = game.legal_placements()

        return LegalMovesResponse(
            phase=game.phase.name.lower(),
            player_name=game.current_player_name,
            cells=[cell.as_tuple() for cell in cells],
        )

    def move_totem(self, request: MoveTotemRequest) -> GameResponse:
        game = self._fetch_game()
        self._assert_phase(game, Phase.MOVE)

        shape = Shape[request.shape.name]
        if not game.has_token_shape(shape):
            raise IllegalMoveError(
                f"{game.current_player_name} has no {shape.name.lower()} tokens left: move the other totem."
            )

        cell = Cell(request.x, request.y)
        totem = game.totem(shape)
        if not game.is_move_totem_possible(cell, totem):
            raise IllegalMoveError(
                f"Totem {shape.symbol} cannot move to {cell.as_tuple()}."
            )

        game.move_totem(cell, totem)
        return self._create_game_response(game.to_model())

    def place_token(self, request: PlaceTokenRequest) -> GameResponse:
        """Place next to the totem that just moved (or anywhere if it is enclaved), then finish the turn."""
        game = self._fetch_game()
        self._assert_phase(game, Phase.INSERT)

        # for the typechecker: the INSERT phase always follows a totem move
        totem = game.last_moved_totem
        assert totem is not None

        cell = Cell(request.x, request.y)
        allowed = (
            game.can_place_token_anywhere(cell, totem)
            if game.is_totem_enclaved(totem)
            else game.can_place_token(cell, totem)
        )
        if not allowed:
            raise IllegalMoveError(f"Cannot place a token on {cell.as_tuple()}.")

        game.place_token(cell, totem)
        game.end_turn()
        return self._create_game_response(game.to_model())

    def undo(self) -> GameResponse:
        """Against the computer, keep undoing until it is the human's turn again."""
        game = self._fetch_game()
        game.undo()
        while game.is_computer_turn() and game.can_undo():
            game.undo()
        return self._create_game_response(game.to_model())

    def redo(self) -> GameResponse:
        game = self._fetch_game()
        game.redo()
        return self._create_game_response(game.to_model())

    def abandon(self) -> GameResponse:
        game = self._fetch_game()
        game.abandon_game()
        return self._create_game_response(game.to_model())

    # -- Internal helpers --
    def _fetch_game(self) -> Game:
        if self._game is None:
            raise GameStateError("No game in progress. Start a new game first.")
        return self._game

    def _assert_phase(self, game: Game, expected: Phase) -> None:
        if game.phase != expected:
            raise GameStateError(
                f"Expected the {expected.name.lower()} phase, but the game is in the {game.phase.name.lower()} phase."
            )

    def _create_game_response(self, model: GameModel) -> GameResponse:
        return GameResponse(
            board=model.board,
            board_size=model.board_size,
            phase=model.phase,
            current_player=model.current_player,
            opponent_player=model.opponent_player,
            current_tokens=model.current_tokens,
            opponent_tokens=model.opponent_tokens,
            totems=model.totems,
            winner=model.winner,
            last_placed=model.last_placed,
            last_moved_totem=model.last_moved_totem,
            can_undo=model.can_undo,
            can_redo=model.can_redo,
            empty_cells=model.empty_cells,
        )
