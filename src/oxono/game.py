"""
The Game class is the entrypoint into the domain layer for the service layer (or any other presentation layer).
It owns the board, both players, the command history and the observers, and it is the only place that mutates them.

Queries never change anything. Commands assume the caller checked legality first (ex. is_move_totem_possible before
move_totem): an unchecked illegal command is a precondition violation, not something the Game guards against.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Protocol, Self

from src.core.config import DEFAULT_BOARD_SIZE, TOKENS_PER_SHAPE, GameSettings
from src.core.models import GameModel
from src.oxono import rules
from src.oxono.board import Board
from src.oxono.cell import Cell
from src.oxono.commands import MoveTotemCommand, PlaceTokenCommand
from src.oxono.history import CommandHistory
from src.oxono.opponents import OpponentStrategy, opponent_for_level
from src.oxono.phase import Phase
from src.oxono.pieces import PLAYER_COLORS, Color, Occupant, Shape, Token, Totem
from src.oxono.player import Player

logger = logging.getLogger(__name__)

FIRST_PLAYER = Color.PINK
COMPUTER_COLOR = Color.BLACK


class Observer(Protocol):
    def update(self) -> None: ...


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    players: dict[Color, Player]
    current_color: Color = FIRST_PLAYER
    phase: Phase = Phase.MOVE
    history: CommandHistory = field(default_factory=CommandHistory)
    opponent: Optional[OpponentStrategy] = None
    computer_color: Optional[Color] = None
    winner: Optional[Color] = None
    game_over: bool = False
    # a placement whose end of turn has not run yet
    placement_pending: bool = False
    tokens_per_shape: int = TOKENS_PER_SHAPE
    rng: random.Random = field(default_factory=random.Random)
    observers: list[Observer] = field(default_factory=list)

    @classmethod
    def new_game(
        cls,
        board_size: int = DEFAULT_BOARD_SIZE,
        ai_level: int = 0,
        vs_computer: bool = True,
        tokens_per_shape: int = TOKENS_PER_SHAPE,
        seed: Optional[int] = None,
        starting_board: Optional[str] = None,
    ) -> Self:
        """
        Start a session.
        ----

        * board_size: even, at least 6 (InvalidBoardSizeError otherwise). Ignored when a starting board is given.
        * ai_level: 0 plays randomly, anything higher tries to complete or block alignments.
        * vs_computer: the computer plays the black tokens. Two humans otherwise.
        * starting_board: text notation of a position to start from (mostly for testing).
        """
        rng = random.Random(seed)
        board = (
            Board.from_text(starting_board)
            if starting_board
            else Board.new(board_size, rng)
        )
        players = {
            color: Player.with_tokens(color, tokens_per_shape) for color in PLAYER_COLORS
        }
        game = cls(
            board=board,
            players=players,
            opponent=opponent_for_level(ai_level, rng) if vs_computer else None,
            computer_color=COMPUTER_COLOR if vs_computer else None,
            tokens_per_shape=tokens_per_shape,
            rng=rng,
        )
        logger.info(
            "New %dx%d game (%s).",
            board.size,
            board.size,
            f"computer level {ai_level}" if vs_computer else "two players",
        )
        return game

    @classmethod
    def from_settings(
        cls, settings: GameSettings, starting_board: Optional[str] = None
    ) -> Self:
        return cls.new_game(
            board_size=settings.board_size,
            ai_level=settings.ai_level,
            vs_computer=settings.vs_computer,
            tokens_per_shape=settings.tokens_per_shape,
            seed=settings.seed,
            starting_board=starting_board,
        )

    def to_model(self) -> GameModel:
        """Snapshot for the layers above"""
        last_moved = self.last_moved_totem
        return GameModel(
            board=self.board.to_text(),
            board_size=self.board.size,
            phase=self.phase.name.lower(),
            current_player=self.current_player_name,
            opponent_player=self.opponent_player_name,
            current_tokens=_token_counts(self.current_player),
            opponent_tokens=_token_counts(self.opponent_player),
            totems={
                shape.name.lower(): totem.cell.as_tuple()
                for shape, totem in self.board.totems.items()
            },
            winner=self.winner_name,
            last_placed=self.last_placed.as_tuple() if self.last_placed else None,
            last_moved_totem=last_moved.shape.name.lower() if last_moved else None,
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
            empty_cells=self.empty_cells_count,
        )

    # --- OBSERVERS ---
    def add_observer(self, observer: Observer) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self.observers:
            self.observers.remove(observer)

    def _notify(self) -> None:
        """Observers are only allowed to read the game"""
        for observer in list(self.observers):
            observer.update()

    # --- QUERIES: PLAYERS ---
    @property
    def current_player(self) -> Player:
        return self.players[self.current_color]

    @property
    def opponent_player(self) -> Player:
        return self.players[_other(self.current_color)]

    @property
    def current_player_name(self) -> str:
        return self.current_player.name

    @property
    def opponent_player_name(self) -> str:
        return self.opponent_player.name

    @property
    def winner_name(self) -> Optional[str]:
        return self.players[self.winner].name if self.winner else None

    def token_count(self, shape: Shape) -> int:
        return self.current_player.token_count(shape)

    def opponent_token_count(self, shape: Shape) -> int:
        return self.opponent_player.token_count(shape)

    def has_token_shape(self, shape: Shape) -> bool:
        return self.current_player.has_token_shape(shape)

    def is_game_over(self) -> bool:
        return self.game_over

    def is_computer_turn(self) -> bool:
        return (
            self.opponent is not None
            and not self.game_over
            and self.current_color == self.computer_color
        )

    # --- QUERIES: BOARD ---
    @property
    def last_moved_totem(self) -> Optional[Totem]:
        return self.board.last_moved_totem

    @property
    def last_placed(self) -> Optional[Cell]:
        return self.board.last_placed

    @property
    def empty_cells_count(self) -> int:
        return len(self.board.all_empty_cells())

    def totem(self, shape: Shape) -> Totem:
        return self.board.totem(shape)

    def get_token(self, cell: Cell) -> Occupant:
        return self.board.occupant(cell)

    def is_cell_empty(self, cell: Cell) -> bool:
        return self.board.is_cell_empty(cell)

    def is_valid_position(self, cell: Cell) -> bool:
        return self.board.is_valid_position(cell)

    def free_adjacent_cells(self, cell: Cell) -> list[Cell]:
        return rules.free_adjacent_cells(self.board, cell)

    # --- QUERIES: RULES ---
    def is_move_totem_possible(self, cell: Cell, totem: Totem) -> bool:
        return rules.is_move_totem_possible(self.board, cell, self._own(totem))

    def is_totem_enclaved(self, totem: Totem) -> bool:
        return rules.is_totem_enclaved(self.board, self._own(totem))

    def are_rows_and_columns_occupied(self, totem: Totem) -> bool:
        return rules.are_rows_and_columns_occupied(self.board, self._own(totem))

    def can_place_token_anywhere(self, cell: Cell, totem: Totem) -> bool:
        """Rule when the totem is enclaved: any empty cell, as long as you still hold a token of the totem's shape"""
        return self.board.is_cell_empty(cell) and self.has_token_shape(totem.shape)

    def can_place_token(self, cell: Cell, totem: Totem) -> bool:
        """Normal rule: the cell must touch the totem (no diagonals)"""
        if not rules.is_adjacent_to_totem(cell, self._own(totem)):
            return False
        return self.can_place_token_anywhere(cell, totem)

    def check_victory(self, cell: Cell) -> bool:
        return rules.check_victory(self.board, cell)

    def legal_totem_moves(self, totem: Totem) -> list[Cell]:
        return [
            cell
            for cell in self.board.all_empty_cells()
            if self.is_move_totem_possible(cell, totem)
        ]

    def legal_placements(self) -> list[Cell]:
        """Cells the current player may put a token on right now (only meaningful in the INSERT phase)"""
        totem = self.last_moved_totem
        if self.phase != Phase.INSERT or totem is None:
            return []
        placement_rule = (
            self.can_place_token_anywhere
            if self.is_totem_enclaved(totem)
            else self.can_place_token
        )
        return [
            cell for cell in self.board.all_empty_cells() if placement_rule(cell, totem)
        ]

    def can_undo(self) -> bool:
        return self.phase != Phase.CHOICE and self.history.can_undo()

    def can_redo(self) -> bool:
        return self.phase != Phase.CHOICE and self.history.can_redo()

    # --- COMMANDS ---
    def move_totem(self, cell: Cell, totem: Totem) -> None:
        """Unchecked: call is_move_totem_possible first"""
        totem = self._own(totem)
        command = MoveTotemCommand(
            board=self.board,
            totem=totem,
            from_cell=totem.cell,
            to_cell=cell,
            previous_moved_totem=self.board.last_moved_totem,
            player_color=self.current_color,
        )
        self.history.execute(command)
        self.phase = Phase.INSERT
        self._notify()

    def place_token(self, cell: Cell, totem: Totem) -> None:
        """Unchecked: call can_place_token (or can_place_token_anywhere if the totem is enclaved) first"""
        command = PlaceTokenCommand(
            board=self.board,
            player=self.current_player,
            cell=cell,
            token=Token(self.current_color, totem.shape),
            previous_placed=self.board.last_placed,
        )
        self.history.execute(command)
        self.phase = Phase.MOVE
        self.placement_pending = True
        self._notify()

    def switch_player(self) -> None:
        self.current_color = _other(self.current_color)
        self._notify()

    def undo(self) -> None:
        """
        Revert the last command. The turn goes back to whoever issued it, in the phase it was issued in.
        Nothing happens on an empty history or once the game is over.
        """
        if self.phase == Phase.CHOICE:
            return
        command = self.history.undo()
        if command is None:
            return
        self.placement_pending = False
        self.current_color = command.player_color
        self.phase = command.phase_before
        self._notify()

    def redo(self) -> None:
        """A redone placement ends the turn again (victory check, next player, computer answer)."""
        if self.phase == Phase.CHOICE:
            return
        command = self.history.redo()
        if command is None:
            return
        self.current_color = command.player_color
        self.phase = command.phase_after
        self._notify()
        if isinstance(command, PlaceTokenCommand):
            self.placement_pending = True
            self.end_turn()

    def start(self, board_size: Optional[int] = None) -> None:
        """Back to the initial state, with a fresh board (of the same size unless another one is requested)"""
        self.board = Board.new(
            self.board.size if board_size is None else board_size, self.rng
        )
        self.players = {
            color: Player.with_tokens(color, self.tokens_per_shape)
            for color in PLAYER_COLORS
        }
        self.current_color = FIRST_PLAYER
        self.phase = Phase.MOVE
        self.history.clear()
        self.winner = None
        self.game_over = False
        self.placement_pending = False
        logger.info("Game restarted on a %dx%d board.", self.board.size, self.board.size)
        self._notify()

    def abandon_game(self) -> None:
        """Ends the game without a winner"""
        self.game_over = True
        self.phase = Phase.CHOICE
        logger.info("Game abandoned.")
        self._notify()

    def still_has_tokens(self) -> bool:
        """
        False only when NEITHER player has a token left: the game is then abandoned.
        (A single player without tokens is simply skipped.)
        """
        if self.current_player.has_tokens() or self.opponent_player.has_tokens():
            return True
        self.abandon_game()
        return False

    def play_opponent_turn(self) -> None:
        """Let the computer play its totem move and token placement (only if it is its turn)"""
        if self.is_computer_turn() and self.opponent is not None:
            self.opponent.play(self, self.board)
        self._notify()

    def end_turn(self) -> None:
        """
        Called after a token was placed. Runs once per placement: any further call is ignored.
        ----

        1. The placement completed an alignment? The current player wins.
        2. Otherwise the other player is up. A player without tokens is skipped, and if nobody has any left the game is abandoned.
        3. The computer plays right away when it is its turn, and its placement goes through the same checks.
        """
        if (
            self.phase != Phase.MOVE
            or not self.placement_pending
            or self.last_placed is None
        ):
            return
        self.placement_pending = False
        if self.check_victory(self.last_placed):
            self._declare_winner()
            return
        self._next_player()

    # --- PRIVATE HELPERS ---
    def _own(self, totem: Totem) -> Totem:
        """Callers may hold a stale/copied totem. Always act on the board's own totem of that shape."""
        return self.board.totem(totem.shape)

    def _declare_winner(self) -> None:
        self.winner = self.current_color
        self.game_over = True
        self.phase = Phase.CHOICE
        logger.info("%s wins.", self.current_player_name)
        self._notify()

    def _next_player(self) -> None:
        self.switch_player()
        if not self.still_has_tokens():
            return
        if not self.current_player.has_tokens():
            logger.info("%s has no tokens left and is skipped.", self.current_player_name)
            self.switch_player()

        if self.is_computer_turn():
            self._play_computer_turn()

    def _play_computer_turn(self) -> None:
        tokens_before = len(self.board.placed_tokens())
        self.play_opponent_turn()

        if len(self.board.placed_tokens()) == tokens_before:
            # nothing could be moved, hand the turn back
            logger.warning("%s could not play, passing.", self.current_player_name)
            if self.phase == Phase.MOVE:
                self.switch_player()
            return
        self.end_turn()


def _other(color: Color) -> Color:
    return Color.BLACK if color == Color.PINK else Color.PINK


def _token_counts(player: Player) -> dict[str, int]:
    return {shape.name.lower(): player.token_count(shape) for shape in Shape}
