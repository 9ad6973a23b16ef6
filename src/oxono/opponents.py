"""
Computer opponents

Key idea: strategy pattern. Every policy gets the game and its board and plays one full turn through the public
Game API (one totem move, then one token placement), exactly like a human would.
If no totem can move at all, a policy leaves the game untouched: the caller deals with it.
"""

import logging
import random
from copy import deepcopy
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Protocol

from src.oxono.board import Board
from src.oxono.cell import Cell
from src.oxono.pieces import Occupant, OccupantKind, Shape, Token, Totem
from src.oxono.player import Player
from src.oxono.rules import check_victory

logger = logging.getLogger(__name__)

RUN_LENGTH = 3

# (totem to move, where to move it, where to place the token)
Plan = tuple[Totem, Cell, Cell]


class Game(Protocol):
    """Just the parts the opponent policies need"""

    @property
    def current_player(self) -> Player: ...
    def has_token_shape(self, shape: Shape) -> bool: ...
    def free_adjacent_cells(self, cell: Cell) -> list[Cell]: ...
    def is_move_totem_possible(self, cell: Cell, totem: Totem) -> bool: ...
    def is_totem_enclaved(self, totem: Totem) -> bool: ...
    def can_place_token(self, cell: Cell, totem: Totem) -> bool: ...
    def can_place_token_anywhere(self, cell: Cell, totem: Totem) -> bool: ...
    def move_totem(self, cell: Cell, totem: Totem) -> None: ...
    def place_token(self, cell: Cell, totem: Totem) -> None: ...


class OpponentStrategy(Protocol):
    def play(self, game: Game, board: Board) -> None: ...


def usable_totems(game: Game, board: Board) -> list[Totem]:
    """Totems whose shape the current player can still supply"""
    return [board.totem(shape) for shape in Shape if game.has_token_shape(shape)]


# --- BASELINE ---
class RandomOpponentStrategy:
    """Random totem, random legal destination, then a token next to the totem (anywhere if it is enclaved)."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def play(self, game: Game, board: Board) -> None:
        totems = usable_totems(game, board)
        self.rng.shuffle(totems)
        for totem in totems:
            destination = self._move_totem(game, board, totem)
            if destination is not None:
                self._place_token(game, board, totem, destination)
                return
        logger.warning(
            "%s cannot move any totem, turn left untouched.", game.current_player
        )

    def _move_totem(self, game: Game, board: Board, totem: Totem) -> Optional[Cell]:
        """Try the empty cells in random order until one is a legal destination"""
        candidates = board.all_empty_cells()
        self.rng.shuffle(candidates)
        for cell in candidates:
            if game.is_move_totem_possible(cell, totem):
                game.move_totem(cell, totem)
                return cell
        return None

    def _place_token(
        self, game: Game, board: Board, totem: Totem, destination: Cell
    ) -> None:
        if game.is_totem_enclaved(totem):
            candidates = [
                cell
                for cell in board.all_empty_cells()
                if game.can_place_token_anywhere(cell, totem)
            ]
            if candidates:
                game.place_token(self.rng.choice(candidates), totem)
            return

        for cell in game.free_adjacent_cells(destination):
            if game.can_place_token(cell, totem):
                game.place_token(cell, totem)
                return


# --- HEURISTIC ---
@dataclass(frozen=True)
class Run:
    """Consecutive tokens sharing a color or a shape, along one row or column"""

    cells: tuple[Cell, ...]

    def ends(self) -> tuple[Cell, Cell]:
        """The cells right before the first and right after the last token of the run"""
        first, second = self.cells[0], self.cells[1]
        dx, dy = second.x - first.x, second.y - first.y
        return first.shifted(-dx, -dy), self.cells[-1].shifted(dx, dy)


def _runs_in_line(
    board: Board, line: list[Cell], key: Callable[[Token], object]
) -> list[Run]:
    """Maximal runs of exactly RUN_LENGTH tokens that agree on `key`. Empty cells and totems break a run."""
    runs: list[Run] = []
    current: list[Cell] = []
    reference: object = None

    def flush() -> None:
        if len(current) == RUN_LENGTH:
            runs.append(Run(tuple(current)))

    for cell in line:
        occupant: Occupant = board.occupant(cell)
        if occupant.kind != OccupantKind.TOKEN:
            flush()
            current = []
            reference = None
            continue
        value = key(occupant)
        if current and value == reference:
            current.append(cell)
        else:
            flush()
            current = [cell]
            reference = value
    flush()
    return runs


def find_runs(board: Board) -> list[Run]:
    """All runs of three (same color or same shape) on rows, then on columns"""
    lines = [[Cell(x, y) for x in range(board.size)] for y in range(board.size)]
    lines += [[Cell(x, y) for y in range(board.size)] for x in range(board.size)]

    runs: list[Run] = []
    for line in lines:
        runs.extend(_runs_in_line(board, line, lambda token: token.color))
        runs.extend(_runs_in_line(board, line, lambda token: token.shape))
    return runs


def target_cells(board: Board) -> list[Cell]:
    """Empty cells that would extend a run of three to four (no duplicates, in order found)"""
    targets: list[Cell] = []
    for run in find_runs(board):
        for cell in run.ends():
            if (
                board.is_valid_position(cell)
                and board.is_cell_empty(cell)
                and cell not in targets
            ):
                targets.append(cell)
    return targets


class BlockOrWinStrategy:
    """
    Looks for runs of three on the board.
    ----

    1. If a totem can be moved next to the end of such a run and the token placed there wins: do it.
    2. Otherwise take the end cell anyway (blocks the opponent's alignment).
    3. No run of three (or no totem can reach one)? Fall back to the random baseline.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.fallback = RandomOpponentStrategy(self.rng)

    def play(self, game: Game, board: Board) -> None:
        targets = target_cells(board)
        plan = None
        if targets:
            plans = list(self._candidate_plans(game, board, targets))
            plan = self._winning_plan(game, board, plans) or next(iter(plans), None)

        if plan is None:
            logger.debug("No run of three to complete or block, playing randomly.")
            self.fallback.play(game, board)
            return

        totem, move_to, place_at = plan
        logger.debug(
            "Moving %s to %s and placing on %s.", totem, move_to, place_at
        )
        game.move_totem(move_to, totem)
        game.place_token(place_at, totem)

    def _candidate_plans(
        self, game: Game, board: Board, targets: list[Cell]
    ) -> Iterator[Plan]:
        """Legal (move, placement) combinations that end with a token on one of the target cells"""
        totems = usable_totems(game, board)
        for target in targets:
            for move_to in game.free_adjacent_cells(target):
                for totem in totems:
                    if game.is_move_totem_possible(move_to, totem):
                        yield totem, move_to, target

    def _winning_plan(
        self, game: Game, board: Board, plans: list[Plan]
    ) -> Optional[Plan]:
        """Play every plan on a copy of the board and keep the first one that wins"""
        color = game.current_player.color
        for totem, move_to, place_at in plans:
            trial = deepcopy(board)
            trial.move_totem(trial.totem(totem.shape), move_to)
            trial.place_token(place_at, Token(color, totem.shape))
            if check_victory(trial, place_at):
                return totem, move_to, place_at
        return None


def opponent_for_level(
    ai_level: int, rng: Optional[random.Random] = None
) -> OpponentStrategy:
    """0 is the random baseline, anything else the block-or-win heuristic"""
    if ai_level == 0:
        return RandomOpponentStrategy(rng)
    return BlockOrWinStrategy(rng)
