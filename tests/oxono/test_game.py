"""Unit tests for /src/oxono/game.py"""

from typing import Callable
from unittest.mock import Mock

import pytest

from src.core.config import GameSettings
from src.core.exceptions import InvalidBoardSizeError, InvalidNotationError
from src.oxono.cell import Cell
from src.oxono.game import Game
from src.oxono.phase import Phase
from src.oxono.pieces import EMPTY, Color, Shape, Token, Totem

# three pink tokens on (0,1), (1,1), (2,1)
PINK_THREE_IN_A_ROW = "6/XOX3/2+3/3@2/6/6"


def play_turn(game: Game, shape: Shape, move_to: Cell, place_at: Cell) -> None:
    game.move_totem(move_to, game.totem(shape))
    game.place_token(place_at, game.totem(shape))


# -- CONSTRUCTION --
@pytest.mark.parametrize("size", [4, 7, 0])
def test_new_game_invalid_board_size(size: int) -> None:
    with pytest.raises(InvalidBoardSizeError):
        Game.new_game(board_size=size)


def test_new_game_invalid_starting_board() -> None:
    with pytest.raises(InvalidNotationError):
        Game.new_game(starting_board="6/6/6")


def test_new_game_initial_state() -> None:
    game = Game.new_game(board_size=8, vs_computer=False, seed=5)
    assert game.board.size == 8
    assert game.phase == Phase.MOVE
    assert game.current_player_name == "Pink"
    assert game.opponent_player_name == "Black"
    assert game.token_count(Shape.CROSS) == 4
    assert game.opponent_token_count(Shape.CIRCLE) == 4
    assert game.winner is None
    assert not game.is_game_over()
    assert game.empty_cells_count == 62
    assert not game.can_undo()


def test_from_settings() -> None:
    settings = GameSettings(board_size=10, ai_level=1, tokens_per_shape=8, seed=3)
    game = Game.from_settings(settings)
    assert game.board.size == 10
    assert game.token_count(Shape.CIRCLE) == 8
    assert game.computer_color == Color.BLACK
    assert game.opponent is not None


def test_to_model(
    two_player_game: Callable[..., Game], starting_notation: str
) -> None:
    model = two_player_game().to_model()
    assert model.board == starting_notation
    assert model.phase == "move"
    assert model.current_player == "Pink"
    assert model.current_tokens == {"cross": 4, "circle": 4}
    assert model.totems == {"cross": (2, 2), "circle": (3, 3)}
    assert model.empty_cells == 34
    assert model.winner is None
    assert model.last_moved_totem is None


# -- QUERIES --
def test_legal_totem_moves(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    moves = game.legal_totem_moves(game.totem(Shape.CROSS))
    assert len(moves) == 10
    assert Cell(3, 2) in moves
    assert Cell(3, 1) not in moves


def test_rule_queries_resolve_the_board_totem(two_player_game: Callable[..., Game]) -> None:
    """A copied totem standing on another cell still refers to the totem of that shape on the board"""
    game = two_player_game()
    stale = Totem(Shape.CROSS, Cell(0, 0))
    assert game.is_move_totem_possible(Cell(3, 2), stale)
    assert not game.is_move_totem_possible(Cell(1, 0), stale)

    game.move_totem(Cell(3, 2), stale)
    assert game.totem(Shape.CROSS).cell == Cell(3, 2)
    assert stale.cell == Cell(0, 0)


def test_can_place_token(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    game.move_totem(Cell(3, 2), game.totem(Shape.CROSS))
    cross = game.totem(Shape.CROSS)

    assert game.can_place_token(Cell(3, 1), cross)
    assert game.can_place_token(Cell(2, 2), cross)
    assert not game.can_place_token(Cell(0, 0), cross)
    assert not game.can_place_token(Cell(3, 3), cross)  # the other totem
    assert not game.can_place_token(Cell(4, 3), cross)  # diagonal

    game.current_player.tokens[Shape.CROSS] = 0
    assert not game.can_place_token(Cell(3, 1), cross)


def test_can_place_token_anywhere(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    cross = game.totem(Shape.CROSS)
    assert game.can_place_token_anywhere(Cell(0, 0), cross)
    assert not game.can_place_token_anywhere(Cell(3, 3), cross)


def test_legal_placements(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    assert game.legal_placements() == []

    game.move_totem(Cell(3, 2), game.totem(Shape.CROSS))
    assert game.legal_placements() == [Cell(2, 2), Cell(3, 1), Cell(4, 2)]


def test_legal_placements_around_an_enclaved_totem(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game("6/2X3/1o+O2/2x@2/6/6")
    # as if the cross totem just jumped into its enclave
    game.phase = Phase.INSERT
    game.board.last_moved_totem = game.totem(Shape.CROSS)
    assert game.is_totem_enclaved(game.totem(Shape.CROSS))
    assert len(game.legal_placements()) == game.empty_cells_count


# -- COMMANDS --
def test_move_totem(two_player_game: Callable[..., Game], observer: Mock) -> None:
    game = two_player_game()
    game.add_observer(observer)
    game.move_totem(Cell(2, 0), game.totem(Shape.CROSS))

    assert game.phase == Phase.INSERT
    assert game.totem(Shape.CROSS).cell == Cell(2, 0)
    assert game.last_moved_totem is game.totem(Shape.CROSS)
    observer.update.assert_called_once()


def test_place_token(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    play_turn(game, Shape.CIRCLE, Cell(3, 4), Cell(3, 5))

    assert game.phase == Phase.MOVE
    assert game.get_token(Cell(3, 5)) == Token(Color.PINK, Shape.CIRCLE)
    assert game.last_placed == Cell(3, 5)
    assert game.token_count(Shape.CIRCLE) == 3
    assert game.board.occupied_count() == len(game.board.placed_tokens()) + 2


def test_end_turn_hands_over_to_the_other_player(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game()
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    assert game.current_player_name == "Black"
    assert game.phase == Phase.MOVE
    assert game.winner is None


def test_end_turn_only_after_a_placement(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    game.end_turn()
    game.move_totem(Cell(3, 2), game.totem(Shape.CROSS))
    game.end_turn()
    assert game.current_color == Color.PINK
    assert game.phase == Phase.INSERT


def test_end_turn_runs_once_per_placement(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    game.end_turn()
    assert game.current_color == Color.BLACK
    assert game.phase == Phase.MOVE


def test_no_end_of_turn_after_an_undone_totem_move(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game()
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    game.move_totem(Cell(3, 4), game.totem(Shape.CIRCLE))
    game.undo()

    game.end_turn()
    assert game.current_color == Color.BLACK
    assert game.phase == Phase.MOVE


def test_fourth_token_in_a_row_wins(
    two_player_game: Callable[..., Game], observer: Mock
) -> None:
    game = two_player_game(PINK_THREE_IN_A_ROW)
    game.add_observer(observer)
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()

    assert game.check_victory(Cell(3, 1))
    assert game.winner == Color.PINK
    assert game.winner_name == "Pink"
    assert game.phase == Phase.CHOICE
    assert game.is_game_over()
    assert game.to_model().winner == "Pink"
    assert observer.update.call_count == 3


def test_nothing_to_undo_once_the_game_is_over(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game(PINK_THREE_IN_A_ROW)
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    board = game.board.to_text()

    assert not game.can_undo()
    game.undo()
    assert game.board.to_text() == board
    assert game.phase == Phase.CHOICE


def test_player_without_tokens_is_skipped(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    game.players[Color.BLACK].tokens = {Shape.CROSS: 0, Shape.CIRCLE: 0}
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    assert game.current_color == Color.PINK
    assert game.phase == Phase.MOVE


def test_game_is_abandoned_when_nobody_has_tokens(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game()
    game.players[Color.PINK].tokens = {Shape.CROSS: 1, Shape.CIRCLE: 0}
    game.players[Color.BLACK].tokens = {Shape.CROSS: 0, Shape.CIRCLE: 0}
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    assert game.phase == Phase.CHOICE
    assert game.is_game_over()
    assert game.winner is None


def test_still_has_tokens(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    game.players[Color.PINK].tokens = {Shape.CROSS: 0, Shape.CIRCLE: 0}
    assert game.still_has_tokens()

    game.players[Color.BLACK].tokens = {Shape.CROSS: 0, Shape.CIRCLE: 0}
    assert not game.still_has_tokens()
    assert game.phase == Phase.CHOICE
    assert game.winner is None


def test_abandon_game(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    game.abandon_game()
    assert game.is_game_over()
    assert game.phase == Phase.CHOICE
    assert game.winner_name is None


def test_start_resets_everything(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    game.abandon_game()

    game.start(board_size=8)
    assert game.board.size == 8
    assert game.board.occupied_count() == 2
    assert game.current_color == Color.PINK
    assert game.phase == Phase.MOVE
    assert game.token_count(Shape.CROSS) == 4
    assert game.opponent_token_count(Shape.CROSS) == 4
    assert not game.is_game_over()
    assert not game.can_undo()


@pytest.mark.parametrize("size", [0, 7])
def test_start_rejects_an_invalid_board_size(
    two_player_game: Callable[..., Game], size: int
) -> None:
    game = two_player_game()
    with pytest.raises(InvalidBoardSizeError):
        game.start(board_size=size)
    assert game.board.size == 6


# -- UNDO / REDO --
def test_undo_and_redo_restore_identical_states(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game()
    cross = game.totem(Shape.CROSS)
    start = game.board.to_text()

    game.move_totem(Cell(2, 0), cross)
    moved = game.board.to_text()
    game.place_token(Cell(2, 1), cross)
    placed = game.board.to_text()

    game.undo()
    assert game.board.to_text() == moved
    assert game.phase == Phase.INSERT
    assert game.token_count(Shape.CROSS) == 4
    assert game.get_token(Cell(2, 1)) == EMPTY

    game.undo()
    assert game.board.to_text() == start
    assert game.phase == Phase.MOVE
    assert game.last_moved_totem is None
    assert cross.cell == Cell(2, 2)

    game.redo()
    assert game.board.to_text() == moved
    assert game.phase == Phase.INSERT
    assert game.last_moved_totem is cross

    game.redo()
    assert game.board.to_text() == placed
    assert game.last_placed == Cell(2, 1)
    assert game.players[Color.PINK].token_count(Shape.CROSS) == 3
    assert not game.can_redo()
    # the redone placement ended the turn
    assert game.current_color == Color.BLACK


def test_undo_gives_the_turn_back(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    assert game.current_color == Color.BLACK

    game.undo()
    assert game.current_color == Color.PINK
    assert game.phase == Phase.INSERT


def test_redone_placement_ends_the_turn_again(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game()
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()
    played = game.board.to_text()

    game.undo()
    game.redo()
    assert game.board.to_text() == played
    assert game.current_color == Color.BLACK
    assert game.phase == Phase.MOVE


def test_redone_winning_placement_wins_again(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game(PINK_THREE_IN_A_ROW)
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.undo()
    game.redo()
    assert game.winner == Color.PINK
    assert game.phase == Phase.CHOICE


def test_new_move_clears_redo(two_player_game: Callable[..., Game]) -> None:
    game = two_player_game()
    game.move_totem(Cell(2, 0), game.totem(Shape.CROSS))
    game.undo()
    assert game.can_redo()

    game.move_totem(Cell(3, 2), game.totem(Shape.CROSS))
    assert not game.can_redo()


def test_undo_redo_on_empty_history(
    two_player_game: Callable[..., Game], observer: Mock, starting_notation: str
) -> None:
    game = two_player_game()
    game.add_observer(observer)
    game.undo()
    game.redo()
    assert game.board.to_text() == starting_notation
    observer.update.assert_not_called()


# -- OBSERVERS --
def test_observers_are_notified_in_registration_order(
    two_player_game: Callable[..., Game],
) -> None:
    game = two_player_game()
    calls: list[str] = []
    first, second = Mock(spec=["update"]), Mock(spec=["update"])
    first.update.side_effect = lambda: calls.append("first")
    second.update.side_effect = lambda: calls.append("second")
    game.add_observer(first)
    game.add_observer(second)

    game.move_totem(Cell(2, 0), game.totem(Shape.CROSS))
    assert calls == ["first", "second"]


def test_removed_observer_is_not_notified(
    two_player_game: Callable[..., Game], observer: Mock
) -> None:
    game = two_player_game()
    game.add_observer(observer)
    game.remove_observer(observer)
    game.move_totem(Cell(2, 0), game.totem(Shape.CROSS))
    observer.update.assert_not_called()


# -- AGAINST THE COMPUTER --
@pytest.mark.parametrize("ai_level", [0, 1])
def test_computer_answers_right_away(ai_level: int, starting_notation: str) -> None:
    game = Game.new_game(
        ai_level=ai_level, seed=3, starting_board=starting_notation
    )
    play_turn(game, Shape.CROSS, Cell(3, 2), Cell(3, 1))
    game.end_turn()

    assert game.current_color == Color.PINK
    assert game.phase == Phase.MOVE
    assert len(game.board.placed_tokens()) == 2
    assert game.players[Color.BLACK].total_tokens() == 7
    assert not game.is_computer_turn()
