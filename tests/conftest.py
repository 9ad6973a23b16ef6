"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable
from unittest.mock import Mock

import pytest

from src.oxono.board import Board
from src.oxono.game import Game

# 6x6, cross totem on (2,2), circle totem on (3,3), nothing else
STARTING_BOARD = "6/6/2+3/3@2/6/6"


@pytest.fixture
def starting_notation() -> str:
    return STARTING_BOARD


@pytest.fixture
def starting_board() -> Board:
    return Board.from_text(STARTING_BOARD)


@pytest.fixture
def two_player_game() -> Callable[..., Game]:
    """Call the inner function with a board notation (defaults to STARTING_BOARD). No computer involved."""

    def _create_game(board: str = STARTING_BOARD, **kwargs) -> Game:
        return Game.new_game(
            vs_computer=False, starting_board=board, seed=1, **kwargs
        )

    return _create_game


@pytest.fixture
def observer() -> Mock:
    """Anything with an update() method can observe a game"""
    return Mock(spec=["update"])
