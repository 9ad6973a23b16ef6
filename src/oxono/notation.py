"""
Text notation of a board position, in the spirit of the board part of a FEN string.

ex. the starting position of a 6x6 board:
6/6/2+3/3@2/6/6
means:
* rows are read top (y = 0) to bottom, separated by slashes
* inside a row, cells are read left (x = 0) to right
* a number denotes that many consecutive empty cells (may have several digits on big boards)
* X / O are the pink cross / circle tokens, x / o the black ones
* + is the cross totem, @ the circle totem
"""

from typing import Optional

from src.core.config import validate_board_size
from src.core.exceptions import InvalidBoardSizeError, InvalidNotationError
from src.oxono.pieces import Color, Shape

ROW_SEPARATOR = "/"
EMPTY_SYMBOL = "."  # only used internally, never written out

TOKEN_TO_TEXT: dict[tuple[Color, Shape], str] = {
    (Color.PINK, Shape.CROSS): "X",
    (Color.PINK, Shape.CIRCLE): "O",
    (Color.BLACK, Shape.CROSS): "x",
    (Color.BLACK, Shape.CIRCLE): "o",
}
TEXT_TO_TOKEN: dict[str, tuple[Color, Shape]] = {
    value: key for key, value in TOKEN_TO_TEXT.items()
}

TOTEM_TO_TEXT: dict[Shape, str] = {Shape.CROSS: "+", Shape.CIRCLE: "@"}
TEXT_TO_TOTEM: dict[str, Shape] = {value: key for key, value in TOTEM_TO_TEXT.items()}


def expand_row(row: str) -> list[str]:
    """One symbol per cell, empty cells become EMPTY_SYMBOL"""
    symbols: list[str] = []
    digits = ""
    for character in row:
        if character.isdigit():
            digits += character
            continue
        if digits:
            symbols.extend([EMPTY_SYMBOL] * int(digits))
            digits = ""
        if character not in TEXT_TO_TOKEN and character not in TEXT_TO_TOTEM:
            raise InvalidNotationError(
                f"Unknown symbol {character!r} in row {row!r}."
            )
        symbols.append(character)
    if digits:
        symbols.extend([EMPTY_SYMBOL] * int(digits))
    return symbols


def parse_board(text: str) -> list[list[str]]:
    """
    Split the notation into rows of symbols and check its structure.
    ----

    * the grid is square, with a valid board size
    * every row has exactly `size` cells
    * there is exactly one totem of each shape
    """
    rows = [expand_row(row) for row in text.strip().split(ROW_SEPARATOR)]
    size = len(rows)
    try:
        validate_board_size(size)
    except InvalidBoardSizeError as err:
        raise InvalidNotationError(f"Invalid board notation {text!r}: {err}") from err

    for y, row in enumerate(rows):
        if len(row) != size:
            raise InvalidNotationError(
                f"Row {y} has {len(row)} cells, expected {size}: {text!r}"
            )

    flat = [symbol for row in rows for symbol in row]
    for shape, symbol in TOTEM_TO_TEXT.items():
        count = flat.count(symbol)
        if count != 1:
            raise InvalidNotationError(
                f"Expected exactly one {shape.name.lower()} totem, found {count}: {text!r}"
            )
    return rows


def render_row(symbols: list[Optional[str]]) -> str:
    """Reverse of expand_row. None marks an empty cell."""
    characters: list[str] = []
    empty_count = 0
    for symbol in symbols:
        if symbol is None:
            empty_count += 1
            continue
        if empty_count > 0:
            characters.append(str(empty_count))
            empty_count = 0
        characters.append(symbol)

    # an entirely empty row is still written as a number
    if empty_count > 0:
        characters.append(str(empty_count))
    return "".join(characters)


def is_valid_notation(text: str) -> bool:
    try:
        parse_board(text)
    except InvalidNotationError:
        return False
    return True
