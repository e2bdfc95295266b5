"""
validation.py - Structural checks for boards received from outside the engine

The engine never produces an invalid board from valid input, so these checks
are not run on ordinary moves. They are used when a board arrives in wire form
(Board.from_columns) and by the test-suite.
"""

from typing import Sequence

import numpy as np

from fourline.utils import (GRID_DTYPE, Player, check_token_counts,
                            find_winning_slots, render_board)

VALID_SLOT_VALUES = frozenset(player.value for player in Player)


class InvalidBoardError(ValueError):
    """A board that cannot arise from legal play."""


def _describe(columns) -> str:
    try:
        return "\n" + render_board(np.array(columns, dtype=GRID_DTYPE))
    except (TypeError, ValueError, IndexError):
        return " " + repr(columns)


def check_board_shape(columns: Sequence[Sequence[int]]) -> None:
    """
    Check that columns form a rectangular 2D sequence of 0, 1 and 2.

    This is the minimum a board needs before it can be stored in a grid,
    whether or not the position could arise from legal play.

    Raises:
        InvalidBoardError: naming the first rule the board breaks
    """
    if (isinstance(columns, (str, bytes)) or not isinstance(columns, Sequence)
            or not columns or not all(
                isinstance(column, Sequence) and not isinstance(column, (str, bytes))
                for column in columns)):
        raise InvalidBoardError(f"The board is not a 2D array:{_describe(columns)}")

    height = len(columns[0])
    if height == 0 or any(len(column) != height for column in columns):
        raise InvalidBoardError(f"The board is not rectangular: {columns!r}")

    if not all(
            not isinstance(slot, bool) and isinstance(slot, (int, np.integer))
            and slot in VALID_SLOT_VALUES
            for column in columns for slot in column):
        raise InvalidBoardError(f"The board contains invalid tokens: {columns!r}")


def validate_board(columns: Sequence[Sequence[int]]) -> None:
    """
    Check that columns describe a reachable Connect Four position.

    A board is valid when it is a rectangular 2D sequence of 0, 1 and 2,
    player one has as many tokens as player two or exactly one more, no
    column has an empty slot below a token, and at most one player has a
    winning run.

    Raises:
        InvalidBoardError: naming the first rule the board breaks
    """
    check_board_shape(columns)
    grid = np.array(columns, dtype=GRID_DTYPE)

    ones, twos = check_token_counts(grid)
    if ones not in (twos, twos + 1):
        raise InvalidBoardError(
            "There is an imbalance of tokens on the board. "
            f"Player 1 has {ones}, Player 2 has {twos}:{_describe(columns)}")

    for column in grid:
        filled = np.count_nonzero(column != Player.EMPTY.value)
        if np.any(column[:filled] == Player.EMPTY.value):
            raise InvalidBoardError(
                f"There are empty slots below filled ones:{_describe(columns)}")

    winners = {int(grid[column, row]) for column, row in find_winning_slots(grid)}
    if len(winners) > 1:
        raise InvalidBoardError(
            f"The board is winning for both players:{_describe(columns)}")


def is_valid_board(columns: Sequence[Sequence[int]]) -> bool:
    """Non-raising form of validate_board."""
    try:
        validate_board(columns)
    except InvalidBoardError:
        return False
    return True
