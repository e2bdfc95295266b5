"""Tests for fourline.game.validation."""
from __future__ import annotations

import pytest

from fourline.game.board import Board
from fourline.game.validation import InvalidBoardError, is_valid_board, validate_board


@pytest.mark.parametrize("columns, message", [
    ("not a board", "not a 2D array"),
    ([], "not a 2D array"),
    ([1, 2], "not a 2D array"),
    ([[0, 0], [0]], "not rectangular"),
    ([[], []], "not rectangular"),
    ([[3, 0], [0, 0]], "invalid tokens"),
    ([[True, 0], [0, 0]], "invalid tokens"),
    ([[1.0, 0], [0, 0]], "invalid tokens"),
    ([[2, 0], [0, 0]], "imbalance"),
    ([[1, 1], [0, 0]], "imbalance"),
    ([[0, 1], [2, 0]], "empty slots below filled ones"),
    ([[1, 1, 1, 1], [2, 2, 2, 2]], "winning for both players"),
])
def test_malformed_boards_are_rejected(columns, message) -> None:
    with pytest.raises(InvalidBoardError, match=message):
        validate_board(columns)
    assert not is_valid_board(columns)


@pytest.mark.parametrize("columns", [
    [[0]],
    [[1]],
    [[1, 2], [0, 0]],
    [[1, 1, 1, 1], [2, 2, 2, 0]],
    ((1, 2, 0), (0, 0, 0)),
])
def test_reachable_boards_are_valid(columns) -> None:
    validate_board(columns)
    assert is_valid_board(columns)


def test_invalid_board_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_board([[2]])


def test_from_columns_validates_by_default() -> None:
    with pytest.raises(InvalidBoardError):
        Board.from_columns([[0, 1], [2, 0]])


def test_from_columns_can_skip_validation() -> None:
    board = Board.from_columns([[0, 1], [2, 0]], validate=False)
    assert board.to_columns() == [[0, 1], [2, 0]]


def test_every_legal_position_validates(play) -> None:
    board = play([3, 3, 3, 2, 4, 4, 5, 2, 6])
    validate_board(board.to_columns())
