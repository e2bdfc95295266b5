"""Shared test fixtures for fourline.

Fixtures defined here are available to all tests in the suite without
needing an explicit import.
"""
from __future__ import annotations

import pytest

from fourline.game.board import Board
from fourline.stats.tracker import RatingTracker, StatisticsStore


def play_sequence(columns, width: int = 7, height: int = 6) -> Board:
    """Play the given columns alternately from an empty board."""
    board = Board.empty(width, height)
    for column in columns:
        outcome = board.apply_move(board.player_to_move(), column)
        assert outcome.is_legal, f"move in column {column} rejected: {outcome.rejection}"
        board = outcome.board
    return board


@pytest.fixture()
def play():
    """Return a helper that plays a column sequence from an empty board."""
    return play_sequence


@pytest.fixture()
def empty_board() -> Board:
    return Board.empty()


@pytest.fixture()
def tracker() -> RatingTracker:
    """A tracker with its own empty store."""
    return RatingTracker(StatisticsStore())


@pytest.fixture()
def drawn_columns() -> list[list[int]]:
    """A full 7x6 board with no four in a row anywhere."""
    up = [1, 2, 1, 2, 1, 2]
    down = [2, 1, 2, 1, 2, 1]
    return [up, up, down, down, up, up, down]
