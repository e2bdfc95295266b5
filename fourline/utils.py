"""
utils.py - Constants, enumerations and grid helpers for the fourline engine

This module provides the constants, enumerations and numpy helpers shared by
the board engine, the game session and the rating tracker. Win detection lives
here: one primitive finds winning runs inside a single column, and every other
axis is reduced to it by transposing or staggering the grid.

Grids are numpy arrays of shape (width, height) indexed as grid[column, row],
with row 0 at the bottom.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Sequence, Tuple

import numpy as np

# Board constants
DEFAULT_WIDTH = 7
DEFAULT_HEIGHT = 6
CONNECT_N = 4  # Number of tokens in a row to win

# Rating constants
INITIAL_ELO = 100.0
ELO_K_FACTOR = 40
ELO_SCALE = 400

GRID_DTYPE = np.int8

# Glyph tables for rendering, indexed by slot value
TOKEN_STRINGS: Dict[str, Tuple[str, str, str]] = {
    "default": ("0", "1", "2"),
    "disks": ("⚫", "\U0001f534", "\U0001f7e1"),
    "zombies": ("\U0001f7eb", "\U0001f6a7", "\U0001f9df"),
    "ascii": (".", "X", "O"),
}

Coordinate = Tuple[int, int]


class Player(Enum):
    """Enumeration representing players and slot states."""
    EMPTY = 0
    ONE = 1    # First player
    TWO = 2    # Second player

    def other(self) -> 'Player':
        """Get the other player."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    def __str__(self):
        if self == Player.EMPTY:
            return " "
        elif self == Player.ONE:
            return "X"
        else:
            return "O"


class GameResult(Enum):
    """
    Enumeration representing the game outcome.

    The values of the finished outcomes are the result codes accepted by
    the rating tracker.
    """
    IN_PROGRESS = -1
    DRAW = 0
    PLAYER_ONE_WIN = 1
    PLAYER_TWO_WIN = 2

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Player:
        """The winning seat, or Player.EMPTY for draws and unfinished games."""
        if self == GameResult.PLAYER_ONE_WIN:
            return Player.ONE
        if self == GameResult.PLAYER_TWO_WIN:
            return Player.TWO
        return Player.EMPTY

    @classmethod
    def for_winner(cls, player: Player) -> 'GameResult':
        if player == Player.ONE:
            return cls.PLAYER_ONE_WIN
        if player == Player.TWO:
            return cls.PLAYER_TWO_WIN
        return cls.DRAW


class Direction(Enum):
    """Enumeration representing the axes checked for wins."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    DIAGONAL_UP = "diagonal_up"  # Bottom-left to top-right
    DIAGONAL_DOWN = "diagonal_down"  # Top-left to bottom-right


def to_player(value) -> Player:
    """
    Coerce an int or Player into a Player.

    Raises:
        ValueError: if value does not name a slot state
    """
    if isinstance(value, Player):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"Not a player: {value!r}")
    return Player(int(value))


def winning_indices_in_line(line: Sequence[int], connect_n: int = CONNECT_N) -> List[int]:
    """
    Find the indices of every maximal run of equal non-empty tokens.

    Args:
        line: One column (or a row of a transposed grid)
        connect_n: Minimum run length that counts as a win

    Returns:
        Indices of all slots lying on a run of at least connect_n, ascending
    """
    indices = []
    length = len(line)
    start = 0
    for index in range(1, length + 1):
        if index < length and line[index] == line[start]:
            continue
        if line[start] != Player.EMPTY.value and index - start >= connect_n:
            indices.extend(range(start, index))
        start = index
    return indices


def winning_vertical_slots(grid: np.ndarray) -> List[Coordinate]:
    """Coordinates (column, row) on vertical winning runs."""
    return [
        (column_index, row_index)
        for column_index, column in enumerate(grid)
        for row_index in winning_indices_in_line(column)
    ]


def winning_horizontal_slots(grid: np.ndarray) -> List[Coordinate]:
    """Coordinates on horizontal winning runs, found on the transposed grid."""
    return [(column, row) for row, column in winning_vertical_slots(grid.T)]


def negative_stagger(grid: np.ndarray) -> np.ndarray:
    """
    Shift column i up by i slots, padding with empties.

    Descending diagonals of the input become rows of the result.
    """
    width, height = grid.shape
    staggered = np.zeros((width, height + width - 1), dtype=grid.dtype)
    for index in range(width):
        staggered[index, index:index + height] = grid[index]
    return staggered


def positive_stagger(grid: np.ndarray) -> np.ndarray:
    """
    Shift column i up by width - 1 - i slots, padding with empties.

    Ascending diagonals of the input become rows of the result.
    """
    return negative_stagger(grid[::-1])[::-1]


def winning_positive_diagonal_slots(grid: np.ndarray) -> List[Coordinate]:
    """Coordinates on ascending diagonal winning runs."""
    width = grid.shape[0]
    return [
        (column, row - (width - 1 - column))
        for column, row in winning_horizontal_slots(positive_stagger(grid))
    ]


def winning_negative_diagonal_slots(grid: np.ndarray) -> List[Coordinate]:
    """Coordinates on descending diagonal winning runs."""
    return [
        (column, row - column)
        for column, row in winning_horizontal_slots(negative_stagger(grid))
    ]


def winning_slots_by_direction(grid: np.ndarray) -> Dict[Direction, List[Coordinate]]:
    """
    Group winning coordinates by the axis they were found on.

    A coordinate shared by runs on two axes appears under both.
    """
    if grid.size == 0:
        return {direction: [] for direction in Direction}
    return {
        Direction.VERTICAL: winning_vertical_slots(grid),
        Direction.HORIZONTAL: winning_horizontal_slots(grid),
        Direction.DIAGONAL_UP: winning_positive_diagonal_slots(grid),
        Direction.DIAGONAL_DOWN: winning_negative_diagonal_slots(grid),
    }


def find_winning_slots(grid: np.ndarray) -> FrozenSet[Coordinate]:
    """
    Collect every coordinate participating in any winning run.

    Returns:
        Deduplicated set of (column, row) coordinates, empty if nobody has won
    """
    slots = set()
    for coordinates in winning_slots_by_direction(grid).values():
        slots.update((int(column), int(row)) for column, row in coordinates)
    return frozenset(slots)


def check_token_counts(grid: np.ndarray) -> Tuple[int, int]:
    """Return the number of (player one, player two) tokens on the grid."""
    return (int(np.count_nonzero(grid == Player.ONE.value)),
            int(np.count_nonzero(grid == Player.TWO.value)))


def check_glyphs(token_glyphs: Sequence[str]) -> Sequence[str]:
    if len(token_glyphs) != 3:
        raise ValueError(
            f"A glyph table needs exactly 3 entries, got {len(token_glyphs)}")
    return token_glyphs


def render_board(grid: np.ndarray, token_glyphs: Sequence[str] = TOKEN_STRINGS["default"]) -> str:
    """
    Render the grid as text, highest row first.

    Args:
        grid: The board grid
        token_glyphs: Three strings for empty, player one and player two

    Returns:
        Rows joined by newlines, slots within a row joined by single spaces
    """
    glyphs = check_glyphs(token_glyphs)
    width, height = grid.shape
    return "\n".join(
        " ".join(glyphs[int(grid[column, row])] for column in range(width))
        for row in range(height - 1, -1, -1)
    )


def render_board_ascii(grid: np.ndarray, token_glyphs: Sequence[str] = TOKEN_STRINGS["ascii"]) -> str:
    """
    Render the grid framed with borders and column numbers, for the CLI.

    Args:
        grid: The board grid
        token_glyphs: Three single-character glyphs

    Returns:
        ASCII representation of the board
    """
    width = grid.shape[0]
    result = ["|" + "-" * (width * 2 - 1) + "|"]
    for line in render_board(grid, token_glyphs).split("\n"):
        result.append("|" + line + "|")
    result.append("|" + "-" * (width * 2 - 1) + "|")

    # Column numbers wrap after 9 to keep the frame aligned
    result.append("|" + " ".join(str(i % 10) for i in range(width)) + "|")

    return "\n".join(result)
