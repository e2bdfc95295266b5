"""
board.py - Immutable board representation and move application for Connect Four

This module implements the Board value type. A Board never changes once it has
been created: applying a move returns a MoveResult that either carries a new
Board or the reason the move was rejected. Whose turn it is, whether the game
has ended and who has won are all derived from the grid on demand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from fourline.debug import debug
from fourline.game.validation import check_board_shape, validate_board
from fourline.utils import (DEFAULT_WIDTH, DEFAULT_HEIGHT, GRID_DTYPE, TOKEN_STRINGS,
                            Coordinate, GameResult, Player, check_token_counts,
                            find_winning_slots, render_board, to_player)


class MoveRejection(Enum):
    """Reasons a move can be refused."""
    GAME_ENDED = "game has already ended"
    WRONG_PLAYER = "it is not this player's turn"
    COLUMN_OUT_OF_RANGE = "column is not on the board"
    COLUMN_FULL = "column is full"


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of Board.apply_move.

    Exactly one of board and rejection is set. Check ``is_legal`` (or the
    truthiness of the result) before using ``board``.
    """
    board: Optional['Board'] = None
    rejection: Optional[MoveRejection] = None
    column: Optional[int] = None
    row: Optional[int] = None

    @property
    def is_legal(self) -> bool:
        return self.rejection is None

    def __bool__(self) -> bool:
        return self.is_legal

    @classmethod
    def rejected(cls, reason: MoveRejection, column=None) -> 'MoveResult':
        return cls(rejection=reason, column=column)


class Board:
    """
    An immutable Connect Four board.

    The grid is stored column-major as a read-only numpy array of shape
    (width, height); ``grid[column, row]`` holds the slot value and row 0 is the
    bottom of the column.
    """

    __slots__ = ("_grid", "_winning_slots")

    def __init__(self, grid: np.ndarray):
        """
        Wrap a grid. The array is copied and frozen.

        Prefer Board.empty or Board.from_columns; this constructor does not
        validate the position.
        """
        grid = np.array(grid, dtype=GRID_DTYPE, copy=True)
        if grid.ndim != 2 or grid.shape[0] < 1 or grid.shape[1] < 1:
            raise ValueError(f"Board grid must be a non-empty 2D array, got shape {grid.shape}")
        grid.setflags(write=False)
        self._grid = grid
        self._winning_slots: Optional[FrozenSet[Coordinate]] = None

    @classmethod
    def empty(cls, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> 'Board':
        """
        Create a board with every slot empty.

        Raises:
            ValueError: if width or height is not a positive integer
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
                raise ValueError(f"Board {name} must be a positive integer, got {value!r}")
        debug.trace(f"Creating empty {width}x{height} board", "board")
        return cls(np.zeros((width, height), dtype=GRID_DTYPE))

    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[int]], validate: bool = True) -> 'Board':
        """
        Build a board from its wire form: a list of columns, row 0 first.

        Args:
            columns: Columns of slot values in {0, 1, 2}
            validate: Reject positions that cannot arise from legal play. The
                shape and slot values are checked either way.

        Raises:
            InvalidBoardError: if the columns are not a grid of 0, 1 and 2, or
                validate is set and the position is unreachable
        """
        if validate:
            validate_board(columns)
        else:
            check_board_shape(columns)
        return cls(np.array(columns, dtype=GRID_DTYPE))

    # -- value semantics -------------------------------------------------

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the grid. The view cannot be made writeable."""
        return self._grid.view()

    @property
    def width(self) -> int:
        return int(self._grid.shape[0])

    @property
    def height(self) -> int:
        return int(self._grid.shape[1])

    @property
    def dimensions(self) -> Tuple[int, int]:
        """(width, height) of the board."""
        return self.width, self.height

    def to_columns(self) -> List[List[int]]:
        """Serialize as a list of columns of ints, row 0 first."""
        return self._grid.tolist()

    def __getitem__(self, position: Coordinate) -> Player:
        column, row = position
        return Player(int(self._grid[column, row]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self._grid, other._grid))

    def __hash__(self) -> int:
        return hash((self._grid.shape, self._grid.tobytes()))

    def __repr__(self) -> str:
        return f"Board.from_columns({self.to_columns()!r})"

    def __str__(self) -> str:
        return self.render()

    # -- derived queries -------------------------------------------------

    def free_columns(self) -> List[int]:
        """Indices of columns with at least one empty slot, ascending."""
        has_space = np.any(self._grid == Player.EMPTY.value, axis=1)
        return [int(column) for column in np.flatnonzero(has_space)]

    def column_height(self, column: int) -> int:
        """Number of tokens in a column."""
        return int(np.count_nonzero(self._grid[column] != Player.EMPTY.value))

    def token_counts(self) -> Tuple[int, int]:
        """Number of tokens placed by (player one, player two)."""
        return check_token_counts(self._grid)

    def player_to_move(self) -> Player:
        """
        The player next to move, derived from the token counts.

        Player one moves when both players have placed the same number of
        tokens, otherwise player two does.
        """
        ones, twos = self.token_counts()
        return Player.ONE if ones == twos else Player.TWO

    def winning_slots(self) -> FrozenSet[Coordinate]:
        """
        Coordinates (column, row) of every slot on a winning run.

        Runs longer than four contribute all their slots and slots found on
        more than one axis appear once. Empty if nobody has won.
        """
        if self._winning_slots is None:
            # Benign race: concurrent callers compute the same frozenset
            self._winning_slots = find_winning_slots(self._grid)
        return self._winning_slots

    def is_winning_for(self, player) -> bool:
        """Whether player has four or more tokens in a row along any axis."""
        value = to_player(player).value
        if value == Player.EMPTY.value:
            return False
        return any(self._grid[column, row] == value for column, row in self.winning_slots())

    def winner(self) -> Optional[Player]:
        """The winning player, or None if nobody has won."""
        for player in (Player.ONE, Player.TWO):
            if self.is_winning_for(player):
                return player
        return None

    def is_full(self) -> bool:
        return not self.free_columns()

    def is_ended(self) -> bool:
        """Whether a player has won or no free columns remain."""
        return bool(self.winning_slots()) or self.is_full()

    def result(self) -> GameResult:
        """The game outcome for this position."""
        winner = self.winner()
        if winner is not None:
            return GameResult.for_winner(winner)
        if self.is_full():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    # -- moves -----------------------------------------------------------

    def check_move(self, player, column) -> Optional[MoveRejection]:
        """
        Check a move without applying it.

        Returns:
            The rejection reason, or None if the move is legal
        """
        if self.is_ended():
            return MoveRejection.GAME_ENDED
        try:
            player = to_player(player)
        except ValueError:
            return MoveRejection.WRONG_PLAYER
        if player != self.player_to_move():
            return MoveRejection.WRONG_PLAYER
        if (isinstance(column, bool) or not isinstance(column, (int, np.integer))
                or not 0 <= column < self.width):
            return MoveRejection.COLUMN_OUT_OF_RANGE
        if not np.any(self._grid[column] == Player.EMPTY.value):
            return MoveRejection.COLUMN_FULL
        return None

    def apply_move(self, player, column) -> MoveResult:
        """
        Drop player's token into column.

        Args:
            player: The player making the move (Player or 1/2)
            column: Column index, 0-based from the left

        Returns:
            A legal MoveResult carrying the new board and landing row, or a
            rejected MoveResult carrying the reason. This board is unchanged
            either way.
        """
        rejection = self.check_move(player, column)
        if rejection is not None:
            debug.debug(f"Rejected move by {player} in column {column}: {rejection.value}", "board")
            return MoveResult.rejected(rejection, column)

        column = int(column)
        row = int(np.flatnonzero(self._grid[column] == Player.EMPTY.value)[0])
        grid = self._grid.copy()
        grid[column, row] = to_player(player).value
        debug.trace(f"Player {int(grid[column, row])} placed at ({column}, {row})", "board")
        return MoveResult(board=Board(grid), column=column, row=row)

    def render(self, token_glyphs: Sequence[str] = TOKEN_STRINGS["default"]) -> str:
        """
        Render the board as text, top row first.

        Args:
            token_glyphs: Strings for empty, player one and player two slots
        """
        return render_board(self._grid, token_glyphs)


# Function forms of the board operations

def create_empty(width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> Board:
    return Board.empty(width, height)


def free_columns(board: Board) -> List[int]:
    return board.free_columns()


def player_to_move(board: Board) -> Player:
    return board.player_to_move()


def apply_move(player, column_index: int, board: Board) -> MoveResult:
    return board.apply_move(player, column_index)


def is_ended(board: Board) -> bool:
    return board.is_ended()


def is_winning_for(player, board: Board) -> bool:
    return board.is_winning_for(player)


def winning_slots(board: Board) -> FrozenSet[Coordinate]:
    return board.winning_slots()


def board_dimensions(board: Board) -> Tuple[int, int]:
    return board.dimensions


def render(board: Board, token_glyphs: Sequence[str] = TOKEN_STRINGS["default"]) -> str:
    return board.render(token_glyphs)
