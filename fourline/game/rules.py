"""
rules.py - Game session management for Connect Four

This module provides ConnectFourGame, which plays a sequence of games between
two named players on top of the immutable Board. It keeps the current board
value and the boards before it (for undo), and when a game ends it reports the
result to a RatingTracker with the name of the player who moved first.
"""

from typing import Dict, FrozenSet, List, Optional, Sequence

from fourline.debug import debug
from fourline.game.board import Board, MoveResult
from fourline.stats.tracker import RatingTracker, Statistics, check_player_name
from fourline.utils import (DEFAULT_WIDTH, DEFAULT_HEIGHT, TOKEN_STRINGS,
                            Coordinate, GameResult, Player)


class ConnectFourGame:
    """
    High-level Connect Four game manager.

    Seats change hands between games: ``new_game()`` swaps the names so the
    player who moved second last time moves first next time.
    """

    def __init__(self, player_1_name: str = "Player 1", player_2_name: str = "Player 2",
                 tracker: Optional[RatingTracker] = None,
                 width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        """
        Initialize a new Connect Four game.

        Args:
            player_1_name: Name of the player moving first in the first game
            player_2_name: Name of the player moving second in the first game
            tracker: Rating tracker to report finished games to, if any
            width: Board width
            height: Board height

        Raises:
            ValueError: if a name is empty or not a string, or both names match
        """
        check_player_name(player_1_name)
        check_player_name(player_2_name)
        if player_1_name == player_2_name:
            raise ValueError("The two players need different names")
        debug.debug(f"Initializing ConnectFourGame {player_1_name!r} vs {player_2_name!r}", "game")
        self.players = {Player.ONE: player_1_name, Player.TWO: player_2_name}
        self.tracker = tracker
        self.width = width
        self.height = height
        self.board = Board.empty(width, height)
        self.history: List[Board] = []
        self.recorded = False
        self.last_statistics: Optional[Dict[str, Statistics]] = None

    def new_game(self, swap_seats: bool = True) -> None:
        """Start a new game on an empty board, swapping seats by default."""
        if swap_seats:
            self.players = {Player.ONE: self.players[Player.TWO],
                            Player.TWO: self.players[Player.ONE]}
        debug.debug(f"New game: {self.players[Player.ONE]!r} moves first", "game")
        self.board = Board.empty(self.width, self.height)
        self.history = []
        self.recorded = False
        self.last_statistics = None

    def play(self, column: int) -> MoveResult:
        """
        Make a move for the player whose turn it is.

        Args:
            column: Column to place a token in (0-indexed)

        Returns:
            The MoveResult from the board; rejected moves leave the game unchanged
        """
        player = self.board.player_to_move()
        outcome = self.board.apply_move(player, column)
        if not outcome:
            return outcome

        self.history.append(self.board)
        self.board = outcome.board
        debug.debug(f"{self.players[player]!r} played column {column}", "game")

        if self.board.is_ended():
            self._finish()
        return outcome

    def _finish(self) -> None:
        result = self.board.result()
        debug.info(f"Game over: {result.name}", "game")
        if self.tracker is None or self.recorded:
            return
        self.last_statistics = self.tracker.record_game(
            self.players[Player.ONE], self.players[Player.TWO], result)
        self.recorded = True

    def undo(self) -> bool:
        """
        Take back the last move.

        Returns:
            True if a move was undone, False if there was nothing to undo or
            the result has already been recorded
        """
        if not self.history:
            debug.debug("No moves to undo", "game")
            return False
        if self.recorded:
            debug.debug("Result already recorded; undo refused", "game")
            return False

        self.board = self.history.pop()
        return True

    @property
    def current_player(self) -> Player:
        return self.board.player_to_move()

    @property
    def current_player_name(self) -> str:
        return self.players[self.current_player]

    def is_game_over(self) -> bool:
        return self.board.is_ended()

    def result(self) -> GameResult:
        return self.board.result()

    def get_winner(self) -> Optional[Player]:
        """The winning seat, or None if no winner yet or a draw."""
        return self.board.winner()

    def get_winner_name(self) -> Optional[str]:
        winner = self.get_winner()
        return self.players[winner] if winner is not None else None

    def get_valid_moves(self) -> List[int]:
        if self.board.is_ended():
            return []
        return self.board.free_columns()

    def winning_slots(self) -> FrozenSet[Coordinate]:
        return self.board.winning_slots()

    def render(self, token_glyphs: Sequence[str] = TOKEN_STRINGS["default"]) -> str:
        return self.board.render(token_glyphs)
