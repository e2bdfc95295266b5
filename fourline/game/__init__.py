"""
fourline.game - Core game mechanics for Connect Four

This package contains the immutable board engine, board validation
and the game session used to play a game between two named players.
"""

from fourline.game.board import Board, MoveRejection, MoveResult
from fourline.game.rules import ConnectFourGame
from fourline.game.validation import InvalidBoardError, is_valid_board, validate_board

__all__ = ['Board', 'MoveRejection', 'MoveResult', 'ConnectFourGame',
           'InvalidBoardError', 'is_valid_board', 'validate_board']
