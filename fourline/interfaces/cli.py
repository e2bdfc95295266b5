"""
cli.py - Command-line interface for the fourline engine

This module provides a CLI for hot-seat games between two named players,
analysing board positions, looking up player statistics and serving the
JSON-RPC interface over standard input and output.
"""

import argparse
import json
import sys
from typing import List, Optional

from fourline.data.data_manager import load_statistics, save_statistics
from fourline.debug import debug, DebugLevel, parse_level
from fourline.game.board import Board
from fourline.game.rules import ConnectFourGame
from fourline.game.validation import InvalidBoardError
from fourline.interfaces.rpc import JsonRpcDispatcher
from fourline.stats.tracker import RatingTracker, Statistics
from fourline.utils import (DEFAULT_WIDTH, DEFAULT_HEIGHT, TOKEN_STRINGS, Player,
                            render_board_ascii, winning_slots_by_direction)

# Special commands returned by get_human_move
QUIT = -1
UNDO = -2
RESTART = -3


def format_statistics(name: str, stats: Statistics) -> str:
    """One line summary of a player's statistics."""
    return (f"{name}: elo {stats.elo:.1f} | "
            f"first W/L/D {stats.player_1_wins}/{stats.player_1_losses}/{stats.player_1_draws} | "
            f"second W/L/D {stats.player_2_wins}/{stats.player_2_losses}/{stats.player_2_draws} | "
            f"streak {stats.current_streak} (best {stats.longest_streak})")


class SimpleCLI:
    """Simple command-line interface for the fourline engine."""

    def __init__(self):
        """Initialize the CLI."""
        self.args = None
        self.tracker: Optional[RatingTracker] = None

    def build_parser(self) -> argparse.ArgumentParser:
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument('--debug', action='store_true', help='Enable debug mode')
        common.add_argument('--debug-level', default=None,
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Debug level (overrides FOURLINE_DEBUG_LEVEL)')
        common.add_argument('--log-file', default=None, help='Also write log output to this file')

        parser = argparse.ArgumentParser(description='Connect Four engine and rating tracker')
        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', parents=[common],
                                            help='Play hot-seat games between two players')
        play_parser.add_argument('--player-1', default='Player 1', help='Name of the player moving first')
        play_parser.add_argument('--player-2', default='Player 2', help='Name of the player moving second')
        play_parser.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='Board width')
        play_parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT, help='Board height')
        play_parser.add_argument('--tokens', choices=sorted(TOKEN_STRINGS), default='ascii',
                                 help='Glyphs used to draw the board')
        play_parser.add_argument('--games', type=int, default=1,
                                 help='Number of games to play (0 plays until quit)')
        play_parser.add_argument('--stats-file', default=None,
                                 help='Statistics snapshot to load and update')

        analyse_parser = subparsers.add_parser('analyse', parents=[common],
                                               help='Analyse a board position')
        analyse_parser.add_argument('--position', required=True,
                                    help='Board as JSON: a list of columns, row 0 first')
        analyse_parser.add_argument('--no-validate', action='store_true',
                                    help='Skip board validation')
        analyse_parser.add_argument('--tokens', choices=sorted(TOKEN_STRINGS), default='default',
                                    help='Glyphs used to draw the board')

        stats_parser = subparsers.add_parser('stats', parents=[common], help='Show player statistics')
        stats_parser.add_argument('names', nargs='*', help='Player names (all recorded players if omitted)')
        stats_parser.add_argument('--stats-file', default=None, help='Statistics snapshot to read')

        rpc_parser = subparsers.add_parser('rpc', parents=[common],
                                           help='Serve JSON-RPC requests, one per line on stdin')
        rpc_parser.add_argument('--stats-file', default=None,
                                help='Statistics snapshot to load and update')

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(argv)

        if getattr(self.args, 'debug', False):
            debug.configure(level=DebugLevel.DEBUG)
        elif getattr(self.args, 'debug_level', None):
            debug.configure(level=parse_level(self.args.debug_level))
        if getattr(self.args, 'log_file', None):
            debug.configure(log_file=self.args.log_file)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI based on the parsed arguments. Returns an exit code."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            return self.play_games()
        elif self.args.command == 'analyse':
            return self.analyse_position()
        elif self.args.command == 'stats':
            return self.show_statistics()
        elif self.args.command == 'rpc':
            return self.serve_rpc()
        else:
            print("Please specify a command. Use --help for options.")
            return 1

    def _load_tracker(self) -> RatingTracker:
        stats_file = getattr(self.args, 'stats_file', None)
        store = load_statistics(stats_file) if stats_file else None
        self.tracker = RatingTracker(store)
        return self.tracker

    def _save_tracker(self) -> None:
        stats_file = getattr(self.args, 'stats_file', None)
        if stats_file and self.tracker is not None:
            if not save_statistics(self.tracker.store, stats_file):
                print(f"Warning: could not save statistics to {stats_file}", file=sys.stderr)

    def _render(self, board: Board) -> str:
        glyphs = TOKEN_STRINGS[self.args.tokens]
        if all(len(glyph) == 1 for glyph in glyphs):
            return render_board_ascii(board.grid, glyphs)
        return board.render(glyphs)

    # -- play ------------------------------------------------------------

    def play_games(self) -> int:
        """Play hot-seat games, recording each result."""
        try:
            tracker = self._load_tracker()
            game = ConnectFourGame(self.args.player_1, self.args.player_2, tracker,
                                   width=self.args.width, height=self.args.height)
        except ValueError as e:
            print(f"Error: {e}")
            return 2

        print("Enter a column number to make a move.")
        print("Other commands: 'q' to quit, 'u' to undo, 'r' to restart.")

        games_played = 0
        while self.args.games == 0 or games_played < self.args.games:
            if not self.play_game(game):
                break
            games_played += 1
            self._save_tracker()
            for name, stats in (game.last_statistics or {}).items():
                print(format_statistics(name, stats))
            game.new_game()
        return 0

    def play_game(self, game: ConnectFourGame) -> bool:
        """
        Play one game to the end.

        Returns:
            False if the players quit before the game ended
        """
        print(f"\n{game.players[Player.ONE]} ({Player.ONE}) moves first against "
              f"{game.players[Player.TWO]} ({Player.TWO}).")
        print(self._render(game.board))

        while not game.is_game_over():
            move = self.get_human_move(game)
            if move is None:
                continue
            if move == QUIT:
                print("Quitting game.")
                return False
            if move == UNDO:
                print("Move undone." if game.undo() else "No moves to undo.")
                print(self._render(game.board))
                continue
            if move == RESTART:
                game.new_game(swap_seats=False)
                print("Game restarted.")
                print(self._render(game.board))
                continue

            outcome = game.play(move)
            if outcome:
                print(self._render(game.board))
            else:
                print(f"Invalid move: {move} ({outcome.rejection.value})")

        print("Game over!")
        winner = game.get_winner_name()
        if winner is not None:
            slots = sorted(game.winning_slots())
            print(f"{winner} wins! Winning slots: {slots}")
        else:
            print("It's a draw!")
        return True

    def get_human_move(self, game: ConnectFourGame) -> Optional[int]:
        """
        Get a move from the player whose turn it is.

        Returns:
            Column index, or special command code, or None if invalid input
        """
        last_column = game.width - 1
        try:
            user_input = input(f"{game.current_player_name} ({game.current_player}), "
                               f"columns 0-{last_column}, q/u/r: ").strip().lower()
        except EOFError:
            return QUIT

        if user_input == 'q':
            return QUIT
        elif user_input == 'u':
            return UNDO
        elif user_input == 'r':
            return RESTART

        try:
            move = int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or special command.")
            return None
        if 0 <= move <= last_column:
            return move
        print(f"Column must be between 0 and {last_column}.")
        return None

    # -- analyse ---------------------------------------------------------

    def analyse_position(self) -> int:
        """Print what the engine derives from a board position."""
        try:
            columns = json.loads(self.args.position)
            board = Board.from_columns(columns, validate=not self.args.no_validate)
        except InvalidBoardError as e:
            print(f"Invalid board: {e}")
            return 2
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return 2

        width, height = board.dimensions
        debug.start_timer("analyse")
        print(f"Board {width}x{height}:")
        print(board.render(TOKEN_STRINGS[self.args.tokens]))
        print(f"Player to move: {board.player_to_move().value}")
        print(f"Free columns: {board.free_columns()}")
        print(f"Ended: {board.is_ended()}")
        print(f"Result: {board.result().name}")

        for direction, slots in winning_slots_by_direction(board.grid).items():
            if slots:
                print(f"Winning {direction.value} slots: {sorted(slots)}")
        debug.end_timer("analyse", "cli")
        return 0

    # -- stats -----------------------------------------------------------

    def show_statistics(self) -> int:
        """Print statistics for the requested (or all recorded) players."""
        try:
            tracker = self._load_tracker()
        except ValueError as e:
            print(f"Error loading statistics: {e}")
            return 2

        if self.args.names:
            records = tracker.get_statistics(self.args.names).items()
        else:
            records = tracker.leaderboard()
        if not records:
            print("No games recorded.")
        for name, stats in records:
            print(format_statistics(name, stats))
        return 0

    # -- rpc -------------------------------------------------------------

    def serve_rpc(self, stdin=None, stdout=None) -> int:
        """Answer JSON-RPC requests read line by line until end of input."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        try:
            tracker = self._load_tracker()
        except ValueError as e:
            print(f"Error loading statistics: {e}", file=sys.stderr)
            return 2

        dispatcher = JsonRpcDispatcher(tracker, on_record=lambda updated: self._save_tracker())
        debug.info(f"Serving JSON-RPC methods {dispatcher.methods}", "cli")
        for line in stdin:
            if not line.strip():
                continue
            response = dispatcher.handle_json(line)
            if response is not None:
                stdout.write(response + "\n")
                stdout.flush()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    return SimpleCLI().run(argv)
