"""Tests for fourline.game.board - Board, MoveResult and the function forms."""
from __future__ import annotations

import pytest

from fourline.game import board as engine
from fourline.game.board import Board, MoveRejection, MoveResult
from fourline.game.validation import InvalidBoardError
from fourline.utils import TOKEN_STRINGS, GameResult, Player


# ---------------------------------------------------------------------------
# Empty boards
# ---------------------------------------------------------------------------


class TestEmptyBoard:
    def test_default_board_has_all_columns_free(self, empty_board: Board) -> None:
        assert empty_board.free_columns() == [0, 1, 2, 3, 4, 5, 6]

    def test_default_board_is_not_ended(self, empty_board: Board) -> None:
        assert not empty_board.is_ended()
        assert empty_board.result() == GameResult.IN_PROGRESS

    def test_default_dimensions(self, empty_board: Board) -> None:
        assert empty_board.dimensions == (7, 6)
        assert engine.board_dimensions(empty_board) == (7, 6)

    def test_player_one_moves_first(self, empty_board: Board) -> None:
        assert empty_board.player_to_move() == Player.ONE

    def test_all_slots_empty(self, empty_board: Board) -> None:
        assert empty_board.to_columns() == [[0] * 6 for _ in range(7)]

    def test_nobody_is_winning(self, empty_board: Board) -> None:
        assert not empty_board.is_winning_for(1)
        assert not empty_board.is_winning_for(2)
        assert empty_board.winning_slots() == frozenset()

    def test_custom_size(self) -> None:
        board = Board.empty(3, 2)
        assert board.dimensions == (3, 2)
        assert board.free_columns() == [0, 1, 2]

    @pytest.mark.parametrize("width, height", [(0, 6), (7, 0), (-1, 6), (7, -3), (7.5, 6), (True, 6)])
    def test_non_positive_dimensions_rejected(self, width, height) -> None:
        with pytest.raises(ValueError):
            Board.empty(width, height)


# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------


class TestApplyMove:
    def test_token_lands_at_bottom(self, empty_board: Board) -> None:
        outcome = empty_board.apply_move(Player.ONE, 3)
        assert outcome.is_legal
        assert outcome.row == 0
        assert outcome.board[3, 0] == Player.ONE

    def test_input_board_unchanged(self, empty_board: Board) -> None:
        empty_board.apply_move(1, 3)
        assert empty_board == Board.empty()

    def test_tokens_stack(self, play) -> None:
        board = play([3, 3])
        assert board[3, 0] == Player.ONE
        assert board[3, 1] == Player.TWO
        assert board.column_height(3) == 2

    def test_turns_alternate(self, empty_board: Board) -> None:
        after_one = empty_board.apply_move(1, 0).board
        assert after_one.player_to_move() == Player.TWO
        after_two = after_one.apply_move(2, 0).board
        assert after_two.player_to_move() == Player.ONE

    def test_accepts_plain_integers(self, empty_board: Board) -> None:
        assert empty_board.apply_move(1, 0).is_legal

    def test_wrong_player_rejected(self, empty_board: Board) -> None:
        outcome = empty_board.apply_move(Player.TWO, 0)
        assert not outcome
        assert outcome.board is None
        assert outcome.rejection == MoveRejection.WRONG_PLAYER

    def test_empty_slot_is_not_a_player(self, empty_board: Board) -> None:
        assert empty_board.apply_move(0, 0).rejection == MoveRejection.WRONG_PLAYER
        assert empty_board.apply_move(7, 0).rejection == MoveRejection.WRONG_PLAYER

    def test_full_column_rejected(self, play) -> None:
        board = play([0, 0], width=3, height=2)
        outcome = board.apply_move(1, 0)
        assert outcome.rejection == MoveRejection.COLUMN_FULL
        assert board.free_columns() == [1, 2]

    @pytest.mark.parametrize("column", [-1, 7, 100, "3", 1.0, None])
    def test_column_out_of_range_rejected(self, empty_board: Board, column) -> None:
        assert empty_board.apply_move(1, column).rejection == MoveRejection.COLUMN_OUT_OF_RANGE

    def test_ended_game_rejects_every_move(self, play) -> None:
        board = play([0, 1, 0, 1, 0, 1, 0])
        assert board.is_ended()
        for player in (1, 2):
            for column in range(7):
                assert board.apply_move(player, column).rejection == MoveRejection.GAME_ENDED

    def test_rejected_result_is_falsy(self) -> None:
        assert not MoveResult.rejected(MoveRejection.COLUMN_FULL, 2)
        assert MoveResult.rejected(MoveRejection.COLUMN_FULL, 2).column == 2

    def test_check_move_reports_without_applying(self, empty_board: Board) -> None:
        assert empty_board.check_move(1, 0) is None
        assert empty_board.check_move(2, 0) == MoveRejection.WRONG_PLAYER


# ---------------------------------------------------------------------------
# Value semantics
# ---------------------------------------------------------------------------


class TestValueSemantics:
    def test_grid_is_read_only(self, play) -> None:
        board = play([0])
        with pytest.raises(ValueError):
            board.grid[0, 1] = 2

    def test_grid_cannot_be_made_writeable(self, play) -> None:
        board = play([0])
        grid = board.grid
        with pytest.raises(ValueError):
            grid.setflags(write=True)
        assert board.to_columns()[0] == [1, 0, 0, 0, 0, 0]
        assert board.winning_slots() == frozenset()

    @pytest.mark.parametrize("columns", [[[3, 0]], [[300]], [[1, 0], [2]], [[1.5, 0]]])
    def test_unchecked_columns_still_need_valid_tokens(self, columns) -> None:
        with pytest.raises(InvalidBoardError):
            Board.from_columns(columns, validate=False)

    def test_unchecked_columns_allow_unreachable_positions(self) -> None:
        board = Board.from_columns([[0, 1], [2, 0]], validate=False)
        assert board.to_columns() == [[0, 1], [2, 0]]

    def test_equal_positions_are_equal_and_hash_alike(self, play) -> None:
        first = play([0, 1, 2])
        second = play([2, 1, 0])
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_different_positions_differ(self, play) -> None:
        assert play([0]) != play([1])
        assert Board.empty(7, 6) != Board.empty(6, 7)

    def test_wire_form_round_trip(self, play) -> None:
        board = play([3, 3, 4, 2, 2])
        assert Board.from_columns(board.to_columns()) == board

    def test_wire_form_is_columns_bottom_first(self, play) -> None:
        columns = play([1, 1, 2], width=3, height=2).to_columns()
        assert columns == [[0, 0], [1, 2], [1, 0]]

    def test_not_equal_to_lists(self, empty_board: Board) -> None:
        assert empty_board != empty_board.to_columns()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_top_row_first(self, play) -> None:
        board = play([0, 1], width=3, height=2)
        assert board.render() == "0 0 0\n1 2 0"

    def test_custom_glyphs(self, play) -> None:
        board = play([0, 1], width=3, height=2)
        assert board.render(TOKEN_STRINGS["ascii"]) == ". . .\nX O ."
        assert engine.render(board, ["_", "a", "b"]) == "_ _ _\na b _"

    def test_str_uses_default_glyphs(self, play) -> None:
        board = play([2], width=3, height=1)
        assert str(board) == "0 0 1"

    def test_glyph_table_must_have_three_entries(self, empty_board: Board) -> None:
        with pytest.raises(ValueError):
            empty_board.render(["a", "b"])


# ---------------------------------------------------------------------------
# Function forms
# ---------------------------------------------------------------------------


class TestFunctionForms:
    def test_play_through_functions(self) -> None:
        board = engine.create_empty()
        assert engine.player_to_move(board) == Player.ONE
        for column in [0, 1, 0, 1, 0, 1]:
            board = engine.apply_move(engine.player_to_move(board), column, board).board
        assert not engine.is_ended(board)
        board = engine.apply_move(1, 0, board).board
        assert engine.is_ended(board)
        assert engine.is_winning_for(1, board)
        assert engine.winning_slots(board) == {(0, 0), (0, 1), (0, 2), (0, 3)}
        assert engine.free_columns(board) == list(range(7))
