"""Tests for board functionality."""

import pytest

from tetris_engine.board import Board
from tetris_engine.piece import Piece, PIECE_SHAPES


def fill_row(board, y, skip=(), color="#888888"):
    for x in range(board.width):
        if x not in skip:
            board.set(x, y, color)


def test_board_initialization():
    """Test board starts empty."""
    board = Board()
    assert (board.width, board.height) == (10, 20)
    assert all(cell is None for row in board.rows for cell in row), "Board should start empty"


def test_validity_rule():
    """Test bounds and collision checks for a candidate position."""
    board = Board()
    t_shape = PIECE_SHAPES["T"]

    assert board.is_valid(t_shape, 4, 18), "Valid position should fit"
    assert not board.is_valid(t_shape, -1, 10), "Past left wall should not fit"
    assert not board.is_valid(t_shape, 8, 10), "Past right wall should not fit"
    assert not board.is_valid(t_shape, 4, 19), "Below floor should not fit"

    # Cells above the top edge are allowed
    assert board.is_valid(t_shape, 4, -1), "Partly above the board should fit"

    board.set(5, 19, "#888888")
    assert not board.is_valid(t_shape, 4, 18), "Overlap with settled cell should not fit"


def test_empty_shape_cells_are_ignored():
    """Test only occupied shape cells are checked."""
    board = Board()
    board.set(4, 18, "#888888")

    # T's top-left corner is empty, so (4, 18) does not block it
    assert board.is_valid(PIECE_SHAPES["T"], 4, 18)


def test_commit():
    """Test writing a shape into the grid."""
    board = Board()
    piece = Piece.create("I", x=3, y=0)

    board.lock_piece(piece)

    for x, y in piece.cells():
        assert board.cell_color(x, y) == "#00f0f0", f"Cell ({x}, {y}) should be filled"
    assert board.is_occupied(3, 0)
    assert not board.is_occupied(7, 0)


def test_commit_drops_cells_above_board():
    """Test cells above the top edge are silently ignored."""
    board = Board()
    board.commit(PIECE_SHAPES["O"], 4, -1, "#f0f000")

    assert board.cell_color(4, 0) == "#f0f000"
    assert board.cell_color(5, 0) == "#f0f000"
    assert board.filled_row_count() == 1


def test_clear_no_full_rows():
    """Test clearing leaves a board without full rows untouched."""
    board = Board()
    fill_row(board, 19, skip=(0,))
    board.set(3, 10, "#888888")
    before = board.copy()

    assert board.clear_completed_rows() == 0
    assert board == before, "Board should be unchanged"


def test_line_clearing():
    """Test clearing a complete line."""
    board = Board()
    fill_row(board, 19)
    board.set(2, 18, "#00f000")

    lines_cleared = board.clear_completed_rows()
    assert lines_cleared == 1, "Should clear one line"

    assert board.cell_color(2, 19) == "#00f000", "Row above should shift down"
    assert all(cell is None for cell in board.rows[0]), "Top row should be empty"
    assert board.filled_row_count() == 1


def test_multiple_line_clearing():
    """Test clearing contiguous lines."""
    board = Board()
    for y in range(17, 20):
        fill_row(board, y)

    assert board.clear_completed_rows() == 3, "Should clear three lines"
    assert board.filled_row_count() == 0


def test_non_contiguous_line_clearing():
    """Test clearing full rows separated by a partial row."""
    board = Board()
    fill_row(board, 19)
    fill_row(board, 18, skip=(4,))
    fill_row(board, 17)
    board.set(0, 16, "#f00000")

    assert board.clear_completed_rows() == 2

    assert board.rows[19] == ["#888888"] * 4 + [None] + ["#888888"] * 5, "Partial row lands on the floor"
    assert board.cell_color(0, 18) == "#f00000"
    assert board.filled_row_count() == 2
    assert all(cell is None for row in board.rows[:18] for cell in row)


def test_board_rows_round_trip():
    """Test exporting and rebuilding a board."""
    board = Board()
    board.set(1, 2, "#0000f0")

    rebuilt = Board.from_rows(board.to_rows())
    assert rebuilt == board


def test_from_rows_rejects_ragged_grid():
    """Test malformed grids are rejected."""
    with pytest.raises(ValueError):
        Board.from_rows([[None] * 10, [None] * 9])
    with pytest.raises(ValueError):
        Board.from_rows([])
