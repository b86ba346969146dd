"""Tetris board with collision detection and line clearing."""

from typing import List, Optional

from tetris_engine.piece import Piece, Shape, shape_cells

# A settled cell holds a color string, or None when empty
Cell = Optional[str]


class Board:
    """Fixed-size grid of settled cell colors."""

    WIDTH = 10
    HEIGHT = 20

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        """Initialize an empty board.

        Args:
            width: Number of columns
            height: Number of rows (row 0 is the top)
        """
        self.width = width
        self.height = height
        # rows[y][x] is the cell at (x, y)
        self.rows: List[List[Cell]] = [self._empty_row() for _ in range(height)]

    def _empty_row(self) -> List[Cell]:
        return [None] * self.width

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if coordinates are within board bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        """Check whether a settled cell is filled.

        Coordinates outside the board are never occupied; bounds are
        enforced separately by is_valid().
        """
        return self.cell_color(x, y) is not None

    def cell_color(self, x: int, y: int) -> Cell:
        """Get the color of a settled cell, or None if empty or off-board."""
        if not self.in_bounds(x, y):
            return None
        return self.rows[y][x]

    def set(self, x: int, y: int, color: Cell) -> None:
        """Set a cell directly. Out-of-bounds writes are ignored."""
        if self.in_bounds(x, y):
            self.rows[y][x] = color

    def is_valid(self, shape: Shape, x: int, y: int) -> bool:
        """Check whether a shape fits at the given position.

        Every occupied cell must lie within the side walls and above the
        floor. Cells above the top edge are allowed; cells on the board
        must be empty.

        Args:
            shape: Candidate occupancy matrix
            x: Candidate column of the shape's origin
            y: Candidate row of the shape's origin

        Returns:
            True if the position is collision-free
        """
        for dx, dy in shape_cells(shape):
            col = x + dx
            row = y + dy
            if col < 0 or col >= self.width or row >= self.height:
                return False
            if row >= 0 and self.rows[row][col] is not None:
                return False
        return True

    def fits(self, piece: Piece) -> bool:
        """Check if a piece is at a collision-free position."""
        return self.is_valid(piece.shape, piece.x, piece.y)

    def commit(self, shape: Shape, x: int, y: int, color: str) -> None:
        """Write a shape's occupied cells into the grid.

        Cells above the top edge are dropped.

        Args:
            shape: Occupancy matrix to write
            x: Column of the shape's origin
            y: Row of the shape's origin
            color: Color stored in every written cell
        """
        for dx, dy in shape_cells(shape):
            if y + dy >= 0:
                self.set(x + dx, y + dy, color)

    def lock_piece(self, piece: Piece) -> None:
        """Lock a piece onto the board."""
        self.commit(piece.shape, piece.x, piece.y, piece.color)

    def is_row_full(self, y: int) -> bool:
        return all(cell is not None for cell in self.rows[y])

    def clear_completed_rows(self) -> int:
        """Clear all complete rows and return count.

        Rows are scanned bottom to top. After a removal the same index is
        checked again, since the row above has slid into it.

        Returns:
            Number of rows cleared
        """
        cleared = 0
        y = self.height - 1

        while y >= 0:
            if self.is_row_full(y):
                del self.rows[y]
                self.rows.insert(0, self._empty_row())
                cleared += 1
            else:
                y -= 1

        return cleared

    def filled_row_count(self) -> int:
        """Count rows holding at least one settled cell."""
        return sum(1 for row in self.rows if any(cell is not None for cell in row))

    def reset(self) -> None:
        """Empty every cell."""
        self.rows = [self._empty_row() for _ in range(self.height)]

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        new_board = Board(self.width, self.height)
        new_board.rows = [row.copy() for row in self.rows]
        return new_board

    def to_rows(self) -> List[List[Cell]]:
        """Export the grid as a list of rows (for serialization)."""
        return [row.copy() for row in self.rows]

    @classmethod
    def from_rows(cls, rows: List[List[Cell]]) -> "Board":
        """Create a board from a list of rows.

        Raises:
            ValueError: If the grid is empty or not rectangular
        """
        if not rows or not rows[0]:
            raise ValueError("Board needs at least one row and one column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError(f"Expected every row to have {width} cells")
        board = cls(width, len(rows))
        board.rows = [list(row) for row in rows]
        return board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.rows == other.rows
