"""Tetromino piece definitions and rotation logic.

Each piece kind is defined by a single spawn-orientation occupancy matrix.
Other orientations are derived by rotating the matrix, so shapes are plain
tuples of tuples and never mutated in place.
"""

from dataclasses import dataclass
from typing import List, Tuple

# Type alias for an occupancy matrix: rows of 0/1 cells
Shape = Tuple[Tuple[int, ...], ...]

PIECE_KINDS: List[str] = ["I", "O", "T", "S", "Z", "J", "L"]

# Spawn orientation for each kind, row 0 at the top
PIECE_SHAPES: dict[str, Shape] = {
    "I": ((1, 1, 1, 1),),
    "O": ((1, 1), (1, 1)),
    "T": ((0, 1, 0), (1, 1, 1)),
    "S": ((0, 1, 1), (1, 1, 0)),
    "Z": ((1, 1, 0), (0, 1, 1)),
    "J": ((1, 0, 0), (1, 1, 1)),
    "L": ((0, 0, 1), (1, 1, 1)),
}

PIECE_COLORS: dict[str, str] = {
    "I": "#00f0f0",
    "O": "#f0f000",
    "T": "#a000f0",
    "S": "#00f000",
    "Z": "#f00000",
    "J": "#0000f0",
    "L": "#f0a000",
}


def rotate_shape(shape: Shape) -> Shape:
    """Rotate a shape 90 degrees clockwise.

    The result has swapped dimensions: new[x][rows - 1 - y] = old[y][x].

    Args:
        shape: Occupancy matrix to rotate

    Returns:
        New rotated matrix
    """
    rows = len(shape)
    cols = len(shape[0])
    rotated = [[0] * rows for _ in range(cols)]
    for y in range(rows):
        for x in range(cols):
            rotated[x][rows - 1 - y] = shape[y][x]
    return tuple(tuple(row) for row in rotated)


def shape_cells(shape: Shape) -> List[Tuple[int, int]]:
    """Get (x, y) offsets of every occupied cell in a shape."""
    return [
        (x, y)
        for y, row in enumerate(shape)
        for x, cell in enumerate(row)
        if cell
    ]


def spawn_position(shape: Shape, board_width: int) -> Tuple[int, int]:
    """Get the spawn position for a shape.

    Pieces spawn horizontally centered on the top row.

    Args:
        shape: Occupancy matrix of the piece
        board_width: Number of board columns

    Returns:
        (x, y) spawn coordinates
    """
    return (board_width // 2 - len(shape[0]) // 2, 0)


@dataclass(frozen=True)
class Piece:
    """A tetromino with its current shape at a specific board position."""

    kind: str
    shape: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def create(cls, kind: str, x: int = 0, y: int = 0) -> "Piece":
        """Create a piece of the given kind in its spawn orientation.

        Args:
            kind: One of "I", "O", "T", "S", "Z", "J", "L"
            x: Board column of the shape's origin
            y: Board row of the shape's origin (0 at top)

        Raises:
            ValueError: If the kind is unknown
        """
        if kind not in PIECE_SHAPES:
            raise ValueError(f"Invalid piece kind: {kind}")
        return cls(kind, PIECE_SHAPES[kind], x, y)

    @classmethod
    def spawn(cls, kind: str, board_width: int) -> "Piece":
        """Create a piece of the given kind at its spawn position."""
        piece = cls.create(kind)
        x, y = spawn_position(piece.shape, board_width)
        return piece.moved_to(x, y)

    @property
    def color(self) -> str:
        return PIECE_COLORS[self.kind]

    @property
    def width(self) -> int:
        return len(self.shape[0])

    @property
    def height(self) -> int:
        return len(self.shape)

    def cells(self) -> List[Tuple[int, int]]:
        """Get absolute board coordinates of all occupied cells.

        Returns:
            List of (x, y) tuples in board coordinates
        """
        return [(self.x + dx, self.y + dy) for dx, dy in shape_cells(self.shape)]

    def move(self, dx: int, dy: int) -> "Piece":
        """Return a new piece moved by the given delta."""
        return Piece(self.kind, self.shape, self.x + dx, self.y + dy)

    def moved_to(self, x: int, y: int) -> "Piece":
        return Piece(self.kind, self.shape, x, y)

    def rotate(self) -> "Piece":
        """Return a new piece rotated clockwise at the same position."""
        return Piece(self.kind, rotate_shape(self.shape), self.x, self.y)

    def __repr__(self) -> str:
        return f"Piece({self.kind}, x={self.x}, y={self.y}, {self.width}x{self.height})"
