from __future__ import annotations

import logging
from typing import Iterator, NamedTuple, Optional, Tuple

import numpy as np

from .shapes import COLOR_COUNT, Shape, count_cells


logger = logging.getLogger(__name__)

EMPTY_PIECE = 0
EMPTY_COLOR = -1


class Cell(NamedTuple):
    piece_id: int
    color_index: int


class Anchor(NamedTuple):
    row: int
    col: int


def _is_index(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, np.integer))


class GameGrid:
    """Square N x N board of cells.

    Occupancy is kept in two parallel arrays: `pieces` holds the owning piece
    id (0 for an empty cell) and `colors` the palette index (-1 when empty).
    """

    def __init__(self, size: int = 9, color_count: int = COLOR_COUNT) -> None:
        self.size = int(size)
        self.color_count = int(color_count)
        self.pieces = np.zeros((self.size, self.size), dtype=np.int32)
        self.colors = np.full((self.size, self.size), EMPTY_COLOR, dtype=np.int16)

    @classmethod
    def create_empty(cls, size: int = 9) -> "GameGrid":
        return cls(size)

    def is_inside(self, row: int, col: int) -> bool:
        if not (_is_index(row) and _is_index(col)):
            return False
        return 0 <= row < self.size and 0 <= col < self.size

    @property
    def occupied(self) -> np.ndarray:
        return self.pieces != EMPTY_PIECE

    def cell(self, row: int, col: int) -> Optional[Cell]:
        if not self.is_inside(row, col):
            return None
        piece_id = int(self.pieces[row, col])
        if piece_id == EMPTY_PIECE:
            return None
        return Cell(piece_id, int(self.colors[row, col]))

    def can_place(self, shape: Shape, row: int, col: int) -> bool:
        """Check that `shape` anchored at (row, col) fits on empty cells."""
        if not (_is_index(row) and _is_index(col)):
            return False
        shape_h, shape_w = shape.shape

        # Bounds first, the grid is only read once the box is known to fit
        if row < 0 or col < 0:
            return False
        if row + shape_h > self.size or col + shape_w > self.size:
            return False

        window = self.pieces[row : row + shape_h, col : col + shape_w]
        return not bool(np.any((window != EMPTY_PIECE) & (shape != 0)))

    def place(self, shape: Shape, row: int, col: int, piece_id: int, color_index: int) -> int:
        """Write `shape` at (row, col) and return the number of cells placed.

        The placement is re-validated; an illegal placement, a non-positive
        piece id or an out-of-range colour leaves the grid untouched and
        returns 0.
        """
        if piece_id <= EMPTY_PIECE or not 0 <= color_index < self.color_count:
            logger.debug("rejected place: piece_id=%s color_index=%s", piece_id, color_index)
            return 0
        if not self.can_place(shape, row, col):
            return 0
        shape_h, shape_w = shape.shape
        mask = shape != 0
        self.pieces[row : row + shape_h, col : col + shape_w][mask] = piece_id
        self.colors[row : row + shape_h, col : col + shape_w][mask] = color_index
        return count_cells(shape)

    def clear_cells(self, rows: int | slice, cols: int | slice) -> None:
        self.pieces[rows, cols] = EMPTY_PIECE
        self.colors[rows, cols] = EMPTY_COLOR

    def filled_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        for row, col in zip(*np.nonzero(self.occupied)):
            yield int(row), int(col), Cell(int(self.pieces[row, col]), int(self.colors[row, col]))

    def get_filled_ratio(self) -> float:
        return float(np.count_nonzero(self.occupied)) / float(self.size * self.size)

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.size, self.color_count)
        new_grid.pieces = self.pieces.copy()
        new_grid.colors = self.colors.copy()
        return new_grid

    def occupancy(self) -> np.ndarray:
        """0/1 int8 view of the board, used for observations."""
        return self.occupied.astype(np.int8)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return (
            self.size == other.size
            and np.array_equal(self.pieces, other.pieces)
            and np.array_equal(self.colors, other.colors)
        )

    def __repr__(self) -> str:
        return f"GameGrid(size={self.size}, filled={int(np.count_nonzero(self.occupied))})"


def shape_center(shape: Shape) -> Anchor:
    """Floored centroid of the filled cells of `shape`."""
    rows, cols = np.nonzero(shape)
    if rows.size == 0:
        return Anchor(0, 0)
    return Anchor(int(rows.sum()) // rows.size, int(cols.sum()) // cols.size)


def format_grid(grid: GameGrid) -> str:
    return "\n".join("".join("█" if cell else "·" for cell in row) for row in grid.occupied)
