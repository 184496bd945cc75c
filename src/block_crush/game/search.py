from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .grid import Anchor, GameGrid, shape_center
from .shapes import Shape, shape_at


def valid_anchor_mask(grid: GameGrid, shape: Shape) -> np.ndarray:
    """Boolean (N-R+1, N-C+1) mask of anchors where `shape` fits.

    Empty when the shape is larger than the grid on either axis.
    """
    shape_h, shape_w = shape.shape
    if shape_h > grid.size or shape_w > grid.size:
        return np.zeros((0, 0), dtype=np.bool_)
    windows = sliding_window_view(grid.occupied, (shape_h, shape_w))
    collisions = windows & (shape != 0)
    return ~np.any(collisions, axis=(2, 3))


def valid_placements(grid: GameGrid, shape: Shape) -> List[Anchor]:
    """All legal anchors for `shape` in row-major order."""
    rows, cols = np.nonzero(valid_anchor_mask(grid, shape))
    return [Anchor(int(r), int(c)) for r, c in zip(rows, cols)]


def can_place_any(grid: GameGrid, shape_indices: Iterable[int]) -> bool:
    """True if at least one shape of the supply fits somewhere on the grid.

    Unknown shape indices are skipped.
    """
    for index in shape_indices:
        shape = shape_at(index)
        if shape is None:
            continue
        if bool(np.any(valid_anchor_mask(grid, shape))):
            return True
    return False


def nearest_valid_placement(
    grid: GameGrid,
    shape: Shape,
    target_row: int,
    target_col: int,
    max_distance: Optional[int] = None,
) -> Optional[Anchor]:
    """Closest legal anchor to the one that centres `shape` on the target cell.

    Candidates are ranked by Manhattan distance from the ideal anchor
    (target minus shape centre), then Chebyshev distance, then row-major
    position. With `max_distance` set, anchors further away than that
    Manhattan distance are ignored.
    """
    mask = valid_anchor_mask(grid, shape)
    rows, cols = np.nonzero(mask)
    if rows.size == 0:
        return None

    center = shape_center(shape)
    ideal_row = target_row - center.row
    ideal_col = target_col - center.col
    d_row = np.abs(rows - ideal_row)
    d_col = np.abs(cols - ideal_col)
    manhattan = d_row + d_col
    chebyshev = np.maximum(d_row, d_col)

    # lexsort uses the last key as primary; np.nonzero is already row-major
    order = np.lexsort((cols, rows, chebyshev, manhattan))
    best = int(order[0])
    if max_distance is not None and int(manhattan[best]) > max_distance:
        return None
    return Anchor(int(rows[best]), int(cols[best]))
