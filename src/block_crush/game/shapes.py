from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np


Shape = np.ndarray


def _shape(rows) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Fixed catalog, index is the stable shape id
BLOCK_SHAPES: Tuple[Shape, ...] = (
    _shape([[1]]),                         # 1x1
    _shape([[1, 1]]),                      # 2x1
    _shape([[1, 1, 1]]),                   # 3x1
    _shape([[1, 1], [1, 1]]),              # 2x2
    _shape([[1, 1, 1, 1]]),                # I
    _shape([[1, 1, 1], [0, 1, 0]]),        # T
    _shape([[1, 1, 1], [1, 0, 0]]),        # L
    _shape([[1, 1, 1], [0, 0, 1]]),        # J
    _shape([[1, 1], [1, 1], [1, 0]]),      # small L
    _shape([[1, 1, 0], [0, 1, 1]]),        # Z
    _shape([[0, 1, 1], [1, 1, 0]]),        # S
    _shape([[1, 1, 1], [0, 1, 0]]),        # T (second weight in the draw)
    _shape([[1], [1], [1]]),               # 3x1 vertical
    _shape([[1, 1], [1, 0]]),              # corner
    _shape([[1, 0], [1, 1], [1, 0]]),      # T vertical
)

# Pastel palette
BLOCK_COLORS: Tuple[str, ...] = (
    "#a8b5ff",
    "#c5a3ff",
    "#ffb3e6",
    "#7fdfd4",
    "#ffd89b",
    "#ff9f9f",
    "#b5c4ff",
    "#d4b3ff",
    "#ffc4e6",
    "#8fefdf",
    "#ffe0ab",
    "#ffafaf",
)

SHAPE_COUNT = len(BLOCK_SHAPES)
COLOR_COUNT = len(BLOCK_COLORS)


def shape_at(index) -> Optional[Shape]:
    """Return the catalog shape for `index`, or None if there is no such shape."""
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        return None
    if 0 <= index < SHAPE_COUNT:
        return BLOCK_SHAPES[int(index)]
    return None


def random_shape_index(seed: float) -> int:
    """Draw a shape index from a numeric seed.

    Uses a sine hash of the seed, so the result is only as reproducible as
    the seed itself. Always in [0, SHAPE_COUNT).
    """
    seed = float(seed)
    if not math.isfinite(seed):
        seed = 0.0
    return abs(math.floor(math.sin(seed) * 1e6)) % SHAPE_COUNT


def color_for(index: int) -> str:
    """Palette colour for `index`, wrapping; anything non-integer gets slot 0."""
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        return BLOCK_COLORS[0]
    return BLOCK_COLORS[int(index) % COLOR_COUNT]


def color_index_for(shape_index: int) -> int:
    """Palette slot used when a shape is written to the grid."""
    return int(shape_index) % COLOR_COUNT


def count_cells(shape: Shape) -> int:
    return int(np.count_nonzero(shape))
