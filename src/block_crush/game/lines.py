from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence

import numpy as np

from .grid import GameGrid


logger = logging.getLogger(__name__)


class FullLines(NamedTuple):
    rows: List[int]
    cols: List[int]

    @property
    def count(self) -> int:
        return len(self.rows) + len(self.cols)


@dataclass
class ClearResult:
    lines_cleared: int = 0
    passes: List[FullLines] = field(default_factory=list)


def full_rows_and_cols(grid: GameGrid) -> FullLines:
    """Rows and columns whose every cell is occupied.

    Rows and columns are checked independently, so a cell can belong to a
    full row and a full column at once.
    """
    occupied = grid.occupied
    rows = np.flatnonzero(np.all(occupied, axis=1))
    cols = np.flatnonzero(np.all(occupied, axis=0))
    return FullLines([int(r) for r in rows], [int(c) for c in cols])


def clear_lines(grid: GameGrid, rows: Sequence[int], cols: Sequence[int]) -> int:
    """Empty every cell of the listed rows and columns, in place.

    Returns the number of cells that went from occupied to empty; clearing a
    line that is already empty changes nothing.
    """
    before = int(np.count_nonzero(grid.occupied))
    for row in rows:
        if 0 <= row < grid.size:
            grid.clear_cells(row, slice(None))
    for col in cols:
        if 0 <= col < grid.size:
            grid.clear_cells(slice(None), col)
    return before - int(np.count_nonzero(grid.occupied))


def resolve_full_lines(grid: GameGrid) -> ClearResult:
    """Clear full lines until none remain, accumulating every pass."""
    result = ClearResult()
    while True:
        full = full_rows_and_cols(grid)
        if full.count == 0:
            break
        clear_lines(grid, full.rows, full.cols)
        result.lines_cleared += full.count
        result.passes.append(full)
        logger.debug("cleared rows=%s cols=%s", full.rows, full.cols)
    return result
