"""Simulation core for Block Crush.

Exports the engine pieces:
- shapes: fixed polyomino catalog, colour palette and the seeded draw
- GameGrid: board model with placement checks
- full_rows_and_cols / clear_lines / resolve_full_lines: line clearing
- ScoringRules / compute_score: per-placement scoring
- can_place_any / nearest_valid_placement: placement searches
- BlockCrushGame: round controller and session state
"""

from .shapes import (
    BLOCK_COLORS,
    BLOCK_SHAPES,
    color_for,
    count_cells,
    random_shape_index,
    shape_at,
)
from .grid import Anchor, Cell, GameGrid, format_grid, shape_center
from .lines import ClearResult, FullLines, clear_lines, full_rows_and_cols, resolve_full_lines
from .rules import ScoringRules, compute_score
from .search import can_place_any, nearest_valid_placement, valid_anchor_mask, valid_placements
from .seeding import ClockSeedSource, ReplaySeedSource, SeedSource
from .core import (
    BlockCrushGame,
    GameConfig,
    Phase,
    PlacementResult,
    SessionState,
    TOTAL_STAGES,
)

__all__ = [
    "BLOCK_COLORS",
    "BLOCK_SHAPES",
    "color_for",
    "count_cells",
    "random_shape_index",
    "shape_at",
    "Anchor",
    "Cell",
    "GameGrid",
    "format_grid",
    "shape_center",
    "ClearResult",
    "FullLines",
    "clear_lines",
    "full_rows_and_cols",
    "resolve_full_lines",
    "ScoringRules",
    "compute_score",
    "can_place_any",
    "nearest_valid_placement",
    "valid_anchor_mask",
    "valid_placements",
    "ClockSeedSource",
    "ReplaySeedSource",
    "SeedSource",
    "BlockCrushGame",
    "GameConfig",
    "Phase",
    "PlacementResult",
    "SessionState",
    "TOTAL_STAGES",
]
