from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from block_crush.storage import KeyValueStore

from .grid import Anchor, GameGrid, shape_center
from .lines import resolve_full_lines
from .rules import ScoringRules
from .search import can_place_any, nearest_valid_placement, valid_placements
from .seeding import ClockSeedSource, ReplaySeedSource, SeedSource
from .shapes import Shape, color_index_for, random_shape_index, shape_at


logger = logging.getLogger(__name__)

TOTAL_STAGES = 500
BEST_SCORE_KEY = "bestScore"


class Phase(IntEnum):
    IDLE = 0
    SELECTING = 1
    DRAGGING = 2
    COMMITTING = 3
    GAME_OVER = 4


@dataclass
class GameConfig:
    grid_size: int = 9
    pieces_per_round: int = 3
    stage: int = 1
    random_seed: Optional[int] = None
    max_episode_steps: int = 10000

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError("grid_size must be >= 1")
        if self.pieces_per_round < 1:
            raise ValueError("pieces_per_round must be >= 1")
        if not 1 <= self.stage <= TOTAL_STAGES:
            raise ValueError(f"stage must be in 1..{TOTAL_STAGES}")


@dataclass(frozen=True)
class PlacementResult:
    success: bool
    cells_placed: int = 0
    lines_cleared: int = 0
    gained: int = 0


REJECTED = PlacementResult(success=False)


@dataclass(frozen=True)
class SessionState:
    grid: GameGrid
    supply: Tuple[int, ...]
    score: int
    best_score: int
    piece_id_counter: int
    is_game_over: bool
    phase: Phase
    selected_slot: Optional[int]


class BlockCrushGame:
    """One play session: grid, piece supply, score and the game-over latch.

    Every input method is a no-op on malformed input (unknown slot, illegal
    anchor, input after game over) and reports that through its return value.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        seed_source: Optional[SeedSource] = None,
        store: Optional[KeyValueStore] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.store = store
        self.seed_source: SeedSource = seed_source or self._default_seed_source()
        self.best_score = self._load_best_score()

        self.grid = GameGrid(self.config.grid_size)
        self.supply: List[int] = []
        self.score = 0
        self.piece_id_counter = 1
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.game_over = False
        self.phase = Phase.IDLE
        self.selected_slot: Optional[int] = None

        # Drag state
        self._drag_slot: Optional[int] = None
        self._drag_preview: Optional[Anchor] = None
        self._drag_last_cell: Optional[Tuple[int, int]] = None

        self.reset()

    def _default_seed_source(self) -> SeedSource:
        if self.config.random_seed is not None:
            return ReplaySeedSource(self.config.random_seed)
        return ClockSeedSource(self.config.stage)

    def _load_best_score(self) -> int:
        if self.store is None:
            return 0
        value = self.store.get(BEST_SCORE_KEY, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return 0
        return value

    # ---------- Session lifecycle ----------
    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.seed_source = ReplaySeedSource(seed)
        self.grid = GameGrid(self.config.grid_size)
        self.score = 0
        self.piece_id_counter = 1
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.game_over = False
        self.phase = Phase.IDLE
        self.selected_slot = None
        self._clear_drag()
        self.supply = [self._draw(slot) for slot in range(self.config.pieces_per_round)]
        self._refresh_game_over()

    def play_again(self) -> None:
        self.reset()

    def _draw(self, slot: int) -> int:
        return random_shape_index(self.seed_source.next_seed(slot))

    def _refresh_game_over(self) -> None:
        if not can_place_any(self.grid, self.supply):
            self.game_over = True
            self.phase = Phase.GAME_OVER
            self._clear_drag()
            self.selected_slot = None
            logger.debug("game over: score=%d supply=%s", self.score, self.supply)

    def _update_best_score(self) -> None:
        if self.score <= self.best_score:
            return
        self.best_score = self.score
        if self.store is not None:
            self.store.set(BEST_SCORE_KEY, self.best_score)

    # ---------- Supply ----------
    def _is_slot(self, slot) -> bool:
        if isinstance(slot, bool) or not isinstance(slot, (int, np.integer)):
            return False
        return 0 <= slot < len(self.supply)

    def shape_for_slot(self, slot: int) -> Optional[Shape]:
        if not self._is_slot(slot):
            return None
        return shape_at(self.supply[slot])

    def supply_shapes(self) -> List[Optional[Shape]]:
        return [shape_at(index) for index in self.supply]

    # ---------- Selection ----------
    def select(self, slot: int) -> bool:
        """Toggle click-selection of a supply slot."""
        if self.game_over or self._drag_slot is not None or self.shape_for_slot(slot) is None:
            return False
        if self.selected_slot == slot:
            self.selected_slot = None
            self.phase = Phase.IDLE
        else:
            self.selected_slot = int(slot)
            self.phase = Phase.SELECTING
        return True

    def deselect(self) -> None:
        if self.selected_slot is None:
            return
        self.selected_slot = None
        if not self.game_over and self._drag_slot is None:
            self.phase = Phase.IDLE

    def click_cell(self, row: int, col: int) -> PlacementResult:
        """Place the selected piece with its anchor on the clicked cell."""
        if self.selected_slot is None or self._drag_slot is not None:
            return REJECTED
        return self.place_at(row, col, self.selected_slot)

    # ---------- Drag ----------
    @property
    def drag_preview(self) -> Optional[Anchor]:
        return self._drag_preview

    @property
    def dragging_slot(self) -> Optional[int]:
        return self._drag_slot

    def _clear_drag(self) -> None:
        self._drag_slot = None
        self._drag_preview = None
        self._drag_last_cell = None

    def _phase_after_input(self) -> Phase:
        if self.game_over:
            return Phase.GAME_OVER
        return Phase.SELECTING if self.selected_slot is not None else Phase.IDLE

    def begin_drag(self, slot: int) -> bool:
        if self.game_over or self.shape_for_slot(slot) is None:
            return False
        self._clear_drag()
        self._drag_slot = int(slot)
        self.phase = Phase.DRAGGING
        return True

    def snap_anchor(self, shape: Shape, row: int, col: int) -> Optional[Anchor]:
        """Anchor that centres `shape` on (row, col), or the nearest legal one."""
        center = shape_center(shape)
        anchor = Anchor(row - center.row, col - center.col)
        if self.grid.can_place(shape, anchor.row, anchor.col):
            return anchor
        return nearest_valid_placement(self.grid, shape, row, col)

    def drag_over(self, row: int, col: int) -> Optional[Anchor]:
        """Pointer moved over (row, col); returns the snapped preview anchor."""
        if self._drag_slot is None:
            return None
        shape = self.shape_for_slot(self._drag_slot)
        if shape is None or not self.grid.is_inside(row, col):
            self._drag_preview = None
            return None
        self._drag_last_cell = (row, col)
        self._drag_preview = self.snap_anchor(shape, row, col)
        return self._drag_preview

    def drag_off_grid(self) -> None:
        self._drag_preview = None

    def end_drag(self) -> PlacementResult:
        """Drop the dragged piece at the preview, else near the last hovered cell."""
        slot = self._drag_slot
        if slot is None:
            return REJECTED
        shape = self.shape_for_slot(slot)
        preview = self._drag_preview
        last_cell = self._drag_last_cell
        self._clear_drag()
        self.phase = self._phase_after_input()
        if shape is None:
            return REJECTED

        target: Optional[Anchor] = None
        if preview is not None and self.grid.can_place(shape, preview.row, preview.col):
            target = preview
        elif last_cell is not None:
            target = nearest_valid_placement(self.grid, shape, last_cell[0], last_cell[1])
        if target is None:
            return REJECTED
        return self.place_at(target.row, target.col, slot)

    def cancel_drag(self) -> None:
        if self._drag_slot is None:
            return
        self._clear_drag()
        self.phase = self._phase_after_input()

    # ---------- Commit ----------
    def place_at(self, row: int, col: int, slot: int) -> PlacementResult:
        """Commit the shape in `slot` with its anchor at (row, col).

        Either everything (grid, score, supply, game-over) changes together or
        nothing does.
        """
        if self.game_over:
            return REJECTED
        shape = self.shape_for_slot(slot)
        if shape is None or not self.grid.can_place(shape, row, col):
            return REJECTED

        self.phase = Phase.COMMITTING
        shape_index = self.supply[slot]
        next_grid = self.grid.copy()
        cells_placed = next_grid.place(shape, row, col, self.piece_id_counter, color_index_for(shape_index))
        cleared = resolve_full_lines(next_grid)
        gained = self.rules.score_for(cells_placed, cleared.lines_cleared)

        next_supply = [index for i, index in enumerate(self.supply) if i != slot]
        while len(next_supply) < self.config.pieces_per_round:
            next_supply.append(self._draw(len(next_supply)))

        self.grid = next_grid
        self.supply = next_supply
        self.score += gained
        self.piece_id_counter += 1
        self.total_pieces_placed += 1
        self.total_lines_cleared += cleared.lines_cleared
        self.selected_slot = None
        self._clear_drag()
        self._update_best_score()
        logger.debug(
            "placed shape %d at (%d, %d): cells=%d lines=%d gained=%d",
            shape_index, row, col, cells_placed, cleared.lines_cleared, gained,
        )

        self.phase = Phase.IDLE
        self._refresh_game_over()
        return PlacementResult(True, cells_placed, cleared.lines_cleared, gained)

    # ---------- Queries ----------
    def valid_actions(self) -> List[Tuple[int, int, int]]:
        """(slot, row, col) for every legal placement of the current supply."""
        actions: List[Tuple[int, int, int]] = []
        for slot, shape in enumerate(self.supply_shapes()):
            if shape is None:
                continue
            for row, col in valid_placements(self.grid, shape):
                actions.append((slot, row, col))
        return actions

    @property
    def state(self) -> SessionState:
        return SessionState(
            grid=self.grid.copy(),
            supply=tuple(self.supply),
            score=self.score,
            best_score=self.best_score,
            piece_id_counter=self.piece_id_counter,
            is_game_over=self.game_over,
            phase=self.phase,
            selected_slot=self.selected_slot,
        )

    def get_game_stats(self) -> dict:
        return {
            "final_score": self.score,
            "best_score": self.best_score,
            "pieces_placed": self.total_pieces_placed,
            "lines_cleared": self.total_lines_cleared,
            "final_fill_ratio": self.grid.get_filled_ratio(),
            "avg_score_per_piece": self.score / max(1, self.total_pieces_placed),
        }
