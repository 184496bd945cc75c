from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from block_crush.game import Anchor, BlockCrushGame, PlacementResult
from block_crush.game.core import REJECTED


# Pointer travel (px) before a tray press turns into a drag
DRAG_THRESHOLD = 8.0


@dataclass
class _Press:
    slot: int
    x: float
    y: float


class DragTracker:
    """Pointer gesture state for the piece tray.

    A press that is released before moving `threshold` pixels is a click and
    toggles selection; past the threshold it becomes a drag driven through
    `BlockCrushGame.begin_drag` / `drag_over` / `end_drag`. Grid cells are
    passed in already hit-tested by the host.
    """

    def __init__(self, game: BlockCrushGame, threshold: float = DRAG_THRESHOLD) -> None:
        self.game = game
        self.threshold = threshold
        self._press: Optional[_Press] = None
        self.pointer: Optional[Tuple[float, float]] = None

    @property
    def dragging(self) -> bool:
        return self.game.dragging_slot is not None

    def press(self, slot: int, x: float, y: float) -> bool:
        if self.game.game_over or self.game.shape_for_slot(slot) is None:
            return False
        self._press = _Press(int(slot), x, y)
        self.pointer = (x, y)
        return True

    def move(self, x: float, y: float, cell: Optional[Tuple[int, int]]) -> Optional[Anchor]:
        self.pointer = (x, y)
        if self._press is not None and not self.dragging:
            if math.hypot(x - self._press.x, y - self._press.y) >= self.threshold:
                self.game.begin_drag(self._press.slot)
                self._press = None
        if not self.dragging:
            return None
        if cell is None:
            self.game.drag_off_grid()
            return None
        return self.game.drag_over(*cell)

    def release(self) -> PlacementResult:
        press = self._press
        self._press = None
        self.pointer = None
        if self.dragging:
            return self.game.end_drag()
        if press is not None:
            self.game.select(press.slot)
        return REJECTED

    def cancel(self) -> None:
        self._press = None
        self.pointer = None
        self.game.cancel_drag()
