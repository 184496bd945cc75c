"""Seed sources feeding `random_shape_index`.

The engine does not create entropy itself; a session is handed a seed source
and asks it for one seed per drawn slot.
"""

from __future__ import annotations

import random
import time
from typing import Callable, Optional, Protocol


class SeedSource(Protocol):
    def next_seed(self, slot: int) -> float:
        ...


class ClockSeedSource:
    """Stage base mixed with wall-clock milliseconds and the slot offset.

    Two sessions on the same stage do not see the same pieces.
    """

    def __init__(self, stage: int = 1, clock: Optional[Callable[[], float]] = None) -> None:
        self.base = int(stage) * 1000
        self._clock = clock or time.time

    def next_seed(self, slot: int) -> float:
        return float(self.base + int(self._clock() * 1000) + slot)


class ReplaySeedSource:
    """Reproducible seeds drawn from a private `random.Random`."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def next_seed(self, slot: int) -> float:
        return self.rng.random() * 1e6 + slot
