from __future__ import annotations

import numpy as np

from block_crush.game import BlockCrushGame, GameConfig, GameGrid, random_shape_index


class FixedIndexSeedSource:
    """Seed source whose every draw lands on the same shape index."""

    def __init__(self, shape_index: int) -> None:
        self.seed = next(s for s in range(100_000) if random_shape_index(s) == shape_index)

    def next_seed(self, slot: int) -> float:
        return float(self.seed)


def fill_except(grid: GameGrid, empties, piece_id: int = 1, color_index: int = 0) -> GameGrid:
    """Occupy every cell of `grid` except the (row, col) pairs in `empties`."""
    grid.pieces[:, :] = piece_id
    grid.colors[:, :] = color_index
    for row, col in empties:
        grid.pieces[row, col] = 0
        grid.colors[row, col] = -1
    return grid


def make_game(supply, refill_index: int = 0, store=None, size: int = 9) -> BlockCrushGame:
    """Game on an empty grid with a chosen supply; replacements draw `refill_index`."""
    game = BlockCrushGame(
        GameConfig(grid_size=size),
        seed_source=FixedIndexSeedSource(refill_index),
        store=store,
    )
    game.supply = list(supply)
    return game


def brute_force_any(grid: GameGrid, shapes) -> bool:
    for shape in shapes:
        for row in range(-1, grid.size + 1):
            for col in range(-1, grid.size + 1):
                if grid.can_place(shape, row, col):
                    return True
    return False


def random_grid(rng: np.random.Generator, size: int = 9, density: float = 0.6) -> GameGrid:
    grid = GameGrid(size)
    mask = rng.random((size, size)) < density
    grid.pieces[mask] = 1
    grid.colors[mask] = 0
    return grid
