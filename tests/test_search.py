import numpy as np

from block_crush.game import (
    BLOCK_SHAPES,
    GameGrid,
    can_place_any,
    nearest_valid_placement,
    shape_at,
    valid_anchor_mask,
    valid_placements,
)
from tests.helpers import brute_force_any, fill_except, random_grid


def test_valid_anchor_mask_matches_can_place():
    rng = np.random.default_rng(11)
    for _ in range(100):
        grid = random_grid(rng, density=float(rng.random()))
        for shape in BLOCK_SHAPES:
            mask = valid_anchor_mask(grid, shape)
            h, w = shape.shape
            assert mask.shape == (9 - h + 1, 9 - w + 1)
            for r in range(mask.shape[0]):
                for c in range(mask.shape[1]):
                    assert bool(mask[r, c]) == grid.can_place(shape, r, c)


def test_shape_larger_than_grid_has_no_anchor():
    grid = GameGrid(3)
    assert valid_placements(grid, shape_at(4)) == []
    assert can_place_any(grid, [4]) is False
    assert nearest_valid_placement(grid, shape_at(4), 0, 0) is None


def test_can_place_any_agrees_with_brute_force():
    rng = np.random.default_rng(5)
    for _ in range(300):
        grid = random_grid(rng, density=0.55 + 0.4 * float(rng.random()))
        supply = [int(i) for i in rng.integers(0, len(BLOCK_SHAPES), size=3)]
        expected = brute_force_any(grid, [BLOCK_SHAPES[i] for i in supply])
        assert can_place_any(grid, supply) == expected


def test_can_place_any_skips_unknown_indices():
    grid = GameGrid(9)
    assert can_place_any(grid, [99]) is False
    assert can_place_any(grid, [99, -1, 0]) is True
    assert can_place_any(grid, []) is False


def test_single_gap_scenario():
    grid = fill_except(GameGrid(9), [(4, 4)])
    assert can_place_any(grid, [1]) is False
    assert can_place_any(grid, [12]) is False
    assert can_place_any(grid, [0]) is True


def test_nearest_returns_legal_anchor():
    rng = np.random.default_rng(9)
    for _ in range(300):
        grid = random_grid(rng, density=float(rng.random()))
        shape = BLOCK_SHAPES[int(rng.integers(len(BLOCK_SHAPES)))]
        target = int(rng.integers(-2, 11)), int(rng.integers(-2, 11))
        anchor = nearest_valid_placement(grid, shape, *target)
        if anchor is None:
            assert valid_placements(grid, shape) == []
        else:
            assert grid.can_place(shape, anchor.row, anchor.col)


def test_nearest_prefers_centred_anchor():
    grid = GameGrid(9)
    # 2x2 centre is (0, 0), so the ideal anchor is the target itself
    assert nearest_valid_placement(grid, shape_at(3), 4, 4) == (4, 4)
    # I piece centre is (0, 1)
    assert nearest_valid_placement(grid, shape_at(4), 3, 4) == (3, 3)


def test_nearest_clamps_to_the_board():
    grid = GameGrid(9)
    assert nearest_valid_placement(grid, shape_at(4), 0, 0) == (0, 0)
    assert nearest_valid_placement(grid, shape_at(4), 8, 8) == (8, 5)


def test_nearest_tie_break_is_row_major():
    grid = GameGrid(9)
    grid.place(shape_at(0), 4, 4, piece_id=1, color_index=0)
    assert nearest_valid_placement(grid, shape_at(0), 4, 4) == (3, 4)


def test_nearest_respects_max_distance():
    grid = fill_except(GameGrid(9), [(0, 0)])
    assert nearest_valid_placement(grid, shape_at(0), 8, 8) == (0, 0)
    assert nearest_valid_placement(grid, shape_at(0), 8, 8, max_distance=3) is None


def test_nearest_does_not_mutate():
    grid = fill_except(GameGrid(9), [(2, 2), (2, 3)])
    before = grid.copy()
    nearest_valid_placement(grid, shape_at(1), 7, 7)
    assert grid == before


def test_nearest_on_full_grid_is_none():
    grid = fill_except(GameGrid(9), [])
    for shape in BLOCK_SHAPES:
        assert nearest_valid_placement(grid, shape, 4, 4) is None
