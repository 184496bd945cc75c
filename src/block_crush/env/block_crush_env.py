from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_crush.game import BLOCK_SHAPES, BlockCrushGame, GameConfig, ScoringRules, color_for
from block_crush.storage import KeyValueStore


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


def _compute_action_mask(game: BlockCrushGame) -> np.ndarray:
    size = game.grid.size
    k = game.config.pieces_per_round
    mask = np.zeros((k, size, size), dtype=np.bool_)
    if game.game_over:
        return mask
    for slot, row, col in game.valid_actions():
        if 0 <= slot < k:
            mask[slot, row, col] = True
    return mask


class BlockCrushEnv(gym.Env):
    """Headless host over `BlockCrushGame`.

    Action: (slot, row, col). Reward is the engine score gained by the
    placement; a rejected placement earns `invalid_action_penalty`.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
        store: Optional[KeyValueStore] = None,
        invalid_action_penalty: float = -1.0,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        config = config or GameConfig()
        if config.random_seed is None:
            # The clock seed source is not reproducible under env seeding
            config = replace(config, random_seed=0)
        self.game = BlockCrushGame(config, rules, store=store)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        size = self.game.config.grid_size
        k = self.game.config.pieces_per_round

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=len(BLOCK_SHAPES) - 1, shape=(k,), dtype=np.int8),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, size, size))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.pieces_per_round
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, index in enumerate(self.game.supply[:k]):
            pieces[i] = int(index)
        return {
            "grid": self.game.grid.occupancy(),
            "pieces": pieces,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "best_score": self.game.best_score,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            # Keep episodes reproducible from the env's own generator
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, row, col = map(int, action)
        result = self.game.place_at(row, col, slot)

        reward = float(result.gained) if result.success else self.invalid_action_penalty
        terminated = bool(self.game.game_over)
        if terminated:
            reward += self.terminal_penalty
        self._steps += 1
        truncated = self._steps >= self.game.config.max_episode_steps

        info = self._get_info()
        info["placed"] = result.success
        info["lines_cleared"] = result.lines_cleared
        info["engine_score_delta"] = result.gained
        return self._get_obs(), reward, terminated, truncated, info

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.game.grid
        cell = 12
        size = grid.size
        img = np.zeros((size * cell, size * cell, 3), dtype=np.uint8)
        img[:, :] = (30, 30, 36)
        for row, col, filled in grid.filled_cells():
            color = _hex_to_rgb(color_for(filled.color_index))
            img[row * cell : (row + 1) * cell - 1, col * cell : (col + 1) * cell - 1, :] = color
        return img

    def close(self) -> None:
        pass
