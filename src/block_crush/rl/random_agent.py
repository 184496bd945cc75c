from __future__ import annotations

import argparse
import logging

import gymnasium as gym
import numpy as np

import block_crush.env  # noqa: F401  ensure registration
from block_crush.game import format_grid
from block_crush.logger import configure_logging


logger = logging.getLogger(__name__)


def run_random(episodes: int = 1, seed: int = 0, max_steps: int = 10_000) -> list[dict]:
    """Play masked-random episodes and return each episode's game stats."""
    env = gym.make("BlockCrush-9x9-v0")
    rng = np.random.default_rng(seed)
    results: list[dict] = []
    try:
        for episode in range(episodes):
            obs, info = env.reset(seed=seed + episode)
            for _ in range(max_steps):
                valid = np.argwhere(info["action_mask"])
                if len(valid) == 0:
                    break
                action = valid[rng.integers(len(valid))]
                obs, reward, terminated, truncated, info = env.step(action)
                if terminated or truncated:
                    break
            game = env.unwrapped.game
            stats = game.get_game_stats()
            results.append(stats)
            logger.info("episode %d: %s", episode, stats)
            print(format_grid(game.grid))
    finally:
        env.close()
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--episodes", type=int, default=1)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level.upper())
    results = run_random(args.episodes, args.seed)
    print(f"Random agent mean score: {np.mean([r['final_score'] for r in results]):.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
