"""Gymnasium environments for Block Crush."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One placement per step, MultiDiscrete (slot, row, col)
register(
    id="BlockCrush-9x9-v0",
    entry_point="block_crush.env.block_crush_env:BlockCrushEnv",
)

__all__ = ["BlockCrush-9x9-v0"]
