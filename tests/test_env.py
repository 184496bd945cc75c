import gymnasium as gym
import numpy as np

import block_crush.env  # noqa: F401
from block_crush.env.block_crush_env import BlockCrushEnv
from block_crush.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper
from block_crush.game import GameConfig


def test_reset_and_valid_step():
    env = gym.make("BlockCrush-9x9-v0")
    obs, info = env.reset(seed=3)
    assert obs["grid"].shape == (9, 9)
    assert obs["pieces"].shape == (3,)
    mask = info["action_mask"]
    assert mask.shape == (3, 9, 9) and mask.any()

    action = np.argwhere(mask)[0]
    obs, reward, terminated, truncated, info = env.step(action)
    assert info["placed"] is True
    assert reward >= 10.0
    assert obs["grid"].sum() >= 1
    assert not terminated and not truncated
    env.close()


def test_invalid_step_is_penalised():
    env = BlockCrushEnv(invalid_action_penalty=-2.0)
    env.reset(seed=0)
    env.game.supply = [3, 3, 3]
    obs, reward, terminated, truncated, info = env.step((0, 8, 8))
    assert reward == -2.0
    assert info["placed"] is False
    assert obs["grid"].sum() == 0


def test_seeded_resets_are_reproducible():
    a = BlockCrushEnv()
    b = BlockCrushEnv()
    obs_a, _ = a.reset(seed=11)
    obs_b, _ = b.reset(seed=11)
    assert np.array_equal(obs_a["pieces"], obs_b["pieces"])


def test_truncation():
    env = BlockCrushEnv(GameConfig(max_episode_steps=2))
    env.reset(seed=1)
    env.game.supply = [3, 3, 3]
    _, _, _, truncated, _ = env.step((0, 8, 8))
    assert not truncated
    _, _, _, truncated, _ = env.step((0, 8, 8))
    assert truncated


def test_rgb_render():
    env = BlockCrushEnv(render_mode="rgb_array")
    env.reset(seed=2)
    env.game.supply = [0, 0, 0]
    env.step((0, 0, 0))
    img = env.render()
    assert img.shape == (108, 108, 3)
    assert tuple(img[0, 0]) == (0xA8, 0xB5, 0xFF)
    assert tuple(img[50, 50]) == (30, 30, 36)


def test_flatten_wrapper():
    env = FlattenDiscreteActionWrapper(BlockCrushEnv())
    env.reset(seed=4)
    assert env.action_space.n == 3 * 81
    assert env._unflatten(0) == (0, 0, 0)
    assert env._unflatten(82) == (1, 0, 1)
    assert env.get_action_mask().shape == (243,)


def test_resample_wrapper_turns_invalid_into_valid():
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(BlockCrushEnv()))
    env.reset(seed=4)
    env.unwrapped.game.supply = [3, 3, 3]
    invalid = 8 * 9 + 8
    assert not env.get_action_mask()[invalid]
    _, _, _, _, info = env.step(invalid)
    assert info["placed"] is True


def test_random_agent_plays_to_the_end(capsys):
    from block_crush.rl.random_agent import run_random

    results = run_random(episodes=1, seed=0, max_steps=50)
    assert len(results) == 1
    assert results[0]["pieces_placed"] >= 1
    assert results[0]["final_score"] >= 10
    out = capsys.readouterr().out
    assert sum(out.count(ch) for ch in "█·") == 81
