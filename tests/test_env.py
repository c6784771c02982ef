import gymnasium as gym
import numpy as np
import pytest

import tetromino_rl.env  # noqa: F401
from tetromino_rl.env.block_drop_env import BlockDropEnv
from tetromino_rl.env.wrappers import ResampleInvalidActionWrapper
from tetromino_rl.game import Action, TetrominoType
from tests.helpers import fill_rows, place


@pytest.mark.parametrize("env_id,shape,lookahead", [
    ("BlockDrop-10x20-v0", (20, 10), 1),
    ("BlockDrop-12x24-v0", (24, 12), 2),
])
def test_registered_envs(env_id, shape, lookahead):
    env = gym.make(env_id)
    obs, info = env.reset(seed=0)
    assert obs["board"].shape == shape
    assert obs["preview"].shape == (lookahead,)
    assert obs["level"].tolist() == [1]
    assert info["action_mask"].shape == (6,)
    env.close()


def test_random_rollout_terminates_cleanly():
    env = BlockDropEnv(variant="basic")
    obs, info = env.reset(seed=3)
    for _ in range(3000):
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        assert isinstance(reward, float)
        if terminated:
            break
    assert terminated
    assert info["score"] >= 0


def test_clearing_lines_is_rewarded():
    env = BlockDropEnv(variant="basic", gravity_every=100)
    env.reset(seed=1)
    fill_rows(env.game, [18, 19], skip_cols=(0, 1))
    place(env.game, TetrominoType.O, x=0)
    _, reward, terminated, _, info = env.step(Action.HARD_DROP)
    assert not terminated
    assert info["reward_components"]["lines"] == 2.0
    assert reward == pytest.approx(0.01 * 300 + 2.0)


def test_pause_is_not_an_agent_action():
    env = BlockDropEnv()
    env.reset(seed=0)
    with pytest.raises(ValueError):
        env.step(Action.TOGGLE_PAUSE)


def test_unknown_variant_rejected():
    with pytest.raises(ValueError):
        BlockDropEnv(variant="huge")


def test_rgb_render():
    env = BlockDropEnv(variant="extended", render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (24 * 12, 12 * 12, 3)
    assert img.dtype == np.uint8


def test_resample_wrapper_replaces_rejected_action():
    env = ResampleInvalidActionWrapper(BlockDropEnv(variant="basic", gravity_every=100))
    env.reset(seed=0)
    game = env.unwrapped.game
    place(game, TetrominoType.O, x=0, y=5)
    mask = env.get_action_mask()
    assert not mask[Action.LEFT]

    seen = []
    inner_step = env.env.step

    def recording_step(action):
        seen.append(int(action))
        return inner_step(action)

    env.env.step = recording_step
    env.step(Action.LEFT)
    assert seen[0] != Action.LEFT
    assert mask[seen[0]]
