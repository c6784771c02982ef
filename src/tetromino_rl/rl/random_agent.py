from __future__ import annotations

import random

import gymnasium as gym

import tetromino_rl.env  # noqa: F401


def run_random(steps: int = 200, env_id: str = "BlockDrop-10x20-v0") -> float:
    env = gym.make(env_id)
    obs, info = env.reset()
    total_reward = 0.0
    for _ in range(steps):
        # Prefer actions the engine would accept
        valid = [i for i, ok in enumerate(info.get("action_mask", [])) if ok]
        if valid:
            action = random.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    run_random()
