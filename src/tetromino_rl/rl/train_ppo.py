from __future__ import annotations

import argparse
import os

import gymnasium as gym

# Ensure envs are registered
import tetromino_rl.env  # noqa: F401
from tetromino_rl.env.wrappers import ResampleInvalidActionWrapper


ENV_IDS = {
    "basic": "BlockDrop-10x20-v0",
    "extended": "BlockDrop-12x24-v0",
}


def make_env(env_id: str, seed: int | None = None) -> gym.Env:
    env = gym.make(env_id)
    # Resample rejected actions for vanilla PPO; also forwards get_action_mask
    env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--variant", choices=sorted(ENV_IDS), default="basic")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_tetromino.zip")
    p.add_argument("--n_envs", type=int, default=4)
    return p


def main() -> None:
    args = build_parser().parse_args()
    env_id = ENV_IDS[args.variant]

    from stable_baselines3 import PPO
    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    def make_env_idx(i: int):
        def thunk():
            return make_env(env_id, seed=i)
        return thunk

    vec_env = SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)])
    vec_env = VecMonitor(vec_env)
    model = PPO(
        policy="MultiInputPolicy",
        env=vec_env,
        verbose=1,
        tensorboard_log=args.logdir,
    )

    os.makedirs(os.path.dirname(args.save_path), exist_ok=True)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)


if __name__ == "__main__":  # pragma: no cover
    main()
