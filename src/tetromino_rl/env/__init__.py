"""Gymnasium environments for Tetromino RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Classic 10x20 board, one preview, uniform random pieces
register(
    id="BlockDrop-10x20-v0",
    entry_point="tetromino_rl.env.block_drop_env:BlockDropEnv",
    kwargs={"variant": "basic"},
)

# 12x24 board, two previews, 7-bag with combo scoring
register(
    id="BlockDrop-12x24-v0",
    entry_point="tetromino_rl.env.block_drop_env:BlockDropEnv",
    kwargs={"variant": "extended"},
)

__all__ = ["BlockDrop-10x20-v0", "BlockDrop-12x24-v0"]
