from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_rl.game import COLORS, Action, BlockDropGame, GameConfig, TetrominoType


VARIANTS = {
    "basic": GameConfig.basic,
    "extended": GameConfig.extended,
}


class BlockDropEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, variant: str = "basic",
                 render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 gravity_every: int = 2,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        if config is None:
            if variant not in VARIANTS:
                raise ValueError(f"unknown variant {variant!r}, expected one of {sorted(VARIANTS)}")
            config = VARIANTS[variant]()
        self.game = BlockDropGame(config)
        self.render_mode = render_mode
        if gravity_every < 1:
            raise ValueError("gravity_every must be at least 1")
        self.gravity_every = int(gravity_every)
        self.terminal_penalty = float(terminal_penalty)

        # Reward shaping parameters
        self.reward_weights: Dict[str, float] = {
            # Positive components
            "score": 0.01,           # per engine score point
            "lines": 1.0,            # per line cleared
            # Negative components (penalize increases)
            "holes": 0.1,            # penalize holes created
            "height": 0.02,          # penalize max height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        height, width = config.height, config.width
        n_types = len(TetrominoType)

        # Board cells: 0 empty, +id locked, -id falling piece
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_types, high=n_types, shape=(height, width), dtype=np.int8),
                "preview": spaces.Box(low=1, high=n_types, shape=(config.lookahead,), dtype=np.int8),
                "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
            }
        )
        # LEFT, RIGHT, ROTATE, SOFT_DROP, HARD_DROP, NONE
        self.action_space = spaces.Discrete(6)

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.get_state().astype(np.int8),
            "preview": np.array([int(t) for t in self.game.preview.peek()], dtype=np.int8),
            "level": np.array([self.game.level], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": self.game.get_action_mask(),
            "score": self.game.score,
            "lines": self.game.lines_cleared_total,
            "level": self.game.level,
            "combo": self.game.combo,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return self.game.get_action_mask()

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = Action(int(action))
        if action == Action.TOGGLE_PAUSE:
            raise ValueError("pausing is not an agent action")

        score_before = self.game.score
        lines_before = self.game.lines_cleared_total
        holes_before = self.game.grid.count_holes()
        height_before = self.game.grid.get_max_height()

        self.game.step(action)
        self._steps += 1
        if not self.game.game_over and self._steps % self.gravity_every == 0:
            self.game.tick()

        reward_components: Dict[str, float] = {
            "score": self.reward_weights["score"] * float(self.game.score - score_before),
            "lines": self.reward_weights["lines"] * float(self.game.lines_cleared_total - lines_before),
            "holes": -self.reward_weights["holes"] * float(
                max(0, self.game.grid.count_holes() - holes_before)),
            "height": -self.reward_weights["height"] * float(
                max(0, self.game.grid.get_max_height() - height_before)),
        }
        terminated = bool(self.game.game_over)
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        reward = float(sum(reward_components.values()))

        info = self._get_info()
        info["reward_components"] = reward_components
        return self._get_obs(), reward, terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        board = self.game.get_state()
        cell = 12
        h, w = board.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        img[:, :] = (30, 30, 36)
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                if v:
                    img[y * cell:(y + 1) * cell - 1, x * cell:(x + 1) * cell - 1, :] = COLORS[TetrominoType(abs(v))]
        return img

    def close(self) -> None:
        pass
