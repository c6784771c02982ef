from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from tetromino_rl.scores.models import ScoreSubmission

from .grid import GameGrid
from .pieces import ActivePiece, TetrominoType
from .rules import ScoringRules, ScoringVariant
from .sequencer import PiecePreview, SequencingPolicy, make_sequencer
from .timing import PollingScheduler, TimerHandle


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5
    TOGGLE_PAUSE = 6


class RunStatus(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    lookahead: int = 1
    scoring: ScoringVariant = ScoringVariant.BASIC
    sequencing: SequencingPolicy = SequencingPolicy.RANDOM
    random_seed: Optional[int] = None
    spawn_y: int = 0

    def __post_init__(self) -> None:
        self.scoring = ScoringVariant(self.scoring)
        self.sequencing = SequencingPolicy(self.sequencing)
        if self.lookahead not in (1, 2):
            raise ValueError(f"lookahead must be 1 or 2, got {self.lookahead}")
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board of {self.width}x{self.height} is too small for a tetromino")

    @classmethod
    def basic(cls, **overrides) -> "GameConfig":
        """10x20, one preview slot, plain line scoring, uniform random pieces."""
        values = dict(width=10, height=20, lookahead=1,
                      scoring=ScoringVariant.BASIC, sequencing=SequencingPolicy.RANDOM)
        values.update(overrides)
        return cls(**values)

    @classmethod
    def extended(cls, **overrides) -> "GameConfig":
        """12x24, two preview slots, combo and multi-line bonuses, 7-bag pieces."""
        values = dict(width=12, height=24, lookahead=2,
                      scoring=ScoringVariant.EXTENDED, sequencing=SequencingPolicy.BAG)
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class LockResult:
    lines_cleared: int
    points: int
    game_over: bool


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a render sink needs, detached from the live engine."""

    board: np.ndarray
    piece: Optional[ActivePiece]
    ghost_y: Optional[int]
    preview: Tuple[TetrominoType, ...]
    score: int
    lines: int
    level: int
    combo: int
    status: RunStatus


class BlockDropGame:
    """Falling-block engine: one state machine for both game variants.

    Player commands return True when they changed the game and False when they
    were rejected. Rejections are ordinary play, not errors.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 scheduler: Optional[PollingScheduler] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules(variant=self.config.scoring)
        if self.rules.variant is not self.config.scoring:
            raise ValueError(
                f"scoring rules are {self.rules.variant.value} but the config asks for "
                f"{self.config.scoring.value}"
            )
        self.scheduler = scheduler
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.preview = PiecePreview(make_sequencer(self.config.sequencing, self.rng), self.config.lookahead)
        self.score = 0
        self.lines_cleared_total = 0
        self.level = 1
        self.combo = 0
        self.status = RunStatus.RUNNING
        self.current_piece: Optional[ActivePiece] = None
        self.last_lock: Optional[LockResult] = None
        self._gravity_handle: Optional[TimerHandle] = None
        self._gravity_generation = 0
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self._cancel_gravity()
        self.grid.reset()
        self.preview.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.level = 1
        self.combo = 0
        self.last_lock = None
        self.status = RunStatus.RUNNING
        if self._spawn_piece():
            self._schedule_gravity()

    @property
    def game_over(self) -> bool:
        return self.status is RunStatus.GAME_OVER

    @property
    def gravity_interval_ms(self) -> int:
        return self.rules.gravity_interval_ms(self.level)

    def toggle_pause(self) -> bool:
        if self.status is RunStatus.GAME_OVER:
            return False
        if self.status is RunStatus.RUNNING:
            self.status = RunStatus.PAUSED
            self._cancel_gravity()
        else:
            self.status = RunStatus.RUNNING
            self._schedule_gravity()
        logger.debug("status -> %s", self.status.value)
        return True

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------
    def _can_act(self) -> bool:
        return self.status is RunStatus.RUNNING and self.current_piece is not None

    def move(self, dx: int, dy: int) -> bool:
        if not self._can_act():
            return False
        if self.grid.collides(self.current_piece, dx, dy):
            return False
        self.current_piece = self.current_piece.moved(dx, dy)
        return True

    def move_left(self) -> bool:
        return self.move(-1, 0)

    def move_right(self) -> bool:
        return self.move(1, 0)

    def soft_drop(self) -> bool:
        return self.move(0, 1)

    def rotate(self) -> bool:
        if not self._can_act():
            return False
        rotated = self.current_piece.rotated()
        if self.grid.collides(rotated):
            return False
        self.current_piece = rotated
        return True

    def tick(self) -> bool:
        """Gravity step: descend one row, or lock when resting.

        Returns True if the piece moved down.
        """
        if not self._can_act():
            return False
        if self.move(0, 1):
            return True
        self._lock_piece()
        return False

    def hard_drop(self) -> bool:
        if not self._can_act():
            return False
        drop = self.grid.ghost_drop_y(self.current_piece) - self.current_piece.y
        self.current_piece = self.current_piece.moved(0, drop)
        self._lock_piece()
        return True

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.status is RunStatus.GAME_OVER:
            return self.get_state(), 0, True, self._info()

        score_before = self.score
        action = Action(action)
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action == Action.NONE:
            pass

        reward = self.score - score_before
        return self.get_state(), reward, self.game_over, self._info()

    # ------------------------------------------------------------------
    # Spawn / lock
    # ------------------------------------------------------------------
    def _spawn_piece(self) -> bool:
        kind = self.preview.pop()
        piece = ActivePiece.spawn(kind, self.grid.width, self.config.spawn_y)
        self.current_piece = piece
        if self.grid.collides(piece):
            self._enter_game_over("spawn of %s blocked" % kind.name)
            return False
        logger.debug("spawned %s at (%d, %d)", kind.name, piece.x, piece.y)
        return True

    def _lock_piece(self) -> LockResult:
        assert self.current_piece is not None
        if not self.grid.merge(self.current_piece):
            # Lock-out: nothing from this lock is applied
            self.current_piece = None
            result = LockResult(lines_cleared=0, points=0, game_over=True)
            self.last_lock = result
            self._enter_game_over("lock-out above the ceiling")
            return result

        lines = self.grid.clear_full_rows()
        award = self.rules.score_for_clear(lines, self.level, self.combo)
        self.score += award.points
        self.combo = award.combo
        self.lines_cleared_total += lines
        previous_level = self.level
        self.level = self.rules.level_for_lines(self.lines_cleared_total)
        result = LockResult(lines_cleared=lines, points=award.points, game_over=False)
        self.last_lock = result
        if lines:
            logger.debug("cleared %d line(s) for %d points, combo %d", lines, award.points, self.combo)
        if self.level != previous_level:
            logger.debug("level %d -> %d", previous_level, self.level)
            self._schedule_gravity()
        self._spawn_piece()
        return result

    def _enter_game_over(self, reason: str) -> None:
        self.status = RunStatus.GAME_OVER
        self._cancel_gravity()
        logger.info("game over (%s): score=%d lines=%d level=%d", reason, self.score,
                    self.lines_cleared_total, self.level)

    # ------------------------------------------------------------------
    # Gravity timer
    # ------------------------------------------------------------------
    def _cancel_gravity(self) -> None:
        self._gravity_generation += 1
        if self._gravity_handle is not None:
            self._gravity_handle.cancel()
            self._gravity_handle = None

    def _schedule_gravity(self) -> None:
        self._cancel_gravity()
        if self.scheduler is None or self.status is not RunStatus.RUNNING:
            return
        generation = self._gravity_generation
        self._gravity_handle = self.scheduler.call_later(
            self.gravity_interval_ms, lambda: self._on_gravity(generation)
        )

    def _on_gravity(self, generation: int) -> None:
        # A tick from a superseded schedule must not touch the session
        if generation != self._gravity_generation or self.status is not RunStatus.RUNNING:
            return
        self._gravity_handle = None
        self.tick()
        if generation == self._gravity_generation and self.status is RunStatus.RUNNING:
            self._schedule_gravity()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def get_action_mask(self) -> np.ndarray:
        """Which of the six agent actions would change the game right now."""
        mask = np.zeros(6, dtype=np.bool_)
        mask[Action.NONE] = True
        if not self._can_act():
            return mask
        piece = self.current_piece
        mask[Action.LEFT] = not self.grid.collides(piece, -1, 0)
        mask[Action.RIGHT] = not self.grid.collides(piece, 1, 0)
        mask[Action.ROTATE] = not self.grid.collides(piece.rotated())
        mask[Action.SOFT_DROP] = not self.grid.collides(piece, 0, 1)
        mask[Action.HARD_DROP] = True
        return mask

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state

    def snapshot(self) -> GameSnapshot:
        piece = self.current_piece.copy() if self.current_piece is not None else None
        ghost = self.grid.ghost_drop_y(piece) if piece is not None and not self.game_over else None
        return GameSnapshot(
            board=self.grid.clone_state(),
            piece=piece,
            ghost_y=ghost,
            preview=self.preview.peek(),
            score=self.score,
            lines=self.lines_cleared_total,
            level=self.level,
            combo=self.combo,
            status=self.status,
        )

    def score_submission(self, nickname: str = "") -> ScoreSubmission:
        """Build the score record for the external score API."""
        return ScoreSubmission(
            nickname=nickname.strip(),
            points=self.score,
            level=self.level,
            lines=self.lines_cleared_total,
            combo=self.combo,
        )

    def _info(self) -> dict:
        return {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
            "level": self.level,
            "combo": self.combo,
            "status": self.status.value,
        }
