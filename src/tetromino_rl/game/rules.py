from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ScoringVariant(str, Enum):
    BASIC = "basic"
    EXTENDED = "extended"


@dataclass(frozen=True)
class ClearAward:
    points: int
    combo: int


@dataclass
class ScoringRules:
    """Line-clear scoring and the level/gravity curve.

    The basic variant pays ``base_points[lines] * level``. The extended variant
    adds a multi-line bonus and a combo bonus for consecutive clearing locks.
    ``level`` is always the level before the clear is applied.
    """

    variant: ScoringVariant = ScoringVariant.BASIC
    base_points: Tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    multi_line_bonus: Tuple[int, int, int, int, int] = (0, 0, 100, 300, 600)
    combo_step: int = 50
    lines_per_level: int = 10
    base_interval_ms: int = 1000
    interval_step_ms: int = 100
    min_interval_ms: int = 100

    def __post_init__(self) -> None:
        self.variant = ScoringVariant(self.variant)

    def score_for_clear(self, lines: int, level: int, combo: int = 0) -> ClearAward:
        if not 0 <= lines < len(self.base_points):
            raise ValueError(f"cannot clear {lines} lines at once")
        if self.variant is ScoringVariant.BASIC:
            return ClearAward(points=self.base_points[lines] * level, combo=0)
        if lines == 0:
            return ClearAward(points=0, combo=0)
        combo += 1
        combo_bonus = self.combo_step * combo if combo > 1 else 0
        points = (self.base_points[lines] + self.multi_line_bonus[lines]) * level + combo_bonus * level
        return ClearAward(points=points, combo=combo)

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def gravity_interval_ms(self, level: int) -> int:
        return max(self.min_interval_ms, self.base_interval_ms - (level - 1) * self.interval_step_ms)
