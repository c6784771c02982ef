from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _template(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _template([[1, 1, 1, 1]]),
    TetrominoType.O: _template([[1, 1], [1, 1]]),
    TetrominoType.T: _template([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.S: _template([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _template([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.J: _template([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.L: _template([[0, 0, 1], [1, 1, 1]]),
}

COLORS: Dict[TetrominoType, Tuple[int, int, int]] = {
    TetrominoType.I: (0, 240, 240),
    TetrominoType.O: (240, 240, 0),
    TetrominoType.T: (160, 0, 240),
    TetrominoType.S: (0, 240, 0),
    TetrominoType.Z: (240, 0, 0),
    TetrominoType.J: (0, 0, 240),
    TetrominoType.L: (240, 160, 0),
}


def shape_of(kind: TetrominoType) -> Shape:
    """Return a writable copy of the template shape for ``kind``."""
    return BASE_SHAPES[TetrominoType(kind)].copy()


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a shape 90 degrees clockwise.

    An R x C input yields a C x R output with ``out[i, j] == shape[R - 1 - j, i]``.
    The input is never modified.
    """
    return np.rot90(np.asarray(shape), 1, axes=(1, 0)).copy()


@dataclass
class ActivePiece:
    """The falling piece: its type, its own shape copy and its top-left anchor."""

    kind: TetrominoType
    shape: Shape
    x: int
    y: int

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int, y: int = 0) -> "ActivePiece":
        shape = shape_of(kind)
        x = board_width // 2 - shape.shape[1] // 2
        return cls(kind=TetrominoType(kind), shape=shape, x=x, y=y)

    @property
    def color(self) -> Tuple[int, int, int]:
        return COLORS[self.kind]

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape.copy(), self.x + dx, self.y + dy)

    def rotated(self) -> "ActivePiece":
        return ActivePiece(self.kind, rotate_cw(self.shape), self.x, self.y)

    def copy(self) -> "ActivePiece":
        return self.moved(0, 0)

    def cells(self, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        """Board (x, y) coordinates of every occupied cell, offset by (dx, dy)."""
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for row in range(h):
            for col in range(w):
                if self.shape[row, col]:
                    cells.append((self.x + col + dx, self.y + row + dy))
        return cells
