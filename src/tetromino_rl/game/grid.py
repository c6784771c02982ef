from __future__ import annotations

from typing import Tuple

import numpy as np

from .pieces import ActivePiece


Coordinate = Tuple[int, int]


class GameGrid:
    """Fixed-size playfield of ``height`` rows by ``width`` columns.

    Cells hold 0 when empty, otherwise the ``TetrominoType`` value of the piece
    that locked there. Row 0 is the top of the visible board; pieces may hang
    above it (negative rows) while they fall.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, piece: ActivePiece, dx: int = 0, dy: int = 0) -> bool:
        for x, y in piece.cells(dx, dy):
            if x < 0 or x >= self.width or y >= self.height:
                return True
            # Cells above the ceiling only collide with the side walls
            if y >= 0 and self.grid[y, x] != 0:
                return True
        return False

    def ghost_drop_y(self, piece: ActivePiece) -> int:
        """Lowest anchor row the piece can reach by falling straight down."""
        dy = 0
        while not self.collides(piece, 0, dy + 1):
            dy += 1
        return piece.y + dy

    def merge(self, piece: ActivePiece) -> bool:
        """Write the piece into the grid.

        Returns False, leaving the grid untouched, when any cell would sit
        above the visible board (lock-out).
        """
        cells = piece.cells()
        if any(y < 0 for _, y in cells):
            return False
        value = int(piece.kind)
        for x, y in cells:
            self.grid[y, x] = value
        return True

    def clear_full_rows(self) -> int:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        remaining = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, remaining))
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
