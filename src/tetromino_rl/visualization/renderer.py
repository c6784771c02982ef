from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pygame

from tetromino_rl.game import COLORS, GameSnapshot, RunStatus, TetrominoType, shape_of
from tetromino_rl.scores import LeaderboardEntry


BACKGROUND = (10, 10, 14)
BOARD_BG = (30, 30, 36)
TEXT = (230, 230, 230)


def leaderboard_lines(entries: Optional[Sequence[LeaderboardEntry]], limit: int = 10) -> List[str]:
    """Text rows of the ranking overlay; None means the fetch is still running."""
    if entries is None:
        return ["Loading..."]
    if not entries:
        return ["No scores yet. Be the first!"]
    return [f"#{rank:<3} {entry.display_name[:16]:<16} {entry.points:>9,}"
            for rank, entry in enumerate(entries[:limit], start=1)]


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return BOARD_BG
    return COLORS.get(TetrominoType(abs(v)), (200, 200, 200))


class Renderer:
    """Draws a GameSnapshot: board, ghost, falling piece, previews and stats."""

    def __init__(self, cell_size: int = 30, margin: int = 20, preview_cell: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.preview_cell = preview_cell
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        panel = 6 * self.preview_cell + self.margin * 2
        return (self.margin * 3 + width * self.cell_size + panel,
                self.margin * 2 + height * self.cell_size)

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
            self._big_font = pygame.font.SysFont(None, 42)
        return self._font, self._big_font

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, board: np.ndarray) -> pygame.Surface:
        h, w = board.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(BOARD_BG)
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                if v:
                    rect = pygame.Rect(x * self.cell_size, y * self.cell_size,
                                       self.cell_size - 1, self.cell_size - 1)
                    pygame.draw.rect(surf, _color_for_value(v), rect)
        return surf

    def _draw_piece(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        piece = snapshot.piece
        if piece is None:
            return
        h, w = piece.shape.shape
        for row in range(h):
            for col in range(w):
                if not piece.shape[row, col]:
                    continue
                x = piece.x + col
                if snapshot.ghost_y is not None and snapshot.ghost_y + row >= 0:
                    pygame.draw.rect(screen, piece.color, self._cell_rect(x, snapshot.ghost_y + row), 2)
                if piece.y + row >= 0:
                    pygame.draw.rect(screen, piece.color, self._cell_rect(x, piece.y + row))

    def _draw_panel(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        font, _ = self._fonts()
        h, w = snapshot.board.shape
        x0 = self.margin * 2 + w * self.cell_size
        y = self.margin
        for label, value in (("Score", snapshot.score), ("Level", snapshot.level),
                             ("Lines", snapshot.lines),
                             ("Combo", f"{snapshot.combo}x" if snapshot.combo else "-")):
            screen.blit(font.render(f"{label}: {value}", True, TEXT), (x0, y))
            y += 28
        y += 10
        screen.blit(font.render("Next", True, TEXT), (x0, y))
        y += 28
        for kind in snapshot.preview:
            shape = shape_of(kind)
            for py in range(shape.shape[0]):
                for px in range(shape.shape[1]):
                    if shape[py, px]:
                        rect = pygame.Rect(x0 + px * self.preview_cell, y + py * self.preview_cell,
                                           self.preview_cell - 1, self.preview_cell - 1)
                        pygame.draw.rect(screen, COLORS[kind], rect)
            y += self.preview_cell * 3

    def _draw_banner(self, screen: pygame.Surface, text: str) -> None:
        _, big_font = self._fonts()
        msg = big_font.render(text, True, (255, 255, 255))
        rect = msg.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        screen.blit(msg, rect)

    def _draw_leaderboard(self, screen: pygame.Surface, lines: List[str]) -> None:
        font, big_font = self._fonts()
        w, h = screen.get_width() - 2 * self.margin, screen.get_height() - 2 * self.margin
        panel = pygame.Surface((w, h), pygame.SRCALPHA)
        panel.fill((20, 25, 40, 230))
        screen.blit(panel, (self.margin, self.margin))
        screen.blit(big_font.render("Ranking", True, TEXT), (self.margin * 2, self.margin * 2))
        y = self.margin * 2 + 48
        for line in lines:
            screen.blit(font.render(line, True, TEXT), (self.margin * 2, y))
            y += 26

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot,
             leaderboard: Optional[List[str]] = None) -> None:
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(snapshot.board), (self.margin, self.margin))
        self._draw_piece(screen, snapshot)
        self._draw_panel(screen, snapshot)
        if snapshot.status is RunStatus.PAUSED:
            self._draw_banner(screen, "PAUSED")
        elif snapshot.status is RunStatus.GAME_OVER:
            self._draw_banner(screen, f"GAME OVER  {snapshot.score}")
        if leaderboard is not None:
            self._draw_leaderboard(screen, leaderboard)
        pygame.display.flip()
