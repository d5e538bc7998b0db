from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from tetris_duel.game import COLORS, BoardEngine, Piece, TetrominoType
from tetris_duel.match import Match


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return (20, 20, 26)
    color = pygame.Color(COLORS[TetrominoType(abs(v))])
    return (color.r, color.g, color.b)


class DuelRenderer:
    """Draws both boards side by side with scores and the human's next piece."""

    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 160) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, rows: int, cols: int) -> Tuple[int, int]:
        board_w = cols * self.cell_size
        board_h = rows * self.cell_size
        width = self.margin * 4 + board_w * 2 + self.panel_width
        height = self.margin * 3 + board_h
        return width, height

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        return surf

    def _draw_board(self, screen: pygame.Surface, engine: BoardEngine, label: str, x0: int) -> None:
        state = engine.get_state()
        screen.blit(self._grid_surface(state), (x0, self.margin * 2))
        text = self.font.render(f"{label}: {engine.score}", True, (230, 230, 230))
        screen.blit(text, (x0, self.margin // 2))
        if engine.game_over:
            over = self.font.render("Game Over", True, (255, 90, 90))
            rect = over.get_rect(center=(x0 + state.shape[1] * self.cell_size // 2,
                                         self.margin * 2 + state.shape[0] * self.cell_size // 2))
            screen.blit(over, rect)

    def _draw_next(self, screen: pygame.Surface, piece: Optional[Piece], x0: int) -> None:
        screen.blit(self.font.render("Next", True, (230, 230, 230)), (x0, self.margin * 2))
        if piece is None:
            return
        size = self.cell_size * 5 // 6
        color = _color_for_value(int(piece.kind))
        for py in range(piece.height):
            for px in range(piece.width):
                if piece.shape[py, px]:
                    rect = pygame.Rect(x0 + px * size, self.margin * 4 + py * size, size - 1, size - 1)
                    pygame.draw.rect(screen, color, rect)

    def draw(self, screen: pygame.Surface, match: Match) -> None:
        screen.fill((10, 10, 14))
        board_w = match.human.engine.grid.width * self.cell_size
        human_x = self.margin
        panel_x = human_x + board_w + self.margin
        agent_x = panel_x + self.panel_width + self.margin
        self._draw_board(screen, match.human.engine, "You", human_x)
        self._draw_next(screen, match.human.engine.next_piece, panel_x)
        self._draw_board(screen, match.agent.engine, "AI", agent_x)
        if match.result is not None:
            lines = [
                f"You {match.result.human_score} - AI {match.result.agent_score}",
                "R: restart  ESC: quit",
            ]
            for i, line in enumerate(lines):
                img = self.font.render(line, True, (255, 220, 120))
                screen.blit(img, (panel_x, self.margin * 10 + i * 24))
