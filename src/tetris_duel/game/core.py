from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional

import numpy as np

from .events import EngineEvent, GameOver, LinesCleared, ScoreMilestone
from .grid import GameGrid
from .pieces import Piece, TetrominoType, rotate_cw
from .rules import ScoringRules


logger = logging.getLogger(__name__)

GIFT_PIECES = (TetrominoType.O, TetrominoType.I)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    NONE = 4


class GameState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    random_seed: Optional[int] = None
    preview: bool = True  # keep a pre-generated next piece


ScoreSink = Callable[[int], None]
GameOverSink = Callable[[int], None]


class BoardEngine:
    """One player's board: grid, active and next piece, score and lifecycle.

    Only a RUNNING engine accepts spawns, moves and rotations. Everything that
    would affect the opponent is emitted as an event in `self.events`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        name: str = "player",
        on_score: Optional[ScoreSink] = None,
        on_game_over: Optional[GameOverSink] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.name = name
        self.on_score = on_score
        self.on_game_over = on_game_over
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid()
        self.state = GameState.NOT_STARTED
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.current_piece: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None
        self.events: List[EngineEvent] = []

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    def reset(self) -> None:
        self.grid.reset()
        self.state = GameState.NOT_STARTED
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.current_piece = None
        self.next_piece = None
        self.events.clear()
        if self.on_score is not None:
            self.on_score(self.score)

    def start(self) -> None:
        if self.state is not GameState.NOT_STARTED:
            return
        self.state = GameState.RUNNING
        self.spawn_piece()

    def drain_events(self) -> List[EngineEvent]:
        events, self.events = self.events, []
        return events

    def _random_piece(self, kinds=None) -> Piece:
        kind = self.rng.choice(list(kinds or TetrominoType))
        return Piece.spawn(kind)

    def spawn_piece(self) -> None:
        if not self.running:
            return
        if self.next_piece is not None:
            self.current_piece = self.next_piece
            self.next_piece = None
        else:
            self.current_piece = self._random_piece()
        if self.config.preview:
            self.next_piece = self._random_piece()
        # Top-out: the new piece does not fit where it spawns
        if self.check_collision():
            self._end_game("top-out on spawn")

    def check_collision(self, piece: Optional[Piece] = None) -> bool:
        piece = piece or self.current_piece
        if piece is None:
            return False
        return self.grid.collides(piece.shape, piece.x, piece.y)

    def move(self, dx: int, dy: int) -> bool:
        if not self.running or self.current_piece is None:
            return False
        piece = self.current_piece
        piece.x += dx
        piece.y += dy
        if not self.check_collision():
            return True
        piece.x -= dx
        piece.y -= dy
        if dy > 0:
            # Blocked while falling: the piece has landed
            self.lock_piece()
            if self.game_over:
                # A fatal lock leaves the grid and score as the sink saw them
                return False
            self.clear_lines()
            self.spawn_piece()
        return False

    def rotate(self) -> bool:
        if not self.running or self.current_piece is None:
            return False
        piece = self.current_piece
        original_shape, original_rotation = piece.shape, piece.rotation
        piece.shape = rotate_cw(original_shape)
        piece.rotation = (original_rotation + 1) % 4
        if self.check_collision():
            piece.shape = original_shape
            piece.rotation = original_rotation
            return False
        return True

    def lock_piece(self) -> None:
        assert self.current_piece is not None
        piece = self.current_piece
        self.grid.stamp(piece.shape, piece.x, piece.y, int(piece.kind))
        self.pieces_locked += 1
        self.check_game_over()

    def clear_lines(self) -> int:
        row = None
        full = self.grid.full_rows()
        if len(full) == 4:
            row = self.grid.grid[full[-1]].copy()
        lines = self.grid.clear_full_lines()
        if lines > 0:
            self.lines_cleared_total += lines
            self.update_score(lines)
            self.events.append(LinesCleared(lines=lines, row=row))
        return lines

    def update_score(self, lines: int) -> int:
        previous = self.score
        gained = self.rules.score_for_lines(lines)
        self.score += gained
        if self.on_score is not None:
            self.on_score(self.score)
        if self.rules.crossed_milestone(previous, self.score):
            self.events.append(ScoreMilestone(previous_score=previous, score=self.score))
        return gained

    def check_game_over(self) -> bool:
        if self.grid.top_rows_occupied(2):
            self._end_game("stack reached the top rows")
            return True
        return False

    def halt(self) -> None:
        """End this session from outside, e.g. when the opponent tops out."""
        self._end_game("halted")

    def _end_game(self, reason: str) -> None:
        if self.game_over:
            return
        self.state = GameState.GAME_OVER
        self.current_piece = None
        logger.info("Game over for %s (%s), score %d", self.name, reason, self.score)
        self.events.append(GameOver(score=self.score))
        if self.on_game_over is not None:
            self.on_game_over(self.score)

    # ---------- Effects applied by the arbiter ----------
    def receive_gift(self) -> bool:
        """Swap the active piece for an easy one (O or I) at the spawn position."""
        if not self.running:
            return False
        gift = self._random_piece(GIFT_PIECES)
        if self.check_collision(gift):
            return False
        self.current_piece = gift
        logger.info("%s received a gift piece %s", self.name, gift.kind.name)
        return True

    def receive_line(self, row: np.ndarray) -> bool:
        """Write a full row into the lowest all-empty row of the grid."""
        if not self.running:
            return False
        y = self.grid.lowest_empty_row()
        if y is None:
            return False
        self.grid.grid[y] = row
        if self.check_collision():
            self.grid.grid[y] = 0
            return False
        logger.info("%s received a line at row %d", self.name, y)
        return True

    def step(self, action: Action) -> bool:
        if action == Action.LEFT:
            return self.move(-1, 0)
        if action == Action.RIGHT:
            return self.move(1, 0)
        if action == Action.SOFT_DROP:
            return self.move(0, 1)
        if action == Action.ROTATE:
            return self.rotate()
        return False

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for rendering
        state = self.grid.clone_state()
        if self.current_piece is not None and self.running:
            for x, y in self.current_piece.cells():
                if 0 <= y < self.grid.height and 0 <= x < self.grid.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state
