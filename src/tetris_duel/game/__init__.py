"""Game module for Tetris Duel.

Exports the board engine and supporting classes:
- GameGrid: fixed 20x10 grid, collision and line clearing
- Piece: tetromino with transpose-and-reverse rotation
- TetrominoType: enum of the seven piece kinds
- ScoringRules: line-clear points and score milestones
- BoardEngine: one player's state machine (spawn, move, rotate, lock)
"""

from .grid import GameGrid, GRID_HEIGHT, GRID_WIDTH
from .pieces import Piece, TetrominoType, BASE_SHAPES, COLORS, rotate_cw, rotated
from .rules import ScoringRules
from .events import EngineEvent, GameOver, LinesCleared, ScoreMilestone
from .core import Action, BoardEngine, GameConfig, GameState

__all__ = [
    "GameGrid",
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "Piece",
    "TetrominoType",
    "BASE_SHAPES",
    "COLORS",
    "rotate_cw",
    "rotated",
    "ScoringRules",
    "EngineEvent",
    "GameOver",
    "LinesCleared",
    "ScoreMilestone",
    "Action",
    "BoardEngine",
    "GameConfig",
    "GameState",
]
