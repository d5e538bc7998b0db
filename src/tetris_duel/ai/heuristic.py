"""Single-piece heuristic search used by the automated opponent.

Every rotation of the active piece is hard-dropped into every column of a
scratch copy of the grid, the resulting board is scored with a weighted sum
of features, and the first best-scoring placement wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from tetris_duel.game.grid import EMPTY, collides, column_tops, stamp
from tetris_duel.game.pieces import BASE_SHAPES, Piece, rotated


logger = logging.getLogger(__name__)


@dataclass
class HeuristicWeights:
    lines: float = 500.0
    holes: float = -50.0
    height: float = -15.0
    horizontal_fill: float = 30.0
    unevenness: float = -20.0


@dataclass(frozen=True)
class Placement:
    x: int
    rotation: int
    score: float


# ----------------------------
# Board features
# ----------------------------
def complete_lines(grid: np.ndarray) -> int:
    return int(np.sum(np.all(grid != EMPTY, axis=1)))


def hole_penalty(grid: np.ndarray) -> int:
    """Sum over columns of (empty cells under the column's top block) squared."""
    rows = grid.shape[0]
    occ = grid != EMPTY
    tops = column_tops(grid)
    below_top = np.arange(rows)[:, None] >= tops[None, :]
    per_column = np.sum(below_top & ~occ, axis=0)
    return int(np.sum(per_column * per_column))


def average_height(grid: np.ndarray) -> float:
    rows, cols = grid.shape
    heights = rows - column_tops(grid)
    return float(np.sum(heights)) / cols


def horizontal_fill(grid: np.ndarray) -> float:
    """Reward near-complete rows (cubic in fill ratio) and rows stacked on filled rows."""
    rows, cols = grid.shape
    counts = np.sum(grid != EMPTY, axis=1)
    score = 0.0
    for y in range(rows - 1, -1, -1):
        count = int(counts[y])
        if count == 0:
            continue
        score += (count / cols) ** 3 * 100
        if y < rows - 1 and counts[y + 1] > 0:
            score += count * 2
    return score


def unevenness(grid: np.ndarray) -> int:
    return int(np.sum(np.abs(np.diff(column_tops(grid)))))


def extract_features(grid: np.ndarray) -> Dict[str, float]:
    return {
        "lines": float(complete_lines(grid)),
        "holes": float(hole_penalty(grid)),
        "height": average_height(grid),
        "horizontal_fill": horizontal_fill(grid),
        "unevenness": float(unevenness(grid)),
    }


def landing_row(grid: np.ndarray, shape: np.ndarray, x: int, start_y: int) -> int:
    """Row where `shape` comes to rest when dropped from `start_y`; negative if it never fits."""
    y = start_y
    while not collides(grid, shape, x, y):
        y += 1
    return y - 1


class HeuristicAgent:
    def __init__(self, weights: Optional[HeuristicWeights] = None) -> None:
        self.weights = weights or HeuristicWeights()

    def evaluate_board(self, grid: np.ndarray) -> float:
        feats = extract_features(grid)
        w = self.weights
        return (
            w.lines * feats["lines"]
            + w.holes * feats["holes"]
            + w.height * feats["height"]
            + w.horizontal_fill * feats["horizontal_fill"]
            + w.unevenness * feats["unevenness"]
        )

    def evaluate_placement(
        self, grid: np.ndarray, shape: np.ndarray, x: int, start_y: int, value: int = 1
    ) -> Optional[float]:
        """Score a hard drop of `shape` at column `x`, or None when it has no landing row."""
        y = landing_row(grid, shape, x, start_y)
        if y < 0:
            return None
        scratch = grid.copy()
        stamp(scratch, shape, x, y, value)
        return self.evaluate_board(scratch)

    @staticmethod
    def candidate_shapes(piece: Piece) -> Iterator[Tuple[int, np.ndarray]]:
        # Always rotate the base shape so rotation indices stay absolute
        base = BASE_SHAPES[piece.kind]
        for rotation in range(4):
            yield rotation, rotated(base, rotation)

    def find_best_move(self, grid: np.ndarray, piece: Piece) -> Optional[Placement]:
        snapshot = np.array(grid, copy=True)
        width = snapshot.shape[1]
        best: Optional[Placement] = None
        for rotation, shape in self.candidate_shapes(piece):
            for x in range(width - shape.shape[1] + 1):
                score = self.evaluate_placement(snapshot, shape, x, piece.y, int(piece.kind))
                if score is None:
                    continue
                if best is None or score > best.score:
                    best = Placement(x=x, rotation=rotation, score=score)
        if best is None:
            logger.debug("No valid placement for %s", piece.kind.name)
        else:
            logger.debug("Best placement for %s: x=%d rotation=%d score=%.1f",
                         piece.kind.name, best.x, best.rotation, best.score)
        return best
