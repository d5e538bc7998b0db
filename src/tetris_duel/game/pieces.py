from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

import numpy as np

from .grid import GRID_WIDTH


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    L = 4
    J = 5
    S = 6
    Z = 7


Shape = np.ndarray


BASE_SHAPES = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[1, 0], [1, 0], [1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[0, 1], [0, 1], [1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
}

COLORS = {
    TetrominoType.I: "#00f0f0",
    TetrominoType.O: "#f0f000",
    TetrominoType.T: "#a000f0",
    TetrominoType.L: "#f0a000",
    TetrominoType.J: "#0000f0",
    TetrominoType.S: "#00f000",
    TetrominoType.Z: "#f00000",
}


def rotate_cw(shape: Shape) -> Shape:
    """Rotate 90 degrees clockwise: transpose, then reverse each row."""
    return shape.T[:, ::-1].copy()


def rotated(shape: Shape, times: int) -> Shape:
    out = shape.copy()
    for _ in range(times % 4):
        out = rotate_cw(out)
    return out


def spawn_x(shape: Shape) -> int:
    return GRID_WIDTH // 2 - shape.shape[1] // 2


@dataclass
class Piece:
    kind: TetrominoType
    shape: Shape = field(default=None)  # type: ignore[assignment]
    x: int = 0
    y: int = 0
    rotation: int = 0  # 0..3, number of clockwise turns from the base shape

    def __post_init__(self) -> None:
        if self.shape is None:
            self.shape = BASE_SHAPES[self.kind].copy()

    @classmethod
    def spawn(cls, kind: TetrominoType) -> "Piece":
        shape = BASE_SHAPES[kind].copy()
        return cls(kind=kind, shape=shape, x=spawn_x(shape), y=0)

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells(self) -> List[Tuple[int, int]]:
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells

    def copy(self) -> "Piece":
        return Piece(self.kind, self.shape.copy(), self.x, self.y, self.rotation)
