from __future__ import annotations

from typing import List, Optional

import numpy as np


GRID_WIDTH = 10
GRID_HEIGHT = 20
EMPTY = 0


def collides(cells: np.ndarray, shape: np.ndarray, x: int, y: int) -> bool:
    """Return True if `shape` anchored at (x, y) hits a wall, the floor or a filled cell.

    Cells above the top edge (negative rows) are only bounded horizontally.
    """
    height, width = cells.shape
    h, w = shape.shape
    for dy in range(h):
        for dx in range(w):
            if not shape[dy, dx]:
                continue
            gx = x + dx
            gy = y + dy
            if gx < 0 or gx >= width or gy >= height:
                return True
            if gy >= 0 and cells[gy, gx] != EMPTY:
                return True
    return False


def stamp(cells: np.ndarray, shape: np.ndarray, x: int, y: int, value: int) -> None:
    h, w = shape.shape
    for dy in range(h):
        for dx in range(w):
            if shape[dy, dx] and y + dy >= 0:
                cells[y + dy, x + dx] = value


class GameGrid:
    """Fixed 20x10 playfield.

    0 marks an empty cell; any positive value is the identity token of the
    piece that filled it (see `TetrominoType`). Row 0 is the top.
    """

    def __init__(self) -> None:
        self.width = GRID_WIDTH
        self.height = GRID_HEIGHT
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def collides(self, shape: np.ndarray, x: int, y: int) -> bool:
        return collides(self.grid, shape, x, y)

    def stamp(self, shape: np.ndarray, x: int, y: int, value: int) -> None:
        stamp(self.grid, shape, x, y, value)

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def clear_full_lines(self) -> int:
        full = np.all(self.grid != EMPTY, axis=1)
        num = int(np.count_nonzero(full))
        if num == 0:
            return 0
        # Remove full rows and add empty rows at the top
        kept = self.grid[~full]
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def top_rows_occupied(self, rows: int = 2) -> bool:
        return bool(np.any(self.grid[:rows] != EMPTY))

    def lowest_empty_row(self) -> Optional[int]:
        for y in range(self.height - 1, -1, -1):
            if not np.any(self.grid[y] != EMPTY):
                return y
        return None

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()


def column_tops(cells: np.ndarray) -> np.ndarray:
    height = cells.shape[0]
    occ = cells != EMPTY
    any_col = occ.any(axis=0)
    return np.where(any_col, np.argmax(occ, axis=0), height)
