"""Events a board engine emits for whoever arbitrates the match.

Engines never touch each other; they append these to their outbox and the
arbiter drains it after every tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class LinesCleared:
    lines: int
    # Copy of one cleared row, only set for a four-line clear
    row: Optional[np.ndarray] = None


@dataclass(frozen=True)
class ScoreMilestone:
    previous_score: int
    score: int


@dataclass(frozen=True)
class GameOver:
    score: int


EngineEvent = Union[LinesCleared, ScoreMilestone, GameOver]
