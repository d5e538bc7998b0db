from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class ScoringRules:
    base_points: int = 50
    bonus_points: Dict[int, int] = field(default_factory=lambda: {2: 100, 3: 200, 4: 300})
    milestone_every: int = 1000

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        # No bonus beyond the table; more than 4 lines cannot happen with tetrominoes
        return lines * self.base_points + self.bonus_points.get(lines, 0)

    def crossed_milestone(self, previous: int, current: int) -> bool:
        return current // self.milestone_every > previous // self.milestone_every
