"""Heuristic opponent: placement search and move replay."""

from .heuristic import (
    HeuristicAgent,
    HeuristicWeights,
    Placement,
    average_height,
    complete_lines,
    extract_features,
    hole_penalty,
    horizontal_fill,
    landing_row,
    unevenness,
)
from .driver import AgentDriver

__all__ = [
    "HeuristicAgent",
    "HeuristicWeights",
    "Placement",
    "AgentDriver",
    "average_height",
    "complete_lines",
    "extract_features",
    "hole_penalty",
    "horizontal_fill",
    "landing_row",
    "unevenness",
]
