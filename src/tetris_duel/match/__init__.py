"""Frame-driven two-player match: sessions, timers and the arbiter."""

from .scheduler import Scheduler
from .session import AgentSession, HumanSession, PlayerSession
from .arbiter import Match, MatchConfig, MatchResult

__all__ = [
    "Scheduler",
    "PlayerSession",
    "HumanSession",
    "AgentSession",
    "Match",
    "MatchConfig",
    "MatchResult",
]
