"""Two-player match: ticks both sessions and routes their effects.

Sessions never reference each other. After a session ticks, its engine's
events are drained here and the resulting effects are applied to the
opponent before the opponent's own tick runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from tetris_duel.ai import AgentDriver
from tetris_duel.game import (
    Action,
    BoardEngine,
    EngineEvent,
    GameConfig,
    GameOver,
    LinesCleared,
    ScoreMilestone,
)

from .scheduler import Scheduler
from .session import AgentSession, HumanSession, PlayerSession


logger = logging.getLogger(__name__)


@dataclass
class MatchConfig:
    drop_interval_ms: float = 500.0
    agent_move_delay_ms: float = 500.0
    slowdown_factor: float = 1.2
    slowdown_duration_ms: float = 10000.0
    gift_lines: int = 2
    exchange_lines: int = 4
    random_seed: Optional[int] = None


@dataclass(frozen=True)
class MatchResult:
    human_score: int
    agent_score: int

    @property
    def winner(self) -> Optional[str]:
        if self.human_score > self.agent_score:
            return "human"
        if self.agent_score > self.human_score:
            return "agent"
        return None


class Match:
    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        driver: Optional[AgentDriver] = None,
        on_finished: Optional[Callable[[MatchResult], None]] = None,
    ) -> None:
        self.config = config or MatchConfig()
        self.on_finished = on_finished
        self.scheduler = Scheduler()
        seed = self.config.random_seed
        human_engine = BoardEngine(GameConfig(random_seed=seed), name="human")
        agent_engine = BoardEngine(
            GameConfig(random_seed=None if seed is None else seed + 1), name="agent"
        )
        self.human = HumanSession(human_engine, self.config.drop_interval_ms)
        self.agent = AgentSession(agent_engine, driver, self.config.agent_move_delay_ms)
        self._opponents: Dict[str, PlayerSession] = {}
        self.bind_opponents(self.human, self.agent)
        self.result: Optional[MatchResult] = None

    @property
    def sessions(self) -> List[PlayerSession]:
        return [self.human, self.agent]

    @property
    def finished(self) -> bool:
        return self.result is not None

    def bind_opponents(self, first: PlayerSession, second: PlayerSession) -> None:
        self._opponents = {first.name: second, second.name: first}

    def opponent_of(self, session: PlayerSession) -> PlayerSession:
        return self._opponents[session.name]

    def start(self) -> None:
        for session in self.sessions:
            session.start()
        # A spawn can already top out on a pre-filled board
        for session in self.sessions:
            self._route(session)

    def reset(self) -> None:
        self.scheduler.clear()
        self.result = None
        for session in self.sessions:
            session.reset()
        self.start()

    def handle_input(self, action: Action) -> None:
        if not self.finished:
            self.human.push_input(action)

    def tick(self, now_ms: float) -> None:
        self.scheduler.advance(now_ms)
        for session in self.sessions:
            if self.finished:
                break
            session.tick(now_ms)
            self._route(session)

    # ---------- Event routing ----------
    def _route(self, session: PlayerSession) -> None:
        for event in session.engine.drain_events():
            self._apply(session, event)

    def _apply(self, session: PlayerSession, event: EngineEvent) -> None:
        if self.finished:
            return
        opponent = self.opponent_of(session)
        if isinstance(event, LinesCleared):
            if event.lines == self.config.gift_lines:
                opponent.engine.receive_gift()
            elif event.lines == self.config.exchange_lines and event.row is not None:
                if opponent.engine.receive_line(event.row):
                    logger.info("%s passed a full line to %s", session.name, opponent.name)
        elif isinstance(event, ScoreMilestone):
            logger.info("%s reached %d points, slowing both players", session.name, event.score)
            for target in self.sessions:
                self._slow_down(target)
        elif isinstance(event, GameOver):
            opponent.engine.halt()
            # The opponent's own GameOver event is dropped with its outbox
            opponent.engine.drain_events()
            self._finish()

    def _slow_down(self, session: PlayerSession) -> None:
        session.apply_speed_modifier(self.config.slowdown_factor)
        self.scheduler.call_later(
            self.config.slowdown_duration_ms,
            session.clear_speed_modifier,
            key=f"slowdown-{session.name}",
        )

    def _finish(self) -> None:
        if self.finished:
            return
        self.scheduler.clear()
        self.result = MatchResult(
            human_score=self.human.engine.score,
            agent_score=self.agent.engine.score,
        )
        logger.info("Match over: human %d, agent %d", self.result.human_score, self.result.agent_score)
        if self.on_finished is not None:
            self.on_finished(self.result)
