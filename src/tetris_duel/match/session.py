from __future__ import annotations

from collections import deque
from typing import Deque, Optional

from tetris_duel.ai import AgentDriver
from tetris_duel.game import Action, BoardEngine


class PlayerSession:
    """Frame-driven wrapper around one engine; subclasses decide what a tick does."""

    def __init__(self, engine: BoardEngine, interval_ms: float) -> None:
        self.engine = engine
        self.base_interval_ms = float(interval_ms)
        self.interval_ms = float(interval_ms)
        self.speed_factor = 1.0
        self.last_time: Optional[float] = None

    @property
    def name(self) -> str:
        return self.engine.name

    def start(self) -> None:
        self.engine.start()

    def reset(self) -> None:
        self.engine.reset()
        self.clear_speed_modifier()
        self.last_time = None

    def apply_speed_modifier(self, factor: float) -> None:
        # Relative to the base interval so repeated modifiers do not compound
        self.speed_factor = float(factor)
        self.interval_ms = self.base_interval_ms * self.speed_factor

    def clear_speed_modifier(self) -> None:
        self.speed_factor = 1.0
        self.interval_ms = self.base_interval_ms

    def tick(self, now_ms: float) -> None:
        if not self.engine.running:
            return
        if self.last_time is None:
            self.last_time = now_ms
        delta = now_ms - self.last_time
        self.last_time = now_ms
        self._advance(now_ms, delta)

    def _advance(self, now_ms: float, delta_ms: float) -> None:
        raise NotImplementedError


class HumanSession(PlayerSession):
    """Applies queued key presses, then gravity once the drop interval elapses."""

    def __init__(self, engine: BoardEngine, interval_ms: float = 500.0) -> None:
        super().__init__(engine, interval_ms)
        self.drop_counter = 0.0
        self.inputs: Deque[Action] = deque()

    def push_input(self, action: Action) -> None:
        if self.engine.running:
            self.inputs.append(action)

    def reset(self) -> None:
        super().reset()
        self.drop_counter = 0.0
        self.inputs.clear()

    def _advance(self, now_ms: float, delta_ms: float) -> None:
        while self.inputs and self.engine.running:
            self.engine.step(self.inputs.popleft())
        self.drop_counter += delta_ms
        if self.engine.running and self.drop_counter > self.interval_ms:
            self.engine.move(0, 1)
            self.drop_counter = 0.0


class AgentSession(PlayerSession):
    """Runs one agent decision cycle each time the move delay elapses."""

    def __init__(self, engine: BoardEngine, driver: Optional[AgentDriver] = None,
                 interval_ms: float = 500.0) -> None:
        super().__init__(engine, interval_ms)
        self.driver = driver or AgentDriver()
        self.last_move = 0.0

    def reset(self) -> None:
        super().reset()
        self.last_move = 0.0

    def _advance(self, now_ms: float, delta_ms: float) -> None:
        if now_ms - self.last_move > self.interval_ms:
            self.last_move = now_ms
            self.driver.make_move(self.engine)
