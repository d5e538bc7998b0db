from __future__ import annotations

from typing import Optional

from tetris_duel.game import BoardEngine

from .heuristic import HeuristicAgent, Placement


class AgentDriver:
    """Replays the agent's decisions on an engine through ordinary moves.

    Each cycle rotates to the target rotation, steps one column toward the
    target x and soft-drops once; the next cycle searches again.
    """

    def __init__(self, agent: Optional[HeuristicAgent] = None) -> None:
        self.agent = agent or HeuristicAgent()
        self.last_decision: Optional[Placement] = None

    def decide(self, engine: BoardEngine) -> Optional[Placement]:
        if not engine.running or engine.current_piece is None:
            return None
        return self.agent.find_best_move(engine.grid.clone_state(), engine.current_piece)

    def make_move(self, engine: BoardEngine) -> bool:
        decision = self.decide(engine)
        self.last_decision = decision
        if decision is None:
            return False

        turns = (decision.rotation - engine.current_piece.rotation + 4) % 4
        for _ in range(turns):
            engine.rotate()

        dx = decision.x - engine.current_piece.x
        if dx > 0:
            engine.move(1, 0)
        elif dx < 0:
            engine.move(-1, 0)

        engine.move(0, 1)
        return True
