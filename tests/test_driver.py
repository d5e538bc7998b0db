import unittest

from tetris_duel.ai import AgentDriver, HeuristicAgent, Placement
from tetris_duel.game import BoardEngine, GameConfig, Piece, TetrominoType


class FixedAgent(HeuristicAgent):
    """Always answers with the same placement."""

    def __init__(self, placement):
        super().__init__()
        self.placement = placement

    def find_best_move(self, grid, piece):
        return self.placement


def started_engine(kind):
    engine = BoardEngine(GameConfig(random_seed=0))
    engine.start()
    engine.current_piece = Piece.spawn(kind)
    return engine


class TestAgentDriver(unittest.TestCase):

    def test_one_cycle_steps_one_column_and_one_row(self):
        engine = started_engine(TetrominoType.O)
        driver = AgentDriver()
        self.assertTrue(driver.make_move(engine))
        self.assertEqual(driver.last_decision.x, 0)
        self.assertEqual(engine.current_piece.x, 3)
        self.assertEqual(engine.current_piece.y, 1)

    def test_rotates_to_target_rotation(self):
        engine = started_engine(TetrominoType.I)
        driver = AgentDriver(FixedAgent(Placement(x=3, rotation=1, score=0.0)))
        driver.make_move(engine)
        piece = engine.current_piece
        self.assertEqual(piece.rotation, 1)
        self.assertEqual(piece.shape.shape, (4, 1))
        self.assertEqual((piece.x, piece.y), (3, 1))

    def test_rotation_count_wraps_around(self):
        engine = started_engine(TetrominoType.T)
        engine.rotate()
        driver = AgentDriver(FixedAgent(Placement(x=4, rotation=0, score=0.0)))
        driver.make_move(engine)
        self.assertEqual(engine.current_piece.rotation, 0)

    def test_moves_right_toward_target(self):
        engine = started_engine(TetrominoType.O)
        driver = AgentDriver(FixedAgent(Placement(x=8, rotation=0, score=0.0)))
        driver.make_move(engine)
        self.assertEqual(engine.current_piece.x, 5)

    def test_no_decision_means_no_move(self):
        engine = started_engine(TetrominoType.O)
        driver = AgentDriver(FixedAgent(None))
        self.assertFalse(driver.make_move(engine))
        self.assertEqual((engine.current_piece.x, engine.current_piece.y), (4, 0))

    def test_finished_engine_is_left_alone(self):
        engine = started_engine(TetrominoType.O)
        engine.halt()
        self.assertFalse(AgentDriver().make_move(engine))

    def test_agent_keeps_playing(self):
        engine = BoardEngine(GameConfig(random_seed=7))
        engine.start()
        driver = AgentDriver()
        for _ in range(2000):
            if not engine.running:
                break
            if not driver.make_move(engine):
                engine.move(0, 1)
            self.assertEqual(engine.grid.grid.shape, (20, 10))
        self.assertGreaterEqual(engine.pieces_locked, 10)


if __name__ == "__main__":
    unittest.main()
