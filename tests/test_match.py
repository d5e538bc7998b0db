import unittest
from unittest import mock

import numpy as np

from tetris_duel.game import Action, BoardEngine, GameConfig, Piece, TetrominoType
from tetris_duel.match import (
    AgentSession,
    HumanSession,
    Match,
    MatchConfig,
    MatchResult,
    Scheduler,
)


class TestScheduler(unittest.TestCase):

    def test_fires_when_deadline_passes(self):
        scheduler = Scheduler()
        calls = []
        scheduler.call_later(100, lambda: calls.append("a"), key="a")
        self.assertEqual(scheduler.advance(50), 0)
        self.assertEqual(calls, [])
        self.assertEqual(scheduler.advance(100), 1)
        self.assertEqual(calls, ["a"])
        self.assertFalse(scheduler.pending("a"))

    def test_same_key_replaces_pending_task(self):
        scheduler = Scheduler()
        calls = []
        scheduler.call_later(100, lambda: calls.append(1), key="k")
        scheduler.call_later(200, lambda: calls.append(2), key="k")
        scheduler.advance(150)
        self.assertEqual(calls, [])
        scheduler.advance(200)
        self.assertEqual(calls, [2])

    def test_runs_in_deadline_order(self):
        scheduler = Scheduler()
        calls = []
        scheduler.call_later(300, lambda: calls.append("late"))
        scheduler.call_later(100, lambda: calls.append("early"))
        scheduler.advance(1000)
        self.assertEqual(calls, ["early", "late"])

    def test_delay_counts_from_last_advance(self):
        scheduler = Scheduler()
        calls = []
        scheduler.advance(1000)
        scheduler.call_later(100, lambda: calls.append(1))
        scheduler.advance(1050)
        self.assertEqual(calls, [])
        scheduler.advance(1100)
        self.assertEqual(calls, [1])

    def test_cancel_and_clear(self):
        scheduler = Scheduler()
        calls = []
        scheduler.call_later(10, lambda: calls.append(1), key="x")
        self.assertTrue(scheduler.cancel("x"))
        self.assertFalse(scheduler.cancel("x"))
        scheduler.call_later(10, lambda: calls.append(2))
        scheduler.clear()
        scheduler.advance(100)
        self.assertEqual(calls, [])


def started_engine(kind=TetrominoType.O, name="player"):
    engine = BoardEngine(GameConfig(random_seed=0), name=name)
    engine.start()
    engine.current_piece = Piece.spawn(kind)
    return engine


class TestSessions(unittest.TestCase):

    def test_human_input_applied_on_tick(self):
        session = HumanSession(started_engine())
        session.tick(0)
        session.push_input(Action.LEFT)
        session.push_input(Action.LEFT)
        session.tick(16)
        self.assertEqual(session.engine.current_piece.x, 2)
        self.assertEqual(len(session.inputs), 0)

    def test_human_gravity_after_interval(self):
        session = HumanSession(started_engine(), interval_ms=500)
        session.tick(0)
        session.tick(400)
        self.assertEqual(session.engine.current_piece.y, 0)
        session.tick(600)
        self.assertEqual(session.engine.current_piece.y, 1)
        self.assertEqual(session.drop_counter, 0.0)

    def test_speed_modifier_does_not_compound(self):
        session = HumanSession(started_engine(), interval_ms=500)
        session.apply_speed_modifier(1.2)
        session.apply_speed_modifier(1.2)
        self.assertAlmostEqual(session.interval_ms, 600.0)
        session.clear_speed_modifier()
        self.assertAlmostEqual(session.interval_ms, 500.0)

    def test_agent_moves_after_delay(self):
        session = AgentSession(started_engine(), interval_ms=500)
        session.tick(0)
        self.assertEqual(session.engine.current_piece.y, 0)
        session.tick(501)
        self.assertEqual((session.engine.current_piece.x, session.engine.current_piece.y), (3, 1))
        session.tick(700)
        self.assertEqual(session.engine.current_piece.y, 1)

    def test_finished_session_ignores_ticks(self):
        session = HumanSession(started_engine())
        session.engine.halt()
        session.push_input(Action.LEFT)
        session.tick(0)
        session.tick(5000)
        self.assertIsNone(session.last_time)
        self.assertEqual(len(session.inputs), 0)


class TestMatch(unittest.TestCase):

    def setUp(self):
        self.finished = []
        self.match = Match(MatchConfig(random_seed=1), on_finished=self.finished.append)
        self.match.start()

    def test_sessions_are_bound_to_each_other(self):
        self.assertIs(self.match.opponent_of(self.match.human), self.match.agent)
        self.assertIs(self.match.opponent_of(self.match.agent), self.match.human)
        self.assertTrue(self.match.human.engine.running)
        self.assertTrue(self.match.agent.engine.running)

    def test_handle_input_queues_for_human(self):
        self.match.handle_input(Action.ROTATE)
        self.assertEqual(list(self.match.human.inputs), [Action.ROTATE])

    def test_two_lines_send_a_gift(self):
        agent_engine = self.match.agent.engine
        self.match.human.engine.grid.grid[18:, :] = 1
        self.match.human.engine.clear_lines()
        with mock.patch.object(agent_engine, "receive_gift", wraps=agent_engine.receive_gift) as gift:
            self.match.tick(0)
        gift.assert_called_once_with()
        self.assertIn(agent_engine.current_piece.kind, (TetrominoType.O, TetrominoType.I))

    def test_four_lines_pass_a_row(self):
        self.match.human.engine.grid.grid[16:, :] = 5
        self.match.human.engine.clear_lines()
        self.match.tick(0)
        self.assertTrue(np.all(self.match.agent.engine.grid.grid[19] == 5))
        self.assertTrue(np.all(self.match.human.engine.grid.grid == 0))

    def test_single_line_has_no_effect_on_opponent(self):
        agent_engine = self.match.agent.engine
        self.match.human.engine.grid.grid[19, :] = 1
        self.match.human.engine.clear_lines()
        with mock.patch.object(agent_engine, "receive_gift") as gift, \
                mock.patch.object(agent_engine, "receive_line") as line:
            self.match.tick(0)
        gift.assert_not_called()
        line.assert_not_called()

    def test_milestone_slows_both_players_temporarily(self):
        human = self.match.human
        human.engine.score = 990
        human.engine.update_score(1)
        self.match.tick(1000)
        self.assertAlmostEqual(human.interval_ms, 600.0)
        self.assertAlmostEqual(self.match.agent.interval_ms, 600.0)
        self.assertTrue(self.match.scheduler.pending("slowdown-human"))
        self.match.tick(10999)
        self.assertAlmostEqual(human.interval_ms, 600.0)
        self.match.tick(11000)
        self.assertAlmostEqual(human.interval_ms, 500.0)
        self.assertAlmostEqual(self.match.agent.interval_ms, 500.0)

    def test_game_over_halts_opponent_and_reports(self):
        self.match.human.engine.score = 200
        self.match.human.engine.halt()
        self.match.tick(0)
        self.assertTrue(self.match.finished)
        self.assertTrue(self.match.agent.engine.game_over)
        self.assertEqual(self.finished, [MatchResult(human_score=200, agent_score=0)])
        self.assertEqual(self.finished[0].winner, "human")

    def test_events_after_game_over_are_ignored(self):
        human = self.match.human
        human.engine.halt()
        human.engine.score = 990
        human.engine.update_score(1)
        self.match.tick(0)
        self.assertTrue(self.match.finished)
        self.assertFalse(self.match.scheduler.pending("slowdown-human"))
        self.assertFalse(self.match.scheduler.pending("slowdown-agent"))
        self.assertAlmostEqual(human.interval_ms, 500.0)
        self.assertAlmostEqual(self.match.agent.interval_ms, 500.0)

    def test_finished_match_stops_ticking(self):
        self.match.agent.engine.halt()
        self.match.tick(0)
        piece_grid = self.match.human.engine.grid.grid.copy()
        self.match.handle_input(Action.LEFT)
        self.match.tick(5000)
        self.assertEqual(len(self.finished), 1)
        self.assertEqual(len(self.match.human.inputs), 0)
        self.assertTrue(np.array_equal(self.match.human.engine.grid.grid, piece_grid))

    def test_reset_restarts_both_sessions(self):
        self.match.human.engine.halt()
        self.match.tick(0)
        self.match.reset()
        self.assertFalse(self.match.finished)
        for session in self.match.sessions:
            self.assertTrue(session.engine.running)
            self.assertEqual(session.engine.score, 0)
            self.assertAlmostEqual(session.interval_ms, 500.0)

    def test_winner(self):
        self.assertEqual(MatchResult(10, 20).winner, "agent")
        self.assertIsNone(MatchResult(5, 5).winner)


if __name__ == "__main__":
    unittest.main()
