"""
Tests for event handlers and their wiring into the niching loop.
"""
import logging
import unittest
from unittest.mock import MagicMock

from niche_swarm.algorithm import MaximumIterations
from niche_swarm.functions import sphere
from niche_swarm.handlers import EventHandler, LoggingHandler
from niche_swarm.niching import NichingAlgorithm
from niche_swarm.problem import OptimisationProblem
from niche_swarm.pso import PSO


class TestEventHandler(unittest.TestCase):
    """事件分派"""

    def test_dispatch_to_hook(self):
        handler = EventHandler()
        handler.on_niche_created = MagicMock()

        handler.handle_event('niche_created', iteration=3)

        handler.on_niche_created.assert_called_once_with(iteration=3)

    def test_unknown_event_ignored(self):
        EventHandler().handle_event('something_else', value=1)

    def test_set_algorithm(self):
        handler = EventHandler()
        algorithm = MagicMock()
        handler.set_algorithm(algorithm)
        self.assertIs(handler.algorithm, algorithm)


class TestLoggingHandler(unittest.TestCase):
    """日誌處理器"""

    def test_invalid_interval(self):
        with self.assertRaises(ValueError):
            LoggingHandler(log_interval=0)

    def test_counts_created_niches(self):
        handler = LoggingHandler()
        handler.handle_event('niche_created', iteration=1)
        handler.handle_event('niche_created', iteration=2)
        self.assertEqual(handler.niches_created, 2)

    def test_logs_on_interval(self):
        """測試只在 log_interval 的倍數輸出"""
        handler = LoggingHandler(log_interval=5)
        swarms = MagicMock()
        swarms.shape.return_value = "main=3, subs=[2]"

        with self.assertLogs('niche_swarm.handlers.logging_handler', level=logging.INFO) as captured:
            handler.handle_event('iteration_complete', iteration=4, swarms=swarms)
            handler.handle_event('iteration_complete', iteration=5, swarms=swarms)

        self.assertEqual(len(captured.records), 1)
        self.assertIn("main=3, subs=[2]", captured.records[0].getMessage())


class TestHandlerWiring(unittest.TestCase):
    """NichingAlgorithm 觸發事件的順序"""

    def setUp(self):
        problem = OptimisationProblem(sphere, 2, -5.0, 5.0)
        main_swarm = PSO(problem=problem)
        main_swarm.initialise(8, seed=0)
        self.algorithm = NichingAlgorithm(main_swarm, stopping_conditions=[MaximumIterations(3)])

    def test_lifecycle_events(self):
        handler = MagicMock(spec=EventHandler)
        self.algorithm.handlers.append(handler)

        result = self.algorithm.run()

        events = [c.args[0] for c in handler.handle_event.call_args_list]
        self.assertEqual(events[0], 'run_start')
        self.assertEqual(events[-1], 'run_complete')
        self.assertEqual(events.count('iteration_complete'), 3)
        self.assertEqual(result.iterations_completed, 3)

    def test_handler_receives_algorithm(self):
        handler = LoggingHandler()
        self.algorithm.add_handler(handler)
        self.assertIs(handler.algorithm, self.algorithm)

    def test_failing_handler_is_logged(self):
        handler = LoggingHandler()
        handler.on_iteration_complete = MagicMock(side_effect=RuntimeError("boom"))
        self.algorithm.add_handler(handler)

        with self.assertLogs('niche_swarm.niching.engine', level=logging.ERROR):
            self.algorithm.run()

        self.assertEqual(self.algorithm.iterations, 3)


if __name__ == '__main__':
    unittest.main()
