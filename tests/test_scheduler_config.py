"""
Test suite for JVMSim phase scheduling and configuration.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from jvmsim.simulation import (
    ImmediateScheduler, RealTimeScheduler, SchedulerError,
    SimulationConfig, ConfigurationError, quantize_heap_size, clamp_batch_size
)


class TestImmediateScheduler(unittest.TestCase):
    """Test the virtual-clock scheduler."""

    def setUp(self):
        self.scheduler = ImmediateScheduler()
        self.calls = []

    def test_runs_in_due_order(self):
        self.scheduler.call_later(1.0, lambda: self.calls.append("late"))
        self.scheduler.call_later(0.5, lambda: self.calls.append("early"))
        self.scheduler.call_later(0.5, lambda: self.calls.append("early-2"))

        steps = self.scheduler.run_until_idle()

        self.assertEqual(steps, 3)
        self.assertEqual(self.calls, ["early", "early-2", "late"])
        self.assertEqual(self.scheduler.now(), 1.0)

    def test_cancelled_call_is_skipped(self):
        handle = self.scheduler.call_later(1.0, lambda: self.calls.append("x"))
        handle.cancel()

        self.assertTrue(self.scheduler.is_idle)
        self.assertEqual(self.scheduler.run_until_idle(), 0)
        self.assertEqual(self.calls, [])

    def test_nested_scheduling(self):
        def first():
            self.calls.append(("first", self.scheduler.now()))
            self.scheduler.call_later(2.0, lambda: self.calls.append(("second", self.scheduler.now())))

        self.scheduler.call_later(1.0, first)
        self.scheduler.run_until_idle()

        self.assertEqual(self.calls, [("first", 1.0), ("second", 3.0)])

    def test_advance_stops_at_target(self):
        self.scheduler.call_later(1.0, lambda: self.calls.append("a"))
        self.scheduler.call_later(3.0, lambda: self.calls.append("b"))

        self.assertEqual(self.scheduler.advance(2.0), 1)
        self.assertEqual(self.calls, ["a"])
        self.assertEqual(self.scheduler.now(), 2.0)
        self.assertEqual(self.scheduler.pending, 1)

    def test_runaway_detection(self):
        def reschedule():
            self.scheduler.call_later(1.0, reschedule)

        self.scheduler.call_later(1.0, reschedule)
        with self.assertRaises(SchedulerError):
            self.scheduler.run_until_idle(max_steps=25)

    def test_negative_delay_rejected(self):
        with self.assertRaises(ValueError):
            self.scheduler.call_later(-1.0, lambda: None)


class TestRealTimeScheduler(unittest.TestCase):
    """Test the sleeping scheduler with a fake clock."""

    def test_sleeps_until_due(self):
        now = [10.0]
        sleeps = []

        def sleep(seconds):
            sleeps.append(seconds)
            now[0] += seconds

        scheduler = RealTimeScheduler(clock=lambda: now[0], sleep=sleep)
        ran = []
        scheduler.call_later(0.8, lambda: ran.append(now[0]))
        scheduler.run_until_idle()

        self.assertEqual(len(sleeps), 1)
        self.assertAlmostEqual(sleeps[0], 0.8)
        self.assertAlmostEqual(ran[0], 10.8)


class TestSimulationConfig(unittest.TestCase):
    """Test configuration bounds and parsing."""

    def test_defaults(self):
        config = SimulationConfig()
        self.assertEqual(config.max_heap_size, 60)
        self.assertEqual(config.batch_size, 20)
        self.assertEqual(config.auto_gc_settle_delay, 1.5)

    def test_heap_size_quantized(self):
        self.assertEqual(quantize_heap_size(94), 90)
        self.assertEqual(quantize_heap_size(95), 100)
        self.assertEqual(quantize_heap_size(10), 60)
        self.assertEqual(quantize_heap_size(9000), 500)

    def test_batch_size_clamped(self):
        self.assertEqual(clamp_batch_size(0), 1)
        self.assertEqual(clamp_batch_size(250), 100)
        self.assertEqual(SimulationConfig(batch_size=150).batch_size, 100)

    def test_non_integer_heap_size(self):
        with self.assertRaises(ConfigurationError):
            SimulationConfig(max_heap_size="60")

    def test_invalid_probability(self):
        with self.assertRaises(ConfigurationError):
            SimulationConfig(young_survival_probability=1.5)

    def test_negative_delay(self):
        with self.assertRaises(ConfigurationError):
            SimulationConfig(gc_mark_delay=-0.1)

    def test_configuration_error_is_value_error(self):
        with self.assertRaises(ValueError):
            SimulationConfig(log_capacity=0)

    def test_from_env(self):
        config = SimulationConfig.from_env({
            "JVMSIM_HEAP_SIZE": "120",
            "JVMSIM_BATCH_SIZE": "5",
            "JVMSIM_SEED": "42",
        })
        self.assertEqual(config.max_heap_size, 120)
        self.assertEqual(config.batch_size, 5)
        self.assertEqual(config.seed, 42)

    def test_from_env_overrides_win(self):
        config = SimulationConfig.from_env({"JVMSIM_HEAP_SIZE": "120"}, max_heap_size=200)
        self.assertEqual(config.max_heap_size, 200)

    def test_from_env_rejects_garbage(self):
        with self.assertRaises(ConfigurationError) as ctx:
            SimulationConfig.from_env({"JVMSIM_SEED": "abc"})
        self.assertIn("JVMSIM_SEED", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
