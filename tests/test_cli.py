"""
Test suite for the JVMSim interactive console.
"""

import unittest
import sys
import os

from click.testing import CliRunner

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from jvmsim.cli import Console, main
from jvmsim.assistant import ChatAssistant, ExpertService, MISSING_KEY_MESSAGE
from jvmsim.simulation import MemorySimulator, SimulationConfig, ImmediateScheduler, JVMPart


class CannedService(ExpertService):

    def __init__(self):
        self.contexts = []

    def ask(self, question, context=None):
        self.contexts.append(context)
        return "canned answer"


class TestConsole(unittest.TestCase):
    """Drive the command interpreter without a terminal."""

    def setUp(self):
        self.output = []
        self.service = CannedService()
        self.simulator = MemorySimulator(SimulationConfig(seed=5), ImmediateScheduler())
        assistant = ChatAssistant(self.service, self.simulator.chat_context)
        self.console = Console(self.simulator, assistant, echo=self.output.append)

    def test_commands_drain_the_scheduler(self):
        self.assertTrue(self.console.execute("new"))
        self.assertTrue(self.console.execute("call"))

        self.assertEqual(len(self.simulator.state.heap), 1)
        self.assertEqual(len(self.simulator.state.stack), 1)
        self.assertFalse(self.simulator.busy)
        self.assertTrue(self.simulator.scheduler.is_idle)

    def test_batch_with_size(self):
        self.console.execute("batch 5")
        self.assertEqual(len(self.simulator.state.heap), 5)

    def test_batch_with_bad_size(self):
        self.console.execute("batch zero")
        self.assertEqual(len(self.simulator.state.heap), 0)
        self.assertEqual(len(self.output), 1)

    def test_heap_resize(self):
        self.console.execute("heap 95")
        self.assertEqual(self.simulator.state.max_heap_size, 100)

    def test_status(self):
        self.console.execute("new")
        self.console.execute("status")

        self.assertEqual(self.output[0], "Heap: 1/60 objects (young 1/20, old 0/40)")
        self.assertIn("Stack: <empty>", self.output)
        self.assertEqual(self.output[-1], "Allocated: 1  Collected: 0")

    def test_select_and_ask(self):
        self.console.execute("select heap_old")
        self.assertEqual(self.simulator.selected, JVMPart.HEAP_OLD)

        self.console.execute("ask what lives here?")

        self.assertEqual(self.output[-1], "canned answer")
        self.assertTrue(self.service.contexts[0].startswith("User is currently viewing: Old Gen."))

    def test_select_unknown_part(self):
        self.console.execute("select perm_gen")
        self.assertIsNone(self.simulator.selected)
        self.assertIn("perm_gen", self.output[-1])

    def test_unknown_command(self):
        self.assertTrue(self.console.execute("jump"))
        self.assertEqual(self.output, ["Unknown command: jump (type 'help')"])

    def test_quit(self):
        self.assertFalse(self.console.execute("quit"))
        self.assertTrue(self.console.execute(""))


class TestMainCommand(unittest.TestCase):
    """Run the click entry point end to end."""

    def setUp(self):
        self.runner = CliRunner()
        self.env = {"GEMINI_API_KEY": None, "API_KEY": None, "JVMSIM_HEAP_SIZE": None,
                    "JVMSIM_BATCH_SIZE": None, "JVMSIM_SEED": None}

    def test_session(self):
        result = self.runner.invoke(main, ["--fast", "--seed", "1"],
                                    input="new\ncall\nstatus\nquit\n", env=self.env)

        self.assertEqual(result.exit_code, 0)
        self.assertIn("young 20 / old 40", result.output)
        self.assertIn("Allocated Obj_1 in the heap (Eden)", result.output)
        self.assertIn("Stack: method_1()", result.output)

    def test_ask_without_key(self):
        result = self.runner.invoke(main, ["--fast"], input="ask what is eden?\n", env=self.env)

        self.assertEqual(result.exit_code, 0)
        self.assertIn(MISSING_KEY_MESSAGE, result.output)

    def test_heap_size_option(self):
        result = self.runner.invoke(main, ["--fast", "--heap-size", "90"], input="quit\n", env=self.env)
        self.assertIn("heap 90 objects (young 30 / old 60)", result.output)

    def test_heap_size_out_of_range(self):
        result = self.runner.invoke(main, ["--heap-size", "10"], env=self.env)
        self.assertNotEqual(result.exit_code, 0)


if __name__ == "__main__":
    unittest.main()
