"""
Interactive console for JVMSim.

Drives the simulator from a prompt: every command starts one transition
and the scheduler is drained before the next prompt, so the narration
plays out phase by phase.
"""

import logging
import shlex
from typing import Callable, Dict, List, Optional

import click

from .logging_config import setup_logging
from .memory.generational_gc import CollectionMode
from .simulation import (
    MemorySimulator, SimulationConfig, ImmediateScheduler, RealTimeScheduler,
    JVM_COMPONENTS, LogEntry, Severity, SimulationError, parse_part
)
from .assistant import ChatAssistant, ExpertService, GeminiExpertService


SEVERITY_COLORS = {
    Severity.INFO: None,
    Severity.ACTION: "cyan",
    Severity.ERROR: "red",
}

HELP_TEXT = """\
Commands:
  new                 allocate one object (class loading, method area, Eden)
  batch [n]           allocate n objects at once (default: configured batch size)
  call                push a stack frame
  return              pop the top stack frame
  gc                  run a Minor GC
  full-gc             run a Full GC
  heap <size>         set the max heap size (60-500, step 10)
  batch-size <n>      set the default batch size (1-100)
  select [part]       select a component (no argument: global overview)
  parts               list the components
  ask <question>      ask the JVM assistant about the selected component
  status              show heap and stack
  stats               show collection statistics
  log [n]             show the n most recent log entries
  help                show this help
  quit                leave
"""


def print_entry(entry: LogEntry):
    click.secho(str(entry), fg=SEVERITY_COLORS[entry.severity])


class Console:
    """Command interpreter bound to one simulator instance"""

    def __init__(self, simulator: MemorySimulator, assistant: ChatAssistant,
                 echo: Callable[[str], None] = click.echo):
        self.simulator = simulator
        self.assistant = assistant
        self.echo = echo
        self._commands: Dict[str, Callable[[List[str]], None]] = {
            "new": self._new,
            "batch": self._batch,
            "call": self._call,
            "return": self._return,
            "gc": self._gc,
            "full-gc": self._full_gc,
            "heap": self._heap,
            "batch-size": self._batch_size,
            "select": self._select,
            "parts": self._parts,
            "ask": self._ask,
            "status": self._status,
            "stats": self._stats,
            "log": self._log,
            "help": self._help,
        }

    def execute(self, line: str) -> bool:
        """Run one command line; returns False when the user asked to quit"""
        try:
            words = shlex.split(line)
        except ValueError as e:
            self.echo(f"Cannot parse command: {e}")
            return True

        if not words:
            return True

        name, args = words[0].lower(), words[1:]
        if name in ("quit", "exit"):
            return False

        handler = self._commands.get(name)
        if handler is None:
            self.echo(f"Unknown command: {name} (type 'help')")
            return True

        try:
            handler(args)
        except (SimulationError, ValueError) as e:
            self.echo(str(e))
            return True

        self.simulator.scheduler.run_until_idle()
        return True

    def _new(self, args: List[str]):
        self.simulator.allocate()

    def _batch(self, args: List[str]):
        size = int(args[0]) if args else None
        self.simulator.allocate_batch(size)

    def _call(self, args: List[str]):
        self.simulator.call_method()

    def _return(self, args: List[str]):
        self.simulator.return_method()

    def _gc(self, args: List[str]):
        self.simulator.collect(CollectionMode.MINOR)

    def _full_gc(self, args: List[str]):
        self.simulator.collect(CollectionMode.FULL)

    def _heap(self, args: List[str]):
        if not args:
            raise ValueError("Usage: heap <size>")
        self.simulator.set_max_heap_size(int(args[0]))

    def _batch_size(self, args: List[str]):
        if not args:
            raise ValueError("Usage: batch-size <n>")
        self.simulator.set_batch_size(int(args[0]))
        self.echo(f"Batch size: {self.simulator.config.batch_size}")

    def _select(self, args: List[str]):
        part = parse_part(args[0]) if args else None
        self.simulator.select_component(part)
        if part is None:
            self.echo("Global overview")
            return
        info = JVM_COMPONENTS[part]
        self.echo(f"{info.name}: {info.description}")
        self.echo(f"  {info.details}")

    def _parts(self, args: List[str]):
        for part, info in JVM_COMPONENTS.items():
            self.echo(f"  {part.name.lower():<18} {info.name}")

    def _ask(self, args: List[str]):
        answer = self.assistant.ask(" ".join(args))
        if answer is None:
            raise ValueError("Usage: ask <question>")
        self.echo(answer)

    def _status(self, args: List[str]):
        snapshot = self.simulator.snapshot()
        limits = snapshot.limits
        self.echo(f"Heap: {snapshot.total_count}/{snapshot.max_heap_size} objects "
                  f"(young {snapshot.young_count}/{limits.young}, old {snapshot.old_count}/{limits.old})")
        for region, count in self.simulator.state.heap.count_by_region().items():
            self.echo(f"  {region.value:<4} {count}")
        frames = ", ".join(frame.label for frame in snapshot.frames) or "<empty>"
        self.echo(f"Stack: {frames}")
        self.echo(f"Allocated: {snapshot.total_allocated}  Collected: {snapshot.total_collected}")

    def _stats(self, args: List[str]):
        stats = self.simulator.get_statistics()
        self.echo(f"Collections: {stats.total_collections} "
                  f"(minor {stats.minor_collections}, full {stats.full_collections})")
        self.echo(f"Reclaimed: {stats.total_collected}  Promoted: {stats.total_promoted}  "
                  f"Promotion failures: {stats.promotion_failures}")
        self.echo(f"Occupancy: young {stats.young_occupancy:.0%}, old {stats.old_occupancy:.0%}, "
                  f"heap {stats.heap_occupancy:.0%}")

    def _log(self, args: List[str]):
        count = int(args[0]) if args else 10
        for entry in reversed(self.simulator.log.entries[:count]):
            self.echo(str(entry))

    def _help(self, args: List[str]):
        self.echo(HELP_TEXT)


def build_console(config: SimulationConfig, fast: bool = False,
                  service: Optional[ExpertService] = None) -> Console:
    scheduler = ImmediateScheduler() if fast else RealTimeScheduler()
    simulator = MemorySimulator(config, scheduler)
    simulator.log.subscribe(print_entry)
    assistant = ChatAssistant(service or GeminiExpertService(), simulator.chat_context)
    return Console(simulator, assistant)


@click.command()
@click.option("--heap-size", type=click.IntRange(60, 500), default=None,
              help="Max heap size in objects (step 10).")
@click.option("--batch-size", type=click.IntRange(1, 100), default=None,
              help="Objects created by a batch allocation.")
@click.option("--seed", type=int, default=None, help="Seed for the survival draws.")
@click.option("--fast", is_flag=True, help="Skip the pacing delays between phases.")
@click.option("--verbose", "-v", is_flag=True, help="Also emit the package log on stderr.")
def main(heap_size, batch_size, seed, fast, verbose):
    """Interactive JVM memory model simulator."""
    if verbose:
        setup_logging(logging.DEBUG)

    overrides = {}
    if heap_size is not None:
        overrides["max_heap_size"] = heap_size
    if batch_size is not None:
        overrides["batch_size"] = batch_size
    if seed is not None:
        overrides["seed"] = seed
    config = SimulationConfig.from_env(**overrides)

    console = build_console(config, fast=fast)
    limits = console.simulator.limits
    click.echo(f"JVMSim: heap {config.max_heap_size} objects "
               f"(young {limits.young} / old {limits.old}). Type 'help' for commands.")

    while True:
        try:
            line = click.prompt("jvm", prompt_suffix="> ", default="", show_default=False)
        except (EOFError, click.Abort):
            break
        if not console.execute(line):
            break


if __name__ == "__main__":
    main()
