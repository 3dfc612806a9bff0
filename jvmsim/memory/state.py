"""
Simulation state record for JVMSim.

A single explicit record owned by the coordinator and handed to each
engine call, instead of counters and flags scattered around the runtime.
"""

from dataclasses import dataclass, field

from .capacity import GenerationLimits, generation_limits
from .heap_manager import HeapState
from .call_stack import CallStack


@dataclass
class SimulationCounters:
    """Process-wide telemetry counters"""
    total_allocated: int = 0
    total_collected: int = 0


class AnimationLock:
    """
    Gate ensuring at most one multi-phase transition is in flight.

    Acquisition never blocks: a caller that finds the lock held is
    expected to give up and retry later.
    """

    def __init__(self):
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def try_acquire(self) -> bool:
        if self._busy:
            return False
        self._busy = True
        return True

    def release(self):
        self._busy = False


@dataclass
class SimulationState:
    """Everything the engines read and mutate"""
    max_heap_size: int = 60
    heap: HeapState = field(default_factory=HeapState)
    stack: CallStack = field(default_factory=CallStack)
    counters: SimulationCounters = field(default_factory=SimulationCounters)
    lock: AnimationLock = field(default_factory=AnimationLock)

    @property
    def limits(self) -> GenerationLimits:
        return generation_limits(self.max_heap_size)

    @property
    def total_count(self) -> int:
        return len(self.heap)

    @property
    def is_over_capacity(self) -> bool:
        return len(self.heap) > self.max_heap_size
