"""
Event feeds for JVMSim.

The event log is the narration shown next to the diagram; the event bus
carries component highlights and post-transition snapshots to whatever
presentation layer is attached.
"""

import itertools
import logging
from datetime import datetime
from typing import Callable, Deque, List, Optional, Tuple
from enum import Enum, auto
from dataclasses import dataclass
from collections import deque

from ..memory.heap_manager import ManagedObject
from ..memory.call_stack import StackFrame
from ..memory.capacity import GenerationLimits
from .components import JVMPart

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Log entry categories"""
    INFO = "info"
    ACTION = "action"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.ACTION: logging.INFO,
    Severity.ERROR: logging.WARNING,
}


@dataclass(frozen=True)
class LogEntry:
    id: int
    timestamp: datetime
    message: str
    severity: Severity

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.message}"


class EventLog:
    """
    Bounded, most-recent-first narration feed.

    Every entry is mirrored to the ``jvmsim`` logger so that headless runs
    keep a trace without a log view attached.
    """

    def __init__(self, capacity: int = 50, clock: Callable[[], datetime] = datetime.now):
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._clock = clock
        self._ids = itertools.count(1)
        self._subscribers: List[Callable[[LogEntry], None]] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    @property
    def entries(self) -> List[LogEntry]:
        """Entries, newest first"""
        return list(self._entries)

    @property
    def latest(self) -> Optional[LogEntry]:
        return self._entries[0] if self._entries else None

    def subscribe(self, callback: Callable[[LogEntry], None]):
        self._subscribers.append(callback)

    def add(self, message: str, severity: Severity = Severity.INFO) -> LogEntry:
        entry = LogEntry(next(self._ids), self._clock(), message, severity)
        self._entries.appendleft(entry)
        logger.log(_LOG_LEVELS[severity], message)

        for callback in self._subscribers:
            callback(entry)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(message, Severity.INFO)

    def action(self, message: str) -> LogEntry:
        return self.add(message, Severity.ACTION)

    def error(self, message: str) -> LogEntry:
        return self.add(message, Severity.ERROR)

    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]


class ComponentEventKind(Enum):
    ACTIVATED = auto()   # Component becomes the selected/highlighted one
    FLASH = auto()       # Short highlight pulse


@dataclass(frozen=True)
class ComponentEvent:
    kind: ComponentEventKind
    part: JVMPart
    duration: float = 0.0


@dataclass(frozen=True)
class SimulationSnapshot:
    """Read-only view of the simulation handed to the presentation layer"""
    objects: Tuple[ManagedObject, ...]
    frames: Tuple[StackFrame, ...]
    total_allocated: int
    total_collected: int
    max_heap_size: int
    limits: GenerationLimits
    busy: bool
    selected: Optional[JVMPart]

    @property
    def young_count(self) -> int:
        return sum(1 for obj in self.objects if obj.is_young)

    @property
    def old_count(self) -> int:
        return len(self.objects) - self.young_count

    @property
    def total_count(self) -> int:
        return len(self.objects)


class EventBus:
    """Fan-out of component events and snapshots to registered listeners"""

    def __init__(self):
        self._component_callbacks: List[Callable[[ComponentEvent], None]] = []
        self._snapshot_callbacks: List[Callable[[SimulationSnapshot], None]] = []

    def on_component_event(self, callback: Callable[[ComponentEvent], None]):
        self._component_callbacks.append(callback)

    def on_snapshot(self, callback: Callable[[SimulationSnapshot], None]):
        self._snapshot_callbacks.append(callback)

    def emit_component(self, event: ComponentEvent):
        for callback in self._component_callbacks:
            callback(event)

    def emit_snapshot(self, snapshot: SimulationSnapshot):
        for callback in self._snapshot_callbacks:
            callback(snapshot)
