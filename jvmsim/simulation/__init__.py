"""
JVMSim Simulation Layer

Coordinator, phase scheduling, event feeds and configuration for the
memory model simulator.
"""

from .config import (
    SimulationConfig, quantize_heap_size, clamp_batch_size,
    MIN_HEAP_SIZE, MAX_HEAP_SIZE, HEAP_SIZE_STEP, MIN_BATCH_SIZE, MAX_BATCH_SIZE
)
from .errors import (
    SimulationCondition, Diagnostic, SimulationError, ConfigurationError, SchedulerError
)
from .components import JVMPart, ComponentInfo, JVM_COMPONENTS, parse_part
from .events import (
    Severity, LogEntry, EventLog, ComponentEventKind, ComponentEvent,
    SimulationSnapshot, EventBus
)
from .scheduler import ScheduledCall, PhaseScheduler, ImmediateScheduler, RealTimeScheduler
from .coordinator import MemorySimulator, TransitionResult, SimulationStats, AllocationPhase

__all__ = [
    # Configuration
    'SimulationConfig', 'quantize_heap_size', 'clamp_batch_size',
    'MIN_HEAP_SIZE', 'MAX_HEAP_SIZE', 'HEAP_SIZE_STEP', 'MIN_BATCH_SIZE', 'MAX_BATCH_SIZE',

    # Errors and conditions
    'SimulationCondition', 'Diagnostic', 'SimulationError', 'ConfigurationError',
    'SchedulerError',

    # Components and events
    'JVMPart', 'ComponentInfo', 'JVM_COMPONENTS', 'parse_part',
    'Severity', 'LogEntry', 'EventLog', 'ComponentEventKind', 'ComponentEvent',
    'SimulationSnapshot', 'EventBus',

    # Scheduling
    'ScheduledCall', 'PhaseScheduler', 'ImmediateScheduler', 'RealTimeScheduler',

    # Coordinator
    'MemorySimulator', 'TransitionResult', 'SimulationStats', 'AllocationPhase',
]
