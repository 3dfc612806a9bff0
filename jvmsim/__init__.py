"""
JVMSim Package

An interactive, educational simulator of the JVM memory model: class
loading, stack frames, a generational heap and garbage collection.

Architecture:
    jvmsim/
    ├── memory/          # Capacity model, heap and stack state, allocator, GC
    ├── simulation/      # Coordinator, phase scheduler, events, configuration
    ├── assistant/       # Chat assistant pass-through
    └── cli.py           # Interactive console

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .memory import (
    Region, ManagedObject, HeapState, StackFrame, CallStack,
    GenerationLimits, generation_limits, CollectionMode, GCMetrics
)
from .simulation import (
    MemorySimulator, SimulationConfig, ImmediateScheduler, RealTimeScheduler,
    SimulationCondition, JVMPart
)

__all__ = [
    # Memory model
    "Region", "ManagedObject", "HeapState", "StackFrame", "CallStack",
    "GenerationLimits", "generation_limits", "CollectionMode", "GCMetrics",

    # Simulation
    "MemorySimulator", "SimulationConfig", "ImmediateScheduler", "RealTimeScheduler",
    "SimulationCondition", "JVMPart",

    # Version info
    "__version__",
]
