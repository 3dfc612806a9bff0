"""
JVMSim Memory Model

Heap, call stack and the generational collector that the simulation
coordinator drives.
"""

from .capacity import GenerationLimits, generation_limits
from .heap_manager import Region, ManagedObject, HeapState, YOUNG_REGIONS
from .call_stack import StackFrame, CallStack
from .state import SimulationState, SimulationCounters, AnimationLock
from .allocator import has_capacity, commit_allocation, commit_batch
from .generational_gc import (
    GenerationalCollector, CollectionMode, CollectionTrigger, CollectionPhase,
    CollectionPlan, GCMetrics, RandomSource,
    YOUNG_SURVIVAL_PROBABILITY, OLD_SURVIVAL_PROBABILITY
)

__all__ = [
    # Capacity model
    'GenerationLimits', 'generation_limits',

    # Heap and stack state
    'Region', 'ManagedObject', 'HeapState', 'YOUNG_REGIONS',
    'StackFrame', 'CallStack',
    'SimulationState', 'SimulationCounters', 'AnimationLock',

    # Allocation
    'has_capacity', 'commit_allocation', 'commit_batch',

    # Generational GC
    'GenerationalCollector', 'CollectionMode', 'CollectionTrigger', 'CollectionPhase',
    'CollectionPlan', 'GCMetrics', 'RandomSource',
    'YOUNG_SURVIVAL_PROBABILITY', 'OLD_SURVIVAL_PROBABILITY',
]
