"""
Allocation engine for JVMSim.

Creates objects in Eden. Single allocations are refused once the heap
is full; batch allocations model a burst that outruns the capacity
check and are always committed.
"""

from typing import List

from .heap_manager import ManagedObject, Region
from .state import SimulationState


def has_capacity(state: SimulationState) -> bool:
    """True while a single allocation can still fit under the heap limit"""
    return len(state.heap) < state.max_heap_size


def commit_allocation(state: SimulationState) -> ManagedObject:
    """Place one new object in Eden with the next allocation id."""
    obj = ManagedObject(id=state.counters.total_allocated + 1, region=Region.EDEN)
    state.heap.append(obj)
    state.counters.total_allocated += 1
    return obj


def commit_batch(state: SimulationState, batch_size: int) -> List[ManagedObject]:
    """
    Place ``batch_size`` objects in Eden as one contiguous group.

    Capacity is not checked here; the caller reports any overflow.
    """
    if batch_size <= 0:
        raise ValueError(f"Batch size must be positive, got {batch_size}")

    first_id = state.counters.total_allocated + 1
    batch = [ManagedObject(id=first_id + i, region=Region.EDEN) for i in range(batch_size)]

    state.heap.extend(batch)
    state.counters.total_allocated += batch_size
    return batch
