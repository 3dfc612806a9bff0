"""
Capacity model for the JVMSim heap.

Derives the young and old generation limits from the total heap size.
The young generation gets a third of the heap, the old generation
takes the remainder so the two always add up to the configured total.
"""

from typing import NamedTuple


class GenerationLimits(NamedTuple):
    """Object-count limits for each generation"""
    young: int
    old: int

    @property
    def total(self) -> int:
        return self.young + self.old


def generation_limits(max_heap_size: int) -> GenerationLimits:
    """Split ``max_heap_size`` into (young, old) limits using floor division."""
    young = max_heap_size // 3
    return GenerationLimits(young=young, old=max_heap_size - young)
