"""
Heap State for JVMSim

Holds the live managed objects of the simulated heap, each tagged with
the generation region it currently lives in.
"""

from typing import Dict, Iterable, Iterator, List
from enum import Enum
from dataclasses import dataclass


class Region(Enum):
    """Heap regions an object can live in"""
    EDEN = "eden"               # Where new objects are born
    SURVIVOR_0 = "s0"
    SURVIVOR_1 = "s1"
    OLD = "old"                 # Tenured objects

    @property
    def is_young(self) -> bool:
        return self in YOUNG_REGIONS


YOUNG_REGIONS = (Region.EDEN, Region.SURVIVOR_0, Region.SURVIVOR_1)


@dataclass(frozen=True)
class ManagedObject:
    """A simulated object instance on the heap"""
    id: int
    region: Region = Region.EDEN

    @property
    def name(self) -> str:
        return f"Obj_{self.id}"

    @property
    def is_young(self) -> bool:
        return self.region.is_young


class HeapState:
    """
    The authoritative set of live objects.

    Objects are kept in insertion order; collection passes rely on that
    order to make promotion decisions reproducible.
    """

    def __init__(self, objects: Iterable[ManagedObject] = ()):
        self._objects: List[ManagedObject] = list(objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[ManagedObject]:
        return iter(self._objects)

    @property
    def objects(self) -> List[ManagedObject]:
        """Copy of the live objects in insertion order"""
        return list(self._objects)

    @property
    def young_count(self) -> int:
        return sum(1 for obj in self._objects if obj.is_young)

    @property
    def old_count(self) -> int:
        return sum(1 for obj in self._objects if obj.region is Region.OLD)

    def in_region(self, region: Region) -> List[ManagedObject]:
        return [obj for obj in self._objects if obj.region is region]

    def count_by_region(self) -> Dict[Region, int]:
        counts = {region: 0 for region in Region}
        for obj in self._objects:
            counts[obj.region] += 1
        return counts

    def append(self, obj: ManagedObject):
        self._objects.append(obj)

    def extend(self, objects: Iterable[ManagedObject]):
        self._objects.extend(objects)

    def replace(self, objects: Iterable[ManagedObject]):
        """Swap in the live set produced by a collection pass"""
        self._objects = list(objects)
