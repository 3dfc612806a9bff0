"""
Generational Garbage Collector for JVMSim

Implements the simulated reclamation pass: a minor pass only looks at
the young generation, a full pass also sweeps the old generation.
Reachability is modelled with independent survival draws per object,
taken from an injectable random source so that passes can be replayed.
"""

from typing import List, Optional, Protocol, Tuple
from enum import Enum, auto
from dataclasses import dataclass, field, replace

import numpy as np

from .heap_manager import HeapState, ManagedObject, Region


YOUNG_SURVIVAL_PROBABILITY = 0.5
OLD_SURVIVAL_PROBABILITY = 0.7


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)"""

    def random(self) -> float:
        ...


class CollectionMode(Enum):
    """Scope of a collection pass"""
    MINOR = "Minor GC"              # Young generation only
    FULL = "Full GC (Major)"        # Young and old generations


class CollectionTrigger(Enum):
    """Reasons why a GC collection was triggered"""
    EXPLICIT_REQUEST = auto()       # Manual GC request
    ALLOCATION_PRESSURE = auto()    # Young generation reached its limit


class CollectionPhase(Enum):
    """Progress of a single collection invocation"""
    IDLE = auto()
    ANNOUNCED = auto()
    CLASSIFIED = auto()
    APPLIED = auto()


@dataclass
class GCMetrics:
    """Statistics for a garbage collection cycle"""
    mode: CollectionMode
    trigger_reason: CollectionTrigger
    start_time: float
    end_time: float
    objects_scanned: int
    objects_collected: int
    objects_promoted: int
    objects_retained: int
    promotion_failed: bool

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000


@dataclass
class CollectionPlan:
    """Outcome of the classify step, not yet applied to the heap"""
    mode: CollectionMode
    live: List[ManagedObject] = field(default_factory=list)
    reclaimed: List[ManagedObject] = field(default_factory=list)
    promoted: List[ManagedObject] = field(default_factory=list)
    retained: List[ManagedObject] = field(default_factory=list)
    promotion_failed: bool = False

    @property
    def scanned(self) -> int:
        return len(self.reclaimed) + len(self.promoted) + len(self.retained)


class GenerationalCollector:
    """
    Survival and promotion policy for the simulated heap.

    Young survivors are promoted straight into the old generation while
    it has room. When it is full the survivor stays where it is and the
    pass is flagged as a promotion failure; a real runtime would escalate
    to a full collection or fail the allocation instead.
    """

    def __init__(self, rng: Optional[RandomSource] = None,
                 young_survival: float = YOUNG_SURVIVAL_PROBABILITY,
                 old_survival: float = OLD_SURVIVAL_PROBABILITY):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.young_survival = young_survival
        self.old_survival = old_survival

    def _survives(self, probability: float) -> bool:
        return self.rng.random() < probability

    def classify(self, heap: HeapState, mode: CollectionMode, old_limit: int) -> CollectionPlan:
        """
        Partition the heap into the next live set.

        Objects are visited in insertion order. The promotion gate counts
        old objects already placed in the new live set, so the result is
        fully determined by the sequence of survival draws.
        """
        plan = CollectionPlan(mode=mode)
        old_in_live = 0

        for obj in heap:
            if obj.region is Region.OLD:
                if mode is CollectionMode.MINOR or self._survives(self.old_survival):
                    plan.live.append(obj)
                    plan.retained.append(obj)
                    old_in_live += 1
                else:
                    plan.reclaimed.append(obj)
                continue

            if not self._survives(self.young_survival):
                plan.reclaimed.append(obj)
                continue

            if old_in_live < old_limit:
                promoted = replace(obj, region=Region.OLD)
                plan.live.append(promoted)
                plan.promoted.append(promoted)
                old_in_live += 1
            else:
                # Old generation is full; keep the survivor in its young region
                plan.live.append(obj)
                plan.retained.append(obj)
                plan.promotion_failed = True

        return plan

    def apply(self, heap: HeapState, plan: CollectionPlan) -> Tuple[int, int]:
        """Install the planned live set and return (reclaimed, promoted)"""
        heap.replace(plan.live)
        return len(plan.reclaimed), len(plan.promoted)
