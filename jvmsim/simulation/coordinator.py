"""
Simulation coordinator for JVMSim

Main interface of the simulator. Sequences the multi-phase transitions
(allocation, batch allocation, method call/return, collection) on a
phase scheduler, guards them with the animation lock, narrates them to
the event log and fires the automatic Minor GC when the young
generation fills up.
"""

import logging
from typing import Dict, List, Optional
from enum import Enum, auto
from dataclasses import dataclass, field
from collections import deque

import numpy as np

from ..memory.capacity import GenerationLimits
from ..memory.heap_manager import ManagedObject
from ..memory.call_stack import StackFrame
from ..memory.state import SimulationState
from ..memory.allocator import has_capacity, commit_allocation, commit_batch
from ..memory.generational_gc import (
    GenerationalCollector, CollectionMode, CollectionTrigger, CollectionPhase,
    CollectionPlan, GCMetrics, RandomSource
)
from .config import SimulationConfig, quantize_heap_size, clamp_batch_size
from .components import JVMPart, JVM_COMPONENTS
from .errors import SimulationCondition, SimulationError, ConfigurationError
from .events import (
    EventLog, EventBus, ComponentEvent, ComponentEventKind, SimulationSnapshot
)
from .scheduler import PhaseScheduler, RealTimeScheduler, ScheduledCall

logger = logging.getLogger(__name__)


class AllocationPhase(Enum):
    """Phases of a single ``new Object()``"""
    CLASS_LOADING_CHECK = auto()
    METHOD_AREA = auto()
    COMMIT = auto()


@dataclass
class TransitionResult:
    """
    Handle returned by every operation.

    ``accepted`` is known immediately. Conditions discovered in later
    phases (overflow, promotion failure) are appended as the phases run;
    ``completed`` flips once the final phase has finished.
    """
    accepted: bool
    conditions: List[SimulationCondition] = field(default_factory=list)
    completed: bool = False
    objects: List[ManagedObject] = field(default_factory=list)
    frame: Optional[StackFrame] = None
    metrics: Optional[GCMetrics] = None

    @property
    def condition(self) -> Optional[SimulationCondition]:
        return self.conditions[0] if self.conditions else None

    @property
    def is_busy(self) -> bool:
        return SimulationCondition.BUSY in self.conditions


@dataclass
class SimulationStats:
    """Aggregated simulator statistics"""
    total_allocated: int = 0
    total_collected: int = 0
    total_promoted: int = 0
    total_collections: int = 0
    minor_collections: int = 0
    full_collections: int = 0
    promotion_failures: int = 0
    objects_by_region: Dict[str, int] = field(default_factory=dict)
    young_occupancy: float = 0.0
    old_occupancy: float = 0.0
    heap_occupancy: float = 0.0


class MemorySimulator:
    """
    Coordinator of the simulated JVM memory model.

    Owns the simulation state record and hands it to the allocation,
    stack and collection engines. Only one transition may be in flight;
    any mutating request made meanwhile is rejected with a BUSY result.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 scheduler: Optional[PhaseScheduler] = None,
                 rng: Optional[RandomSource] = None,
                 event_log: Optional[EventLog] = None):
        self.config = config or SimulationConfig()
        self.scheduler = scheduler or RealTimeScheduler()

        # Core components
        self.state = SimulationState(max_heap_size=self.config.max_heap_size)
        self.collector = GenerationalCollector(
            rng if rng is not None else np.random.default_rng(self.config.seed),
            young_survival=self.config.young_survival_probability,
            old_survival=self.config.old_survival_probability
        )

        # Presentation feeds
        self.log = event_log or EventLog(self.config.log_capacity)
        self.events = EventBus()
        self.selected: Optional[JVMPart] = None

        # Phase tracking
        self.allocation_phase: Optional[AllocationPhase] = None
        self.collection_phase = CollectionPhase.IDLE
        self._pending_auto_gc: Optional[ScheduledCall] = None
        self._auto_gc_stalled = False

        # Statistics
        self.collection_history: deque = deque(maxlen=100)
        self._total_promoted = 0
        self._promotion_failures = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self.state.lock.busy

    @property
    def limits(self) -> GenerationLimits:
        return self.state.limits

    @property
    def auto_gc_pending(self) -> bool:
        return self._pending_auto_gc is not None and self._pending_auto_gc.pending

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            objects=tuple(self.state.heap),
            frames=tuple(self.state.stack.frames),
            total_allocated=self.state.counters.total_allocated,
            total_collected=self.state.counters.total_collected,
            max_heap_size=self.state.max_heap_size,
            limits=self.limits,
            busy=self.busy,
            selected=self.selected,
        )

    def get_statistics(self) -> SimulationStats:
        """Get aggregated allocation and collection statistics"""
        heap = self.state.heap
        limits = self.limits
        minor = sum(1 for m in self.collection_history if m.mode is CollectionMode.MINOR)

        return SimulationStats(
            total_allocated=self.state.counters.total_allocated,
            total_collected=self.state.counters.total_collected,
            total_promoted=self._total_promoted,
            total_collections=len(self.collection_history),
            minor_collections=minor,
            full_collections=len(self.collection_history) - minor,
            promotion_failures=self._promotion_failures,
            objects_by_region={r.value: n for r, n in heap.count_by_region().items()},
            young_occupancy=heap.young_count / max(limits.young, 1),
            old_occupancy=heap.old_count / max(limits.old, 1),
            heap_occupancy=len(heap) / max(self.state.max_heap_size, 1),
        )

    # ------------------------------------------------------------------
    # Component selection and chat context
    # ------------------------------------------------------------------

    def select_component(self, part: Optional[JVMPart]):
        """Select a subsystem (None returns to the global overview)"""
        self.selected = part
        if part is not None:
            self.events.emit_component(ComponentEvent(ComponentEventKind.ACTIVATED, part))

    def chat_context(self) -> str:
        """Describe the selected subsystem for the chat assistant"""
        if self.selected is None:
            return "User is viewing the global JVM overview"
        info = JVM_COMPONENTS[self.selected]
        return f"User is currently viewing: {info.name}. Description: {info.details}"

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def allocate(self) -> TransitionResult:
        """Run ``new Object()``: class loading check, method area, Eden commit"""
        if self.busy:
            return self._reject_busy("allocate")

        if not has_capacity(self.state):
            self.log.error(f"Error: Java heap space OutOfMemoryError! (limit {self.state.max_heap_size} reached)")
            self._flash(JVMPart.HEAP)
            return TransitionResult(accepted=False, completed=True,
                                    conditions=[SimulationCondition.OUT_OF_MEMORY])

        result = self._begin_transition()
        self.allocation_phase = AllocationPhase.CLASS_LOADING_CHECK
        self.log.action("Received 'new Object()' instruction")
        self._highlight(JVMPart.CLASS_LOADER)

        self.scheduler.call_later(self.config.class_loading_delay,
                                  lambda: self._allocation_method_area(result),
                                  label="allocate:method-area")
        return result

    def _allocation_method_area(self, result: TransitionResult):
        self.allocation_phase = AllocationPhase.METHOD_AREA
        self.log.info("Class loader verified the class and loaded its metadata into the method area")
        self._highlight(JVMPart.METHOD_AREA)

        self.scheduler.call_later(self.config.method_area_delay,
                                  lambda: self._allocation_commit(result),
                                  label="allocate:commit")

    def _allocation_commit(self, result: TransitionResult):
        self.allocation_phase = AllocationPhase.COMMIT
        obj = commit_allocation(self.state)
        self._auto_gc_stalled = False
        result.objects.append(obj)

        self.log.action(f"Allocated {obj.name} in the heap (Eden)")
        self._highlight(JVMPart.HEAP_YOUNG)

        self.allocation_phase = None
        self._end_transition(result)

    def allocate_batch(self, batch_size: Optional[int] = None) -> TransitionResult:
        """
        Allocate a burst of objects in Eden at once.

        Skips the class loading phases and does not enforce the heap
        limit; exceeding it is reported as CAPACITY_OVERFLOW and the
        over-full heap is kept.
        """
        size = self.config.batch_size if batch_size is None else batch_size
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise ConfigurationError(f"Batch size must be a positive integer, got {size!r}",
                                     code="E_BATCH_SIZE")

        if self.busy:
            return self._reject_busy("allocate_batch")

        result = self._begin_transition()
        self.log.action(f"Received batch allocation instruction: {size} objects")
        self._highlight(JVMPart.HEAP_YOUNG)

        self.scheduler.call_later(self.config.batch_delay,
                                  lambda: self._batch_commit(result, size),
                                  label="batch:commit")
        return result

    def _batch_commit(self, result: TransitionResult, size: int):
        result.objects.extend(commit_batch(self.state, size))
        self._auto_gc_stalled = False

        if self.state.is_over_capacity:
            self.log.error(f"Warning: batch allocation overflowed the heap "
                           f"({self.state.total_count}/{self.state.max_heap_size})")
            result.conditions.append(SimulationCondition.CAPACITY_OVERFLOW)
        else:
            self.log.action(f"Burst simulation: allocated {size} objects in Eden at once")

        self._end_transition(result)

    def call_method(self) -> TransitionResult:
        """Push a stack frame, then touch the PC register"""
        if self.busy:
            return self._reject_busy("call_method")

        result = self._begin_transition()
        self.log.action("Method call: pushStackFrame()")
        self._highlight(JVMPart.STACK)

        self.scheduler.call_later(self.config.stack_delay,
                                  lambda: self._push_commit(result),
                                  label="call:commit")
        return result

    def _push_commit(self, result: TransitionResult):
        result.frame = self.state.stack.push()
        self.log.info("New stack frame pushed onto the VM stack")

        self._flash(JVMPart.PC_REGISTER)
        self.log.info("PC register updated to point at the next instruction")

        self._end_transition(result)

    def return_method(self) -> TransitionResult:
        """Pop the top stack frame"""
        if self.state.stack.is_empty:
            self.log.error("Stack is empty, nothing to pop")
            return TransitionResult(accepted=False, completed=True,
                                    conditions=[SimulationCondition.EMPTY_STACK])

        if self.busy:
            return self._reject_busy("return_method")

        result = self._begin_transition()
        self.log.action("Method return: popStackFrame()")
        self._highlight(JVMPart.STACK)

        self.scheduler.call_later(self.config.stack_delay,
                                  lambda: self._pop_commit(result),
                                  label="return:commit")
        return result

    def _pop_commit(self, result: TransitionResult):
        result.frame = self.state.stack.pop()
        self.log.info("Stack frame popped, caller context restored")
        self._end_transition(result)

    def collect(self, mode: CollectionMode = CollectionMode.MINOR,
                trigger: CollectionTrigger = CollectionTrigger.EXPLICIT_REQUEST) -> TransitionResult:
        """
        Run a collection pass.

        Goes IDLE -> ANNOUNCED -> CLASSIFIED -> APPLIED -> IDLE, one step
        per scheduled phase.
        """
        if self.busy:
            return self._reject_busy("collect")

        result = self._begin_transition()
        start_time = self.scheduler.now()

        self._advance_collection(CollectionPhase.IDLE, CollectionPhase.ANNOUNCED)
        self.log.action(f"Starting {mode.value} (Mark-Sweep/Copying)...")
        self._highlight(JVMPart.GC)

        self.scheduler.call_later(self.config.gc_mark_delay,
                                  lambda: self._collection_classify(result, mode, trigger, start_time),
                                  label="gc:classify")
        return result

    def full_collect(self) -> TransitionResult:
        return self.collect(CollectionMode.FULL)

    def _collection_classify(self, result: TransitionResult, mode: CollectionMode,
                             trigger: CollectionTrigger, start_time: float):
        self._flash(JVMPart.HEAP_YOUNG)
        if mode is CollectionMode.FULL:
            self._flash(JVMPart.HEAP_OLD)
        self._activate(JVMPart.HEAP if mode is CollectionMode.FULL else JVMPart.HEAP_YOUNG)

        plan = self.collector.classify(self.state.heap, mode, self.limits.old)
        self._advance_collection(CollectionPhase.ANNOUNCED, CollectionPhase.CLASSIFIED)

        if plan.promotion_failed:
            result.conditions.append(SimulationCondition.PROMOTION_FAILURE)
            if mode is CollectionMode.MINOR:
                self.log.error("Major GC warning: old generation is full, survivors cannot be promoted!")
                self._flash(JVMPart.HEAP_OLD)

        reclaimed = len(plan.reclaimed)
        if reclaimed > 0:
            self.log.info(f"{mode.value} finished sweeping: {reclaimed} objects reclaimed")
        else:
            self.log.info(f"{mode.value} finished: nothing to reclaim")

        self.scheduler.call_later(self.config.gc_promote_delay,
                                  lambda: self._collection_apply(result, plan, trigger, start_time),
                                  label="gc:apply")

    def _collection_apply(self, result: TransitionResult, plan: CollectionPlan,
                          trigger: CollectionTrigger, start_time: float):
        reclaimed, promoted = self.collector.apply(self.state.heap, plan)
        self.state.counters.total_collected += reclaimed
        self._advance_collection(CollectionPhase.CLASSIFIED, CollectionPhase.APPLIED)

        if promoted > 0:
            self.log.action(f"{promoted} surviving objects promoted to the old generation (Old Gen)")
            self._flash(JVMPart.HEAP_OLD)

        metrics = GCMetrics(
            mode=plan.mode,
            trigger_reason=trigger,
            start_time=start_time,
            end_time=self.scheduler.now(),
            objects_scanned=plan.scanned,
            objects_collected=reclaimed,
            objects_promoted=promoted,
            objects_retained=len(plan.retained),
            promotion_failed=plan.promotion_failed
        )
        self.collection_history.append(metrics)
        self._total_promoted += promoted
        if plan.promotion_failed:
            self._promotion_failures += 1
        result.metrics = metrics

        # An automatic pass that changed nothing would only re-arm itself
        self._auto_gc_stalled = (trigger is CollectionTrigger.ALLOCATION_PRESSURE
                                 and reclaimed == 0 and promoted == 0)
        if self._auto_gc_stalled:
            self.log.error("Warning: automatic Minor GC could not free the young generation")

        self._advance_collection(CollectionPhase.APPLIED, CollectionPhase.IDLE)
        self._end_transition(result)

    # ------------------------------------------------------------------
    # Configuration surface
    # ------------------------------------------------------------------

    def set_max_heap_size(self, value: int) -> TransitionResult:
        """Resize the heap; existing objects are kept as they are"""
        if self.busy:
            return self._reject_busy("set_max_heap_size")

        size = quantize_heap_size(value)
        self.config.max_heap_size = size
        self.state.max_heap_size = size
        self._auto_gc_stalled = False

        limits = self.limits
        self.log.info(f"Max heap size set to {size} (young {limits.young} / old {limits.old})")
        self.events.emit_snapshot(self.snapshot())
        self._cancel_auto_gc()
        self._check_thresholds()
        return TransitionResult(accepted=True, completed=True)

    def set_batch_size(self, value: int) -> TransitionResult:
        if self.busy:
            return self._reject_busy("set_batch_size")
        self.config.batch_size = clamp_batch_size(value)
        return TransitionResult(accepted=True, completed=True)

    # ------------------------------------------------------------------
    # Transition plumbing
    # ------------------------------------------------------------------

    def _reject_busy(self, operation: str) -> TransitionResult:
        logger.debug("%s ignored: a transition is already running", operation)
        return TransitionResult(accepted=False, completed=True,
                                conditions=[SimulationCondition.BUSY])

    def _begin_transition(self) -> TransitionResult:
        if not self.state.lock.try_acquire():
            raise SimulationError("Transition started while another one is running",
                                  code="E_LOCK")
        self._cancel_auto_gc()
        return TransitionResult(accepted=True)

    def _end_transition(self, result: TransitionResult):
        self.state.lock.release()
        result.completed = True
        self.events.emit_snapshot(self.snapshot())
        self._check_thresholds()

    def _advance_collection(self, expected: CollectionPhase, new_phase: CollectionPhase):
        if self.collection_phase is not expected:
            raise SimulationError(
                f"Collection phase out of order: {self.collection_phase.name} -> {new_phase.name}",
                code="E_GC_PHASE"
            )
        self.collection_phase = new_phase

    def _check_thresholds(self):
        """Schedule an automatic Minor GC when the young generation is full"""
        if self.busy:
            return

        limits = self.limits
        young = self.state.heap.young_count

        if young >= limits.young and not self._auto_gc_stalled:
            self.log.action(f"Warning: Young Gen is running out of space ({young}/{limits.young})")
            self._cancel_auto_gc()
            self._pending_auto_gc = self.scheduler.call_later(
                self.config.auto_gc_settle_delay, self._auto_collect, label="gc:auto"
            )

        if self.state.is_over_capacity:
            self.log.error(f"Warning: heap overflow! current {self.state.total_count}, max {self.state.max_heap_size}")

    def _auto_collect(self):
        self._pending_auto_gc = None
        if self.busy:
            return
        self.log.action("Threshold reached, triggering Minor GC automatically")
        self.collect(CollectionMode.MINOR, CollectionTrigger.ALLOCATION_PRESSURE)

    def _cancel_auto_gc(self):
        if self._pending_auto_gc is not None:
            self._pending_auto_gc.cancel()
            self._pending_auto_gc = None

    def _flash(self, part: JVMPart):
        self.events.emit_component(
            ComponentEvent(ComponentEventKind.FLASH, part, self.config.flash_duration)
        )

    def _activate(self, part: JVMPart):
        self.selected = part
        self.events.emit_component(ComponentEvent(ComponentEventKind.ACTIVATED, part))

    def _highlight(self, part: JVMPart):
        self._flash(part)
        self._activate(part)
