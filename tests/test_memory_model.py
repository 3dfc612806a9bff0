"""
Test suite for the JVMSim memory model.

Tests cover:
- Capacity model (young/old split)
- Heap state bookkeeping
- Call stack push/pop
- Allocation engine
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from jvmsim.memory import (
    generation_limits, Region, ManagedObject, HeapState, CallStack,
    SimulationState, AnimationLock, has_capacity, commit_allocation, commit_batch
)


class TestCapacityModel(unittest.TestCase):
    """Test the young/old generation split."""

    def test_limits_add_up_for_all_sizes(self):
        """Young + old always equals the heap size."""
        for size in range(3, 1001):
            limits = generation_limits(size)
            self.assertEqual(limits.young + limits.old, size)
            self.assertEqual(limits.young, size // 3)
            self.assertEqual(limits.total, size)

    def test_default_heap(self):
        limits = generation_limits(60)
        self.assertEqual((limits.young, limits.old), (20, 40))

    def test_uneven_heap(self):
        limits = generation_limits(500)
        self.assertEqual((limits.young, limits.old), (166, 334))


class TestHeapState(unittest.TestCase):
    """Test heap bookkeeping."""

    def setUp(self):
        self.heap = HeapState([
            ManagedObject(1, Region.EDEN),
            ManagedObject(2, Region.SURVIVOR_0),
            ManagedObject(3, Region.OLD),
            ManagedObject(4, Region.SURVIVOR_1),
        ])

    def test_generation_counts(self):
        self.assertEqual(len(self.heap), 4)
        self.assertEqual(self.heap.young_count, 3)
        self.assertEqual(self.heap.old_count, 1)

    def test_count_by_region(self):
        counts = self.heap.count_by_region()
        self.assertEqual(counts[Region.EDEN], 1)
        self.assertEqual(counts[Region.SURVIVOR_0], 1)
        self.assertEqual(counts[Region.SURVIVOR_1], 1)
        self.assertEqual(counts[Region.OLD], 1)

    def test_insertion_order_preserved(self):
        self.heap.append(ManagedObject(5))
        self.assertEqual([obj.id for obj in self.heap], [1, 2, 3, 4, 5])

    def test_replace(self):
        self.heap.replace([ManagedObject(3, Region.OLD)])
        self.assertEqual(len(self.heap), 1)
        self.assertEqual(self.heap.in_region(Region.OLD)[0].id, 3)

    def test_objects_is_a_copy(self):
        self.heap.objects.clear()
        self.assertEqual(len(self.heap), 4)

    def test_object_name(self):
        self.assertEqual(ManagedObject(7).name, "Obj_7")
        self.assertTrue(ManagedObject(7).is_young)


class TestCallStack(unittest.TestCase):
    """Test the VM stack."""

    def test_push_labels_follow_depth(self):
        stack = CallStack()
        first = stack.push()
        second = stack.push()

        self.assertEqual(first.label, "method_1()")
        self.assertEqual(second.label, "method_2()")
        self.assertEqual(stack.top, second)

    def test_frame_ids_are_unique(self):
        stack = CallStack()
        ids = [stack.push().id]
        stack.pop()
        ids.append(stack.push().id)
        ids.append(stack.push().id)
        self.assertEqual(len(set(ids)), 3)

    def test_pop_empty_stack(self):
        stack = CallStack()
        self.assertIsNone(stack.pop())
        self.assertTrue(stack.is_empty)

    def test_push_pop_round_trip(self):
        stack = CallStack()
        stack.push()
        before = stack.frames

        stack.push()
        stack.pop()

        self.assertEqual(stack.frames, before)


class TestAllocator(unittest.TestCase):
    """Test the allocation engine."""

    def setUp(self):
        self.state = SimulationState(max_heap_size=60)

    def test_single_allocation(self):
        obj = commit_allocation(self.state)

        self.assertEqual(obj.id, 1)
        self.assertEqual(obj.region, Region.EDEN)
        self.assertEqual(self.state.counters.total_allocated, 1)
        self.assertEqual(len(self.state.heap), 1)

    def test_ids_strictly_increase_across_batches(self):
        ids = [commit_allocation(self.state).id]
        ids += [obj.id for obj in commit_batch(self.state, 5)]
        ids.append(commit_allocation(self.state).id)

        self.assertEqual(ids, list(range(1, 8)))

    def test_batch_ignores_capacity(self):
        batch = commit_batch(self.state, 100)

        self.assertEqual(len(batch), 100)
        self.assertEqual(len(self.state.heap), 100)
        self.assertTrue(self.state.is_over_capacity)
        self.assertTrue(all(obj.region is Region.EDEN for obj in self.state.heap))

    def test_capacity_check(self):
        commit_batch(self.state, 59)
        self.assertTrue(has_capacity(self.state))
        commit_allocation(self.state)
        self.assertFalse(has_capacity(self.state))

    def test_ids_not_reused_after_removal(self):
        commit_batch(self.state, 3)
        self.state.heap.replace([])
        self.assertEqual(commit_allocation(self.state).id, 4)

    def test_invalid_batch_size(self):
        with self.assertRaises(ValueError):
            commit_batch(self.state, 0)


class TestAnimationLock(unittest.TestCase):

    def test_try_acquire_does_not_block(self):
        lock = AnimationLock()
        self.assertTrue(lock.try_acquire())
        self.assertFalse(lock.try_acquire())
        lock.release()
        self.assertFalse(lock.busy)


if __name__ == "__main__":
    unittest.main()
