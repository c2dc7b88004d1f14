import pytest
import gc
import tracemalloc
from ferrocore import Iter


class TestMemoryEfficiency:
    """Test that memory scales with output size, not input size"""

    def test_memory_scales_with_output_not_input(self):
        """A small take from a large input stays small"""
        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        result = (
            Iter.from_iterable(range(100000))
            .map(lambda x: x * x)
            .filter(lambda x: x % 1000 == 0)
            .take(10)
            .collect()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline

        assert len(result) == 10, "Expected 10 results"
        assert memory_used < 5000000, f"Used too much memory: {memory_used} bytes"  # 5MB limit

    def test_no_intermediate_collection_storage(self):
        """Intermediate results are not stored between stages"""
        def memory_intensive_operation(x):
            return [x] * 1000  # Create large list per item

        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        result = (
            Iter.from_iterable(range(100))
            .map(memory_intensive_operation)
            .take(5)
            .collect()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline

        assert len(result) == 5, f"Expected 5 results, got {len(result)}"
        assert memory_used < 10000000, f"Used too much memory: {memory_used} bytes"  # 10MB limit

    def test_memory_efficiency_with_large_skip(self):
        """Skipped elements are dropped, not buffered"""
        large_skip = 50000

        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        result = (
            Iter.from_iterable(range(large_skip + 10))
            .map(lambda x: [x] * 10)
            .skip(large_skip)
            .take(5)
            .collect()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline

        assert result[0] == [large_skip] * 10, f"Unexpected first element: {result[0]}"
        assert memory_used < 5000000, f"Used too much memory: {memory_used} bytes"  # 5MB limit

    def test_full_drain_reductions_stay_flat(self):
        """count/sum/max over a large generator keep constant memory"""
        def generate_data():
            for i in range(100000):
                yield {"id": i, "payload": [i] * 100}

        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        largest = Iter.from_iterable(generate_data()).map(lambda item: item["id"]).max()

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline

        assert largest.unwrap() == 99999
        assert memory_used < 5000000, f"Used too much memory: {memory_used} bytes"  # 5MB limit

    def test_garbage_collection_of_processed_items(self):
        """Processed items can be garbage collected"""
        def create_large_object(x):
            return {"data": [x] * 10000, "value": x}

        gc.collect()
        initial_objects = len(gc.get_objects())

        result = (
            Iter.from_iterable(range(20))
            .map(create_large_object)
            .map(lambda obj: obj["value"])
            .take(5)
            .collect()
        )

        gc.collect()
        final_objects = len(gc.get_objects())

        assert result == [0, 1, 2, 3, 4], f"Unexpected result: {result}"
        object_growth = final_objects - initial_objects
        assert object_growth < 1000, f"Too many objects accumulated: {object_growth}"
