from __future__ import annotations

import tracemalloc

import pytest

from sdk_perf.profiling.memory import MemoryReport, memory_report, supports_memory_profiling

requires_tracemalloc = pytest.mark.skipif(not supports_memory_profiling(), reason="requires CPython tracemalloc")


def test_memory_report_kb_properties() -> None:
    m = MemoryReport(allocated_bytes=2048, retained_bytes=512)
    assert m.allocated_kb == 2.0
    assert m.retained_kb == 0.5


@requires_tracemalloc
def test_retained_memory_includes_returned_object() -> None:
    result, mem = memory_report(lambda: [object() for _ in range(10_000)])
    assert len(result) == 10_000
    assert mem.retained_bytes > 100_000
    assert mem.allocated_bytes >= mem.retained_bytes


@requires_tracemalloc
def test_temporary_allocations_are_allocated_not_retained() -> None:
    def churn() -> int:
        data = [str(i) * 10 for i in range(10_000)]
        return len(data)

    result, mem = memory_report(churn)
    assert result == 10_000
    assert mem.allocated_bytes > 100_000
    assert mem.retained_bytes < mem.allocated_bytes // 10


@requires_tracemalloc
def test_existing_tracing_session_is_left_running() -> None:
    tracemalloc.start()
    try:
        memory_report(lambda: None)
        assert tracemalloc.is_tracing()
    finally:
        tracemalloc.stop()
    memory_report(lambda: None)
    assert not tracemalloc.is_tracing()


@requires_tracemalloc
def test_exceptions_propagate_and_stop_tracing() -> None:
    def boom() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        memory_report(boom)
    assert not tracemalloc.is_tracing()


@requires_tracemalloc
def test_existing_tracing_session_has_its_peak_reset() -> None:
    tracemalloc.start()
    try:
        big = bytearray(1_000_000)
        del big
        _, caller_peak = tracemalloc.get_traced_memory()
        assert caller_peak >= 1_000_000

        _, mem = memory_report(lambda: None)
        current, peak = tracemalloc.get_traced_memory()
        assert tracemalloc.is_tracing()
        assert mem.allocated_bytes < 1_000_000
        assert peak < caller_peak
        assert peak >= current
    finally:
        tracemalloc.stop()
