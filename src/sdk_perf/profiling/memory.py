"""
Python-heap memory measurement for a single call.

Uses `tracemalloc`, so only allocations made through Python's allocator are seen;
memory allocated by C extensions through the system allocator is invisible. That is
sufficient for comparing pure-Python SDK code across runs, which is what the
benchmark phases need.
"""

from __future__ import annotations

import gc
import platform
import tracemalloc
from typing import Callable, TypeVar

import attrs

T = TypeVar("T")


@attrs.define(frozen=True, slots=True)
class MemoryReport:
    allocated_bytes: int
    retained_bytes: int

    @property
    def allocated_kb(self) -> float:
        return self.allocated_bytes / 1024.0

    @property
    def retained_kb(self) -> float:
        return self.retained_bytes / 1024.0


def supports_memory_profiling() -> bool:
    """Return True when the interpreter provides usable allocation tracing."""
    return platform.python_implementation() == "CPython"


def memory_report(fn: Callable[[], T]) -> tuple[T, MemoryReport]:
    """Call `fn` under tracemalloc and return (result, MemoryReport).

    - allocated_bytes: high-water mark of heap growth while `fn` ran
    - retained_bytes: heap growth still live after `fn` returned and a full GC,
      including the returned object itself

    A tracing session the caller already started keeps running, but its peak is
    reset to the current size: tracemalloc has a single peak counter and the
    measurement needs it.
    """
    was_tracing = tracemalloc.is_tracing()
    if not was_tracing:
        tracemalloc.start()
    try:
        gc.collect()
        tracemalloc.reset_peak()
        baseline, _ = tracemalloc.get_traced_memory()
        result = fn()
        gc.collect()
        current, peak = tracemalloc.get_traced_memory()
    finally:
        if not was_tracing:
            tracemalloc.stop()

    return result, MemoryReport(allocated_bytes=max(peak - baseline, 0), retained_bytes=max(current - baseline, 0))
