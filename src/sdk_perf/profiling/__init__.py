"""
Profiling utilities for SDK package benchmarks.

This package contains small, focused helpers that measure the resource cost of a
single call (currently Python-heap memory via `tracemalloc`) and return plain
values that benchmark phases can store in a report record.
"""
