"""Time source used for every elapsed-time measurement.

`monotonic_ms` is built on `time.perf_counter_ns`, which is monotonic and unaffected
by wall-clock adjustments. On a platform without a monotonic counter the wall clock
is used instead; in that case readings may jump backwards and `IS_MONOTONIC` is
False, so callers can record that their samples are less trustworthy.
"""

from __future__ import annotations

import time
from typing import Callable

# Always present on CPython 3.7+; the fallback only matters on interpreters that omit it.
_perf_counter_ns: Callable[[], int] | None = getattr(time, "perf_counter_ns", None)

IS_MONOTONIC: bool = _perf_counter_ns is not None

_source: Callable[[], int] = _perf_counter_ns if _perf_counter_ns is not None else time.time_ns


def monotonic_ms() -> float:
    """Return the current reading of the time source in milliseconds."""
    return _source() / 1e6
