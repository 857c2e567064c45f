from __future__ import annotations

from typing import Callable

from .clock import monotonic_ms

DEFAULT_ITERATIONS = 300


def measure_time(
    body: Callable[[], object],
    iterations: int = DEFAULT_ITERATIONS,
    *,
    clock: Callable[[], float] = monotonic_ms,
) -> list[float]:
    """Call `body` `iterations` times and return the elapsed milliseconds of each call.

    Index `i` of the result is the timing of the i-th call. There is no warmup and no
    outlier filtering; exceptions from `body` propagate and abandon the remaining calls.
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    values = [0.0] * iterations
    for i in range(iterations):
        t0 = clock()
        body()
        values[i] = clock() - t0
    return values
