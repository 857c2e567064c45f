"""Deterministic test payloads for operation benchmarks."""

from __future__ import annotations

import random
from typing import Any


def random_number(rng: random.Random, upper: int) -> int:
    return int(rng.random() * upper)


def random_value(num: int = 0, seed: int = 0) -> Any:
    """Return a value whose type and content depend only on (num, seed)."""
    rng = random.Random(num + seed)
    kind = random_number(rng, 5)
    if kind == 0:
        return f"Some String value {num}"
    if kind == 1:
        return rng.random()
    if kind == 2:
        return random_number(rng, 100_000)
    if kind == 3:
        return list(range(random_number(rng, 100) + 1))
    return {"a": 1, "b": 2, "c": 3}


def sample_hash(n_keys: int = 5, seed: int = 0) -> dict[str, Any]:
    return {f"key{i}": random_value(i, seed) for i in range(n_keys)}
