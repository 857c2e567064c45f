from __future__ import annotations

from sdk_perf.package_bench.testdata import random_value, sample_hash


def test_random_value_is_deterministic() -> None:
    assert [random_value(i, 3) for i in range(20)] == [random_value(i, 3) for i in range(20)]


def test_random_value_covers_several_types() -> None:
    kinds = {type(random_value(i)) for i in range(200)}
    assert {str, float, int, list, dict} <= kinds


def test_sample_hash_keys_and_seed() -> None:
    h = sample_hash(5)
    assert list(h) == ["key0", "key1", "key2", "key3", "key4"]
    assert sample_hash(5) == h
    assert sample_hash(50, seed=1) != sample_hash(50, seed=2)
