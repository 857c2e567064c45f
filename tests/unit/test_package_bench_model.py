from __future__ import annotations

import os.path

import pytest

from sdk_perf.package_bench.model import OperationBenchmark, PackageBenchmark, resolve_factory


def test_resolve_factory_follows_attribute_path() -> None:
    assert resolve_factory("os:path.join") is os.path.join
    assert resolve_factory("collections:OrderedDict").__name__ == "OrderedDict"


@pytest.mark.parametrize("identifier", ["collections", ":OrderedDict", "collections:"])
def test_resolve_factory_rejects_malformed_identifiers(identifier: str) -> None:
    with pytest.raises(ValueError):
        resolve_factory(identifier)


def test_resolve_factory_rejects_non_callables() -> None:
    with pytest.raises(ValueError, match="not callable"):
        resolve_factory("os:sep")


def test_new_client_passes_args_and_kwargs() -> None:
    subject = PackageBenchmark(
        name="dict",
        module_name="collections",
        client_factory="collections:OrderedDict",
        client_args=([("a", 1)],),
        client_kwargs={"b": 2},
    )
    assert subject.new_client() == {"a": 1, "b": 2}


def test_new_client_without_factory_raises() -> None:
    with pytest.raises(ValueError):
        PackageBenchmark(name="x", module_name="json").new_client()


def test_operation_benchmark_defaults_to_300_iterations() -> None:
    op = OperationBenchmark(setup=lambda c: None, test=lambda c, r: None)
    assert op.iterations == 300


def test_to_dict() -> None:
    subject = PackageBenchmark(
        name="s",
        module_name="json",
        client_factory="json:JSONDecoder",
        operations={"decode": OperationBenchmark(setup=lambda c: "1", test=lambda c, r: c.decode(r), iterations=5)},
    )
    assert subject.to_dict() == {
        "name": "s",
        "module_name": "json",
        "client_factory": "json:JSONDecoder",
        "operations": {"decode": {"iterations": 5}},
        "package_dir": None,
    }
