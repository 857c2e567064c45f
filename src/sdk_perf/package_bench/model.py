from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Callable, Mapping

import attrs

from .sampler import DEFAULT_ITERATIONS


def resolve_factory(identifier: str) -> Callable[..., Any]:
    """Resolve a `"package.module:attr.path"` identifier to the callable it names."""
    module_name, sep, attr_path = identifier.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid client factory identifier: {identifier!r} (expected 'module:attr')")
    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    if not callable(obj):
        raise ValueError(f"Client factory {identifier!r} is not callable")
    return obj


@attrs.define(frozen=True, slots=True)
class OperationBenchmark:
    """One named operation benchmark.

    - setup(client) runs once per benchmark (may install stubs) and returns the request
      that every timed call reuses, so building arguments is not measured
    - test(client, request) is the measured call
    """

    setup: Callable[[Any], Any]
    test: Callable[[Any, Any], Any]
    iterations: int = DEFAULT_ITERATIONS


@attrs.define(frozen=True, slots=True)
class PackageBenchmark:
    """A benchmark subject: one SDK package and how to build a client for it."""

    name: str
    module_name: str | None
    client_factory: str | None = None
    client_args: tuple[Any, ...] = ()
    client_kwargs: Mapping[str, Any] = attrs.field(factory=dict)
    operations: Mapping[str, OperationBenchmark] = attrs.field(factory=dict)
    package_dir: Path | None = None

    def resolve_client_factory(self) -> Callable[..., Any]:
        if self.client_factory is None:
            raise ValueError(f"Subject {self.name!r} has no client factory")
        return resolve_factory(self.client_factory)

    def new_client(self, factory: Callable[..., Any] | None = None) -> Any:
        factory = self.resolve_client_factory() if factory is None else factory
        return factory(*self.client_args, **dict(self.client_kwargs))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "module_name": self.module_name,
            "client_factory": self.client_factory,
            "operations": {k: {"iterations": v.iterations} for k, v in self.operations.items()},
            "package_dir": None if self.package_dir is None else str(self.package_dir),
        }
