"""Benchmark phases for one subject.

Phase order matters. Size, import and client phases run in isolated children and
must happen before the subject's package is imported in this process; the operation
phase imports it here and therefore runs last (after every subject's isolated
phases when several subjects are benchmarked together).
"""

from __future__ import annotations

import importlib
import logging
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Any

from ..profiling.memory import memory_report, supports_memory_profiling
from .clock import monotonic_ms
from .isolation import ERROR_KEY, IsolationError, run_isolated
from .model import PackageBenchmark
from .sampler import DEFAULT_ITERATIONS, measure_time

logger = logging.getLogger(__name__)

WARMUP_CALLS = 2


def _avg(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _merge_isolated(record: dict[str, Any], phase: str, body: Any, *, isolate: bool | None) -> bool:
    try:
        result = run_isolated(body, isolate=isolate)
    except IsolationError as e:
        logger.warning("%s phase failed: %s", phase, e)
        return False
    error = result.pop(ERROR_KEY, None)
    if error is not None:
        logger.warning("%s phase failed in isolated run: %s", phase, error)
        record[f"{phase}_error"] = error
    record.update(result)
    return error is None


def _wheel_version(wheel: Path) -> str:
    # {distribution}-{version}(-{build})?-{python}-{abi}-{platform}.whl
    parts = wheel.name.split("-")
    return parts[1] if len(parts) >= 5 else "unknown"


def benchmark_package_size(subject: PackageBenchmark, record: dict[str, Any]) -> None:
    """Build a wheel from the subject's source tree and record its size on disk.

    Built in a temporary directory so wheel artifacts never accumulate.
    """
    if subject.package_dir is None:
        return

    with tempfile.TemporaryDirectory(prefix="benchmark-package-size") as tmp:
        cmd = [sys.executable, "-m", "pip", "wheel", "--no-deps", "--quiet", "-w", tmp, str(subject.package_dir)]
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning("Package size phase failed for %s: %s", subject.name, e)
            return
        wheels = sorted(Path(tmp).glob("*.whl"))
        if not wheels:
            logger.warning("Package size phase produced no wheel for %s", subject.name)
            return
        record["package_size_kb"] = wheels[0].stat().st_size / 1024.0
        record["package_version"] = _wheel_version(wheels[0])


def benchmark_import(subject: PackageBenchmark, record: dict[str, Any], *, isolate: bool | None = None) -> None:
    """Time (and, on CPython, memory-profile) the first import of the subject's package.

    For meaningful numbers the package must not already be imported in this process.
    """
    module_name = subject.module_name
    if not module_name:
        return
    if module_name in sys.modules:
        logger.warning("%s is already imported; import timings will be understated", module_name)

    def _time_import(out: dict[str, Any]) -> None:
        t0 = monotonic_ms()
        importlib.import_module(module_name)
        out["import_time_ms"] = monotonic_ms() - t0

    def _profile_import(out: dict[str, Any]) -> None:
        if not supports_memory_profiling():
            return
        _, mem = memory_report(lambda: importlib.import_module(module_name))
        out["import_mem_retained_kb"] = mem.retained_kb
        out["import_mem_allocated_kb"] = mem.allocated_kb

    _merge_isolated(record, "import", _time_import, isolate=isolate)
    _merge_isolated(record, "import_mem", _profile_import, isolate=isolate)


def benchmark_client(subject: PackageBenchmark, record: dict[str, Any], *, isolate: bool | None = None) -> None:
    """Memory-profile building one client, in an isolated child with cold caches."""
    if not subject.module_name or not subject.client_factory:
        return

    def _profile_client(out: dict[str, Any]) -> None:
        importlib.import_module(subject.module_name or "")
        factory = subject.resolve_client_factory()
        if not supports_memory_profiling():
            return
        _, mem = memory_report(lambda: subject.new_client(factory))
        out["client_mem_retained_kb"] = mem.retained_kb
        out["client_mem_allocated_kb"] = mem.allocated_kb

    _merge_isolated(record, "client", _profile_client, isolate=isolate)


def benchmark_operations(
    subject: PackageBenchmark,
    record: dict[str, Any],
    *,
    client_init_iterations: int = DEFAULT_ITERATIONS,
) -> None:
    """Time client construction and every operation benchmark in this process.

    Imports the subject's package here, so it MUST run after all isolated phases.
    A failing operation is logged and skipped; the remaining ones still run. If no
    client can be built the failure is recorded as `client_init_error` instead.
    """
    if not subject.module_name or not subject.client_factory or not subject.operations:
        return

    try:
        importlib.import_module(subject.module_name)
        factory = subject.resolve_client_factory()
        values = measure_time(lambda: subject.new_client(factory), client_init_iterations)
    except Exception as e:
        # No client, so none of the operations can run.
        logger.warning("Client init benchmark for %s failed: %s: %s", subject.name, type(e).__name__, e)
        record["client_init_error"] = f"{type(e).__name__}: {e}"
        return

    record["client_init_ms"] = values
    logger.info("%s client init avg: %.2f ms", subject.name, _avg(values))

    for test_name, test_def in subject.operations.items():
        try:
            client = subject.new_client(factory)
            req = test_def.setup(client)

            for _ in range(WARMUP_CALLS):
                test_def.test(client, req)

            mem_allocated = 0.0
            if supports_memory_profiling():
                _, mem = memory_report(lambda: test_def.test(client, req))
                mem_allocated = mem.allocated_kb
                record[f"{test_name}_allocated_kb"] = mem_allocated

            values = measure_time(lambda: test_def.test(client, req), test_def.iterations)
        except Exception as e:
            logger.warning("Operation benchmark %s failed: %s: %s", test_name, type(e).__name__, e)
            continue

        record[f"{test_name}_ms"] = values
        logger.info("%s avg: %.2f ms  mem_allocated: %.2f kb", test_name, _avg(values), mem_allocated)


def run_suite(subject: PackageBenchmark, *, include_size: bool = True, isolate: bool | None = None) -> dict[str, Any]:
    """Run the isolation-sensitive phases (size, import, client) and return the record.

    `benchmark_operations` is left to the caller so it can run after every subject.
    """
    record: dict[str, Any] = {}
    if include_size:
        benchmark_package_size(subject, record)
    benchmark_import(subject, record, isolate=isolate)
    benchmark_client(subject, record, isolate=isolate)
    return record
