from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .context import BenchmarkContext
from .metrics import put_report_metrics
from .model import PackageBenchmark
from .report import load_report, new_report, write_report
from .storage import upload_report
from .suite import benchmark_operations, run_suite
from .summary import write_summary

logger = logging.getLogger(__name__)


def run_benchmarks(
    subjects: list[PackageBenchmark],
    *,
    context: BenchmarkContext,
    include_size: bool = True,
    isolate: bool | None = None,
) -> dict[str, Any]:
    """Benchmark `subjects` and return the report document.

    Every subject's isolated phases run before any operation phase, because the
    operation phase imports packages into this process.
    """
    report = new_report(context)
    records: dict[str, dict[str, Any]] = {}

    for subject in subjects:
        logger.info("Benchmarking %s (isolated phases)", subject.name)
        records[subject.name] = run_suite(subject, include_size=include_size, isolate=isolate)

    for subject in subjects:
        logger.info("Benchmarking %s (operations)", subject.name)
        benchmark_operations(subject, records[subject.name])

    report["benchmark"] = records
    return report


def run(
    *,
    subjects: list[PackageBenchmark],
    out_path: Path,
    context: BenchmarkContext,
    include_size: bool = True,
) -> int:
    report = run_benchmarks(subjects, context=context, include_size=include_size)
    write_report(out_path, report)
    logger.info("Wrote %s", out_path)
    return 0


def summary_run(*, report_path: Path, out_path: Path) -> int:
    written = write_summary(load_report(report_path), out_path)
    logger.info("Wrote %s", written)
    return 0


def upload_metrics_run(*, report_path: Path, context: BenchmarkContext, client: Any) -> int:
    calls = put_report_metrics(client, load_report(report_path), context=context)
    logger.info("Sent %d PutMetricData call(s)", calls)
    return 0


def upload_report_run(*, report_path: Path, context: BenchmarkContext, client: Any) -> int:
    upload_report(client, load_report(report_path), context=context)
    return 0
