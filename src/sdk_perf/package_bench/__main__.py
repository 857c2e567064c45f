from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import attrs
import jsonschema

from . import workflow
from .context import BenchmarkContext, UnknownRepositoryError
from .model import PackageBenchmark
from .subjects import SUBJECTS, iter_subjects


def _abs_path(p: str) -> Path:
    return Path(p).expanduser().resolve()


def _package_dir(v: str) -> tuple[str, Path]:
    name, sep, path = v.partition("=")
    if not sep or not name or not path:
        raise argparse.ArgumentTypeError(f"Expected NAME=PATH, got {v!r}")
    return name, _abs_path(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdk_perf.package_bench",
        description="SDK package benchmark harness (import, client and operation costs).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List built-in benchmark subjects.")

    run = sub.add_parser("run", help="Run benchmarks and write a JSON report.")
    run.add_argument("--out", type=_abs_path, required=True, help="Output path for the JSON report.")
    run.add_argument("--subject", action="append", default=None, help="Subject name (repeatable; default: all).")
    run.add_argument(
        "--package-dir",
        type=_package_dir,
        action="append",
        default=[],
        help="NAME=PATH source tree used to measure the built wheel size of subject NAME (repeatable).",
    )
    run.add_argument("--no-size", action="store_true", help="Skip the package size phase.")

    summary = sub.add_parser("summary", help="Generate a Markdown summary from a report (no benchmark run).")
    summary.add_argument("--report", type=_abs_path, required=True)
    summary.add_argument("--out", type=_abs_path, required=True)

    metrics = sub.add_parser("upload-metrics", help="Publish a report's results to CloudWatch.")
    metrics.add_argument("--report", type=_abs_path, required=True)

    upload = sub.add_parser("upload-report", help="Store a report document in S3.")
    upload.add_argument("--report", type=_abs_path, required=True)

    return parser


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # botocore is chatty at DEBUG.
    logging.getLogger("botocore").setLevel(logging.WARNING)


def _with_package_dirs(subjects: list[PackageBenchmark], package_dirs: list[tuple[str, Path]]) -> list[PackageBenchmark]:
    dirs = dict(package_dirs)
    unknown = sorted(set(dirs) - {s.name for s in subjects})
    if unknown:
        raise KeyError(f"--package-dir given for unselected subject(s): {unknown}")
    return [attrs.evolve(s, package_dir=dirs[s.name]) if s.name in dirs else s for s in subjects]


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    _setup_logging(ns.verbose)

    if ns.cmd == "list":
        for name, subject in SUBJECTS.items():
            print(f"{name}\t{subject.module_name}\t{', '.join(subject.operations)}")
        return 0

    context = BenchmarkContext.from_env()
    try:
        if ns.cmd == "run":
            subjects = _with_package_dirs(iter_subjects(ns.subject), ns.package_dir)
            return workflow.run(subjects=subjects, out_path=ns.out, context=context, include_size=not ns.no_size)
        if ns.cmd == "summary":
            return workflow.summary_run(report_path=ns.report, out_path=ns.out)
        if ns.cmd == "upload-metrics":
            # Imported lazily: `run` must start with the SDK unimported.
            import boto3

            return workflow.upload_metrics_run(report_path=ns.report, context=context, client=boto3.client("cloudwatch"))
        if ns.cmd == "upload-report":
            import boto3

            return workflow.upload_report_run(report_path=ns.report, context=context, client=boto3.client("s3"))
    except (KeyError, FileNotFoundError, UnknownRepositoryError) as e:
        print(str(e), file=sys.stderr)
        return 2
    except json.JSONDecodeError as e:
        print(f"Report is not valid JSON: {e}", file=sys.stderr)
        return 2
    except jsonschema.ValidationError as e:
        print(f"Report failed schema validation: {e.message}", file=sys.stderr)
        return 2

    raise AssertionError(f"Unhandled cmd: {ns.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
