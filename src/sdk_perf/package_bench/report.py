from __future__ import annotations

import json
import platform
import subprocess
import sys
import time
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .context import BenchmarkContext

REPORT_VERSION = "1.0"


def host_os(sys_platform: str | None = None) -> str:
    p = sys.platform if sys_platform is None else sys_platform
    if p == "darwin":
        return "macos"
    if p.startswith("linux") or p == "cygwin":
        return "linux"
    if p in {"win32", "msys"}:
        return "windows"
    return "other"


def git_commit_id(cwd: Path | None = None) -> str | None:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], cwd=cwd, stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        # Not a git checkout (or git missing); the field is optional.
        return None
    commit = out.decode().strip()
    return commit or None


def _runtime_engine_version() -> str:
    v = sys.implementation.version
    return f"{v.major}.{v.minor}.{v.micro}"


def new_report(context: BenchmarkContext, *, now: float | None = None, cwd: Path | None = None) -> dict[str, Any]:
    """Create the report document with run metadata and an empty `benchmark` section."""
    report: dict[str, Any] = {"version": REPORT_VERSION}
    commit = git_commit_id(cwd)
    if commit is not None:
        report["commit_id"] = commit
    report["runtime_name"] = sys.implementation.name
    report["runtime_engine_version"] = _runtime_engine_version()
    report["runtime_version"] = platform.python_version()
    report["cpu"] = platform.machine().lower() or "unknown"
    report["os"] = host_os()
    report["execution_env"] = context.execution_env
    report["timestamp"] = int(time.time() if now is None else now)
    report["benchmark"] = {}
    return report


def _default_report_schema_path() -> Path:
    return Path(__file__).resolve().parent / "schemas" / "report.schema.json"


def validate_report_schema(report: dict[str, Any], *, schema_path: Path | None = None) -> None:
    schema_path = _default_report_schema_path() if schema_path is None else schema_path
    schema = json.loads(schema_path.read_text())
    Draft202012Validator(schema).validate(report)


def load_report(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Report not found: {path}")
    report = json.loads(path.read_text())
    validate_report_schema(report)
    return report


def write_report(path: Path, report: dict[str, Any]) -> None:
    validate_report_schema(report)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n")
