from __future__ import annotations

from pathlib import Path

from sdk_perf.package_bench.summary import summary_rows, write_summary


def _report() -> dict:
    return {
        "version": "1.0",
        "commit_id": "deadbeef",
        "runtime_name": "cpython",
        "runtime_engine_version": "3.12.1",
        "runtime_version": "3.12.1",
        "cpu": "x86_64",
        "os": "linux",
        "execution_env": "ci",
        "timestamp": 1700000000,
        "benchmark": {
            "boto3-s3": {
                "import_time_ms": 120.0,
                "client_init_ms": [1.0, 2.0, 3.0],
                "package_version": "1.34.0",
            },
            "empty": {"import_error": "ModuleNotFoundError: x"},
        },
    }


def test_summary_rows_skip_non_numeric_fields() -> None:
    rows = summary_rows(_report()["benchmark"]["boto3-s3"])
    assert rows == [
        ["client_init_ms", "Milliseconds", "3", "2.000"],
        ["import_time_ms", "Milliseconds", "1", "120.000"],
    ]


def test_write_summary_renders_markdown(tmp_path: Path) -> None:
    out = write_summary(_report(), tmp_path / "summary.md")
    assert out == tmp_path / "summary.md"
    text = out.read_text()
    assert "SDK Package Benchmark Summary" in text
    assert "deadbeef" in text
    assert "boto3-s3" in text
    assert "client_init_ms" in text
    assert "No numeric results." in text


def test_write_summary_without_subjects(tmp_path: Path) -> None:
    report = _report()
    report["benchmark"] = {}
    out = write_summary(report, tmp_path / "out" / "summary")
    assert out == tmp_path / "out" / "summary.md"
    assert "No benchmark subjects were recorded." in out.read_text()
