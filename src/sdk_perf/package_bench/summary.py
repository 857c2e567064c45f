from __future__ import annotations

from pathlib import Path
from typing import Any

from mdutils.mdutils import MdUtils  # type: ignore[import-untyped]

from .metrics import Scalar, Series, classify_metric_value, metric_unit


def _format_float(v: float | None) -> str:
    if v is None:
        return "NA"
    return f"{v:.3f}"


def summary_rows(record: dict[str, Any]) -> list[list[str]]:
    """Return [metric, unit, samples, average] rows for the numeric fields of a record."""
    rows: list[list[str]] = []
    for name in sorted(record):
        value = classify_metric_value(record[name])
        if isinstance(value, Scalar):
            rows.append([name, metric_unit(name), "1", _format_float(value.value)])
        elif isinstance(value, Series):
            avg = sum(value.values) / len(value.values) if value.values else None
            rows.append([name, metric_unit(name), str(len(value.values)), _format_float(avg)])
    return rows


def write_summary(report: dict[str, Any], out_path: Path) -> Path:
    """Render a Markdown summary of a report document; returns the written path."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    stem = out_path.with_suffix("") if out_path.suffix == ".md" else out_path

    md = MdUtils(file_name=str(stem), title="SDK Package Benchmark Summary")
    md.new_list(
        [
            f"Commit: `{report.get('commit_id', 'unknown')}`",
            f"Runtime: `{report.get('runtime_name', '')} {report.get('runtime_version', '')}`",
            f"Platform: `{report.get('os', '')}` / `{report.get('cpu', '')}`",
            f"Execution env: `{report.get('execution_env', '')}`",
            f"Timestamp: `{report.get('timestamp', '')}`",
        ]
    )

    benchmark = report.get("benchmark", {})
    if not benchmark:
        md.new_paragraph("No benchmark subjects were recorded.")
    for target in sorted(benchmark):
        md.new_header(level=1, title=target)
        rows = summary_rows(benchmark[target])
        if not rows:
            md.new_paragraph("No numeric results.")
            continue
        header = ["metric", "unit", "samples", "avg"]
        cells = header + [c for row in rows for c in row]
        md.new_table(columns=len(header), rows=len(rows) + 1, text=cells, text_align="left")

    md.create_md_file()
    return Path(f"{stem}.md")
