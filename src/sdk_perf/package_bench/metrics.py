"""CloudWatch metric shaping and dispatch.

Report-record fields are pushed as-is: a scalar becomes one datum with `Value`, a
sample list becomes one or more data with `Values` (raw samples, no client-side
statistics). The unit is inferred from the field name suffix.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Iterable, Mapping, Sequence, Union

import attrs

from .context import BenchmarkContext, repository_config

logger = logging.getLogger(__name__)

# PutMetricData accepts at most 150 entries in `Values`.
MAX_VALUES_PER_CALL = 150

UNITS: dict[str, str] = {
    "kb": "Kilobytes",
    "b": "Bytes",
    "s": "Seconds",
    "ms": "Milliseconds",
}


@attrs.define(frozen=True, slots=True)
class Scalar:
    value: float


@attrs.define(frozen=True, slots=True)
class Series:
    values: tuple[float, ...]

    def chunks(self, size: int = MAX_VALUES_PER_CALL) -> Iterable[list[float]]:
        for i in range(0, len(self.values), size):
            yield list(self.values[i : i + size])


MetricValue = Union[Scalar, Series]
Dimensions = Union[Mapping[str, str], Sequence[tuple[str, str]]]


def _is_number(v: Any) -> bool:
    return isinstance(v, Real) and not isinstance(v, bool)


def classify_metric_value(value: Any) -> MetricValue | None:
    """Return Scalar/Series for reportable values, None for anything else."""
    if _is_number(value):
        return Scalar(float(value))
    if isinstance(value, (list, tuple)) and all(_is_number(v) for v in value):
        return Series(tuple(float(v) for v in value))
    return None


def metric_unit(metric_name: str) -> str:
    return UNITS.get(metric_name.split("_")[-1], "None")


def metric_namespace(repository: str | None) -> str:
    return repository_config(repository).namespace


def _dimensions(dims: Dimensions) -> list[dict[str, str]]:
    pairs = dims.items() if isinstance(dims, Mapping) else dims
    return [{"Name": str(k), "Value": str(v)} for k, v in pairs]


def put_metric(
    client: Any,
    *,
    repository: str | None,
    dims: Dimensions,
    timestamp: datetime,
    metric_name: str,
    metric_value: Any,
) -> int:
    """Send one report field to CloudWatch and return the number of PutMetricData calls.

    Values that are neither a number nor a list of numbers are ignored (0 calls).
    An unknown repository raises `UnknownRepositoryError` before anything is sent.
    """
    namespace = metric_namespace(repository)
    value = classify_metric_value(metric_value)
    if value is None:
        return 0

    datum: dict[str, Any] = {
        "MetricName": metric_name,
        "Timestamp": timestamp,
        "Unit": metric_unit(metric_name),
        "Dimensions": _dimensions(dims),
    }

    if isinstance(value, Scalar):
        client.put_metric_data(Namespace=namespace, MetricData=[{**datum, "Value": value.value}])
        return 1

    calls = 0
    for chunk in value.chunks():
        client.put_metric_data(Namespace=namespace, MetricData=[{**datum, "Values": chunk}])
        calls += 1
    return calls


def put_report_metrics(client: Any, report: dict[str, Any], *, context: BenchmarkContext) -> int:
    """Push every field of every subject record in `report["benchmark"]`."""
    timestamp = datetime.fromtimestamp(int(report["timestamp"]), tz=timezone.utc)
    total = 0
    for target, record in report.get("benchmark", {}).items():
        dims = [
            ("Event", context.event_type),
            ("Target", target),
            ("RuntimeName", str(report.get("runtime_name", "unknown"))),
            ("RuntimeVersion", str(report.get("runtime_version", "unknown"))),
        ]
        for metric_name, metric_value in record.items():
            total += put_metric(
                client,
                repository=context.repository,
                dims=dims,
                timestamp=timestamp,
                metric_name=metric_name,
                metric_value=metric_value,
            )
        logger.info("Published metrics for %s", target)
    return total
