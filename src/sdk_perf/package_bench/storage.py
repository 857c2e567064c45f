from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from .context import BenchmarkContext, repository_config

logger = logging.getLogger(__name__)


def benchmark_bucket(context: BenchmarkContext) -> str:
    return repository_config(context.repository).bucket


def benchmark_key(context: BenchmarkContext, *, now: datetime | None = None, run_id: str | None = None) -> str:
    """Return `<event-type>[/<ref>]/<YYYY-MM-DD>/benchmark_<uuid>.json`.

    The ref segment is only present for non-release events.
    """
    folder = context.event_type
    if folder != "release":
        folder += f"/{context.ref or ''}"
    day = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
    return f"{folder}/{day}/benchmark_{run_id or uuid.uuid4()}.json"


def upload_report(client: Any, report: dict[str, Any], *, context: BenchmarkContext, now: datetime | None = None) -> str:
    """Store the report document in the repository's bucket and return its key."""
    bucket = benchmark_bucket(context)
    key = benchmark_key(context, now=now)
    client.put_object(
        Bucket=bucket,
        Key=key,
        Body=json.dumps(report, sort_keys=True).encode("utf-8"),
        ContentType="application/json",
    )
    logger.info("Uploaded benchmark report to s3://%s/%s", bucket, key)
    return key
