from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any

import pytest

from sdk_perf.package_bench.context import BenchmarkContext, UnknownRepositoryError
from sdk_perf.package_bench.storage import benchmark_bucket, benchmark_key, upload_report

NOW = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)


class FakeS3:
    def __init__(self) -> None:
        self.objects: list[dict[str, Any]] = []

    def put_object(self, **kwargs: Any) -> dict[str, Any]:
        self.objects.append(kwargs)
        return {"ETag": '"x"'}


def test_release_key_has_no_ref_segment() -> None:
    ctx = BenchmarkContext(repository="boto/boto3", event="push", ref="main")
    assert benchmark_key(ctx, now=NOW, run_id="abc") == "release/2026-03-04/benchmark_abc.json"


def test_pr_key_includes_ref() -> None:
    ctx = BenchmarkContext(repository="boto/boto3", event="pull_request", ref="refs/pull/7/merge")
    assert benchmark_key(ctx, now=NOW, run_id="abc") == "pr/refs/pull/7/merge/2026-03-04/benchmark_abc.json"


def test_staging_pr_key() -> None:
    ctx = BenchmarkContext(repository="boto/boto3-staging", event="pull_request", ref="42")
    assert benchmark_key(ctx, now=NOW, run_id="abc").startswith("staging-pr/42/")


def test_key_uses_random_uuid_by_default() -> None:
    key = benchmark_key(BenchmarkContext(), now=NOW)
    assert re.fullmatch(r"release/2026-03-04/benchmark_[0-9a-f-]{36}\.json", key)


def test_bucket_requires_known_repository() -> None:
    assert benchmark_bucket(BenchmarkContext(repository="boto/botocore")) == "botocore-benchmarks"
    with pytest.raises(UnknownRepositoryError):
        benchmark_bucket(BenchmarkContext(repository=None))


def test_upload_report_puts_json_document() -> None:
    s3 = FakeS3()
    ctx = BenchmarkContext(repository="boto/boto3", event="push")
    key = upload_report(s3, {"version": "1.0", "benchmark": {}}, context=ctx, now=NOW)
    (obj,) = s3.objects
    assert obj["Bucket"] == "boto3-benchmarks"
    assert obj["Key"] == key
    assert obj["ContentType"] == "application/json"
    assert json.loads(obj["Body"]) == {"version": "1.0", "benchmark": {}}
