from __future__ import annotations

import pytest

from sdk_perf.package_bench.context import (
    REPOSITORIES,
    BenchmarkContext,
    UnknownRepositoryError,
    repository_config,
)


def test_from_env_reads_ci_variables() -> None:
    ctx = BenchmarkContext.from_env(
        {"GH_REPO": "boto/boto3", "GH_EVENT": "push", "GH_REF": "main", "EXECUTION_ENV": "ci-linux"}
    )
    assert ctx == BenchmarkContext(repository="boto/boto3", event="push", ref="main", execution_env="ci-linux")


def test_from_env_defaults() -> None:
    ctx = BenchmarkContext.from_env({})
    assert ctx.repository is None
    assert ctx.execution_env == "unknown"
    assert ctx.event_type == "release"


@pytest.mark.parametrize(
    ("repository", "event", "expected"),
    [
        ("boto/boto3", "pull_request", "pr"),
        ("boto/boto3-staging", "pull_request", "staging-pr"),
        ("boto/boto3-staging", "push", "release"),
        ("boto/boto3", "release", "release"),
        (None, "pull_request", "pr"),
    ],
)
def test_event_type(repository: str | None, event: str, expected: str) -> None:
    assert BenchmarkContext(repository=repository, event=event).event_type == expected


def test_repository_config_table() -> None:
    assert repository_config("smithy-lang/smithy-python").bucket == "smithy-python-benchmarks"
    assert all(cfg.namespace.endswith("-performance") for cfg in REPOSITORIES.values())
    with pytest.raises(UnknownRepositoryError):
        repository_config("aws/unknown")
