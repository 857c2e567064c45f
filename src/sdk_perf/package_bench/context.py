from __future__ import annotations

import os
from typing import Literal, Mapping

import attrs

EventType = Literal["release", "pr", "staging-pr"]


class UnknownRepositoryError(ValueError):
    """The repository identifier has no entry in `REPOSITORIES`."""


@attrs.define(frozen=True, slots=True)
class RepositoryConfig:
    namespace: str
    bucket: str
    staging: bool = False


REPOSITORIES: dict[str, RepositoryConfig] = {
    "boto/boto3": RepositoryConfig(namespace="boto3-performance", bucket="boto3-benchmarks"),
    "boto/botocore": RepositoryConfig(namespace="botocore-performance", bucket="botocore-benchmarks"),
    "boto/boto3-staging": RepositoryConfig(
        namespace="boto3-staging-performance", bucket="boto3-staging-benchmarks", staging=True
    ),
    "smithy-lang/smithy-python": RepositoryConfig(
        namespace="smithy-python-performance", bucket="smithy-python-benchmarks"
    ),
}


def repository_config(repository: str | None) -> RepositoryConfig:
    if repository is None or repository not in REPOSITORIES:
        raise UnknownRepositoryError(f"Unknown repository: {repository!r}. Known: {sorted(REPOSITORIES)}")
    return REPOSITORIES[repository]


@attrs.define(frozen=True, slots=True)
class BenchmarkContext:
    """Run-wide settings supplied by the CI environment.

    Read once at the CLI edge and passed explicitly to the reporter and storage layers.
    """

    repository: str | None = None
    event: str | None = None
    ref: str | None = None
    execution_env: str = "unknown"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "BenchmarkContext":
        env = os.environ if environ is None else environ
        return BenchmarkContext(
            repository=env.get("GH_REPO") or None,
            event=env.get("GH_EVENT") or None,
            ref=env.get("GH_REF") or None,
            execution_env=env.get("EXECUTION_ENV") or "unknown",
        )

    @property
    def event_type(self) -> EventType:
        if self.event == "pull_request":
            cfg = REPOSITORIES.get(self.repository or "")
            return "staging-pr" if cfg is not None and cfg.staging else "pr"
        return "release"
