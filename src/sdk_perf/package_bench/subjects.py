"""Built-in benchmark subjects for the boto3 SDK.

Clients are built with dummy credentials and a fixed region so construction never
looks up a credential chain. Operation benchmarks install canned responses with
`stub_responses`, so each call still validates and serializes its request but
returns before anything is signed or sent.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

from .model import OperationBenchmark, PackageBenchmark
from .testdata import sample_hash

STUB_CLIENT_KWARGS: dict[str, Any] = {
    "region_name": "us-east-1",
    "aws_access_key_id": "stub-access-key",
    "aws_secret_access_key": "stub-secret-key",
}


def stub_responses(client: Any, responses: Mapping[str, dict[str, Any]]) -> None:
    """Short-circuit operations of `client` with canned parsed responses.

    `responses` maps operation names (e.g. "GetObject") to the parsed response dict.
    Calling an operation without an entry raises, so a benchmark can never reach
    the network.
    """
    # Deferred: the SDK must not be imported before the isolated import phase runs.
    from botocore.awsrequest import AWSResponse

    canned = {
        name: {"ResponseMetadata": {"HTTPStatusCode": 200, "HTTPHeaders": {}, "RetryAttempts": 0}, **parsed}
        for name, parsed in responses.items()
    }

    def _respond(model: Any, **kwargs: Any) -> tuple[Any, dict[str, Any]]:
        if model.name not in canned:
            raise RuntimeError(f"No stubbed response for operation {model.name}")
        return AWSResponse(None, 200, {}, None), copy.deepcopy(canned[model.name])

    client.meta.events.register("before-call.*.*", _respond)


def to_attribute_value(value: Any) -> dict[str, Any]:
    """Convert a plain Python value into a DynamoDB low-level attribute value."""
    if isinstance(value, bool):
        return {"BOOL": value}
    if isinstance(value, (int, float)):
        return {"N": str(value)}
    if isinstance(value, str):
        return {"S": value}
    if isinstance(value, (list, tuple)):
        return {"L": [to_attribute_value(v) for v in value]}
    if isinstance(value, dict):
        return {"M": {str(k): to_attribute_value(v) for k, v in value.items()}}
    if value is None:
        return {"NULL": True}
    raise TypeError(f"Unsupported attribute value type: {type(value).__name__}")


def _attribute_map(item: dict[str, Any]) -> dict[str, Any]:
    return {k: to_attribute_value(v) for k, v in item.items()}


# --- S3 ---------------------------------------------------------------------


def _s3_get_object_setup(client: Any) -> dict[str, Any]:
    stub_responses(client, {"GetObject": {"ContentLength": 11, "ContentType": "text/plain", "ETag": '"stub"'}})
    return {"Bucket": "benchmark-bucket", "Key": "small/object.txt"}


def _s3_put_object_setup(client: Any) -> dict[str, Any]:
    stub_responses(client, {"PutObject": {"ETag": '"stub"'}})
    return {"Bucket": "benchmark-bucket", "Key": "small/object.txt", "Body": b"hello world"}


def _s3_list_objects_setup(client: Any) -> dict[str, Any]:
    contents = [{"Key": f"prefix/object-{i}", "Size": i, "ETag": f'"etag-{i}"'} for i in range(100)]
    stub_responses(client, {"ListObjectsV2": {"Contents": contents, "KeyCount": len(contents), "IsTruncated": False}})
    return {"Bucket": "benchmark-bucket", "Prefix": "prefix/"}


S3_OPERATIONS: dict[str, OperationBenchmark] = {
    "s3_get_object_small": OperationBenchmark(
        setup=_s3_get_object_setup,
        test=lambda client, req: client.get_object(**req),
    ),
    "s3_put_object_small": OperationBenchmark(
        setup=_s3_put_object_setup,
        test=lambda client, req: client.put_object(**req),
    ),
    "s3_list_objects_v2_100": OperationBenchmark(
        setup=_s3_list_objects_setup,
        test=lambda client, req: client.list_objects_v2(**req),
    ),
}


# --- DynamoDB ---------------------------------------------------------------


def _dynamodb_get_item_setup(client: Any) -> dict[str, Any]:
    stub_responses(client, {"GetItem": {"Item": _attribute_map(sample_hash(20))}})
    return {"TableName": "benchmark-table", "Key": {"id": {"S": "item-1"}}}


def _dynamodb_put_item_setup(client: Any) -> dict[str, Any]:
    stub_responses(client, {"PutItem": {}})
    item = {"id": "item-1", **sample_hash(20, seed=7)}
    return {"TableName": "benchmark-table", "Item": _attribute_map(item)}


DYNAMODB_OPERATIONS: dict[str, OperationBenchmark] = {
    "dynamodb_get_item_20_attrs": OperationBenchmark(
        setup=_dynamodb_get_item_setup,
        test=lambda client, req: client.get_item(**req),
    ),
    "dynamodb_put_item_20_attrs": OperationBenchmark(
        setup=_dynamodb_put_item_setup,
        test=lambda client, req: client.put_item(**req),
    ),
}


SUBJECTS: dict[str, PackageBenchmark] = {
    "boto3-s3": PackageBenchmark(
        name="boto3-s3",
        module_name="boto3",
        client_factory="boto3:client",
        client_args=("s3",),
        client_kwargs=STUB_CLIENT_KWARGS,
        operations=S3_OPERATIONS,
    ),
    "boto3-dynamodb": PackageBenchmark(
        name="boto3-dynamodb",
        module_name="boto3",
        client_factory="boto3:client",
        client_args=("dynamodb",),
        client_kwargs=STUB_CLIENT_KWARGS,
        operations=DYNAMODB_OPERATIONS,
    ),
}


def iter_subjects(names: list[str] | None) -> list[PackageBenchmark]:
    if not names:
        return list(SUBJECTS.values())
    unknown = [n for n in names if n not in SUBJECTS]
    if unknown:
        raise KeyError(f"Unknown subject(s) {unknown}. Known: {sorted(SUBJECTS)}")
    return [SUBJECTS[n] for n in names]
