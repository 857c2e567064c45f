"""SDK package benchmark harness (Python orchestrator layer).

This package times package import cost, client construction cost and per-operation
call latency/memory for SDK packages, assembles a JSON report record per run, and
pushes the results to CloudWatch metrics and/or S3 storage.
"""

from __future__ import annotations
