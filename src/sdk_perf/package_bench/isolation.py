"""Run a measurement body in a throwaway child process.

Importing a package or building a client mutates process-wide state (module cache and
allocator arenas). Running such work in a forked child keeps the
parent clean so that later measurements stay comparable. The child reports back
through a pipe carrying a single UTF-8 JSON object.

Where `os.fork` does not exist (e.g. Windows) the body runs in the calling process
instead. The returned map has the same shape either way; only isolation is lost.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Callable

logger = logging.getLogger(__name__)

IsolatedBody = Callable[[dict[str, Any]], None]

# Result key carrying a body exception; bodies must not write it themselves.
ERROR_KEY = "__error__"


class IsolationError(RuntimeError):
    """The isolated run itself failed (fork, channel or payload), not the body."""


def supports_fork() -> bool:
    return hasattr(os, "fork")


def _run_body(body: IsolatedBody) -> dict[str, Any]:
    out: dict[str, Any] = {}
    try:
        body(out)
    except Exception as e:
        logger.warning("Isolated body failed: %s: %s", type(e).__name__, e)
        out[ERROR_KEY] = f"{type(e).__name__}: {e}"
    return out


def _decode_payload(data: bytes) -> dict[str, Any]:
    try:
        result = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise IsolationError(f"Malformed result from isolated run: {e}") from e
    if not isinstance(result, dict):
        raise IsolationError(f"Isolated run returned {type(result).__name__}, expected a JSON object")
    return result


def _run_in_process(body: IsolatedBody) -> dict[str, Any]:
    out = _run_body(body)
    try:
        data = json.dumps(out).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise IsolationError(f"Isolated result is not JSON-serializable: {e}") from e
    return _decode_payload(data)


def _run_forked(body: IsolatedBody) -> dict[str, Any]:
    # Unflushed parent buffers would otherwise be written twice.
    sys.stdout.flush()
    sys.stderr.flush()

    rd, wr = os.pipe()
    try:
        pid = os.fork()
    except OSError as e:
        os.close(rd)
        os.close(wr)
        raise IsolationError(f"Failed to fork isolated process: {e}") from e

    if pid == 0:
        code = 1
        try:
            os.close(rd)
            payload = json.dumps(_run_body(body)).encode("utf-8")
            with os.fdopen(wr, "wb") as f:
                f.write(payload)
            code = 0
        except BaseException:
            logger.exception("Isolated child failed to report its result")
        finally:
            os._exit(code)

    os.close(wr)
    with os.fdopen(rd, "rb") as f:
        data = f.read()
    _, status = os.waitpid(pid, 0)
    exit_code = os.waitstatus_to_exitcode(status)
    if exit_code != 0:
        raise IsolationError(f"Isolated process {pid} exited with code {exit_code}")
    return _decode_payload(data)


def run_isolated(body: IsolatedBody, *, isolate: bool | None = None) -> dict[str, Any]:
    """Call `body(out)` with an empty dict and return what it wrote.

    `isolate=None` forks when the platform supports it; `False` always runs in-process.
    Exceptions raised by `body` are captured under `ERROR_KEY`. Failures of the
    isolation machinery raise `IsolationError`.
    """
    if isolate is None:
        isolate = supports_fork()
    if isolate:
        if not supports_fork():
            raise IsolationError("Process isolation requested but os.fork is unavailable")
        return _run_forked(body)
    return _run_in_process(body)
