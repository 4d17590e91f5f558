"""CLI payload output helpers."""

from __future__ import annotations

from ..core.errors import ScriptError
from ..core.serialize import dumps_json


def emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def render_error(*, as_json: bool, error: ScriptError, run_id: str = "") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": "stripcheck.error.v1",
                "schema_version": 1,
                "tool": "stripcheck",
                "status": "error",
                "run_id": run_id,
                "errors": [error.as_row()],
            },
            pretty=False,
        )
    return f"stripcheck: error [{error.kind}]: {error.message}"
