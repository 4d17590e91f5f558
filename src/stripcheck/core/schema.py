from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from .errors import ScriptError
from .exit_codes import ERR_INTERNAL

SCHEMAS_ROOT = Path(__file__).resolve().parents[1] / "schemas"


def schema_path_for(schema_name: str) -> Path:
    return SCHEMAS_ROOT / f"{schema_name}.schema.json"


def validate(schema_name: str, payload: Any) -> None:
    schema = json.loads(schema_path_for(schema_name).read_text(encoding="utf-8"))
    try:
        jsonschema.validate(payload, schema)
    except jsonschema.ValidationError as exc:
        pointer = "/".join(str(p) for p in exc.absolute_path)
        loc = pointer or "<root>"
        raise ScriptError(f"schema validation failed for {schema_name} at {loc}: {exc.message}", ERR_INTERNAL, kind="schema_violation") from exc
