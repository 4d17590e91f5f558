from __future__ import annotations

import json
from pathlib import Path

ERROR_REGISTRY = Path(__file__).resolve().parent / "error-registry.json"


def _load_registry() -> dict[str, int]:
    payload = json.loads(ERROR_REGISTRY.read_text(encoding="utf-8"))
    mapping: dict[str, int] = {}
    for row in payload.get("codes", []):
        mapping[str(row["name"])] = int(row["code"])
    return mapping


_REG = _load_registry()

OK = 0
ERR_USAGE = _REG["STRIPCHECK_ERR_USAGE"]
ERR_CONFIG = _REG["STRIPCHECK_ERR_CONFIG"]
ERR_PREREQ = _REG["STRIPCHECK_ERR_PREREQ"]
ERR_BUILD = _REG["STRIPCHECK_ERR_BUILD"]
ERR_ARTIFACT = _REG["STRIPCHECK_ERR_ARTIFACT"]
ERR_ENV = _REG["STRIPCHECK_ERR_ENV"]
ERR_VERIFY = _REG["STRIPCHECK_ERR_VERIFY"]
ERR_INTERNAL = _REG["STRIPCHECK_ERR_INTERNAL"]
