"""JSON encoding for reports, error payloads and log lines."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any


def _default(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


def dumps_json(payload: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(payload, indent=2, sort_keys=True, default=_default)
    return json.dumps(payload, sort_keys=True, default=_default)
