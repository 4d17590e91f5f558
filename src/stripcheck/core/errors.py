from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScriptError(Exception):
    """Terminal failure of a stripcheck run; ``code`` is the process exit status."""

    message: str
    code: int
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message

    def as_row(self) -> dict[str, object]:
        return {"code": self.code, "kind": self.kind, "message": self.message}
