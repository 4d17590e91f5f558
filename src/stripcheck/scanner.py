from __future__ import annotations

from pathlib import Path

from .core.errors import ScriptError
from .core.exit_codes import ERR_ARTIFACT


def read_artifact_text(path: Path) -> str:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ScriptError(f"unable to read artifact {path}: {exc.strerror or exc}", ERR_ARTIFACT, kind="artifact_unreadable") from exc
    return raw.decode("utf-8", errors="replace")


def contains_absolute_paths(path: Path, prefix: str) -> bool:
    """True when the lossily decoded artifact contains ``prefix`` verbatim."""
    return prefix in read_artifact_text(path)
