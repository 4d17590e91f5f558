from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from .core.env import getenv
from .core.errors import ScriptError
from .core.exit_codes import ERR_ENV

REGISTRY_SUFFIX = "/registry/src/"


def cargo_home(env: Mapping[str, str] | None = None, cwd: Path | None = None) -> Path:
    """Locate cargo's home the way cargo does: ``$CARGO_HOME`` first, then ``~/.cargo``."""
    raw = env.get("CARGO_HOME") if env is not None else getenv("CARGO_HOME")
    if raw:
        home = Path(raw)
        return home if home.is_absolute() else (cwd or Path.cwd()) / home
    try:
        user_home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ScriptError(
            "unable to discover the home directory; set CARGO_HOME explicitly",
            ERR_ENV,
            kind="cargo_home_missing",
        ) from exc
    return user_home / ".cargo"


def registry_prefix(home: Path) -> str:
    return f"{home}{REGISTRY_SUFFIX}"
