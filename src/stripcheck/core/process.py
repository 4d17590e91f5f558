"""Child-process description, rendering and execution.

``render_command`` produces the shell-safe string echoed before a build;
``run_command`` is the only place that spawns a process.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Callable

from .env import child_env
from .errors import ScriptError
from .exit_codes import ERR_PREREQ


@dataclass(frozen=True)
class BuildCommand:
    program: str
    args: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)
    label: str | None = None

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    @property
    def display_name(self) -> str:
        return self.label or self.program


Runner = Callable[[BuildCommand], int]


def render_command(cmd: BuildCommand) -> str:
    parts = [f"{key}={shlex.quote(value)}" for key, value in cmd.env.items()]
    parts.append(cmd.display_name)
    parts.extend(shlex.quote(arg) for arg in cmd.args)
    return " ".join(parts)


def run_command(cmd: BuildCommand) -> int:
    try:
        proc = subprocess.run(cmd.argv, env=child_env(cmd.env), check=False)
    except OSError as exc:
        raise ScriptError(
            f"failed to spawn {cmd.program}: {exc.strerror or exc}",
            ERR_PREREQ,
            kind="build_tool_missing",
        ) from exc
    return proc.returncode


def capture_command(argv: list[str]) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(argv, text=True, capture_output=True, check=False)
    except OSError as exc:
        raise ScriptError(f"failed to spawn {argv[0]}: {exc.strerror or exc}", ERR_PREREQ, kind="tool_missing") from exc
