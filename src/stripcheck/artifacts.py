"""Locate the wasm files produced by a contract build.

Two strategies exist. ``fixed`` points at the single path the first revision
of this check used, ``<manifest-dir>/target/<triple>/release/<contract>.wasm``.
``scan`` lists every ``*.wasm`` in the output directory: the explicit
``--out-dir`` when one is given, otherwise the cargo target directory reported
by ``cargo metadata`` joined with the target triple and profile.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Callable

from .config import Config
from .core.context import RunContext
from .core.errors import ScriptError
from .core.exit_codes import ERR_ARTIFACT
from .core.logging import log_event
from .core.process import capture_command

WASM_SUFFIX = ".wasm"

MetadataRunner = Callable[[list[str]], "subprocess.CompletedProcess[str]"]


def fixed_artifact_path(config: Config) -> Path:
    return config.manifest_dir / "target" / config.target_triple / "release" / f"{config.contract_name}{WASM_SUFFIX}"


def metadata_command(config: Config) -> list[str]:
    return [
        config.cargo,
        "metadata",
        "--format-version",
        "1",
        "--no-deps",
        "--manifest-path",
        str(config.manifest_path),
    ]


def target_directory(config: Config, runner: MetadataRunner = capture_command) -> Path:
    cmd = metadata_command(config)
    proc = runner(cmd)
    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip()
        raise ScriptError(
            f"build metadata query failed: {' '.join(cmd)}" + (f": {detail}" if detail else ""),
            ERR_ARTIFACT,
            kind="metadata_failed",
        )
    try:
        payload = json.loads(proc.stdout or "")
    except json.JSONDecodeError as exc:
        raise ScriptError(f"build metadata query returned invalid JSON: {exc}", ERR_ARTIFACT, kind="metadata_invalid") from exc
    raw = payload.get("target_directory") if isinstance(payload, dict) else None
    if not isinstance(raw, str) or not raw:
        raise ScriptError("build metadata has no target_directory", ERR_ARTIFACT, kind="metadata_invalid")
    return Path(raw)


def output_directory(config: Config, runner: MetadataRunner = capture_command) -> Path:
    if config.out_dir is not None:
        return config.out_dir
    return target_directory(config, runner) / config.target_triple / config.profile


def discover_artifacts(directory: Path) -> list[Path]:
    if not directory.is_dir():
        raise ScriptError(f"artifact directory not found: {directory}", ERR_ARTIFACT, kind="artifact_missing")
    found = sorted(path for path in directory.iterdir() if path.is_file() and path.name.endswith(WASM_SUFFIX))
    if not found:
        raise ScriptError(f"no {WASM_SUFFIX} artifacts in {directory}", ERR_ARTIFACT, kind="artifact_missing")
    return found


def resolve_artifacts(ctx: RunContext, config: Config, runner: MetadataRunner = capture_command) -> list[Path]:
    if config.strategy == "fixed":
        paths = [fixed_artifact_path(config)]
    else:
        paths = discover_artifacts(output_directory(config, runner))
    log_event(ctx, "debug", "artifacts", "resolved", strategy=config.strategy, count=len(paths))
    return paths
