from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Literal

import yaml

from .core.env import getenv
from .core.errors import ScriptError
from .core.exit_codes import ERR_CONFIG

Strategy = Literal["scan", "fixed"]

STRATEGIES: tuple[str, ...] = ("scan", "fixed")
DEFAULT_BUILD_TOOL = "../stellar-cli/target/debug/soroban"
CONFIG_ENV = "STRIPCHECK_CONFIG"
BUILD_TOOL_ENV = "STRIPCHECK_BUILD_TOOL"


@dataclass(frozen=True)
class Config:
    manifest_path: Path
    profile: str = "release"
    out_dir: Path | None = None
    build_tool: str = DEFAULT_BUILD_TOOL
    tool_label: str = "(stellar-cli)"
    contract_name: str = "soroban_eth_abi"
    target_triple: str = "wasm32-unknown-unknown"
    strategy: Strategy = "scan"
    flags_env_var: str = "RUSTFLAGS"
    cargo: str = "cargo"

    @property
    def manifest_dir(self) -> Path:
        return self.manifest_path.parent

    def summary(self) -> dict[str, Any]:
        return {
            "manifest_path": str(self.manifest_path),
            "profile": self.profile,
            "out_dir": str(self.out_dir) if self.out_dir is not None else None,
            "build_tool": self.build_tool,
            "contract_name": self.contract_name,
            "target_triple": self.target_triple,
            "strategy": self.strategy,
        }


_FILE_KEYS = {f.name for f in fields(Config)} - {"manifest_path"}
_PATH_KEYS = {"out_dir"}


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load a YAML overlay; ``manifest_path`` always comes from the command line."""
    cfg_path = Path(path)
    try:
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ScriptError(f"unable to read config file {cfg_path}: {exc.strerror or exc}", ERR_CONFIG, kind="config_unreadable") from exc
    except yaml.YAMLError as exc:
        raise ScriptError(f"invalid YAML in config file {cfg_path}: {exc}", ERR_CONFIG, kind="config_invalid") from exc
    if not isinstance(raw, dict):
        raise ScriptError(f"config file {cfg_path} must contain a mapping", ERR_CONFIG, kind="config_invalid")
    unknown = sorted(str(key) for key in raw if key not in _FILE_KEYS)
    if unknown:
        raise ScriptError(f"unknown config keys in {cfg_path}: {', '.join(unknown)}", ERR_CONFIG, kind="config_invalid")
    values: dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if key in _PATH_KEYS:
            values[key] = (cfg_path.parent / str(value)) if not Path(str(value)).is_absolute() else Path(str(value))
        elif not isinstance(value, str):
            raise ScriptError(f"config key `{key}` in {cfg_path} must be a string", ERR_CONFIG, kind="config_invalid")
        else:
            values[key] = value
    return values


def _validate(config: Config) -> Config:
    if config.strategy not in STRATEGIES:
        raise ScriptError(
            f"unsupported artifact strategy `{config.strategy}` (expected one of: {', '.join(STRATEGIES)})",
            ERR_CONFIG,
            kind="config_invalid",
        )
    if not config.flags_env_var:
        raise ScriptError("flags_env_var must not be empty", ERR_CONFIG, kind="config_invalid")
    return config


def resolve_config(
    manifest_path: str | Path,
    profile: str | None = None,
    out_dir: str | Path | None = None,
    config_file: str | Path | None = None,
    overrides: dict[str, str | None] | None = None,
) -> Config:
    """Merge defaults, the YAML file, the environment and explicit flags, in that order."""
    config = Config(manifest_path=Path(manifest_path))
    file_path = config_file or getenv(CONFIG_ENV)
    if file_path:
        config = replace(config, **load_config_file(file_path))
    env_tool = getenv(BUILD_TOOL_ENV)
    if env_tool:
        config = replace(config, build_tool=env_tool)
    explicit: dict[str, Any] = {key: value for key, value in (overrides or {}).items() if value is not None}
    unknown = sorted(key for key in explicit if key not in _FILE_KEYS)
    if unknown:
        raise ScriptError(f"unknown config overrides: {', '.join(unknown)}", ERR_CONFIG, kind="config_invalid")
    if profile is not None:
        explicit["profile"] = profile
    if out_dir is not None:
        explicit["out_dir"] = Path(out_dir)
    return _validate(replace(config, **explicit))
