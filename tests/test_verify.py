from __future__ import annotations

import json
import subprocess
from pathlib import Path

import jsonschema
import pytest

from stripcheck.config import Config
from stripcheck.core.context import RunContext
from stripcheck.core.errors import ScriptError
from stripcheck.core.exit_codes import ERR_BUILD, ERR_VERIFY
from stripcheck.core.process import BuildCommand
from stripcheck.core.schema import schema_path_for
from stripcheck.verify import REPORT_SCHEMA, assert_report, verify, write_report

HOME = Path("/home/u/.cargo")
PREFIX = "/home/u/.cargo/registry/src/"


def _fake_build(out_dir: Path, names: tuple[str, ...] = ("soroban_eth_abi.wasm",), leak_when_stripped: str | None = None):
    """Build tool stand-in: embeds the registry prefix only when compiler flags are emptied."""
    commands: list[BuildCommand] = []

    def runner(cmd: BuildCommand) -> int:
        commands.append(cmd)
        out_dir.mkdir(parents=True, exist_ok=True)
        unstripped = cmd.env.get("RUSTFLAGS") == ""
        for name in names:
            body = b"\x00asm\x01\x00\x00\x00"
            if unstripped or name == leak_when_stripped:
                body += f"{PREFIX}index.crates.io-6f17d22bba15001f/soroban-sdk-22.0.0/src/lib.rs".encode()
            else:
                body += b"/rustc/abc/library/core/src/lib.rs"
            (out_dir / name).write_bytes(body)
        return 0

    runner.commands = commands  # type: ignore[attr-defined]
    return runner


def _no_metadata(cmd: list[str]):
    raise AssertionError(f"unexpected metadata query: {cmd}")


def test_end_to_end_scan_with_out_dir(ctx: RunContext, tmp_path: Path, capsys) -> None:
    out = tmp_path / "out"
    config = Config(manifest_path=Path("/proj/Cargo.toml"), out_dir=out)
    runner = _fake_build(out)
    report = verify(ctx, config, runner=runner, metadata_runner=_no_metadata, home=HOME)
    assert report.ok
    assert [(r.strip.value, r.has_absolute_paths) for r in report.results] == [("yes", False), ("no", True)]
    assert [cmd.env for cmd in runner.commands] == [{}, {"RUSTFLAGS": ""}]
    assert_report(report)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"(stellar-cli) contract build --manifest-path=/proj/Cargo.toml --profile=release --out-dir={out}"
    assert lines[1].startswith("strip=yes") and lines[1].endswith("has_absolute_paths=false expected=false ok")
    assert lines[2].startswith("RUSTFLAGS='' (stellar-cli)")
    assert lines[3].endswith("has_absolute_paths=true expected=true ok")


def test_scan_uses_metadata_target_directory(ctx: RunContext, tmp_path: Path) -> None:
    target = tmp_path / "target"
    wasm_dir = target / "wasm32-unknown-unknown" / "release"

    def metadata(cmd: list[str]):
        return subprocess.CompletedProcess(cmd, 0, json.dumps({"target_directory": str(target)}), "")

    config = Config(manifest_path=tmp_path / "Cargo.toml")
    report = verify(ctx, config, runner=_fake_build(wasm_dir, names=("a.wasm", "b.wasm")), metadata_runner=metadata, home=HOME)
    assert report.ok
    assert len(report.results) == 4


def test_one_leaking_artifact_fails_whole_run(ctx: RunContext, tmp_path: Path) -> None:
    out = tmp_path / "out"
    config = Config(manifest_path=tmp_path / "Cargo.toml", out_dir=out)
    runner = _fake_build(out, names=("a.wasm", "b.wasm", "c.wasm"), leak_when_stripped="b.wasm")
    report = verify(ctx, config, runner=runner, metadata_runner=_no_metadata, home=HOME)
    assert not report.ok
    assert [r.path.name for r in report.violations] == ["b.wasm"]
    with pytest.raises(ScriptError) as err:
        assert_report(report)
    assert err.value.code == ERR_VERIFY
    assert err.value.kind == "strip_violation"
    assert "b.wasm: stripped build still contains" in str(err.value)


def test_unstripped_build_without_paths_fails(ctx: RunContext, tmp_path: Path) -> None:
    out = tmp_path / "out"

    def runner(cmd: BuildCommand) -> int:
        out.mkdir(exist_ok=True)
        (out / "c.wasm").write_bytes(b"\x00asm clean")
        return 0

    report = verify(ctx, Config(manifest_path=tmp_path / "Cargo.toml", out_dir=out), runner=runner, home=HOME)
    assert [r.ok for r in report.results] == [True, False]
    assert "unstripped build does not contain" in report.errors()[0]


def test_fixed_strategy_scans_manifest_target(ctx: RunContext, contract_repo: Path) -> None:
    wasm_dir = contract_repo / "target" / "wasm32-unknown-unknown" / "release"
    config = Config(manifest_path=contract_repo / "Cargo.toml", strategy="fixed")
    report = verify(ctx, config, runner=_fake_build(wasm_dir), metadata_runner=_no_metadata, home=HOME)
    assert report.ok
    assert {r.path for r in report.results} == {wasm_dir / "soroban_eth_abi.wasm"}


def test_build_failure_stops_before_second_build(ctx: RunContext, tmp_path: Path) -> None:
    calls: list[BuildCommand] = []

    def runner(cmd: BuildCommand) -> int:
        calls.append(cmd)
        return 1

    with pytest.raises(ScriptError) as err:
        verify(ctx, Config(manifest_path=tmp_path / "Cargo.toml", out_dir=tmp_path), runner=runner, home=HOME)
    assert err.value.code == ERR_BUILD
    assert len(calls) == 1


def test_report_payload_matches_schema(ctx: RunContext, tmp_path: Path) -> None:
    out = tmp_path / "out"
    config = Config(manifest_path=tmp_path / "Cargo.toml", out_dir=out)
    report = verify(ctx, config, runner=_fake_build(out), metadata_runner=_no_metadata, home=HOME)
    path = write_report(report, tmp_path / "reports" / "stripcheck.json")
    payload = json.loads(path.read_text(encoding="utf-8"))
    schema = json.loads(schema_path_for(REPORT_SCHEMA).read_text(encoding="utf-8"))
    jsonschema.validate(payload, schema)
    assert payload["status"] == "ok"
    assert payload["registry_prefix"] == PREFIX
    assert payload["run_id"] == "pytest-run"
    assert [row["strip"] for row in payload["artifacts"]] == ["yes", "no"]
    assert payload["errors"] == []
