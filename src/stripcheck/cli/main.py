from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..config import STRATEGIES, resolve_config
from ..core.context import RunContext
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_INTERNAL, ERR_USAGE, OK
from ..core.logging import log_event
from ..verify import assert_report, verify, write_report
from .output import emit, render_error


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stripcheck",
        description="Build a contract with and without path stripping and check the wasm for registry paths.",
    )
    p.add_argument("--version", action="version", version=f"stripcheck {__version__}")
    p.add_argument("--manifest-path", required=True, help="path to Cargo.toml")
    p.add_argument("--profile", default="release", help="build with the specified profile")
    p.add_argument("--out-dir", help="directory the build tool copies wasm files to")
    p.add_argument("--config", help="YAML file with build tool and artifact settings")
    p.add_argument("--build-tool", help="path to the contract build CLI")
    p.add_argument("--contract-name", help="wasm file stem for the fixed artifact strategy")
    p.add_argument("--target-triple", help="compilation target triple")
    p.add_argument("--strategy", choices=list(STRATEGIES), help="artifact lookup strategy")
    p.add_argument("--report-out", help="write the JSON verification report to this path")
    p.add_argument("--json", action="store_true", help="print the verification report as JSON")
    p.add_argument("--log-json", action="store_true", help="emit structured logs as JSON lines")
    p.add_argument("--run-id", help="run identifier used in logs and the report")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    return p


def main(argv: list[str] | None = None) -> int:
    try:
        ns = build_parser().parse_args(argv)
    except SystemExit as exc:
        # --help and --version exit 0; every parse error maps to the registry usage code
        if exc.code in (0, None):
            raise
        return ERR_USAGE
    ctx = RunContext.from_args(
        ns.run_id,
        "json" if ns.json else "text",
        ns.verbose,
        ns.quiet,
        ns.log_json,
    )
    try:
        config = resolve_config(
            ns.manifest_path,
            profile=ns.profile,
            out_dir=ns.out_dir,
            config_file=ns.config,
            overrides={
                "build_tool": ns.build_tool,
                "contract_name": ns.contract_name,
                "target_triple": ns.target_triple,
                "strategy": ns.strategy,
            },
        )
        log_event(ctx, "debug", "cli", "start", **config.summary())
        report = verify(ctx, config)
        if ns.report_out:
            write_report(report, Path(ns.report_out))
        if ns.json:
            emit(report.to_payload(), as_json=True)
        assert_report(report)
        if not ctx.quiet and not ns.json:
            print(f"stripcheck: pass ({len(report.results)} artifacts)")
        return OK
    except ScriptError as exc:
        print(
            render_error(as_json=ctx.output_format == "json", error=exc, run_id=ctx.run_id),
            file=sys.stderr,
        )
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(
            render_error(
                as_json=ctx.output_format == "json",
                error=ScriptError(f"internal error: {exc}", ERR_INTERNAL, kind="internal_error"),
                run_id=ctx.run_id,
            ),
            file=sys.stderr,
        )
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
