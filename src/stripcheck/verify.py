from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .artifacts import MetadataRunner, resolve_artifacts
from .builder import StripMode, run_build
from .cargo_home import cargo_home, registry_prefix
from .config import Config
from .core.context import RunContext
from .core.errors import ScriptError
from .core.exit_codes import ERR_VERIFY
from .core.logging import log_event
from .core.process import Runner, capture_command, run_command
from .core.schema import validate
from .core.serialize import dumps_json
from .scanner import contains_absolute_paths

REPORT_SCHEMA = "stripcheck.report.v1"
BUILD_ORDER: tuple[StripMode, ...] = (StripMode.YES, StripMode.NO)


@dataclass(frozen=True)
class ArtifactResult:
    strip: StripMode
    path: Path
    has_absolute_paths: bool

    @property
    def expected(self) -> bool:
        return self.strip.expects_absolute_paths

    @property
    def ok(self) -> bool:
        return self.has_absolute_paths == self.expected

    def line(self) -> str:
        status = "ok" if self.ok else "FAIL"
        return (
            f"strip={self.strip.value} {self.path} "
            f"has_absolute_paths={str(self.has_absolute_paths).lower()} "
            f"expected={str(self.expected).lower()} {status}"
        )


@dataclass
class VerificationReport:
    run_id: str
    config: Config
    registry_prefix: str
    results: list[ArtifactResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.results) and all(result.ok for result in self.results)

    @property
    def violations(self) -> list[ArtifactResult]:
        return [result for result in self.results if not result.ok]

    def errors(self) -> list[str]:
        rows = []
        for result in self.violations:
            if result.strip is StripMode.YES:
                rows.append(f"{result.path}: stripped build still contains {self.registry_prefix}")
            else:
                rows.append(f"{result.path}: unstripped build does not contain {self.registry_prefix}")
        return rows

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "schema_name": REPORT_SCHEMA,
            "schema_version": 1,
            "tool": "stripcheck",
            "run_id": self.run_id,
            "status": "ok" if self.ok else "error",
            "ok": self.ok,
            "registry_prefix": self.registry_prefix,
            "config": self.config.summary(),
            "artifacts": [
                {
                    "strip": result.strip.value,
                    "path": str(result.path),
                    "has_absolute_paths": result.has_absolute_paths,
                    "expected": result.expected,
                    "ok": result.ok,
                }
                for result in self.results
            ],
            "errors": self.errors(),
        }
        validate(REPORT_SCHEMA, payload)
        return payload


def scan_build(
    ctx: RunContext,
    config: Config,
    strip: StripMode,
    prefix: str,
    metadata_runner: MetadataRunner = capture_command,
) -> list[ArtifactResult]:
    results = []
    for path in resolve_artifacts(ctx, config, metadata_runner):
        result = ArtifactResult(strip=strip, path=path, has_absolute_paths=contains_absolute_paths(path, prefix))
        if not ctx.quiet:
            print(result.line(), file=ctx.progress_stream)
        log_event(
            ctx,
            "info" if result.ok else "error",
            "scan",
            "result",
            strip=strip.value,
            path=str(path),
            has_absolute_paths=result.has_absolute_paths,
        )
        results.append(result)
    return results


def verify(
    ctx: RunContext,
    config: Config,
    runner: Runner = run_command,
    metadata_runner: MetadataRunner = capture_command,
    home: Path | None = None,
) -> VerificationReport:
    """Build once per strip mode and scan the artifacts of each build before the next one overwrites them."""
    prefix = registry_prefix(home if home is not None else cargo_home())
    report = VerificationReport(run_id=ctx.run_id, config=config, registry_prefix=prefix)
    for strip in BUILD_ORDER:
        run_build(ctx, config, strip, runner)
        report.results.extend(scan_build(ctx, config, strip, prefix, metadata_runner))
    log_event(ctx, "info" if report.ok else "error", "verify", "finish", ok=report.ok, artifacts=len(report.results))
    return report


def assert_report(report: VerificationReport) -> None:
    if report.ok:
        return
    errors = report.errors() or ["no artifacts were scanned"]
    raise ScriptError("strip verification failed:\n" + "\n".join(f"- {row}" for row in errors), ERR_VERIFY, kind="strip_violation")


def write_report(report: VerificationReport, out_file: Path) -> Path:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(dumps_json(report.to_payload(), pretty=True) + "\n", encoding="utf-8")
    return out_file
