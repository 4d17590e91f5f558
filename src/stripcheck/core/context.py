from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Literal, TextIO

from .clock import utc_now
from .env import getenv

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool

    @property
    def echo_commands(self) -> bool:
        return not self.quiet

    @property
    def progress_stream(self) -> TextIO:
        # stdout carries only the report in json mode
        return sys.stderr if self.output_format == "json" else sys.stdout

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        default_run = f"stripcheck-{utc_now().strftime('%Y%m%d-%H%M%S')}-{os.getpid()}"
        resolved_run_id = run_id or getenv("RUN_ID") or default_run
        return cls(
            run_id=resolved_run_id,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
        )
