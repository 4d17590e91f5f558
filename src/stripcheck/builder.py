from __future__ import annotations

from enum import Enum

from .config import Config
from .core.context import RunContext
from .core.errors import ScriptError
from .core.exit_codes import ERR_BUILD
from .core.logging import log_event
from .core.process import BuildCommand, Runner, render_command, run_command


class StripMode(Enum):
    YES = "yes"
    NO = "no"

    @property
    def expects_absolute_paths(self) -> bool:
        # the build tool remaps absolute paths unless its flags injection is suppressed
        return self is StripMode.NO


def build_command(config: Config, strip: StripMode) -> BuildCommand:
    args = [
        "contract",
        "build",
        f"--manifest-path={config.manifest_path}",
        f"--profile={config.profile}",
    ]
    if config.out_dir is not None:
        args.append(f"--out-dir={config.out_dir}")
    env: dict[str, str] = {}
    if strip is StripMode.NO:
        # an empty value stops the build tool from setting CARGO_BUILD_RUSTFLAGS
        # with its own --remap-path-prefix flags
        env[config.flags_env_var] = ""
    return BuildCommand(program=config.build_tool, args=tuple(args), env=env, label=config.tool_label)


def run_build(ctx: RunContext, config: Config, strip: StripMode, runner: Runner = run_command) -> str:
    cmd = build_command(config, strip)
    cmd_str = render_command(cmd)
    if ctx.echo_commands:
        print(cmd_str, file=ctx.progress_stream, flush=True)
    log_event(ctx, "info", "build", "start", strip=strip.value, program=cmd.program)
    code = runner(cmd)
    log_event(ctx, "info" if code == 0 else "error", "build", "finish", strip=strip.value, code=code)
    if code != 0:
        raise ScriptError(f"failed building with stellar: {cmd_str!r} (exit code {code})", ERR_BUILD, kind="build_failed")
    return cmd_str
