"""Compile exactly one target with `cargo rustc`.

`cargo rustc` accepts extra compiler arguments after `--`, but only when a single
target is selected, which is also what keeps module link flags off executables.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from erlangapp_tooling.build.errors import CompileFailed
from erlangapp_tooling.build.runner import CommandRunner
from erlangapp_tooling.build.targets import BuildTarget, TargetClass

log = logging.getLogger(__name__)


def target_selector(target: BuildTarget, target_class: TargetClass) -> list[str]:
    if target_class is TargetClass.LOADABLE_MODULE:
        # cargo allows one library per crate; its name is implicit
        return ["--lib"]
    return ["--bin", target.name]


def build_command(
    target: BuildTarget,
    target_class: TargetClass,
    flags: Sequence[str] = (),
    cargo_args: Sequence[str] = (),
) -> list[str]:
    """cargo rustc <selector> <cargo_args> [-- <flags>]."""
    cmd = ["cargo", "rustc", *target_selector(target, target_class), *cargo_args]
    if flags:
        if "--" not in cargo_args:
            cmd.append("--")
        cmd.extend(flags)
    return cmd


def invoke_build(
    target: BuildTarget,
    target_class: TargetClass,
    flags: Sequence[str],
    runner: CommandRunner,
    cargo_args: Sequence[str] = (),
) -> None:
    """Build target in its crate directory and wait. Raises CompileFailed on non-zero exit."""
    cmd = build_command(target, target_class, flags, cargo_args)
    log.debug("Compiling %s/%s: %s", target.crate_name, target.name, " ".join(cmd))
    try:
        r = runner.run(cmd, cwd=target.crate_dir)
    except OSError as e:
        raise CompileFailed(
            target.crate_name, target.name, None, reason=f"cannot start cargo ({e})"
        ) from e
    if r.returncode != 0:
        raise CompileFailed(target.crate_name, target.name, r.returncode)
