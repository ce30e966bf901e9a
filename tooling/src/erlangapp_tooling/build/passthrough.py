"""`clean` and `test`: forward cargo args to every crate, no per-target orchestration."""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from erlangapp_tooling.build.orchestrator import discover_crates
from erlangapp_tooling.build.runner import CommandRunner, SubprocessRunner

if TYPE_CHECKING:
    from erlangapp_tooling.layout import BuildConfig

log = logging.getLogger(__name__)


def _cargo_each(
    verb: str,
    label: str,
    config: BuildConfig,
    runner: CommandRunner,
    cargo_args: Sequence[str],
) -> int:
    """Run `cargo <verb> <args>` in each crate; stop at the first failure. Returns 0 or 1."""
    for crate_dir in discover_crates(config):
        print(f"{label} {crate_dir.name}")
        try:
            r = runner.run(["cargo", verb, *cargo_args], cwd=crate_dir)
        except OSError as e:
            print(f"❌ cannot start cargo: {e}", file=sys.stderr)
            return 1
        if r.returncode != 0:
            print(
                f"❌ cargo {verb} failed for {crate_dir.name} (status {r.returncode})",
                file=sys.stderr,
            )
            return 1
    return 0


def remove_output_root(output_root: Path) -> None:
    """Delete the artifact tree. Absent is fine (already clean)."""
    if output_root.is_dir():
        shutil.rmtree(output_root)
        log.debug("Removed %s", output_root)


def clean_crates(
    config: BuildConfig,
    runner: CommandRunner | None = None,
    cargo_args: Sequence[str] = (),
) -> int:
    """cargo clean in every crate, then remove placed artifacts. Returns 0 or 1."""
    rc = _cargo_each("clean", "🧹 Cleaning", config, runner or SubprocessRunner(), cargo_args)
    if rc != 0:
        return rc
    try:
        remove_output_root(config.output_root)
    except OSError as e:
        print(f"❌ can't delete output dir {config.output_root} ({e})", file=sys.stderr)
        return 1
    return 0


def test_crates(
    config: BuildConfig,
    runner: CommandRunner | None = None,
    cargo_args: Sequence[str] = (),
) -> int:
    """cargo test in every crate, short-circuiting on the first failure. Returns 0 or 1."""
    return _cargo_each("test", "🧪 Testing", config, runner or SubprocessRunner(), cargo_args)
