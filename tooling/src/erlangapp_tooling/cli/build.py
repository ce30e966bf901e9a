"""`cargo-erlangapp build|clean|test` — build crates into priv/crates, or forward clean/test to cargo."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from erlangapp_tooling.build import (
    BuildReport,
    DiscoveryIOError,
    Platform,
    build_crates,
    clean_crates,
    test_crates,
)
from erlangapp_tooling.cli.parse_common import find_option_value, parse_flags, path_resolver
from erlangapp_tooling.layout import BuildConfig


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        print(f"Warning: unknown log level {level_name}, using WARNING", file=sys.stderr)
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _cargo_options(args: list[str]) -> list[str]:
    """Args cargo itself reads; anything after "--" belongs to rustc."""
    return args[: args.index("--")] if "--" in args else args


def config_from_argv(argv: list[str]) -> tuple[BuildConfig, list[str]]:
    """Consume tool-owned flags; the remaining argv is forwarded to cargo untouched.

    The forwarded cargo options also decide where artifacts are read from:
    --release, -r or --profile <name> select the profile directory, --target <triple>
    adds the triple directory and --target-dir replaces target/. They stay in the
    forwarded args since cargo needs them too.
    """
    try:
        parsed, rest = parse_flags(
            argv,
            ("app_root", "--app-root", Path.cwd, path_resolver),
            ("platform", "--platform", None, Platform.parse),
            ("log_level", "--log-level", "WARNING", None),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    _configure_logging(parsed["log_level"])
    opts = _cargo_options(rest)
    target_dir = find_option_value(opts, "--target-dir")
    config = BuildConfig.for_app(
        parsed["app_root"],
        platform=parsed["platform"],
        release="--release" in opts or "-r" in opts,
        profile=find_option_value(opts, "--profile"),
        target_triple=find_option_value(opts, "--target"),
        target_dir=Path(target_dir) if target_dir else None,
    )
    return config, rest


def print_report(report: BuildReport, app_root: Path) -> None:
    for placed in report.placed:
        try:
            shown = placed.path.relative_to(app_root)
        except ValueError:
            shown = placed.path
        print(f"📦 {placed.crate}/{placed.target} -> {shown}")
    for failure in report.failures:
        print(f"❌ {failure.error}", file=sys.stderr)
    if report.ok:
        print(f"✅ {report.summary()}")
    else:
        print(f"❌ {report.summary()}", file=sys.stderr)


def run_build_argv(argv: list[str] | None = None) -> None:
    """Build every crate; exit 0 iff no crate or target failed."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'cargo-erlangapp build'
    config, cargo_args = config_from_argv(argv)
    try:
        report = build_crates(config, cargo_args=cargo_args)
    except DiscoveryIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print_report(report, config.app_root)
    sys.exit(report.exit_code)


def run_clean_argv(argv: list[str] | None = None) -> None:
    """cargo clean each crate and remove priv/crates."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    config, cargo_args = config_from_argv(argv)
    try:
        rc = clean_crates(config, cargo_args=cargo_args)
    except DiscoveryIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(rc)


def run_test_argv(argv: list[str] | None = None) -> None:
    """cargo test each crate, stopping at the first failure."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    config, cargo_args = config_from_argv(argv)
    try:
        rc = test_crates(config, cargo_args=cargo_args)
    except DiscoveryIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(rc)
