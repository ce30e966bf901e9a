"""Build every crate under the crates root and place its artifacts.

Per run: discover crates -> per crate read metadata and classify targets ->
per target resolve flags, compile, place -> aggregate into a BuildReport.
Failures are collected, never raised, except when the crates root itself
cannot be listed. Crates run in name order and targets in metadata order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from erlangapp_tooling.build.errors import (
    ArtifactCollision,
    CrateBuildError,
    DiscoveryIOError,
)
from erlangapp_tooling.build.invoker import invoke_build
from erlangapp_tooling.build.metadata import read_targets
from erlangapp_tooling.build.placer import PlacedArtifact, destination_path, place_artifact
from erlangapp_tooling.build.platform import resolve_flags
from erlangapp_tooling.build.runner import CommandRunner, SubprocessRunner
from erlangapp_tooling.build.targets import BuildTarget

if TYPE_CHECKING:
    from erlangapp_tooling.layout import BuildConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOutcome:
    """Result for one target, or for a whole crate when its metadata could not be read (target None)."""

    crate_dir: Path
    target: BuildTarget | None
    placed: PlacedArtifact | None = None
    error: CrateBuildError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def crate(self) -> str:
        return self.crate_dir.name


@dataclass
class BuildReport:
    outcomes: list[BuildOutcome] = field(default_factory=list)

    @property
    def placed(self) -> list[PlacedArtifact]:
        return [o.placed for o in self.outcomes if o.placed is not None]

    @property
    def failures(self) -> list[BuildOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def summary(self) -> str:
        return f"{len(self.placed)} artifact(s) placed, {len(self.failures)} failure(s)"


def _is_crate(path: Path, manifest_name: str) -> bool:
    try:
        return path.is_dir() and (path / manifest_name).is_file()
    except OSError as e:
        log.debug("Skipping unreadable crate directory %s: %s", path, e)
        return False


def discover_crates(config: BuildConfig) -> list[Path]:
    """Immediate subdirectories of crates_root that hold a manifest, sorted by name."""
    root = config.crates_root
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DiscoveryIOError(root, e) from e
    crates = []
    for p in entries:
        if _is_crate(p, config.manifest_name):
            crates.append(p)
        else:
            log.debug("Not a crate (no %s): %s", config.manifest_name, p)
    return crates


def build_crate(
    crate_dir: Path,
    config: BuildConfig,
    runner: CommandRunner,
    cargo_args: Sequence[str] = (),
) -> list[BuildOutcome]:
    """Build and place every loadable-module and executable target of one crate."""
    try:
        targets = read_targets(crate_dir, runner, config.manifest_name)
    except CrateBuildError as e:
        return [BuildOutcome(crate_dir, None, error=e)]

    outcomes: list[BuildOutcome] = []
    claimed: set[Path] = set()
    for target in targets:
        target_class = target.target_class
        if target_class is None:
            log.debug("Skipping %s target %s (kind %s)", crate_dir.name, target.name, target.kinds)
            continue
        print(f"🔨 Building {crate_dir.name}: {target.name} ({target_class.value})")
        try:
            dst = destination_path(target, target_class, config)
            if dst in claimed:
                raise ArtifactCollision(target.crate_name, target.name, dst)
            flags = resolve_flags(target_class, config.platform)
            invoke_build(target, target_class, flags, runner, cargo_args)
            placed = place_artifact(target, target_class, config)
        except CrateBuildError as e:
            outcomes.append(BuildOutcome(crate_dir, target, error=e))
            continue
        claimed.add(placed.path)
        outcomes.append(BuildOutcome(crate_dir, target, placed=placed))
    return outcomes


def build_crates(
    config: BuildConfig,
    runner: CommandRunner | None = None,
    cargo_args: Sequence[str] = (),
) -> BuildReport:
    """Build all discovered crates. Raises DiscoveryIOError only if crates_root is unreadable."""
    if runner is None:
        runner = SubprocessRunner()
    report = BuildReport()
    for crate_dir in discover_crates(config):
        report.outcomes.extend(build_crate(crate_dir, config, runner, cargo_args))
    return report
