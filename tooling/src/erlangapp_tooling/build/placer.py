"""Copy built artifacts out of cargo's target directory into <output_root>/<crate>/."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from erlangapp_tooling.build.errors import ArtifactMissing, PlacementFailed
from erlangapp_tooling.build.platform import Platform
from erlangapp_tooling.build.targets import BuildTarget, TargetClass

if TYPE_CHECKING:
    from erlangapp_tooling.layout import BuildConfig

log = logging.getLogger(__name__)

# (class, platform) -> (cargo output name, placed name); {n} is the target name.
# The BEAM loader appends .so on every unix, so macOS dylibs are renamed.
FILENAME_TABLE: dict[tuple[TargetClass, Platform], tuple[str, str]] = {
    (TargetClass.LOADABLE_MODULE, Platform.LINUX): ("lib{n}.so", "lib{n}.so"),
    (TargetClass.LOADABLE_MODULE, Platform.FREEBSD): ("lib{n}.so", "lib{n}.so"),
    (TargetClass.LOADABLE_MODULE, Platform.MACOS): ("lib{n}.dylib", "lib{n}.so"),
    (TargetClass.LOADABLE_MODULE, Platform.WINDOWS): ("{n}.dll", "{n}.dll"),
    (TargetClass.EXECUTABLE, Platform.LINUX): ("{n}", "{n}"),
    (TargetClass.EXECUTABLE, Platform.FREEBSD): ("{n}", "{n}"),
    (TargetClass.EXECUTABLE, Platform.MACOS): ("{n}", "{n}"),
    (TargetClass.EXECUTABLE, Platform.WINDOWS): ("{n}.exe", "{n}.exe"),
}


@dataclass(frozen=True)
class PlacedArtifact:
    crate: str
    target: str
    source: Path
    path: Path


def artifact_filenames(
    target_name: str, target_class: TargetClass, platform: Platform
) -> tuple[str, str]:
    """(cargo output filename, placed filename) for a target."""
    if target_class is TargetClass.LOADABLE_MODULE:
        # cargo always names library artifacts with underscores
        target_name = target_name.replace("-", "_")
    src, dst = FILENAME_TABLE[(target_class, platform)]
    return src.format(n=target_name), dst.format(n=target_name)


def source_path(target: BuildTarget, target_class: TargetClass, config: BuildConfig) -> Path:
    """Where cargo leaves the artifact: <target-dir>/[<triple>/]<profile>/<file>.

    <target-dir> is --target-dir (relative to the crate, where cargo runs), else the
    target_directory cargo metadata reported, else <crate>/target.
    """
    src_name, _ = artifact_filenames(target.name, target_class, config.platform)
    if config.target_dir is not None:
        p = target.crate_dir / config.target_dir
    elif target.target_dir is not None:
        p = target.target_dir
    else:
        p = target.crate_dir / "target"
    if config.target_triple:
        p = p / config.target_triple
    return p / config.profile / src_name


def destination_path(target: BuildTarget, target_class: TargetClass, config: BuildConfig) -> Path:
    _, dst_name = artifact_filenames(target.name, target_class, config.platform)
    return config.output_root / target.crate_name / dst_name


def place_artifact(
    target: BuildTarget, target_class: TargetClass, config: BuildConfig
) -> PlacedArtifact:
    """Copy the built artifact into the output tree, replacing any previous one.

    Copy rather than move: cargo considers a target fresh only while its output
    stays under target/, and a fresh target is not relinked on the next run.
    """
    src = source_path(target, target_class, config)
    dst = destination_path(target, target_class, config)
    if not src.is_file():
        raise ArtifactMissing(target.crate_name, target.name, src)
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
    except OSError as e:
        raise PlacementFailed(target.crate_name, target.name, dst, reason=f"{dst} ({e})") from e
    log.debug("Placed %s -> %s", src, dst)
    return PlacedArtifact(crate=target.crate_name, target=target.name, source=src, path=dst)
