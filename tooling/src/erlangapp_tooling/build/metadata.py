"""Read a crate's declared targets from `cargo metadata`.

Also accepts the older `cargo read-manifest` output, which carries the package
object (with its `targets`) at the top level instead of under `packages`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from erlangapp_tooling.build.errors import MetadataUnavailable
from erlangapp_tooling.build.runner import CommandRunner
from erlangapp_tooling.build.targets import BuildTarget

log = logging.getLogger(__name__)


def metadata_command(crate_dir: Path, manifest_name: str = "Cargo.toml") -> list[str]:
    return [
        "cargo",
        "metadata",
        "--no-deps",
        "--format-version",
        "1",
        "--manifest-path",
        str(crate_dir / manifest_name),
    ]


def _select_package(data: dict[str, Any], manifest: Path) -> dict[str, Any] | None:
    if "targets" in data:
        return data
    packages = data.get("packages")
    if not isinstance(packages, list) or not packages:
        return None
    for pkg in packages:
        if not isinstance(pkg, dict):
            continue
        mp = pkg.get("manifest_path")
        if mp and Path(mp).resolve() == manifest.resolve():
            return pkg
    log.debug("No package in metadata matches %s; using the first package", manifest)
    first = packages[0]
    return first if isinstance(first, dict) else None


def _parse_target(
    obj: Any, crate_dir: Path, target_dir: Path | None = None
) -> BuildTarget | None:
    if not isinstance(obj, dict):
        return None
    name = obj.get("name")
    kinds = obj.get("kind")
    if isinstance(kinds, str):
        kinds = [kinds]
    if not isinstance(name, str) or not isinstance(kinds, list):
        return None
    return BuildTarget(
        name=name,
        kinds=tuple(k for k in kinds if isinstance(k, str)),
        crate_dir=crate_dir,
        target_dir=target_dir,
    )


def parse_targets(raw: str, crate_dir: Path, manifest_name: str = "Cargo.toml") -> list[BuildTarget]:
    """Targets in manifest order from metadata JSON text. Raises MetadataUnavailable if unusable."""
    crate = crate_dir.name
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataUnavailable(crate, reason=f"cannot parse crate metadata ({e})") from e
    if not isinstance(data, dict):
        raise MetadataUnavailable(crate, reason="crate metadata is not a JSON object")
    pkg = _select_package(data, crate_dir / manifest_name)
    targets = pkg.get("targets") if pkg is not None else None
    if not isinstance(targets, list):
        raise MetadataUnavailable(crate, reason="crate metadata has no targets list")

    td = data.get("target_directory")
    target_dir = Path(td) if isinstance(td, str) and td else None

    out: list[BuildTarget] = []
    for obj in targets:
        target = _parse_target(obj, crate_dir, target_dir)
        if target is None:
            log.debug("Skipping malformed target entry in %s: %r", crate, obj)
            continue
        out.append(target)
    return out


def read_targets(
    crate_dir: Path,
    runner: CommandRunner,
    manifest_name: str = "Cargo.toml",
) -> list[BuildTarget]:
    """Run one metadata query for crate_dir and return its targets. No retries."""
    crate = crate_dir.name
    cmd = metadata_command(crate_dir, manifest_name)
    try:
        r = runner.run(cmd, cwd=crate_dir, capture=True)
    except OSError as e:
        raise MetadataUnavailable(crate, reason=f"cannot start cargo ({e})") from e
    if r.returncode != 0:
        err = (r.stderr or "").strip()
        reason = f"cargo metadata exited with status {r.returncode}"
        raise MetadataUnavailable(crate, reason=f"{reason}: {err}" if err else reason)
    return parse_targets(r.stdout or "", crate_dir, manifest_name)
