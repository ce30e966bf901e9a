"""App layout and build configuration. All layout paths are relative to the app root.

Defaults follow the rebar/mix convention of crates/<name>/ sources and
priv/crates/<name>/ artifacts. An app may override them in erlangapp.yaml:

    layout:
      crates_dir: native
      output_dir: priv/native
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from erlangapp_tooling.build.platform import Platform, detect_platform

log = logging.getLogger(__name__)

LAYOUT_FILE = "erlangapp.yaml"

DEFAULT_LAYOUT: dict[str, str] = {
    "crates_dir": "crates",
    "output_dir": "priv/crates",
    "manifest_name": "Cargo.toml",
}


def resolve_layout(layout: dict[str, Any] | None) -> dict[str, str]:
    """Return layout dict with defaults filled. Unknown keys are ignored."""
    if layout is None:
        return dict(DEFAULT_LAYOUT)
    out = dict(DEFAULT_LAYOUT)
    out.update({k: str(v) for k, v in layout.items() if k in out})
    return out


def load_layout_file(app_root: Path) -> dict[str, Any] | None:
    """Read the `layout:` mapping from app_root/erlangapp.yaml. None if absent or unusable."""
    path = app_root / LAYOUT_FILE
    if not path.is_file():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("Could not parse %s: %s; using default layout", path, e)
        return None
    layout = data.get("layout") if isinstance(data, dict) else None
    if layout is not None and not isinstance(layout, dict):
        log.warning("%s: 'layout' must be a mapping; using default layout", path)
        return None
    return layout


# cargo profile name -> directory under target/; custom profiles use their own name.
PROFILE_DIRS: dict[str, str] = {
    "dev": "debug",
    "test": "debug",
    "release": "release",
    "bench": "release",
}


def profile_dir(profile: str) -> str:
    return PROFILE_DIRS.get(profile, profile)


@dataclass(frozen=True)
class BuildConfig:
    """Process-wide settings for one run, passed explicitly to every component."""

    app_root: Path
    crates_root: Path
    output_root: Path
    platform: Platform
    profile: str = "debug"  # directory under target/, not the cargo profile name
    target_triple: str | None = None
    target_dir: Path | None = None
    manifest_name: str = "Cargo.toml"

    @property
    def release(self) -> bool:
        return self.profile == "release"

    @classmethod
    def for_app(
        cls,
        app_root: Path,
        platform: Platform | None = None,
        release: bool = False,
        target_triple: str | None = None,
        layout: dict[str, Any] | None = None,
        profile: str | None = None,
        target_dir: Path | None = None,
    ) -> BuildConfig:
        """Config for app_root. layout overrides win over erlangapp.yaml, which wins over defaults.

        profile is a cargo profile name and takes precedence over release.
        """
        merged = dict(load_layout_file(app_root) or {})
        if layout:
            merged.update(layout)
        lay = resolve_layout(merged)
        return cls(
            app_root=app_root,
            crates_root=app_root / lay["crates_dir"],
            output_root=app_root / lay["output_dir"],
            platform=platform if platform is not None else detect_platform(),
            profile=profile_dir(profile) if profile else ("release" if release else "debug"),
            target_triple=target_triple,
            target_dir=target_dir,
            manifest_name=lay["manifest_name"],
        )
