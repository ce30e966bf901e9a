"""Pytest fixtures for cargo-erlangapp tests: an app tree and a fake cargo runner."""

from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from erlangapp_tooling.build.placer import artifact_filenames
from erlangapp_tooling.build.platform import Platform
from erlangapp_tooling.build.targets import classify_kinds
from erlangapp_tooling.cli.parse_common import find_option_value
from erlangapp_tooling.layout import BuildConfig, profile_dir


class FakeCargo:
    """Stands in for cargo. Knows each crate's targets; `rustc` writes the artifact cargo would."""

    def __init__(self, platform: Platform = Platform.LINUX) -> None:
        self.platform = platform
        self.crates: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[list[str], Path]] = []

    def add_crate(
        self,
        name: str,
        targets: list[tuple[str, list[str]]],
        metadata_rc: int = 0,
        fail: Sequence[str] = (),
        no_artifact: Sequence[str] = (),
        verb_rc: int = 0,
    ) -> None:
        self.crates[name] = {
            "targets": targets,
            "metadata_rc": metadata_rc,
            "fail": set(fail),
            "no_artifact": set(no_artifact),
            "verb_rc": verb_rc,
        }

    def commands(self, verb: str) -> list[list[str]]:
        return [cmd for cmd, _ in self.calls if cmd[1] == verb]

    def run(
        self, cmd: Sequence[str], cwd: Path, capture: bool = False
    ) -> subprocess.CompletedProcess[str]:
        cmd = list(cmd)
        self.calls.append((cmd, cwd))
        crate = self.crates[cwd.name]
        verb = cmd[1]
        if verb == "metadata":
            return self._metadata(cmd, cwd, crate)
        if verb == "rustc":
            return self._rustc(cmd, cwd, crate)
        return subprocess.CompletedProcess(cmd, crate["verb_rc"], "", "")

    def _metadata(self, cmd, cwd, crate) -> subprocess.CompletedProcess[str]:
        if crate["metadata_rc"] != 0:
            return subprocess.CompletedProcess(cmd, crate["metadata_rc"], "", "error: bad manifest")
        payload = {
            "packages": [
                {
                    "name": cwd.name,
                    "manifest_path": str(cwd / "Cargo.toml"),
                    "targets": [{"name": n, "kind": k} for n, k in crate["targets"]],
                }
            ],
            "version": 1,
        }
        return subprocess.CompletedProcess(cmd, 0, json.dumps(payload), "")

    def _rustc(self, cmd, cwd, crate) -> subprocess.CompletedProcess[str]:
        if "--lib" in cmd:
            name, kinds = next(
                (n, k) for n, k in crate["targets"] if "cdylib" in k or "dylib" in k
            )
        else:
            wanted = cmd[cmd.index("--bin") + 1]
            name, kinds = next((n, k) for n, k in crate["targets"] if n == wanted)
        if name in crate["fail"]:
            return subprocess.CompletedProcess(cmd, 101, "", "")
        if name not in crate["no_artifact"]:
            src_name, _ = artifact_filenames(name, classify_kinds(kinds), self.platform)
            opts = cmd[: cmd.index("--")] if "--" in cmd else cmd
            target_dir = find_option_value(opts, "--target-dir")
            out = cwd / (target_dir or "target")
            triple = find_option_value(opts, "--target")
            if triple:
                out = out / triple
            profile = find_option_value(opts, "--profile")
            if profile:
                out = out / profile_dir(profile)
            else:
                out = out / ("release" if "--release" in opts or "-r" in opts else "debug")
            out.mkdir(parents=True, exist_ok=True)
            (out / src_name).write_bytes(f"artifact:{name}".encode())
        return subprocess.CompletedProcess(cmd, 0, "", "")


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """Empty app with a crates/ directory."""
    root = tmp_path / "myapp"
    (root / "crates").mkdir(parents=True)
    return root


@pytest.fixture
def make_crate(app_root: Path):
    """Create crates/<name>/ with a Cargo.toml (or without, manifest=False)."""

    def _make(name: str, manifest: bool = True) -> Path:
        d = app_root / "crates" / name
        (d / "src").mkdir(parents=True, exist_ok=True)
        if manifest:
            (d / "Cargo.toml").write_text(f'[package]\nname = "{name}"\nversion = "0.1.0"\n')
        return d

    return _make


@pytest.fixture
def fake_cargo() -> FakeCargo:
    return FakeCargo(Platform.LINUX)


@pytest.fixture
def linux_config(app_root: Path) -> BuildConfig:
    return BuildConfig.for_app(app_root, platform=Platform.LINUX)


@pytest.fixture
def fake_cargo_for():
    """FakeCargo constructor, for tests that need another platform."""
    return FakeCargo
