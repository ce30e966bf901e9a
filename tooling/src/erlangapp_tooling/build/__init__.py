"""Build the Rust crates of an Erlang/Elixir app into priv/crates (NIF libraries and port binaries)."""

from .errors import (
    ArtifactCollision,
    ArtifactMissing,
    CompileFailed,
    CrateBuildError,
    DiscoveryIOError,
    MetadataUnavailable,
    PlacementFailed,
)
from .orchestrator import (
    BuildOutcome,
    BuildReport,
    build_crate,
    build_crates,
    discover_crates,
)
from .passthrough import clean_crates, test_crates
from .platform import Platform, detect_platform, resolve_flags
from .runner import CommandRunner, SubprocessRunner
from .targets import BuildTarget, TargetClass, classify

__all__ = [
    "ArtifactCollision",
    "ArtifactMissing",
    "BuildOutcome",
    "BuildReport",
    "BuildTarget",
    "CommandRunner",
    "CompileFailed",
    "CrateBuildError",
    "DiscoveryIOError",
    "MetadataUnavailable",
    "PlacementFailed",
    "Platform",
    "SubprocessRunner",
    "TargetClass",
    "build_crate",
    "build_crates",
    "classify",
    "clean_crates",
    "detect_platform",
    "discover_crates",
    "resolve_flags",
    "test_crates",
]
