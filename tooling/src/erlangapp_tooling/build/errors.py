"""Failure kinds for crate builds.

Crate-fatal: MetadataUnavailable. Target-fatal: CompileFailed, ArtifactMissing,
ArtifactCollision, PlacementFailed. Run-fatal: DiscoveryIOError.
"""

from __future__ import annotations

from pathlib import Path


class CrateBuildError(Exception):
    """Base for every failure the orchestrator records. crate/target are names, not paths."""

    kind = "build error"

    def __init__(self, crate: str, target: str | None = None, reason: str = "") -> None:
        self.crate = crate
        self.target = target
        self.reason = reason
        super().__init__(str(self))

    def _where(self) -> str:
        if self.target is None:
            return f"crate {self.crate}"
        return f"crate {self.crate}, target {self.target}"

    def __str__(self) -> str:
        msg = f"{self.kind} ({self._where()})"
        return f"{msg}: {self.reason}" if self.reason else msg


class MetadataUnavailable(CrateBuildError):
    kind = "metadata unavailable"


class CompileFailed(CrateBuildError):
    kind = "compile failed"

    def __init__(
        self,
        crate: str,
        target: str,
        exit_status: int | None,
        reason: str = "",
    ) -> None:
        self.exit_status = exit_status
        if not reason and exit_status is not None:
            reason = f"cargo exited with status {exit_status}"
        super().__init__(crate, target, reason)


class _PathError(CrateBuildError):
    def __init__(self, crate: str, target: str | None, path: Path, reason: str = "") -> None:
        self.path = path
        super().__init__(crate, target, reason or str(path))


class ArtifactMissing(_PathError):
    """Build reported success but the expected output file is not there."""

    kind = "artifact missing"


class ArtifactCollision(_PathError):
    """Another target of the same crate already placed an artifact at this path in this run."""

    kind = "artifact collision"


class PlacementFailed(_PathError):
    kind = "placement failed"


class DiscoveryIOError(Exception):
    """The crates root itself cannot be listed; nothing can be built."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"cannot read crates directory {path} ({cause})")
