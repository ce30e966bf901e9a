"""Build targets as reported by cargo metadata, and their classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class TargetClass(Enum):
    LOADABLE_MODULE = "loadable-module"  # NIF: dlopen'ed into the VM
    EXECUTABLE = "executable"  # port program: spawned as its own OS process


# cargo kind -> class. Everything else (lib, rlib, staticlib, proc-macro, test,
# bench, example, custom-build) is internal to the crate and never packaged.
KIND_CLASSES: dict[str, TargetClass] = {
    "cdylib": TargetClass.LOADABLE_MODULE,
    "dylib": TargetClass.LOADABLE_MODULE,
    "bin": TargetClass.EXECUTABLE,
}


def classify(kind: str) -> TargetClass | None:
    """Class for one cargo kind string, or None when the kind is not orchestrated."""
    return KIND_CLASSES.get(kind)


def classify_kinds(kinds: tuple[str, ...] | list[str]) -> TargetClass | None:
    """Class for a target's kind list. A bin kind wins; otherwise the first classified kind."""
    if "bin" in kinds:
        return TargetClass.EXECUTABLE
    for kind in kinds:
        target_class = classify(kind)
        if target_class is not None:
            return target_class
    return None


@dataclass(frozen=True)
class BuildTarget:
    """One compilation unit of a crate. Re-derived from metadata on every run."""

    name: str
    kinds: tuple[str, ...]
    crate_dir: Path
    target_dir: Path | None = None  # cargo metadata target_directory

    @property
    def crate_name(self) -> str:
        return self.crate_dir.name

    @property
    def target_class(self) -> TargetClass | None:
        return classify_kinds(self.kinds)
