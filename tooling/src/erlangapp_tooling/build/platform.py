"""Host platform identifier and the extra rustc flags each (target class, platform) pair needs."""

from __future__ import annotations

import sys
from enum import Enum

from erlangapp_tooling.build.targets import TargetClass


class Platform(Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    FREEBSD = "freebsd"

    @classmethod
    def parse(cls, value: str) -> Platform:
        """Platform from a CLI/config string (linux, macos, darwin, windows, freebsd)."""
        v = value.strip().lower()
        if v == "darwin":
            return cls.MACOS
        try:
            return cls(v)
        except ValueError:
            names = ", ".join(p.value for p in cls)
            msg = f"Unknown platform: {value}. Use {names}."
            raise ValueError(msg) from None


def detect_platform(sys_platform: str | None = None) -> Platform:
    """Platform of the running interpreter (or of the given sys.platform string)."""
    p = sys.platform if sys_platform is None else sys_platform
    if p == "darwin":
        return Platform.MACOS
    if p in ("win32", "cygwin"):
        return Platform.WINDOWS
    if p.startswith("freebsd"):
        return Platform.FREEBSD
    return Platform.LINUX


# macOS refuses to link a dylib with undefined symbols; the NIF API symbols only
# exist in the VM process, so resolution is deferred to load time.
_MACOS_DYLIB_FLAGS = ("--codegen", "link-args=-flat_namespace -undefined suppress")

FLAG_TABLE: dict[tuple[TargetClass, Platform], tuple[str, ...]] = {
    (TargetClass.LOADABLE_MODULE, Platform.LINUX): (),
    (TargetClass.LOADABLE_MODULE, Platform.MACOS): _MACOS_DYLIB_FLAGS,
    (TargetClass.LOADABLE_MODULE, Platform.WINDOWS): (),
    (TargetClass.LOADABLE_MODULE, Platform.FREEBSD): (),
    (TargetClass.EXECUTABLE, Platform.LINUX): (),
    (TargetClass.EXECUTABLE, Platform.MACOS): (),
    (TargetClass.EXECUTABLE, Platform.WINDOWS): (),
    (TargetClass.EXECUTABLE, Platform.FREEBSD): (),
}


def resolve_flags(target_class: TargetClass, platform: Platform) -> tuple[str, ...]:
    """rustc arguments to append after `--` for this class on this platform."""
    return FLAG_TABLE[(target_class, platform)]
