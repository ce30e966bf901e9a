"""Shared CLI argument parsing: tool-owned flags (--app-root, --platform) and cargo option lookup."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any


def parse_flags(
    argv: list[str],
    *specs: tuple[str, str, Any, Callable[[str], Any] | None],
) -> tuple[dict[str, Any], list[str]]:
    """Parse optional --flag value from argv in one pass.

    Each spec is (key, flag_str, default, converter).
    E.g. ("app_root", "--app-root", Path.cwd, path_resolver).
    converter can be None for string values.
    Returns (dict of key -> value, remaining argv). Remaining argv is what gets
    forwarded to cargo, so only the listed flags are consumed, and nothing after
    "--" (those args belong to rustc or the test binary).
    """
    result: dict[str, Any] = {}
    for key, _flag, default, _converter in specs:
        result[key] = default() if callable(default) else default

    rest: list[str] = []
    i = 0
    while i < len(argv):
        if argv[i] == "--":
            rest.extend(argv[i:])
            break
        matched = False
        for key, flag_str, _default, converter in specs:
            if argv[i] == flag_str and i + 1 < len(argv):
                result[key] = converter(argv[i + 1]) if converter else argv[i + 1]
                i += 2
                matched = True
                break
            if argv[i].startswith(flag_str + "="):
                value = argv[i][len(flag_str) + 1 :]
                result[key] = converter(value) if converter else value
                i += 1
                matched = True
                break
        if not matched:
            rest.append(argv[i])
            i += 1
    return result, rest


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --app-root)."""
    return Path(s).resolve()


def find_option_value(args: list[str], key: str) -> str | None:
    """Value of a cargo option written as key=value, key= value, key =value, key = value or key value.

    Returns None when the key is absent or has no value (e.g. a trailing "key=").
    """
    i = 0
    n = len(args)
    while i < n:
        arg = args[i]
        if arg.startswith(key + "="):
            value = arg[len(key) + 1 :]
            if value:
                return value  # key=value
            return args[i + 1] if i + 1 < n else None  # key= value
        if arg == key:
            if i + 1 >= n:
                return None
            nxt = args[i + 1]
            if nxt == "=":
                return args[i + 2] if i + 2 < n else None  # key = value
            if nxt.startswith("="):
                return nxt[1:] or None  # key =value
            if not nxt.startswith("-"):
                return nxt  # key value
        i += 1
    return None
