"""Process spawning seam for cargo invocations. Tests pass a fake runner instead of spawning cargo."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

log = logging.getLogger(__name__)


class CommandRunner(Protocol):
    def run(
        self,
        cmd: Sequence[str],
        cwd: Path,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]: ...


class SubprocessRunner:
    """Run commands with subprocess.run and wait for them.

    capture=True collects stdout/stderr as text (metadata queries). Otherwise output
    goes straight to the console so compiler diagnostics reach the user unmodified.
    Raises OSError if the command cannot be started.
    """

    def run(
        self,
        cmd: Sequence[str],
        cwd: Path,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        log.debug("Running %s in %s", " ".join(cmd), cwd)
        if capture:
            return subprocess.run(list(cmd), cwd=cwd, capture_output=True, text=True)
        return subprocess.run(list(cmd), cwd=cwd, text=True)
