"""External lister subprocess helpers."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path
from subprocess import CalledProcessError, run

ListerRunner = Callable[[list[str], Path], str]
"""Given a command line and working directory, return the command's stdout."""


class ListerError(RuntimeError):
    """Raised when the external lister cannot produce a file list."""

    def __init__(self, command: list[str], reason: str) -> None:
        self.command = list(command)
        self.reason = reason
        super().__init__(f"unable to run external lister {shlex.join(command)}: {reason}")


def run_lister(command: list[str], cwd: Path) -> str:
    """Run a lister command in ``cwd`` and return its decoded stdout."""
    if not command:
        raise ListerError(command, "empty command")

    try:
        completed = run(command, cwd=cwd, check=True, capture_output=True)
    except CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        raise ListerError(command, stderr or f"exit status {exc.returncode}") from exc
    except OSError as exc:
        raise ListerError(command, str(exc)) from exc

    try:
        return completed.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ListerError(command, f"output is not valid UTF-8: {exc}") from exc


def split_lister_output(output: str) -> list[str]:
    """Split newline-separated lister output into unique, non-empty paths.

    Only ``\\n`` separates entries; a trailing ``\\r`` is dropped from each.
    """
    seen: set[str] = set()
    paths: list[str] = []
    for line in output.split("\n"):
        path = line.removesuffix("\r")
        if not path.strip() or path in seen:
            continue
        seen.add(path)
        paths.append(path)
    return paths
