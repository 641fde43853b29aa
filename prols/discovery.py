"""Candidate file discovery."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path, PurePosixPath

from prols.files import FileEntry
from prols.lister import ListerRunner, run_lister, split_lister_output
from prols.sniff import detect_content_type, is_binary

_LOGGER = logging.getLogger("prols.discovery")


class DiscoveryError(RuntimeError):
    """Raised when the project tree cannot be traversed."""


def discover_files(
    root: Path,
    *,
    ignore_dirs: list[str] | None = None,
    lister: list[str] | None = None,
    detect_binary: bool = False,
    runner: ListerRunner = run_lister,
    logger: logging.Logger | None = None,
) -> list[FileEntry]:
    """Return every candidate file under ``root`` in discovery order.

    Without a ``lister`` the tree is walked in lexical order; otherwise the
    command's output supplies the paths. Binary sniffing only happens when
    ``detect_binary`` is set.
    """
    log = logger or _LOGGER
    ignored = set(ignore_dirs or [])

    if lister:
        paths = _list_with_command(root, lister, ignored, runner=runner, log=log)
    else:
        paths = _walk_tree(root, ignored)

    files: list[FileEntry] = []
    for path in paths:
        entry = FileEntry(path=path)
        if detect_binary:
            entry.binary = is_binary(detect_content_type(root / path))
        files.append(entry)

    log.debug("discovered %d files (binary detection: %s)", len(files), detect_binary)
    return files


def has_ignored_component(path: str, ignored: set[str]) -> bool:
    """Return True when any directory in ``path`` is an ignored name."""
    return any(part in ignored for part in PurePosixPath(path).parts[:-1])


def _list_with_command(
    root: Path,
    lister: list[str],
    ignored: set[str],
    *,
    runner: ListerRunner,
    log: logging.Logger,
) -> list[str]:
    output = runner(lister, root)
    paths: list[str] = []
    for path in split_lister_output(output):
        if has_ignored_component(path, ignored):
            continue
        try:
            info = os.stat(root / path)
        except OSError as exc:
            log.debug("skipping %s: %s", path, exc)
            continue
        if stat.S_ISDIR(info.st_mode):
            continue
        paths.append(path)
    return paths


def _walk_tree(root: Path, ignored: set[str]) -> list[str]:
    paths: list[str] = []
    _walk_dir(root, PurePosixPath(), ignored, paths)
    return paths


def _walk_dir(directory: Path, prefix: PurePosixPath, ignored: set[str], out: list[str]) -> None:
    try:
        with os.scandir(directory) as scanner:
            entries = sorted(scanner, key=lambda item: item.name)
    except OSError as exc:
        raise DiscoveryError(f"unable to read directory {directory}: {exc}") from exc

    for entry in entries:
        relative = prefix / entry.name
        try:
            mode = entry.stat(follow_symlinks=False).st_mode
        except OSError as exc:
            raise DiscoveryError(f"unable to stat {relative}: {exc}") from exc

        if stat.S_ISDIR(mode):
            if entry.name in ignored:
                continue
            _walk_dir(Path(entry.path), relative, ignored, out)
        elif stat.S_ISREG(mode):
            out.append(relative.as_posix())
