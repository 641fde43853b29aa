"""Rule scoring and score ordering."""

from __future__ import annotations

import logging

from prols.files import FileEntry
from prols.rules import Rule

_LOGGER = logging.getLogger("prols.scoring")


def score_files(
    files: list[FileEntry],
    rules: list[Rule],
    *,
    logger: logging.Logger | None = None,
) -> list[FileEntry]:
    """Add the delta of every matching rule to each file's score.

    Files are scored independently of each other, and a file's total does not
    depend on rule order; order only affects the sequence of traced matches.
    """
    log = logger or _LOGGER
    for file in files:
        for rule in rules:
            if rule.matches(file):
                log.debug("%s passed %s", file.path, rule)
                file.score += rule.score
    return files


def sort_by_score(files: list[FileEntry]) -> list[FileEntry]:
    """Return a stable ascending ordering by score."""
    return sorted(files, key=lambda file: file.score)
