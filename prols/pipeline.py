"""The ranking pipeline: discover, presort, score, sort, reverse, filter."""

from __future__ import annotations

import logging
from pathlib import Path

from prols.config import AppConfig
from prols.discovery import discover_files
from prols.files import FileEntry
from prols.lister import ListerRunner, run_lister
from prols.presort import apply_presort
from prols.rules import Rule, build_rules, needs_binary_detection
from prols.scoring import score_files, sort_by_score

_LOGGER = logging.getLogger("prols.pipeline")


def rank_files(
    config: AppConfig,
    *,
    root: Path,
    runner: ListerRunner = run_lister,
    logger: logging.Logger | None = None,
    rules: list[Rule] | None = None,
) -> list[FileEntry]:
    """Run every stage once and return files in final output order."""
    log = logger or _LOGGER
    active_rules = rules if rules is not None else build_rules(config.rules)

    files = discover_files(
        root,
        ignore_dirs=config.ignore_dirs,
        lister=config.lister,
        detect_binary=needs_binary_detection(active_rules),
        runner=runner,
        logger=log,
    )
    files = apply_presort(files, config.presort)
    files = score_files(files, active_rules, logger=log)
    files = sort_by_score(files)

    if log.isEnabledFor(logging.DEBUG):
        for file in files:
            log.debug("%s %d", file.path, file.score)

    if config.reverse:
        files = reverse_files(files)
    if config.hide_negative:
        files = hide_negative_files(files)
    return files


def reverse_files(files: list[FileEntry]) -> list[FileEntry]:
    """Mirror the whole sequence."""
    return files[::-1]


def hide_negative_files(files: list[FileEntry]) -> list[FileEntry]:
    """Drop files scored below zero, keeping the order of the rest."""
    return [file for file in files if file.score >= 0]
