"""Deterministic base ordering applied before scoring."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from prols.config import PreSortDirective, validate_presort_field
from prols.files import FileEntry

_SORT_KEYS: dict[str, Callable[[FileEntry], Any]] = {
    "depth": lambda file: file.depth,
    "path": lambda file: file.path,
}


def apply_presort(files: list[FileEntry], directives: list[PreSortDirective]) -> list[FileEntry]:
    """Return ``files`` ordered by ``directives`` with lexicographic precedence.

    The first directive decides; ties fall through to the next one, and files
    that tie on every directive keep their incoming order. This is done as a
    chain of stable sorts from the least significant directive to the most
    significant one.
    """
    keys = [
        (_SORT_KEYS[validate_presort_field(directive.field)], directive.reverse)
        for directive in directives
    ]
    ordered = list(files)
    for key, reverse in reversed(keys):
        ordered.sort(key=key, reverse=reverse)
    return ordered
