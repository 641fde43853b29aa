"""Presort ordering tests."""

from __future__ import annotations

import pytest

from prols.config import ConfigError, PreSortDirective
from prols.presort import apply_presort
from tests.helpers_fs import entries, paths_of


def test_depth_reverse_puts_deeper_files_first() -> None:
    files = entries("a.go", "sub/b.go", "sub/c.txt")
    ordered = apply_presort(files, [PreSortDirective("depth", reverse=True)])
    assert paths_of(ordered) == ["sub/b.go", "sub/c.txt", "a.go"]


def test_depth_ascending_puts_shallow_files_first() -> None:
    files = entries("x/y/z.py", "sub/b.go", "a.go")
    ordered = apply_presort(files, [PreSortDirective("depth")])
    assert paths_of(ordered) == ["a.go", "sub/b.go", "x/y/z.py"]


def test_path_ordering_and_reverse() -> None:
    files = entries("b.txt", "c.txt", "a.txt")
    assert paths_of(apply_presort(files, [PreSortDirective("path")])) == [
        "a.txt",
        "b.txt",
        "c.txt",
    ]
    assert paths_of(apply_presort(files, [PreSortDirective("path", reverse=True)])) == [
        "c.txt",
        "b.txt",
        "a.txt",
    ]


def test_ties_fall_through_to_next_directive() -> None:
    files = entries("lib/a.py", "z.py", "lib/b.py", "b.py")
    ordered = apply_presort(
        files,
        [PreSortDirective("depth"), PreSortDirective("path", reverse=True)],
    )
    assert paths_of(ordered) == ["z.py", "b.py", "lib/b.py", "lib/a.py"]


def test_full_ties_keep_incoming_order() -> None:
    files = entries("q.py", "b.py", "m.py")
    assert paths_of(apply_presort(files, [PreSortDirective("depth")])) == [
        "q.py",
        "b.py",
        "m.py",
    ]
    assert paths_of(apply_presort(files, [])) == ["q.py", "b.py", "m.py"]


def test_presort_is_idempotent() -> None:
    directives = [PreSortDirective("depth", reverse=True), PreSortDirective("path")]
    files = entries("b/x.py", "a.py", "c/d/e.py", "b/a.py", "z.py")
    once = apply_presort(files, directives)
    twice = apply_presort(once, directives)
    assert paths_of(twice) == paths_of(once)


def test_presort_does_not_touch_scores_or_flags() -> None:
    files = entries("b.py", "a.py")
    files[0].score = 7
    files[1].binary = True
    ordered = apply_presort(files, [PreSortDirective("path")])
    assert [(item.path, item.score, item.binary) for item in ordered] == [
        ("a.py", 0, True),
        ("b.py", 7, False),
    ]


def test_unknown_field_is_configuration_error() -> None:
    with pytest.raises(ConfigError, match="presort.field"):
        apply_presort(entries("a.py"), [PreSortDirective("mtime")])
