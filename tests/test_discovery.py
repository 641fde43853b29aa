"""Discovery tests for filesystem walks and external listers."""

from __future__ import annotations

import logging
import os
from contextlib import nullcontext
from pathlib import Path

import pytest

from prols.discovery import DiscoveryError, discover_files, has_ignored_component
from prols.lister import ListerError, run_lister, split_lister_output
from prols.sniff import DetectionError
from tests.helpers_fs import paths_of, unix_socket, write_bytes, write_file


class _FakeRunner:
    def __init__(self, output: str) -> None:
        self.output = output
        self.calls: list[tuple[list[str], Path]] = []

    def __call__(self, command: list[str], cwd: Path) -> str:
        self.calls.append((list(command), cwd))
        return self.output


def test_walk_emits_regular_files_in_lexical_order(tmp_path: Path) -> None:
    write_file(tmp_path, "b.txt")
    write_file(tmp_path, "a/z.py")
    write_file(tmp_path, "a/b/c.py")
    write_file(tmp_path, "c.go")

    files = discover_files(tmp_path)
    assert paths_of(files) == ["a/b/c.py", "a/z.py", "b.txt", "c.go"]
    assert all(item.score == 0 and item.binary is False for item in files)


def test_walk_prunes_ignored_directories_at_any_depth(tmp_path: Path) -> None:
    write_file(tmp_path, "main.go")
    write_file(tmp_path, ".git/HEAD")
    write_file(tmp_path, "web/node_modules/pkg/index.js")
    write_file(tmp_path, "web/app.js")
    write_file(tmp_path, "node_modules.txt")

    files = discover_files(tmp_path, ignore_dirs=[".git", "node_modules"])
    assert paths_of(files) == ["main.go", "node_modules.txt", "web/app.js"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_walk_skips_symlinks(tmp_path: Path) -> None:
    write_file(tmp_path, "real/file.py")
    os.symlink(tmp_path / "real" / "file.py", tmp_path / "link.py")
    os.symlink(tmp_path / "real", tmp_path / "linked_dir")

    assert paths_of(discover_files(tmp_path)) == ["real/file.py"]


def test_walk_with_binary_detection_flags_binary_content(tmp_path: Path) -> None:
    write_file(tmp_path, "main.go", "package main\n")
    write_bytes(tmp_path, "tool.bin", b"\x00\x01\x02")
    write_bytes(tmp_path, "logo.png", b"\x89PNG\r\n\x1a\n\x00\x00")

    files = discover_files(tmp_path, detect_binary=True)
    assert {item.path: item.binary for item in files} == {
        "logo.png": False,
        "main.go": False,
        "tool.bin": True,
    }


def test_walk_without_detection_never_flags_binary(tmp_path: Path) -> None:
    write_bytes(tmp_path, "tool.bin", b"\x00\x01\x02")
    files = discover_files(tmp_path, detect_binary=False)
    assert files[0].binary is False


def test_lister_paths_are_filtered_and_deduplicated(tmp_path: Path) -> None:
    write_file(tmp_path, "main.go")
    write_file(tmp_path, "pkg/util.go")
    write_file(tmp_path, "vendor/dep/dep.go")
    (tmp_path / "emptydir").mkdir()
    runner = _FakeRunner(
        "\n".join(
            [
                "pkg/util.go",
                "vendor/dep/dep.go",
                "stale/deleted.go",
                "emptydir",
                "",
                "main.go",
                "pkg/util.go",
            ]
        )
        + "\n"
    )

    files = discover_files(
        tmp_path,
        ignore_dirs=["vendor"],
        lister=["git", "ls-files"],
        runner=runner,
    )
    assert paths_of(files) == ["pkg/util.go", "main.go"]
    assert runner.calls == [(["git", "ls-files"], tmp_path)]


def test_lister_stat_failures_are_traced_not_raised(tmp_path: Path, caplog) -> None:
    runner = _FakeRunner("gone.txt\n")
    logger = logging.getLogger("tests.discovery")
    with caplog.at_level(logging.DEBUG, logger="tests.discovery"):
        files = discover_files(tmp_path, lister=["ls"], runner=runner, logger=logger)
    assert files == []
    assert any("skipping gone.txt" in record.getMessage() for record in caplog.records)


def test_lister_mode_detection_failure_is_fatal(tmp_path: Path) -> None:
    write_file(tmp_path, "a.go", "package a\n")
    with unix_socket(tmp_path, "sock"):
        with pytest.raises(DetectionError, match="sock"):
            discover_files(
                tmp_path,
                lister=["ls"],
                runner=_FakeRunner("a.go\nsock\n"),
                detect_binary=True,
            )


def test_walk_missing_root_raises_discovery_error(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError, match="unable to read directory .*missing"):
        discover_files(tmp_path / "missing")


def test_walk_unreadable_subdirectory_raises_discovery_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_file(tmp_path, "a.go")
    write_file(tmp_path, "locked/b.go")
    real_scandir = os.scandir

    def scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)
    with pytest.raises(DiscoveryError, match="unable to read directory .*locked"):
        discover_files(tmp_path)


def test_walk_stat_failure_raises_discovery_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    class _VanishedEntry:
        name = "vanished.go"
        path = str(tmp_path / "vanished.go")

        def stat(self, *, follow_symlinks: bool = True):
            raise FileNotFoundError(2, "No such file or directory", self.path)

    monkeypatch.setattr(os, "scandir", lambda path: nullcontext([_VanishedEntry()]))
    with pytest.raises(DiscoveryError, match="unable to stat vanished.go"):
        discover_files(tmp_path)


def test_lister_failure_propagates(tmp_path: Path) -> None:
    def failing(command: list[str], cwd: Path) -> str:
        raise ListerError(command, "exit status 1")

    with pytest.raises(ListerError, match="git ls-files"):
        discover_files(tmp_path, lister=["git", "ls-files"], runner=failing)


def test_has_ignored_component_checks_directories_only() -> None:
    ignored = {"vendor", ".git"}
    assert has_ignored_component("vendor/a.go", ignored)
    assert has_ignored_component("src/.git/config", ignored)
    assert not has_ignored_component("vendor", ignored)
    assert not has_ignored_component("src/vendor.go", ignored)


def test_split_lister_output_keeps_first_occurrence() -> None:
    assert split_lister_output("b\na\n\n  \nb\nc") == ["b", "a", "c"]


def test_split_lister_output_splits_on_newlines_only() -> None:
    output = "a.go\r\nform\x0cfeed.txt\nline\u2028sep.txt\nvt\x0bfile\n"
    assert split_lister_output(output) == [
        "a.go",
        "form\x0cfeed.txt",
        "line\u2028sep.txt",
        "vt\x0bfile",
    ]


def test_run_lister_returns_stdout(tmp_path: Path) -> None:
    write_file(tmp_path, "one.txt")
    assert run_lister(["ls"], tmp_path).split() == ["one.txt"]


def test_run_lister_failures_name_the_command(tmp_path: Path) -> None:
    with pytest.raises(ListerError, match="prols-no-such-lister --all"):
        run_lister(["prols-no-such-lister", "--all"], tmp_path)

    with pytest.raises(ListerError, match="exit status 3") as excinfo:
        run_lister(["sh", "-c", "exit 3"], tmp_path)
    assert excinfo.value.command == ["sh", "-c", "exit 3"]

    with pytest.raises(ListerError, match="UTF-8"):
        run_lister(["sh", "-c", "printf '\\377'"], tmp_path)

    with pytest.raises(ListerError, match="empty command"):
        run_lister([], tmp_path)
