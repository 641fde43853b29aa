"""Predicate variants a rule can be built from."""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field

from prols.files import FileEntry


@dataclass(frozen=True, slots=True)
class GlobMatcher:
    """Shell-style glob over the full relative path; ``*`` also crosses ``/``."""

    pattern: str
    inspects_binary: bool = field(default=False, init=False)

    def matches(self, file: FileEntry) -> bool:
        return fnmatch.fnmatchcase(file.path, self.pattern)

    def describe(self) -> str:
        return f"glob={self.pattern}"


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """Regular expression searched anywhere in the relative path."""

    pattern: re.Pattern[str]
    inspects_binary: bool = field(default=False, init=False)

    def matches(self, file: FileEntry) -> bool:
        return self.pattern.search(file.path) is not None

    def describe(self) -> str:
        return f"regex={self.pattern.pattern}"


@dataclass(frozen=True, slots=True)
class PrefixMatcher:
    prefix: str
    inspects_binary: bool = field(default=False, init=False)

    def matches(self, file: FileEntry) -> bool:
        return file.path.startswith(self.prefix)

    def describe(self) -> str:
        return f"prefix={self.prefix}"


@dataclass(frozen=True, slots=True)
class SuffixMatcher:
    suffix: str
    inspects_binary: bool = field(default=False, init=False)

    def matches(self, file: FileEntry) -> bool:
        return file.path.endswith(self.suffix)

    def describe(self) -> str:
        return f"suffix={self.suffix}"


@dataclass(frozen=True, slots=True)
class BinaryMatcher:
    """Matches files whose content-type classification equals ``expected``."""

    expected: bool
    inspects_binary: bool = field(default=True, init=False)

    def matches(self, file: FileEntry) -> bool:
        return file.binary is self.expected

    def describe(self) -> str:
        return f"binary={str(self.expected).lower()}"
