"""Base matcher protocol and rule model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from prols.files import FileEntry


class Matcher(Protocol):
    """Protocol for a single predicate over a file's attributes."""

    inspects_binary: bool

    def matches(self, file: FileEntry) -> bool:
        """Return True when the file satisfies this predicate."""

    def describe(self) -> str:
        """Return a short human-readable form for tracing."""


@dataclass(frozen=True, slots=True)
class Rule:
    """A scoring directive: all matchers must hold for ``score`` to apply."""

    name: str
    score: int
    matchers: tuple[Matcher, ...]

    @property
    def inspects_binary(self) -> bool:
        return any(matcher.inspects_binary for matcher in self.matchers)

    def matches(self, file: FileEntry) -> bool:
        return all(matcher.matches(file) for matcher in self.matchers)

    def __str__(self) -> str:
        points = f"+{self.score}" if self.score >= 0 else str(self.score)
        conditions = " ".join(matcher.describe() for matcher in self.matchers)
        label = f"{self.name} " if self.name else ""
        return f"{label}[{conditions}] {points}"
