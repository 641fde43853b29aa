"""Candidate file model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(slots=True)
class FileEntry:
    """A single discovered candidate file."""

    path: str
    score: int = 0
    binary: bool = False

    @property
    def depth(self) -> int:
        return len(PurePosixPath(self.path).parts)

    def to_dict(self) -> dict[str, object]:
        return {"path": self.path, "score": self.score, "binary": self.binary}
