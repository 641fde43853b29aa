"""Output rendering."""

from __future__ import annotations

import json
from typing import Any

from prols import __version__
from prols.files import FileEntry


def render_plain(files: list[FileEntry]) -> str:
    """Render one path per line in final order."""
    return "\n".join(file.path for file in files)


def render_json(files: list[FileEntry], *, sources: list[str]) -> str:
    """Render stable JSON output for scripting."""
    return json.dumps(build_json_payload(files, sources=sources), sort_keys=True)


def build_json_payload(files: list[FileEntry], *, sources: list[str]) -> dict[str, Any]:
    return {
        "files": [file.to_dict() for file in files],
        "meta": {
            "config_sources": list(sources),
            "count": len(files),
            "version": __version__,
        },
    }
