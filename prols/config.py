"""Configuration loading for prols."""

from __future__ import annotations

import os
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_GLOBAL_CONFIG = "$HOME/.config/prols/prols.toml"
LOCAL_CONFIG_FILENAME = ".prols.toml"
PRESORT_FIELDS = ("depth", "path")

_RULE_MATCH_KEYS = ("glob", "regex", "prefix", "suffix", "binary")
_RULE_KEYS = {"name", "score", *_RULE_MATCH_KEYS}
_PRESORT_KEYS = {"field", "reverse"}
_TOP_LEVEL_KEYS = {"ignore_dirs", "lister", "rules", "presort", "reverse", "hide_negative"}


class ConfigError(ValueError):
    """Raised when configuration is unreadable or invalid."""


@dataclass(slots=True)
class RuleConfig:
    """One configured scoring rule before compilation."""

    score: int
    name: str = ""
    glob: str | None = None
    regex: str | None = None
    prefix: str | None = None
    suffix: str | None = None
    binary: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"score": self.score}
        if self.name:
            payload["name"] = self.name
        for key in _RULE_MATCH_KEYS:
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True, slots=True)
class PreSortDirective:
    """One presort ordering criterion."""

    field: str
    reverse: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "reverse": self.reverse}


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from config files."""

    ignore_dirs: list[str] = field(default_factory=list)
    lister: list[str] = field(default_factory=list)
    rules: list[RuleConfig] = field(default_factory=list)
    presort: list[PreSortDirective] = field(default_factory=list)
    reverse: bool = False
    hide_negative: bool = False
    sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ignore_dirs": list(self.ignore_dirs),
            "lister": list(self.lister),
            "rules": [rule.to_dict() for rule in self.rules],
            "presort": [directive.to_dict() for directive in self.presort],
            "reverse": self.reverse,
            "hide_negative": self.hide_negative,
            "sources": list(self.sources),
        }


def resolve_global_path(raw: str | Path | None = None) -> Path:
    """Expand environment variables and ``~`` in a global config path."""
    value = str(raw) if raw is not None else DEFAULT_GLOBAL_CONFIG
    return Path(os.path.expanduser(os.path.expandvars(value)))


def load_app_config(root: Path, global_path: Path | None = None) -> AppConfig:
    """Load the global config and overlay the project-local one.

    An explicit ``global_path`` must exist; the default location is optional.
    Top-level keys found in ``<root>/.prols.toml`` replace the global ones.
    """
    mapping: dict[str, Any] = {}
    sources: list[str] = []

    if global_path is not None:
        resolved = global_path if global_path.is_absolute() else (root / global_path)
        if not resolved.exists():
            raise ConfigError(f"Config file does not exist: {resolved}")
    else:
        resolved = resolve_global_path()

    if resolved.exists():
        mapping.update(_load_toml(resolved))
        sources.append(str(resolved))

    local_path = root / LOCAL_CONFIG_FILENAME
    if local_path.exists() and local_path.resolve() != resolved.resolve():
        mapping.update(_load_toml(local_path))
        sources.append(str(local_path))

    return _from_mapping(mapping, sources=sources)


def validate_presort_field(raw: Any, field_name: str = "presort.field") -> str:
    """Return a known presort field or raise ``ConfigError``."""
    if not isinstance(raw, str) or raw.lower() not in PRESORT_FIELDS:
        choices = ", ".join(PRESORT_FIELDS)
        raise ConfigError(f"{field_name} must be one of: {choices}, got {raw!r}")
    return raw.lower()


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'ignore_dirs = [".git", "node_modules", "vendor", "__pycache__"]',
            "",
            "# Use an external command instead of walking the tree.",
            '# lister = ["git", "ls-files"]',
            "",
            "reverse = false",
            "hide_negative = false",
            "",
            "[[presort]]",
            'field = "depth"',
            "reverse = true",
            "",
            "[[presort]]",
            'field = "path"',
            "",
            "[[rules]]",
            'name = "go sources"',
            'glob = "*.go"',
            "score = 10",
            "",
            "[[rules]]",
            'name = "tests"',
            'regex = "_test\\\\.go$"',
            "score = -5",
            "",
            "[[rules]]",
            'name = "binaries"',
            "binary = true",
            "score = -100",
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    return loaded


def _from_mapping(mapping: dict[str, Any], *, sources: list[str]) -> AppConfig:
    unknown = sorted(key for key in mapping if key not in _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    return AppConfig(
        ignore_dirs=_as_str_list(mapping.get("ignore_dirs"), "ignore_dirs"),
        lister=_parse_lister(mapping.get("lister")),
        rules=[
            _parse_rule(item, f"rules[{index}]")
            for index, item in enumerate(_as_table_list(mapping.get("rules"), "rules"))
        ],
        presort=[
            _parse_presort(item, f"presort[{index}]")
            for index, item in enumerate(_as_table_list(mapping.get("presort"), "presort"))
        ],
        reverse=_as_bool(mapping.get("reverse", False), "reverse"),
        hide_negative=_as_bool(mapping.get("hide_negative", False), "hide_negative"),
        sources=sources,
    )


def _parse_lister(value: Any) -> list[str]:
    if isinstance(value, str):
        value = shlex.split(value)
    lister = _as_str_list(value, "lister")
    if value is not None and not lister:
        raise ConfigError("lister must name a command when set")
    return lister


def _parse_rule(item: dict[str, Any], field_name: str) -> RuleConfig:
    unknown = sorted(key for key in item if key not in _RULE_KEYS)
    if unknown:
        raise ConfigError(f"{field_name} has unknown keys: {', '.join(unknown)}")
    if not any(key in item for key in _RULE_MATCH_KEYS):
        choices = ", ".join(_RULE_MATCH_KEYS)
        raise ConfigError(f"{field_name} must set at least one of: {choices}")
    if "score" not in item:
        raise ConfigError(f"{field_name}.score is required")

    binary = item.get("binary")
    return RuleConfig(
        score=_as_int(item["score"], f"{field_name}.score"),
        name=_as_str(item.get("name", ""), f"{field_name}.name"),
        glob=_as_optional_str(item.get("glob"), f"{field_name}.glob"),
        regex=_as_optional_str(item.get("regex"), f"{field_name}.regex"),
        prefix=_as_optional_str(item.get("prefix"), f"{field_name}.prefix"),
        suffix=_as_optional_str(item.get("suffix"), f"{field_name}.suffix"),
        binary=None if binary is None else _as_bool(binary, f"{field_name}.binary"),
    )


def _parse_presort(item: dict[str, Any], field_name: str) -> PreSortDirective:
    unknown = sorted(key for key in item if key not in _PRESORT_KEYS)
    if unknown:
        raise ConfigError(f"{field_name} has unknown keys: {', '.join(unknown)}")
    return PreSortDirective(
        field=validate_presort_field(item.get("field"), f"{field_name}.field"),
        reverse=_as_bool(item.get("reverse", False), f"{field_name}.reverse"),
    )


def _as_table_list(value: Any, field_name: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list of tables")
    output: list[dict[str, Any]] = []
    for item in value:
        if not isinstance(item, dict):
            raise ConfigError(f"{field_name} must be a list of tables")
        output.append(item)
    return output


def _as_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"{field_name} must be a list of strings")
        items.append(item)
    return items


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{field_name} must be a string")
    return value


def _as_optional_str(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    return _as_str(value, field_name)


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigError(f"{field_name} must be an integer")
    return raw


def _as_bool(raw: Any, field_name: str) -> bool:
    if not isinstance(raw, bool):
        raise ConfigError(f"{field_name} must be a boolean")
    return raw
