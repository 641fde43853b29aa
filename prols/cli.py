"""CLI entrypoint for prols."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from prols import __version__
from prols.config import (
    DEFAULT_GLOBAL_CONFIG,
    AppConfig,
    ConfigError,
    default_config_template,
    load_app_config,
    resolve_global_path,
)
from prols.discovery import DiscoveryError
from prols.lister import ListerError
from prols.logging_utils import configure_logging
from prols.output import render_json, render_plain
from prols.pipeline import rank_files
from prols.rules import Rule, build_rules, needs_binary_detection
from prols.sniff import DetectionError

app = typer.Typer(
    name="prols",
    help="Flexible project-wide file listing based on rules and scores.",
)

GlobalOption = Annotated[
    Path | None,
    typer.Option(
        "--global",
        "-c",
        help="Use specified global prols file.",
        show_default=DEFAULT_GLOBAL_CONFIG,
    ),
]
RootOption = Annotated[Path, typer.Option(help="Project root to rank.")]
FormatOption = Annotated[str, typer.Option(help="Output format: plain|json.")]


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    global_path: GlobalOption = None,
    root: RootOption = Path("."),
    format: FormatOption = "plain",
    debug: Annotated[bool, typer.Option("--debug", help="Print debug messages.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
) -> None:
    """Print project files ordered by configured rule scores."""
    _ = version
    logger = configure_logging(debug)
    if ctx.invoked_subcommand is not None:
        return

    output_format = _format_or_raise(format, allowed={"plain", "json"})
    app_config = _load_config_or_raise(root, global_path)
    rules = _build_rules_or_raise(app_config)

    try:
        files = rank_files(app_config, root=root, rules=rules, logger=logger)
    except (ListerError, DiscoveryError, DetectionError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if output_format == "json":
        typer.echo(render_json(files, sources=app_config.sources))
    elif files:
        typer.echo(render_plain(files))


@app.command("config")
def config_command(
    global_path: GlobalOption = None,
    root: RootOption = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Show resolved configuration."""
    output_format = _format_or_raise(format, allowed={"human", "json"})
    app_config = _load_config_or_raise(root, global_path)
    rules = _build_rules_or_raise(app_config)
    payload = app_config.to_dict()
    payload["detect_binary"] = needs_binary_detection(rules)

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- sources: {payload['sources'] or 'defaults'}",
        f"- ignore_dirs: {payload['ignore_dirs']}",
        f"- lister: {payload['lister'] or 'filesystem walk'}",
        f"- presort: {[_describe_presort(item) for item in payload['presort']]}",
        f"- reverse: {payload['reverse']}",
        f"- hide_negative: {payload['hide_negative']}",
        f"- detect_binary: {payload['detect_binary']}",
        "- rules:",
    ]
    lines.extend(f"  - {rule}" for rule in rules)
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[
        Path | None,
        typer.Option(
            help="Output path for starter config TOML.",
            show_default=DEFAULT_GLOBAL_CONFIG,
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter global config file."""
    out_path = resolve_global_path(out).resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("config-validate")
def config_validate_command(
    global_path: GlobalOption = None,
    root: RootOption = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Validate configuration and report the compiled rules."""
    output_format = _format_or_raise(format, allowed={"human", "json"})
    app_config = _load_config_or_raise(root, global_path)
    rules = _build_rules_or_raise(app_config)
    payload = {
        "ok": True,
        "sources": app_config.sources,
        "rule_count": len(rules),
        "detect_binary": needs_binary_detection(rules),
    }
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo(
        "\n".join(
            [
                "Config is valid.",
                f"- sources: {payload['sources'] or 'defaults'}",
                f"- rule_count: {payload['rule_count']}",
                f"- detect_binary: {payload['detect_binary']}",
            ]
        )
    )


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(root: Path, global_path: Path | None) -> AppConfig:
    try:
        return load_app_config(root, global_path=global_path)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_rules_or_raise(app_config: AppConfig) -> list[Rule]:
    try:
        return build_rules(app_config.rules)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _format_or_raise(value: str, *, allowed: set[str]) -> str:
    output_format = value.lower()
    if output_format not in allowed:
        choices = ", ".join(sorted(allowed))
        raise typer.BadParameter(f"format must be one of: {choices}", param_hint="--format")
    return output_format


def _describe_presort(item: dict[str, object]) -> str:
    return f"{item['field']}{' (reverse)' if item['reverse'] else ''}"
