"""Shared CLI setup: config loading, logging, and registry construction."""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from skillbox_core.config import SkillboxConfig
from skillbox_core.errors import ConfigError
from skillbox_core.logging import setup_logging_from_config
from skillbox_core.types import SearchSpec
from skillbox_skills import SkillRegistry

err_console = Console(stderr=True)

PathOption = typer.Option(
    None,
    "--path",
    "-p",
    help="Extra directory to search for skills (repeatable).",
)
RecursiveOption = typer.Option(
    False,
    "--recursive",
    "-r",
    help="Scan the extra --path directories recursively.",
)


def load_config(
    paths: list[Path] | None = None, recursive: bool = False
) -> SkillboxConfig:
    """Load layered config and append CLI search paths."""
    try:
        config = SkillboxConfig.load()
    except ConfigError as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(1) from None

    extra = [SearchSpec(path=p, recursive=recursive) for p in paths or []]
    config = config.with_extra_paths(extra)
    setup_logging_from_config(config.logging)
    return config


def build_registry(
    paths: list[Path] | None = None, recursive: bool = False
) -> SkillRegistry:
    """Build a registry and run discovery over configured + CLI paths."""
    return SkillRegistry.from_config(load_config(paths, recursive))
