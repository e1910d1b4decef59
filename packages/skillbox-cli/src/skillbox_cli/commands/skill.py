"""Skill commands: list, info, validate, run."""
from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from skillbox_core.errors import SkillLoadError
from skillbox_skills import (
    MANIFEST_FILENAME,
    Skill,
    SkillRegistry,
    SkillValidator,
    split_front_matter,
)
from skillbox_tools import ScriptApprovalRequest, SkillTools

from skillbox_cli.session import PathOption, RecursiveOption, build_registry, load_config

console = Console()

skill_app = typer.Typer(
    no_args_is_help=True,
)


@skill_app.command("list")
def skill_list(
    paths: list[Path] | None = PathOption,
    recursive: bool = RecursiveOption,
) -> None:
    """List all discovered skills."""
    registry = build_registry(paths, recursive)

    if not len(registry):
        console.print(
            "[yellow]No skills found.[/yellow] "
            "Place skill directories in ./skills/ or ~/.skillbox/skills/."
        )
        raise typer.Exit(0)

    table = Table(
        title="Discovered Skills",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Name", style="bold")
    table.add_column("Description")
    table.add_column("Location", style="dim")

    for skill in sorted(registry, key=lambda s: s.name):
        table.add_row(
            escape(skill.name),
            escape(skill.description),
            str(skill.root_path),
        )

    console.print(table)
    console.print(f"\n[dim]{len(registry)} skill(s) found.[/dim]")


@skill_app.command("info")
def skill_info(
    name: str = typer.Argument(..., help="Name of the skill to inspect"),
    paths: list[Path] | None = PathOption,
    recursive: bool = RecursiveOption,
) -> None:
    """Show detailed information about a skill."""
    registry = build_registry(paths, recursive)

    match = registry.get(name)
    if match is None:
        console.print(f"[red]Skill not found:[/red] '{escape(name)}'")
        available = registry.names()
        if available:
            console.print(
                f"[dim]Available skills: {escape(', '.join(sorted(available)))}[/dim]"
            )
        raise typer.Exit(1)

    meta_lines = [
        f"[bold]Name:[/bold]        {escape(match.name)}",
        f"[bold]Description:[/bold] {escape(match.description)}",
        f"[bold]Location:[/bold]    {match.root_path}",
    ]
    for key, value in match.metadata.extra.items():
        meta_lines.append(f"[bold]{escape(str(key))}:[/bold] {escape(str(value))}")

    console.print(Panel(
        "\n".join(meta_lines),
        title=f"Skill: {escape(match.name)}",
        border_style="cyan",
    ))

    # Instructions preview
    content = match.read_manifest_content().decode("utf-8", errors="replace")
    split = split_front_matter(content)
    body = split[1].strip() if split else ""
    if body:
        if len(body) > 2000:
            body = body[:2000] + "\n\n... (truncated)"
        console.print()
        console.print(Panel(
            Syntax(body, "markdown", theme="monokai", word_wrap=True),
            title="Instructions",
            border_style="dim",
        ))
    else:
        console.print("\n[dim]No instructions body defined.[/dim]")


@skill_app.command("validate")
def skill_validate(
    path: Path | None = typer.Argument(
        None,
        help="Path to a skill directory or SKILL.md file. "
        "If omitted, validates all discovered skills.",
    ),
    paths: list[Path] | None = PathOption,
    recursive: bool = RecursiveOption,
) -> None:
    """Validate skill definition(s) and report errors."""
    validator = SkillValidator()

    if path is not None:
        _validate_single(path, validator)
    else:
        _validate_all(validator, paths, recursive)


def _validate_single(path: Path, validator: SkillValidator) -> None:
    """Validate a single skill at *path*."""
    resolved = path.expanduser()

    # Accept either a directory or a SKILL.md file
    if resolved.is_file() and resolved.name == MANIFEST_FILENAME:
        skill_dir = resolved.parent
    elif resolved.is_dir():
        skill_dir = resolved
    else:
        console.print(
            f"[red]Invalid path:[/red] '{escape(str(path))}' is not a directory "
            f"or a {MANIFEST_FILENAME} file."
        )
        raise typer.Exit(1)

    try:
        skill = Skill.load(skill_dir)
    except SkillLoadError as exc:
        console.print(f"[red]Load error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    _report_validation(skill.name, validator.validate(skill))


def _validate_all(
    validator: SkillValidator, paths: list[Path] | None, recursive: bool
) -> None:
    """Validate all discovered skills, including ones that failed to load."""
    config = load_config(paths, recursive)
    registry = SkillRegistry(
        respect_gitignore=config.skills.respect_gitignore,
        max_depth=config.skills.max_depth,
    )
    report = registry.discover(config.skills.paths)

    if not len(registry) and not report.failures:
        console.print(
            "[yellow]No skills found to validate.[/yellow] "
            "Place skill directories in ./skills/ or ~/.skillbox/skills/."
        )
        raise typer.Exit(0)

    for failure in report.failures:
        console.print(
            f"[red]✗[/red] [bold]{escape(str(failure.path))}[/bold]: "
            f"{escape(failure.error)}"
        )
    for overridden in report.overridden:
        console.print(
            f"[yellow]![/yellow] [dim]{escape(str(overridden))} is shadowed by a "
            "later skill with the same name[/dim]"
        )

    total_warnings = 0
    for skill in sorted(registry, key=lambda s: s.name):
        warnings = validator.validate(skill)
        _report_validation(skill.name, warnings)
        total_warnings += len(warnings)

    console.print()
    if report.failures:
        console.print(
            f"[red]{len(report.failures)} skill(s) failed to load.[/red]"
        )
        raise typer.Exit(1)
    if total_warnings == 0:
        console.print(
            f"[green]All {len(registry)} skill(s) passed validation.[/green]"
        )
    else:
        console.print(
            f"[yellow]{total_warnings} warning(s) across "
            f"{len(registry)} skill(s).[/yellow]"
        )


def _report_validation(name: str, warnings: list[str]) -> None:
    if not warnings:
        console.print(f"[green]✓[/green] [bold]{escape(name)}[/bold]")
        return
    console.print(f"[yellow]![/yellow] [bold]{escape(name)}[/bold]")
    for warning in warnings:
        console.print(f"    [yellow]-[/yellow] {escape(warning)}")


@skill_app.command("run", context_settings={"allow_interspersed_args": False})
def skill_run(
    name: str = typer.Argument(..., help="Name of the skill"),
    script: str = typer.Argument(
        ..., help="Script path relative to the skill directory"
    ),
    args: list[str] | None = typer.Argument(
        None,
        help="Arguments for the script; ${SKILL_DIR} expands to the skill "
        "directory. Options such as --yes must precede NAME.",
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Approve without prompting."
    ),
    paths: list[Path] | None = PathOption,
    recursive: bool = RecursiveOption,
) -> None:
    """Run a script shipped with a skill, after confirmation."""
    registry = build_registry(paths, recursive)

    async def approve(request: ScriptApprovalRequest) -> bool:
        console.print(Panel(
            f"[bold]Skill:[/bold]   {escape(request.skill_name)}\n"
            f"[bold]Script:[/bold]  {escape(request.script_path)}\n"
            f"[bold]Args:[/bold]    {escape(' '.join(request.args)) or '-'}\n"
            f"[bold]Command:[/bold] {escape(' '.join(request.command))}",
            title="Run skill script?",
            border_style="yellow",
        ))
        if yes:
            return True
        return typer.confirm("Run this script?", default=False)

    tools = SkillTools(registry, approve=approve)
    result = asyncio.run(tools.run_script(name, script, args or []))

    if not result.ok:
        console.print(f"[red]{escape(result.for_user)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]{escape(result.for_user)}[/green]")
    if result.data:
        console.print(result.data, markup=False, highlight=False, end="")
