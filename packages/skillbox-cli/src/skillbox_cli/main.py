from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from skillbox_core import __version__

from skillbox_cli.commands.skill import skill_app
from skillbox_cli.session import PathOption, RecursiveOption, build_registry

app = typer.Typer(
    name="skillbox",
    help="Skillbox: agent skills with progressive disclosure",
    no_args_is_help=True,
)

app.add_typer(skill_app, name="skill", help="Inspect, validate and run skills")


@app.command()
def prompt(
    paths: list[Path] | None = PathOption,
    recursive: bool = RecursiveOption,
) -> None:
    """Print the agent system prompt for the discovered skills."""
    from skillbox_tools import make_system_prompt

    registry = build_registry(paths, recursive)
    Console().print(
        make_system_prompt(registry), markup=False, highlight=False, soft_wrap=True
    )


@app.command()
def serve(
    paths: list[Path] | None = PathOption,
    recursive: bool = RecursiveOption,
) -> None:
    """Serve the discovered skills as MCP tools over stdio."""
    from skillbox_tools import SkillTools
    from skillbox_tools.skills_server import create_skills_server

    registry = build_registry(paths, recursive)
    server = create_skills_server(SkillTools(registry))
    server.run()


@app.command()
def version() -> None:
    """Show the Skillbox version."""
    Console().print(f"skillbox {__version__}")


def main() -> None:
    """Entry point for the ``skillbox`` console script."""
    app()


if __name__ == "__main__":
    main()
