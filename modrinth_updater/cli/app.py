"""Main Typer application — imports and registers all CLI commands.

Entry point: ``modrinth-updater`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from modrinth_updater import __version__
from modrinth_updater.cli.commands.init import init_cmd
from modrinth_updater.cli.commands.plan import plan_cmd
from modrinth_updater.cli.commands.sync import sync_cmd
from modrinth_updater.cli.console import configure_logging
from modrinth_updater.config import settings

app = typer.Typer(
    name="modrinth-updater",
    help="A tool to update your mods from Modrinth.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="sync", help="Update the mods folder to the latest compatible releases.")(sync_cmd)
app.command(name="plan", help="Show what sync would change, without downloading.")(plan_cmd)
app.command(name="init", help="Create a default modlist in the mods folder.")(init_cmd)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"modrinth-updater {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """A tool to update your mods from Modrinth."""
    configure_logging("DEBUG" if settings.debug else settings.log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
