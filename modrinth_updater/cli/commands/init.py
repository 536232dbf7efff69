"""``modrinth-updater init`` — write a default modlist into a mods folder."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from modrinth_updater.cli.commands.common import resolve_mods_folder
from modrinth_updater.config import settings
from modrinth_updater.core.modlist_store import write_default_modlist

console = Console()


def init_cmd(
    modfolder: Path = typer.Option(
        None,
        "--modfolder",
        "-m",
        help="The path to your mods folder.",
    ),
) -> None:
    """Create the default modlist if the folder does not have one yet."""
    folder = resolve_mods_folder(modfolder, console)
    path = folder / settings.modlist_filename

    if write_default_modlist(path):
        console.print(f"[green]Generated default config at {path}[/green]")
    else:
        console.print(f"[yellow]Config already exists:[/yellow] {path}")
