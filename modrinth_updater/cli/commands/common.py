"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from modrinth_updater.config import UpdaterSettings
from modrinth_updater.core.modlist_store import ModListError, load_or_create_modlist
from modrinth_updater.models.modlist import ModList
from modrinth_updater.paths import default_mods_folder


def resolve_mods_folder(modfolder: Path | None, console: Console) -> Path:
    """Use the given folder, else the OS default; exit 1 if neither exists."""
    folder = modfolder or default_mods_folder()
    if folder is None:
        console.print(
            "[bold red]Could not automatically detect your mods folder.[/bold red] "
            "Please specify it manually with the --modfolder option."
        )
        raise typer.Exit(code=1)
    if not folder.is_dir():
        console.print(f"[bold red]Mods folder not found:[/bold red] {folder}")
        raise typer.Exit(code=1)
    return folder


def open_modlist(folder: Path, settings: UpdaterSettings, console: Console) -> ModList:
    """Load the folder's modlist, generating the default one if missing."""
    path = folder / settings.modlist_filename
    try:
        modlist, created = load_or_create_modlist(path)
    except ModListError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)
    if created:
        console.print(f"[green]Generated default config at {path}[/green]")
    return modlist
