"""``modrinth-updater plan`` — show what ``sync`` would do, without doing it."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from modrinth_updater.cli.commands.common import open_modlist, resolve_mods_folder
from modrinth_updater.cli.console import (
    ConsoleEventSink,
    ConsolePrompter,
    build_report_table,
)
from modrinth_updater.config import settings
from modrinth_updater.core.engine import SyncEngine
from modrinth_updater.core.errors import SyncError
from modrinth_updater.core.events import EventBus
from modrinth_updater.models.sync import SyncStatus

console = Console()


def plan_cmd(
    modfolder: Path = typer.Option(
        None,
        "--modfolder",
        "-m",
        help="The path to your mods folder.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print the summary table.",
    ),
) -> None:
    """Resolve every mod and list which would be kept, downloaded or removed."""
    folder = resolve_mods_folder(modfolder, console)
    modlist = open_modlist(folder, settings, console)

    sinks = [] if quiet else [ConsoleEventSink(console)]
    engine = SyncEngine(
        modlist,
        folder,
        confirm=ConsolePrompter(console),
        events=EventBus(sinks),
        settings=settings,
    )

    try:
        report = engine.plan_sync()
    except SyncError as exc:
        console.print(f"[bold red]{exc.kind}:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print()
    console.print(build_report_table(report))
    console.print(
        f"{len(report.kept)} up to date, {len(report.installed)} to download, "
        f"{len(report.deleted)} to remove, {len(report.failures)} failed."
    )

    if report.status is SyncStatus.ABORTED:
        raise typer.Exit(code=1)
