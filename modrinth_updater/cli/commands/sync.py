"""``modrinth-updater sync`` — update the mods folder from its modlist.

Exit codes: 0 when the folder is updated, already current, or the operator
declines; 1 when any mod fails or the filesystem swap fails.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from modrinth_updater.cli.commands.common import open_modlist, resolve_mods_folder
from modrinth_updater.cli.console import (
    ConsoleEventSink,
    ConsolePrompter,
    build_report_table,
    confirm_unsafe_policy,
)
from modrinth_updater.config import settings
from modrinth_updater.core.engine import SyncEngine
from modrinth_updater.core.errors import SyncError
from modrinth_updater.core.events import EventBus
from modrinth_updater.models.sync import SyncStatus

console = Console()


def sync_cmd(
    modfolder: Path = typer.Option(
        None,
        "--modfolder",
        "-m",
        help="The path to your mods folder.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Answer yes to the fallback and swap prompts. Unsafe modlist options are always asked.",
    ),
) -> None:
    """Update every mod in the modlist to its latest compatible release."""
    folder = resolve_mods_folder(modfolder, console)
    modlist = open_modlist(folder, settings, console)

    if not confirm_unsafe_policy(modlist.policy, console):
        raise typer.Exit(code=0)

    prompter = ConsolePrompter(console, assume_yes=yes)

    engine = SyncEngine(
        modlist,
        folder,
        confirm=prompter,
        events=EventBus([ConsoleEventSink(console)]),
        settings=settings,
    )

    try:
        report = engine.run_sync()
    except SyncError as exc:
        console.print(f"[bold red]{exc.kind}:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if report.status is SyncStatus.ABORTED:
        console.print()
        console.print(build_report_table(report))
        console.print(
            f"[bold red]{len(report.failures)} mod(s) failed; "
            "the mods folder was not changed.[/bold red]"
        )
        raise typer.Exit(code=1)

    if report.status is SyncStatus.UPDATED:
        console.print(
            f"\n[bold green]Updated {len(report.installed)} mod(s), "
            f"removed {len(report.deleted)}, kept {len(report.kept)}.[/bold green]"
        )
