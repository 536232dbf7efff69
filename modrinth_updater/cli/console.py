"""Rich terminal output and prompts for the CLI.

Color scheme
------------
- green   : success
- yellow  : warnings (unstable picks, permissive hash mismatches)
- red     : errors
- cyan    : mod identifiers
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from modrinth_updater.models.modlist import UnsafePolicy
from modrinth_updater.models.sync import (
    ArtifactAction,
    ConfirmationKind,
    ConfirmationRequest,
    EventLevel,
    ProgressEvent,
    SyncReport,
)

_LEVEL_STYLES: dict[EventLevel, str] = {
    EventLevel.INFO: "",
    EventLevel.SUCCESS: "green",
    EventLevel.WARN: "bold yellow",
    EventLevel.ERROR: "bold red",
}

_ACTION_LABELS: dict[ArtifactAction, str] = {
    ArtifactAction.KEEP: "[green]up to date[/green]",
    ArtifactAction.DOWNLOAD: "[cyan]download[/cyan]",
    ArtifactAction.FAILED: "[bold red]FAILED[/bold red]",
}


def configure_logging(level: str = "INFO", console: Console | None = None) -> None:
    """Route library logging through Rich at the configured level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


class ConsoleEventSink:
    """Prints progress events to a Rich console, one line each."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @property
    def sink_name(self) -> str:
        return "console"

    def accept(self, event: ProgressEvent) -> None:
        prefix = f"[cyan]{event.artifact}[/cyan]: " if event.artifact else ""
        style = _LEVEL_STYLES[event.level]
        body = f"[{style}]{event.message}[/{style}]" if style else event.message
        self.console.print(f"{prefix}{body}", highlight=False)


class ConsolePrompter:
    """Answers engine confirmations interactively, or always yes."""

    def __init__(self, console: Console | None = None, *, assume_yes: bool = False) -> None:
        self.console = console or Console()
        self.assume_yes = assume_yes

    def ask(self, question: str) -> bool:
        if self.assume_yes:
            return True
        return Confirm.ask(question, console=self.console, default=False)

    def __call__(self, request: ConfirmationRequest) -> bool:
        if request.kind is ConfirmationKind.APPLY_SWAP and request.details:
            for line in request.details:
                self.console.print(f"  {line}", highlight=False)
        return self.ask(request.message)


# ---------------------------------------------------------------------------
# Unsafe policy warnings
# ---------------------------------------------------------------------------


def _warning_panel(option: str, text: str, severe: bool) -> Panel:
    lines = [f"Unsafe mode enabled: [bold]{option}[/bold]", "", text]
    if severe:
        lines += [
            "",
            "[bold]DO NOT ENABLE THIS OPTION IF YOU DO NOT KNOW WHAT YOU ARE DOING!!![/bold]",
            "THE AUTHOR OF THIS PROGRAM IS NOT RESPONSIBLE FOR [bold]ANY[/bold] "
            "DAMAGE CAUSED BY THIS OPTION.",
        ]
    return Panel(
        "\n".join(lines),
        title="[bold red]!!! WARNING !!![/bold red]",
        border_style="red" if severe else "yellow",
        padding=(1, 2),
    )


def confirm_unsafe_policy(policy: UnsafePolicy, console: Console) -> bool:
    """Make the operator acknowledge every enabled unsafe option.

    Always asks interactively, regardless of ``--yes``. Returns False as
    soon as any question is declined.
    """

    def ask(question: str) -> bool:
        return Confirm.ask(question, console=console, default=False)

    if policy.allow_integrity_bypass:
        console.print(_warning_panel(
            "allowFailHash",
            "This will allow mods to be installed even if their hash does not match "
            "the one specified by the mod author.\nThis is a MAJOR security risk, as "
            "it allows infected mods to be installed without them being checked.",
            severe=True,
        ))
        for question in (
            "Do you wish to continue? AGAIN, DO NOT CONTINUE IF YOU DON'T KNOW WHAT YOU'RE DOING",
            "This is a very bad idea, are you sure?",
            "Are you REALLY sure?",
            "Are you REALLY REALLY sure? THIS IS YOUR LAST CHANCE TO SAY NO",
        ):
            if not ask(question):
                return False

    if policy.allow_unstable:
        console.print(_warning_panel(
            "allowUnstable",
            "This will allow mods to be installed even if they are marked as unstable.\n"
            "These mods are not guaranteed to work, and may cause issues.\nIf your game "
            "crashes/has other issues with this option enabled, it's probably because of "
            "a mod marked as unstable.",
            severe=False,
        ))
        if not ask("Do you wish to continue?"):
            return False

    return True


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def build_report_table(report: SyncReport) -> Table:
    """Tabulate per-mod results in modlist order."""
    table = Table(title=f"Mods in {report.target_dir}", header_style="bold cyan")
    table.add_column("Mod", style="cyan")
    table.add_column("Action")
    table.add_column("Release")
    table.add_column("Game version")
    table.add_column("Details", overflow="fold")

    for result in report.results:
        table.add_row(
            result.identifier,
            _ACTION_LABELS[result.action],
            result.release_id or "-",
            result.platform_version or "-",
            f"{result.error_kind}: {result.error}" if result.error else (result.filename or ""),
        )
    for filename in report.deleted:
        table.add_row(filename, "[yellow]remove[/yellow]", "-", "-", "not in modlist or outdated")
    return table
