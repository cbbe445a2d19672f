"""``stepforge list`` — show every step's lifecycle."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from stepforge.cli._shared import configure_logging, console, load_settings
from stepforge.core.orchestrator import build_orchestrator
from stepforge.core.state_store import CorruptStateError
from stepforge.models.files import FileState

_KIND_STYLES: dict[str, str] = {
    "not_runnable": "dim",
    "runnable": "bold yellow",
    "complete_runnable": "bold green",
    "complete_not_runnable": "bold red",
}


def list_cmd(
    root: Path = typer.Option(None, "--root", "-r", help="Project root directory."),
) -> None:
    """List all steps with their lifecycle state.

    Legend: ``.`` not runnable, ``>`` runnable, ``✓`` complete,
    ``?`` complete but inputs missing.
    """
    settings = load_settings(root)
    configure_logging(settings.log_level)
    orchestrator = build_orchestrator(settings)

    table = Table(title="Steps")
    table.add_column("", justify="center")
    table.add_column("Key", style="cyan")
    table.add_column("Description")
    table.add_column("Missing inputs")
    table.add_column("Inputs since last run")

    try:
        statuses = orchestrator.list()
    except CorruptStateError as exc:
        console.print(f"[bold red]Refusing to continue:[/bold red] {exc}")
        raise typer.Exit(code=3) from exc

    for status in statuses:
        lifecycle = status.lifecycle
        style = _KIND_STYLES[lifecycle.kind]
        drift = ""
        if status.drift is FileState.CHANGED:
            drift = "[yellow]changed[/yellow]"
        elif status.drift is FileState.MATCHING:
            drift = "[dim]unchanged[/dim]"
        elif status.drift is FileState.MISSING:
            drift = "[red]missing[/red]"
        table.add_row(
            f"[{style}]{lifecycle.symbol}[/{style}]",
            status.key,
            status.description,
            "\n".join(lifecycle.missing),
            drift,
        )

    console.print(table)
