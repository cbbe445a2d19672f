"""``stepforge reset STEP`` — forget that a step ever ran."""

from __future__ import annotations

from pathlib import Path

import typer

from stepforge.cli._shared import configure_logging, console, load_settings
from stepforge.core.orchestrator import UnknownStepError, build_orchestrator
from stepforge.core.state_store import CorruptStateError


def reset_cmd(
    step: str = typer.Argument(..., help="Step key."),
    root: Path = typer.Option(None, "--root", "-r", help="Project root directory."),
) -> None:
    """Delete a step's recorded state so it reads as never run. Files are kept."""
    settings = load_settings(root)
    configure_logging(settings.log_level)
    orchestrator = build_orchestrator(settings)

    try:
        removed = orchestrator.reset(step)
    except UnknownStepError as exc:
        console.print(f"[red]{exc.args[0]}[/red]")
        raise typer.Exit(code=2) from exc
    except CorruptStateError as exc:
        console.print(f"[bold red]Refusing to continue:[/bold red] {exc}")
        raise typer.Exit(code=3) from exc

    if removed:
        console.print(f"Reset '{step}'.")
    else:
        console.print(f"[dim]'{step}' has no recorded state.[/dim]")
