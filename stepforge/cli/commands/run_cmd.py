"""``stepforge run STEP`` — run one step."""

from __future__ import annotations

from pathlib import Path

import typer

from stepforge.cli._shared import configure_logging, console, load_settings
from stepforge.core.orchestrator import (
    MissingDependenciesError,
    StepExecutionError,
    UnknownStepError,
    build_orchestrator,
)
from stepforge.core.request_cache import CacheCorruptionError
from stepforge.core.state_store import CorruptStateError


def run_cmd(
    step: str = typer.Argument(..., help="Step key (e.g. 'init', 'draft_outline')."),
    root: Path = typer.Option(None, "--root", "-r", help="Project root directory."),
) -> None:
    """Run a step if its inputs are present, then record its manifest."""
    settings = load_settings(root)
    configure_logging(settings.log_level)
    orchestrator = build_orchestrator(settings)

    try:
        manifest = orchestrator.run(step)
    except UnknownStepError as exc:
        console.print(f"[red]{exc.args[0]}[/red]")
        raise typer.Exit(code=2) from exc
    except MissingDependenciesError as exc:
        console.print(f"[yellow]Cannot run '{exc.key}', missing inputs:[/yellow]")
        for path in exc.missing_inputs:
            console.print(f"  - {path}")
        raise typer.Exit(code=1) from exc
    except StepExecutionError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    except (CacheCorruptionError, CorruptStateError) as exc:
        console.print(f"[bold red]Refusing to continue:[/bold red] {exc}")
        raise typer.Exit(code=3) from exc

    console.print(f"[green]Completed '{manifest.key}'[/green]")
    for record in manifest.outputs:
        console.print(f"  {record.path}  [dim]{record.fingerprint}[/dim]")
    action = orchestrator.action
    if hasattr(action, "hits"):
        console.print(
            f"[dim]external calls: {action.misses} issued, {action.hits} from cache[/dim]"
        )
