"""``stepforge cache-show FINGERPRINT`` — print one memoized call."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.panel import Panel
from rich.syntax import Syntax

from stepforge.cli._shared import console, load_settings
from stepforge.core.request_cache import CacheCorruptionError, RequestCache


def cache_show_cmd(
    fingerprint: str = typer.Argument(..., help="32-character request fingerprint."),
    root: Path = typer.Option(None, "--root", "-r", help="Project root directory."),
) -> None:
    """Show the stored request and response for a fingerprint."""
    settings = load_settings(root)
    cache = RequestCache(settings.cache_path)

    try:
        entry = cache.entry(fingerprint)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc
    except CacheCorruptionError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=3) from exc

    if entry is None:
        console.print(f"[dim]No cache entry {fingerprint}.[/dim]")
        raise typer.Exit(code=1)

    verified = RequestCache.key_for(entry.request) == fingerprint
    status = "[green]key matches request[/green]" if verified else "[bold red]key does not match request[/bold red]"
    console.print(
        Panel(
            Syntax(json.dumps(entry.model_dump(), indent=2), "json"),
            title=f"[bold]{fingerprint}[/bold]",
            subtitle=status,
            border_style="green" if verified else "red",
        )
    )
