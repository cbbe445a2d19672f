"""Main Typer application — imports and registers all CLI commands.

Entry point: ``stepforge`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from stepforge.cli.commands.cache_cmd import cache_show_cmd
from stepforge.cli.commands.list_cmd import list_cmd
from stepforge.cli.commands.reset_cmd import reset_cmd
from stepforge.cli.commands.run_cmd import run_cmd

app = typer.Typer(
    name="stepforge",
    help="stepforge: incremental step runner with memoized external calls.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="list", help="List all step states.")(list_cmd)
app.command(name="run", help="Run a step.")(run_cmd)
app.command(name="reset", help="Forget a step's recorded state.")(reset_cmd)
app.command(name="cache-show", help="Show a memoized external call.")(cache_show_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
