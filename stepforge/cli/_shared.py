"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from stepforge.config import StepforgeSettings

console = Console()


def load_settings(root: Path | None) -> StepforgeSettings:
    """Settings from env/.env, with ``--root`` taking precedence."""
    if root is None:
        return StepforgeSettings()
    return StepforgeSettings(project_root=root)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
