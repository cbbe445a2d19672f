"""``init`` — write the project configuration and a starter brief."""

from __future__ import annotations

import os
from pathlib import Path

from stepforge.models.config import ProjectConfig
from stepforge.models.files import StepManifest
from stepforge.steps.base import StepContext

BRIEF_TEMPLATE = """\
Subject matter: World building for fantasy and science fiction novels.

Target Audience: Professional and experienced authors looking to improve their world building skills.
"""


class ProjectInit:
    """Creates ``brief.txt`` and the project configuration document.

    An existing brief is left alone so that rerunning ``init`` never
    discards the author's edits.
    """

    def __init__(self, brief_path: str = "brief.txt") -> None:
        self.brief_path = brief_path

    def declared_inputs(self, key: str) -> list[str]:
        return []

    def execute(self, key: str, context: StepContext) -> StepManifest:
        config_path = context.config_path or context.root / ".stepforge" / "config.json"
        ProjectConfig().save(config_path)

        brief = context.path(self.brief_path)
        if not brief.exists():
            brief.parent.mkdir(parents=True, exist_ok=True)
            brief.write_text(BRIEF_TEMPLATE, encoding="utf-8")

        return context.manifest(
            key,
            outputs=[self.brief_path, _relative(config_path, context.root)],
        )


def _relative(path: Path, root: Path) -> str:
    try:
        return Path(os.path.relpath(path, root)).as_posix()
    except ValueError:
        return str(path)
