"""The bundled document workflow.

``registered_steps(root)`` is recomputed on every orchestrator call. The
per-section steps and ``combine_sections`` only appear once
``outline.json`` exists, one ``generate_section_N`` per outline section.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from stepforge.core.hasher import resolve_path
from stepforge.models.outline import Outline
from stepforge.steps.base import Step, step
from stepforge.steps.combine_sections import CombineSections
from stepforge.steps.draft_outline import DraftOutline
from stepforge.steps.generate_section import GenerateSection
from stepforge.steps.project_init import ProjectInit
from stepforge.steps.rebuild_outline import RebuildOutlineJson

BRIEF = "brief.txt"
OUTLINE_MD = "outline.md"
OUTLINE_JSON = "outline.json"
DOCUMENT = "document.md"

logger = logging.getLogger(__name__)


def section_count(root: Path) -> int:
    """Number of sections in ``outline.json``.

    0 when it does not exist yet or cannot be parsed; rerunning
    ``rebuild_outline_json`` rewrites it.
    """
    path = resolve_path(OUTLINE_JSON, root)
    if not path.exists():
        return 0
    try:
        return len(Outline.model_validate_json(path.read_bytes()).sections)
    except ValidationError:
        logger.warning("%s is not a valid outline; no section steps", OUTLINE_JSON)
        return 0


def registered_steps(root: Path) -> list[Step]:
    """Ordered step set for the project at *root*."""
    rebuild = RebuildOutlineJson(OUTLINE_MD, OUTLINE_JSON, "rebuild_outline_json_pair")
    steps = [
        step("Initialize the project", "init", ProjectInit(BRIEF)),
        step("Draft the outline", "draft_outline", DraftOutline(BRIEF, OUTLINE_MD)),
        step(
            "Rebuild outline JSON from markdown",
            "rebuild_outline_json",
            rebuild,
            lifecycle=rebuild.policy,
        ),
    ]

    count = section_count(root)
    if count > 0:
        for i in range(1, count + 1):
            steps.append(
                step(
                    f"Generate section {i}",
                    f"generate_section_{i}",
                    GenerateSection(OUTLINE_JSON, i),
                )
            )
        steps.append(
            step(
                "Combine sections",
                "combine_sections",
                CombineSections(OUTLINE_JSON, count, DOCUMENT),
            )
        )
    return steps
