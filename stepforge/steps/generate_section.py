"""``generate_section_N`` — expand one outline section into prose."""

from __future__ import annotations

import logging

from stepforge.models.files import StepManifest
from stepforge.models.outline import Outline
from stepforge.models.requests import ChatRequest, Message, response_text
from stepforge.steps.base import StepContext

logger = logging.getLogger(__name__)


def section_path(index: int) -> str:
    return f"sections/section_{index}.md"


class GenerateSection:
    """Writes ``sections/section_<index>.md`` (1-based *index*)."""

    def __init__(self, outline_json: str, index: int) -> None:
        self.outline_json = outline_json
        self.index = index

    def declared_inputs(self, key: str) -> list[str]:
        return [self.outline_json]

    def execute(self, key: str, context: StepContext) -> StepManifest:
        outline = Outline.model_validate_json(
            context.path(self.outline_json).read_bytes()
        )
        if not 1 <= self.index <= len(outline.sections):
            raise IndexError(
                f"Outline has {len(outline.sections)} sections, no section {self.index}"
            )
        section = outline.sections[self.index - 1]
        logger.info("Generating section %d: %s", self.index, section.title)

        prompt = (
            f"Write section {self.index}, '{section.title}', of the document "
            f"outlined below. Cover every key point.\n\n"
            f"{outline.render_to_markdown()}"
        )
        request = ChatRequest(
            model=context.config.model,
            instructions=context.config.ai_instruction,
            messages=[Message(content=prompt)],
        )
        text = response_text(context.action.issue(request))

        out = section_path(self.index)
        target = context.path(out)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"## {section.title}\n\n{text}\n", encoding="utf-8")
        return context.manifest(key, inputs=[self.outline_json], outputs=[out])
