"""``combine_sections`` — concatenate generated sections into one document."""

from __future__ import annotations

from stepforge.models.files import StepManifest
from stepforge.models.outline import Outline
from stepforge.steps.base import StepContext
from stepforge.steps.generate_section import section_path


class CombineSections:
    def __init__(self, outline_json: str, section_count: int, output: str) -> None:
        self.outline_json = outline_json
        self.section_count = section_count
        self.output = output

    def declared_inputs(self, key: str) -> list[str]:
        return [self.outline_json] + [
            section_path(i) for i in range(1, self.section_count + 1)
        ]

    def execute(self, key: str, context: StepContext) -> StepManifest:
        outline = Outline.model_validate_json(
            context.path(self.outline_json).read_bytes()
        )
        parts = [f"# {outline.title or 'Untitled'}", ""]
        if outline.overview:
            parts += [outline.overview, ""]
        for i in range(1, self.section_count + 1):
            parts.append(context.path(section_path(i)).read_text(encoding="utf-8"))

        context.path(self.output).write_text("\n".join(parts), encoding="utf-8")
        return context.manifest(
            key, inputs=self.declared_inputs(key), outputs=[self.output]
        )
