"""``draft_outline`` — ask the external backend for a markdown outline."""

from __future__ import annotations

from stepforge.models.files import StepManifest
from stepforge.models.requests import ChatRequest, Message, response_text
from stepforge.steps.base import StepContext

PROMPT = """\
Write an outline for the document described below, in markdown.
Use a single '# ' title line, one overview paragraph, then one '## ' heading
per section, each followed by '- ' bullet key points.

---

{brief}
"""


class DraftOutline:
    def __init__(self, brief_path: str, outline_path: str) -> None:
        self.brief_path = brief_path
        self.outline_path = outline_path

    def declared_inputs(self, key: str) -> list[str]:
        return [self.brief_path]

    def execute(self, key: str, context: StepContext) -> StepManifest:
        brief = context.path(self.brief_path).read_text(encoding="utf-8")
        request = ChatRequest(
            model=context.config.model,
            instructions=context.config.ai_instruction,
            messages=[Message(content=PROMPT.format(brief=brief))],
        )
        outline = response_text(context.action.issue(request))

        context.path(self.outline_path).write_text(outline, encoding="utf-8")
        return context.manifest(
            key, inputs=[self.brief_path], outputs=[self.outline_path]
        )
