"""``rebuild_outline_json`` — parse the markdown outline into JSON.

This step carries its own lifecycle: it is complete only while both the
markdown it read and the JSON it wrote still have the fingerprints
recorded after its last run. Hand edits to ``outline.md`` therefore make
it runnable again, and so does tampering with ``outline.json``.
"""

from __future__ import annotations

from stepforge.core.lifecycle import FingerprintPairLifecycle
from stepforge.models.files import StepManifest
from stepforge.models.outline import Outline
from stepforge.steps.base import StepContext


class RebuildOutlineJson:
    """Markdown-to-JSON conversion of a document outline.

    Parameters
    ----------
    input_md, output_json:
        Project-relative source and destination.
    state_key:
        Key of the fingerprint-pair document; distinct from the step key.
    """

    def __init__(self, input_md: str, output_json: str, state_key: str) -> None:
        self.input_md = input_md
        self.output_json = output_json
        self.policy = FingerprintPairLifecycle(input_md, output_json, state_key)

    def declared_inputs(self, key: str) -> list[str]:
        return [self.input_md]

    def execute(self, key: str, context: StepContext) -> StepManifest:
        markdown = context.path(self.input_md).read_text(encoding="utf-8")
        outline = Outline.from_markdown(markdown)
        context.path(self.output_json).write_text(
            outline.model_dump_json(indent=2), encoding="utf-8"
        )
        self.policy.record(context)
        return context.manifest(
            key, inputs=[self.input_md], outputs=[self.output_json]
        )
