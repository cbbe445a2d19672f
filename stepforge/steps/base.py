"""Step capability interfaces.

A ``Step`` composes three things:

* ``key`` / ``description``: identity shown by ``stepforge list``;
* ``action``: a ``StepAction`` that declares inputs and does the work;
* ``lifecycle``: a ``LifecyclePolicy``, ``ManifestLifecycle`` unless the
  step needs its own staleness rule.

Actions receive a ``StepContext`` carrying everything they may touch: the
project root, the project configuration, the state store and the
(cached) external action. Nothing is read from module globals.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, SkipValidation

from stepforge.core.external import ExternalAction
from stepforge.core.hasher import resolve_path
from stepforge.core.lifecycle import LifecyclePolicy, ManifestLifecycle
from stepforge.core.state_store import StepStateStore
from stepforge.models.config import ProjectConfig
from stepforge.models.files import FileRecord, StepManifest
from stepforge.models.lifecycle import LifecycleState


class StepContext(BaseModel):
    """Capabilities handed to a step for one evaluation or execution."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    root: Path
    config: ProjectConfig = ProjectConfig()
    state_store: StepStateStore
    action: SkipValidation[ExternalAction]
    config_path: Path | None = None

    def path(self, relative: str) -> Path:
        """Resolve a project-relative path."""
        return resolve_path(relative, self.root)

    def manifest(
        self,
        key: str,
        inputs: Sequence[str] = (),
        outputs: Sequence[str] = (),
    ) -> StepManifest:
        """Fingerprint *inputs* and *outputs* as they are now on disk."""
        return StepManifest(
            key=key,
            inputs=[FileRecord.from_file(p, self.root) for p in inputs],
            outputs=[FileRecord.from_file(p, self.root) for p in outputs],
        )


@runtime_checkable
class StepAction(Protocol):
    """The work a step performs."""

    def declared_inputs(self, key: str) -> list[str]:
        """Project-relative paths the step reads."""
        ...

    def execute(self, key: str, context: StepContext) -> StepManifest:
        """Do the work and describe what was read and written.

        Any exception aborts the run; no manifest is saved.
        """
        ...


class Step(BaseModel):
    """A registered step."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    description: str
    action: SkipValidation[StepAction]
    lifecycle: SkipValidation[LifecyclePolicy] = Field(
        default_factory=ManifestLifecycle
    )

    def declared_inputs(self) -> list[str]:
        return list(self.action.declared_inputs(self.key))

    def evaluate(self, context: StepContext) -> LifecycleState:
        return self.lifecycle.evaluate(self, context)

    def __repr__(self) -> str:
        return f"<Step key={self.key!r} action={type(self.action).__name__}>"


def step(
    description: str,
    key: str,
    action: StepAction,
    lifecycle: LifecyclePolicy | None = None,
) -> Step:
    """Build a ``Step``; *lifecycle* defaults to ``ManifestLifecycle``."""
    if lifecycle is None:
        return Step(key=key, description=description, action=action)
    return Step(key=key, description=description, action=action, lifecycle=lifecycle)
