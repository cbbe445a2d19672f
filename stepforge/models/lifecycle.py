"""Step lifecycle states.

Exactly four variants exist. A state is always recomputed from the
filesystem and the persisted manifest; it is never cached.
"""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from stepforge.models.files import FileState


class _LifecycleBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Terminal glyphs used by ``stepforge list``.
    symbol: ClassVar[str] = ""

    @property
    def can_run(self) -> bool:
        return False

    @property
    def is_complete(self) -> bool:
        return False

    @property
    def missing(self) -> list[str]:
        return []


class NotRunnable(_LifecycleBase):
    """Never completed, and at least one declared input is missing."""

    kind: Literal["not_runnable"] = "not_runnable"
    symbol: ClassVar[str] = "."
    missing_inputs: list[str]

    @property
    def missing(self) -> list[str]:
        return list(self.missing_inputs)


class Runnable(_LifecycleBase):
    """Never completed (or stale), all declared inputs present."""

    kind: Literal["runnable"] = "runnable"
    symbol: ClassVar[str] = ">"

    @property
    def can_run(self) -> bool:
        return True


class CompleteRunnable(_LifecycleBase):
    """Completed at least once and may run again.

    This does not mean the outputs are up to date with the inputs.
    """

    kind: Literal["complete_runnable"] = "complete_runnable"
    symbol: ClassVar[str] = "✓"

    @property
    def can_run(self) -> bool:
        return True

    @property
    def is_complete(self) -> bool:
        return True


class CompleteNotRunnable(_LifecycleBase):
    """Completed at least once, but an input has since gone missing."""

    kind: Literal["complete_not_runnable"] = "complete_not_runnable"
    symbol: ClassVar[str] = "?"
    missing_inputs: list[str]

    @property
    def is_complete(self) -> bool:
        return True

    @property
    def missing(self) -> list[str]:
        return list(self.missing_inputs)


LifecycleState = Annotated[
    Union[NotRunnable, Runnable, CompleteRunnable, CompleteNotRunnable],
    Field(discriminator="kind"),
]


class StepStatus(BaseModel):
    """One row of ``StepOrchestrator.list()``."""

    model_config = ConfigDict(frozen=True)

    key: str
    description: str
    lifecycle: LifecycleState
    # Aggregate state of recorded inputs vs. disk; None when never run.
    drift: FileState | None = None
