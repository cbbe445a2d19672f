"""Lifecycle evaluation: is a step runnable, and has it completed before?

Two policies exist side by side:

``ManifestLifecycle`` (the default)
    Looks only at which declared inputs exist and whether a manifest was
    ever saved. It never compares live fingerprints against the manifest,
    so an input edited after completion still reads ``CompleteRunnable``.

``FingerprintPairLifecycle``
    Records the fingerprints of one input file and one output file after
    each run and reports ``CompleteRunnable`` only while both still match.

Both are recomputed from disk on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from stepforge.core.hasher import (
    FingerprintNotFoundError,
    fingerprint_of_file,
    try_fingerprint_of_file,
)
from stepforge.models.files import FileRecord, FileState, StepManifest
from stepforge.models.lifecycle import (
    CompleteNotRunnable,
    CompleteRunnable,
    LifecycleState,
    NotRunnable,
    Runnable,
)

if TYPE_CHECKING:
    from stepforge.steps.base import Step, StepContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure evaluation
# ---------------------------------------------------------------------------


def partition_inputs(
    input_paths: Iterable[str], root: Path | None = None
) -> tuple[dict[str, str], list[str]]:
    """Fingerprint declared inputs and split them into existing and missing.

    Returns ``(existing, missing)`` where *existing* maps path to
    fingerprint and *missing* keeps declaration order. I/O errors other
    than a missing file propagate.
    """
    existing: dict[str, str] = {}
    missing: list[str] = []
    for path in input_paths:
        try:
            existing[path] = fingerprint_of_file(path, root)
        except FingerprintNotFoundError:
            missing.append(path)
    return existing, missing


def evaluate_lifecycle(
    input_paths: Iterable[str],
    manifest: StepManifest | None,
    root: Path | None = None,
) -> LifecycleState:
    """Classify a step from its declared inputs and its manifest (if any)."""
    _, missing = partition_inputs(input_paths, root)
    if manifest is None:
        return NotRunnable(missing_inputs=missing) if missing else Runnable()
    if missing:
        return CompleteNotRunnable(missing_inputs=missing)
    return CompleteRunnable()


def file_state(
    path: str, expected: str, root: Path | None = None
) -> FileState:
    """Compare a file on disk with a recorded fingerprint."""
    actual = try_fingerprint_of_file(path, root)
    if actual is None:
        return FileState.MISSING
    return FileState.MATCHING if actual == expected else FileState.CHANGED


def input_state(
    records: Iterable[FileRecord], root: Path | None = None
) -> FileState:
    """Aggregate ``file_state`` over records.

    Priority is MISSING > CHANGED > MATCHING.
    """
    any_missing = False
    any_changed = False
    for record in records:
        state = file_state(record.path, record.fingerprint, root)
        if state is FileState.MISSING:
            any_missing = True
        elif state is FileState.CHANGED:
            any_changed = True
    if any_missing:
        return FileState.MISSING
    if any_changed:
        return FileState.CHANGED
    return FileState.MATCHING


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


@runtime_checkable
class LifecyclePolicy(Protocol):
    """Anything that can classify a step against the current project state."""

    def evaluate(self, step: Step, context: StepContext) -> LifecycleState:
        ...

    def forget(self, step: Step, context: StepContext) -> bool:
        """Drop whatever state marks *step* complete. Returns whether any existed."""
        ...


class ManifestLifecycle:
    """Default policy: declared inputs present? manifest present?"""

    def evaluate(self, step: Step, context: StepContext) -> LifecycleState:
        manifest = context.state_store.load(step.key)
        return evaluate_lifecycle(
            step.action.declared_inputs(step.key), manifest, context.root
        )

    def forget(self, step: Step, context: StepContext) -> bool:
        return context.state_store.delete(step.key)

    def __repr__(self) -> str:
        return "ManifestLifecycle()"


class FingerprintPair(BaseModel):
    """Fingerprints of an input/output pair as of the last run."""

    model_config = ConfigDict(frozen=True)

    input_fingerprint: str
    output_fingerprint: str


class FingerprintPairLifecycle:
    """Policy for a step that turns one input file into one output file.

    Parameters
    ----------
    input_path, output_path:
        The file pair, relative to the project root.
    state_key:
        Key under which the ``FingerprintPair`` document is stored. It
        must differ from the step key, which holds the manifest.
    """

    def __init__(self, input_path: str, output_path: str, state_key: str) -> None:
        self.input_path = input_path
        self.output_path = output_path
        self.state_key = state_key

    def evaluate(self, step: Step, context: StepContext) -> LifecycleState:
        input_fp = try_fingerprint_of_file(self.input_path, context.root)
        if input_fp is None:
            return NotRunnable(missing_inputs=[self.input_path])

        output_fp = try_fingerprint_of_file(self.output_path, context.root)
        pair = context.state_store.load_document(self.state_key, FingerprintPair)
        if (
            pair is not None
            and output_fp is not None
            and pair.input_fingerprint == input_fp
            and pair.output_fingerprint == output_fp
        ):
            return CompleteRunnable()
        if pair is not None:
            logger.debug("%s: recorded fingerprints are stale", step.key)
        return Runnable()

    def record(self, context: StepContext) -> FingerprintPair:
        """Store the current fingerprints of the pair. Call after a run."""
        pair = FingerprintPair(
            input_fingerprint=fingerprint_of_file(self.input_path, context.root),
            output_fingerprint=fingerprint_of_file(self.output_path, context.root),
        )
        context.state_store.save_document(self.state_key, pair)
        return pair

    def forget(self, step: Step, context: StepContext) -> bool:
        """Delete the recorded pair so the step reads as never run."""
        return context.state_store.delete(self.state_key)

    def __repr__(self) -> str:
        return (
            f"FingerprintPairLifecycle({self.input_path!r} -> "
            f"{self.output_path!r}, state_key={self.state_key!r})"
        )
