"""Step orchestrator — evaluates lifecycles and runs steps one at a time.

The orchestrator holds no step registry of its own. It is given a step
source, ``registered_steps(root) -> list[Step]``, and calls it afresh for
every operation, so a step set that grows with the content of earlier
outputs is always current.

Run lifecycle:
1. Evaluate the step's lifecycle policy.
2. Refuse with ``MissingDependenciesError`` unless it can run.
3. Call ``action.execute(key, context)``.
4. Check the returned manifest belongs to the step.
5. Persist the manifest.

Failures in steps 3-4 leave any earlier manifest untouched. Corrupt state
or cache entries propagate as they are; every other step failure is
wrapped in ``StepExecutionError``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from stepforge.config import StepforgeSettings
from stepforge.core.external import EchoAction, ExternalAction
from stepforge.core.lifecycle import input_state
from stepforge.core.request_cache import CacheCorruptionError, CachedAction, RequestCache
from stepforge.core.state_store import CorruptStateError, StepStateStore
from stepforge.models.config import ProjectConfig
from stepforge.models.files import StepManifest
from stepforge.models.lifecycle import LifecycleState, StepStatus
from stepforge.steps.base import Step, StepContext
from stepforge.steps.workflow import registered_steps

logger = logging.getLogger(__name__)

StepSource = Callable[[Path], list[Step]]


class MissingDependenciesError(RuntimeError):
    """Raised when a step cannot run because declared inputs are missing."""

    def __init__(self, key: str, missing_inputs: list[str]) -> None:
        self.key = key
        self.missing_inputs = list(missing_inputs)
        super().__init__(
            f"Cannot run {key}: missing inputs {', '.join(self.missing_inputs)}"
        )


class StepExecutionError(RuntimeError):
    """Raised when a step's ``execute()`` fails or returns a bad manifest."""


class UnknownStepError(KeyError):
    """Raised when a step key is not in the registered step set."""


class StepOrchestrator:
    """Runs registered steps against a project directory.

    Parameters
    ----------
    root:
        Project root; declared paths are relative to it.
    state_store:
        Where manifests live.
    action:
        External call capability handed to steps, normally a
        ``CachedAction``.
    step_source:
        ``registered_steps(root)`` returning the ordered step list.
    config_path:
        Location of the ``ProjectConfig`` document. Read fresh for every
        run; defaults are used when absent.
    """

    def __init__(
        self,
        root: Path,
        state_store: StepStateStore,
        action: ExternalAction,
        step_source: StepSource,
        *,
        config_path: Path | None = None,
    ) -> None:
        self.root = Path(root)
        self.state_store = state_store
        self.action = action
        self._step_source = step_source
        self.config_path = config_path

    # ------------------------------------------------------------------
    # Context and step set
    # ------------------------------------------------------------------

    def context(self) -> StepContext:
        """Build the capability bundle for one operation."""
        return StepContext(
            root=self.root,
            config=self._load_config(),
            state_store=self.state_store,
            action=self.action,
            config_path=self.config_path,
        )

    def _load_config(self) -> ProjectConfig:
        if self.config_path is None:
            return ProjectConfig()
        try:
            return ProjectConfig.load(self.config_path)
        except ValidationError as exc:
            raise CorruptStateError(
                f"Project config at {self.config_path} is corrupt: {exc}"
            ) from exc

    def steps(self) -> list[Step]:
        """The current ordered step set."""
        return self._step_source(self.root)

    def get_step(self, key: str) -> Step:
        """Return the registered step named *key*."""
        steps = self.steps()
        for s in steps:
            if s.key == key:
                return s
        raise UnknownStepError(
            f"Step {key!r} not found. Registered steps: {[s.key for s in steps]}"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def evaluate(self, step: Step | str) -> LifecycleState:
        """Current lifecycle of *step*."""
        if isinstance(step, str):
            step = self.get_step(step)
        return step.evaluate(self.context())

    def list(self) -> list[StepStatus]:
        """Evaluate every registered step. No side effects."""
        context = self.context()
        statuses = []
        for s in self.steps():
            manifest = self.state_store.load(s.key)
            drift = (
                input_state(manifest.inputs, self.root)
                if manifest is not None
                else None
            )
            statuses.append(
                StepStatus(
                    key=s.key,
                    description=s.description,
                    lifecycle=s.evaluate(context),
                    drift=drift,
                )
            )
        return statuses

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, step: Step | str) -> StepManifest:
        """Run *step* if its lifecycle allows, and persist its manifest."""
        if isinstance(step, str):
            step = self.get_step(step)
        context = self.context()

        lifecycle = step.evaluate(context)
        if not lifecycle.can_run:
            raise MissingDependenciesError(step.key, lifecycle.missing)

        logger.info("Running '%s' (%s)", step.key, lifecycle.kind)
        try:
            manifest = step.action.execute(step.key, context)
        except (CacheCorruptionError, CorruptStateError):
            raise
        except Exception as exc:
            logger.error("Step '%s' failed: %s", step.key, exc)
            raise StepExecutionError(f"Step {step.key} failed: {exc}") from exc

        if not isinstance(manifest, StepManifest):
            raise StepExecutionError(
                f"Step {step.key} returned {type(manifest).__name__}, "
                "expected StepManifest"
            )
        if manifest.key != step.key:
            raise StepExecutionError(
                f"Step {step.key} returned a manifest for {manifest.key!r}"
            )

        self.state_store.save(manifest)
        logger.info(
            "Completed '%s': %s",
            step.key,
            ", ".join(f"{r.path}={r.fingerprint[:8]}" for r in manifest.outputs)
            or "no outputs",
        )
        return manifest

    def reset(self, step: Step | str) -> bool:
        """Forget that *step* ever ran. Files on disk are left alone.

        Deletes the manifest and any state the step's lifecycle policy
        keeps of its own. Returns whether anything was deleted.
        """
        if isinstance(step, str):
            step = self.get_step(step)
        removed = self.state_store.delete(step.key)
        if step.lifecycle.forget(step, self.context()):
            removed = True
        if removed:
            logger.info("Reset '%s'", step.key)
        return removed


def build_orchestrator(
    settings: StepforgeSettings,
    action: ExternalAction | None = None,
    step_source: StepSource | None = None,
) -> StepOrchestrator:
    """Wire the stores, the cache and the step source from *settings*.

    *action* is wrapped in a ``CachedAction``; ``EchoAction`` is used when
    none is given. *step_source* defaults to the bundled workflow.
    """
    cache = RequestCache(settings.cache_path)
    return StepOrchestrator(
        root=settings.project_root.expanduser(),
        state_store=StepStateStore(settings.state_path),
        action=CachedAction(action if action is not None else EchoAction(), cache),
        step_source=step_source or registered_steps,
        config_path=settings.config_path,
    )
