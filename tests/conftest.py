"""Shared test fixtures for stepforge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from stepforge.core.orchestrator import StepOrchestrator
from stepforge.core.request_cache import CachedAction, RequestCache
from stepforge.core.state_store import StepStateStore
from stepforge.models.files import StepManifest
from stepforge.steps.base import Step, StepContext, step


class RecordingAction:
    """ExternalAction double: records every request, answers via *reply*."""

    def __init__(self, reply: Callable[[Any], Any] | None = None) -> None:
        self.requests: list[Any] = []
        self._reply = reply or (lambda request: {"output": f"reply #{len(self.requests)}"})

    def issue(self, request: Any) -> Any:
        self.requests.append(request)
        return self._reply(request)


class WriteFile:
    """StepAction double: reads *inputs*, writes *output* with fixed content.

    With ``ask=True`` the content comes from the external action instead,
    so reruns exercise the request cache.
    """

    def __init__(
        self,
        output: str,
        content: str = "payload",
        inputs: list[str] | None = None,
        ask: bool = False,
    ) -> None:
        self.output = output
        self.content = content
        self.inputs = inputs or []
        self.ask = ask
        self.executions = 0

    def declared_inputs(self, key: str) -> list[str]:
        return list(self.inputs)

    def execute(self, key: str, context: StepContext) -> StepManifest:
        self.executions += 1
        text = self.content
        if self.ask:
            sources = [context.path(p).read_text(encoding="utf-8") for p in self.inputs]
            response = context.action.issue(
                {"messages": [{"role": "user", "content": "\n".join(sources) or self.content}]}
            )
            text = response["output"]
        context.path(self.output).write_text(text, encoding="utf-8")
        return context.manifest(key, inputs=self.inputs, outputs=[self.output])


class Failing:
    """StepAction double whose execute() always raises."""

    def __init__(self, inputs: list[str] | None = None) -> None:
        self.inputs = inputs or []

    def declared_inputs(self, key: str) -> list[str]:
        return list(self.inputs)

    def execute(self, key: str, context: StepContext) -> StepManifest:
        raise ValueError("backend exploded")


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Project root for a test."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def state_store(root: Path) -> StepStateStore:
    return StepStateStore(root / ".stepforge")


@pytest.fixture
def cache(root: Path) -> RequestCache:
    return RequestCache(root / "cache")


@pytest.fixture
def backend() -> RecordingAction:
    return RecordingAction()


@pytest.fixture
def context(root: Path, state_store: StepStateStore, backend: RecordingAction) -> StepContext:
    return StepContext(root=root, state_store=state_store, action=backend)


@pytest.fixture
def make_orchestrator(
    root: Path,
    state_store: StepStateStore,
    cache: RequestCache,
    backend: RecordingAction,
) -> Callable[[list[Step] | Callable[[Path], list[Step]]], StepOrchestrator]:
    """Factory fixture: orchestrator over a fixed step list or a step source."""

    def _factory(steps) -> StepOrchestrator:
        source = steps if callable(steps) else (lambda _root: list(steps))
        return StepOrchestrator(
            root=root,
            state_store=state_store,
            action=CachedAction(backend, cache),
            step_source=source,
            config_path=root / ".stepforge" / "config.json",
        )

    return _factory


@pytest.fixture
def scenario_steps() -> list[Step]:
    """Step A (no inputs, writes out.txt) and step B (reads out.txt)."""
    return [
        step("Produce out.txt", "A", WriteFile("out.txt", content="from A", ask=True)),
        step("Consume out.txt", "B", WriteFile("b.txt", inputs=["out.txt"], ask=True)),
    ]


@pytest.fixture
def doubles() -> SimpleNamespace:
    """Test double classes, exposed as a fixture so test modules need no imports."""
    return SimpleNamespace(
        RecordingAction=RecordingAction,
        WriteFile=WriteFile,
        Failing=Failing,
    )
