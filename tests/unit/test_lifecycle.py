"""Lifecycle evaluation: both policies, totality and drift reporting."""

from __future__ import annotations

from pathlib import Path

import pytest

from stepforge.core.hasher import fingerprint
from stepforge.core.lifecycle import (
    FingerprintPairLifecycle,
    ManifestLifecycle,
    evaluate_lifecycle,
    file_state,
    input_state,
    partition_inputs,
)
from stepforge.models.files import FileRecord, FileState, StepManifest
from stepforge.models.lifecycle import (
    CompleteNotRunnable,
    CompleteRunnable,
    NotRunnable,
    Runnable,
)
from stepforge.steps.base import StepContext, step

MANIFEST = StepManifest(key="s")


class TestEvaluateLifecycle:
    @pytest.mark.parametrize(
        ("manifest", "create_a", "expected"),
        [
            (None, True, Runnable()),
            (None, False, NotRunnable(missing_inputs=["a.txt"])),
            (MANIFEST, True, CompleteRunnable()),
            (MANIFEST, False, CompleteNotRunnable(missing_inputs=["a.txt"])),
        ],
    )
    def test_totality(self, root: Path, manifest, create_a, expected):
        if create_a:
            (root / "a.txt").write_text("a")
        assert evaluate_lifecycle(["a.txt"], manifest, root) == expected

    def test_no_inputs(self, root: Path):
        assert evaluate_lifecycle([], None, root) == Runnable()
        assert evaluate_lifecycle([], MANIFEST, root) == CompleteRunnable()

    def test_missing_keeps_declaration_order(self, root: Path):
        (root / "b.txt").write_text("b")
        state = evaluate_lifecycle(["c.txt", "b.txt", "a.txt"], None, root)
        assert state == NotRunnable(missing_inputs=["c.txt", "a.txt"])

    def test_unreadable_input_propagates(self, root: Path):
        (root / "adir").mkdir()
        with pytest.raises(OSError):
            evaluate_lifecycle(["adir"], None, root)

    def test_partition(self, root: Path):
        (root / "a.txt").write_text("a")
        existing, missing = partition_inputs(["a.txt", "b.txt"], root)
        assert existing == {"a.txt": fingerprint(b"a")}
        assert missing == ["b.txt"]


class TestManifestLifecycle:
    def test_ignores_input_drift(self, root: Path, context: StepContext, doubles):
        (root / "a.txt").write_text("v1")
        s = step("reads a", "s", doubles.WriteFile("out.txt", inputs=["a.txt"]))
        context.state_store.save(context.manifest("s", inputs=["a.txt"]))

        (root / "a.txt").write_text("v2")
        assert ManifestLifecycle().evaluate(s, context) == CompleteRunnable()

    def test_uses_declared_inputs_not_manifest_inputs(
        self, root: Path, context: StepContext, doubles
    ):
        (root / "old.txt").write_text("x")
        context.state_store.save(context.manifest("s", inputs=["old.txt"]))
        s = step("reads new", "s", doubles.WriteFile("out.txt", inputs=["new.txt"]))
        assert s.evaluate(context) == CompleteNotRunnable(missing_inputs=["new.txt"])


class TestFingerprintPairLifecycle:
    @pytest.fixture
    def policy(self) -> FingerprintPairLifecycle:
        return FingerprintPairLifecycle("in.md", "out.json", "pair_state")

    @pytest.fixture
    def pair_step(self, doubles, policy):
        return step("pair", "pair", doubles.WriteFile("out.json", inputs=["in.md"]), lifecycle=policy)

    def test_missing_input(self, context, policy, pair_step):
        assert policy.evaluate(pair_step, context) == NotRunnable(missing_inputs=["in.md"])

    def test_never_recorded(self, root, context, policy, pair_step):
        (root / "in.md").write_text("# t")
        assert policy.evaluate(pair_step, context) == Runnable()

    def test_recorded_and_matching(self, root, context, policy, pair_step):
        (root / "in.md").write_text("# t")
        (root / "out.json").write_text("{}")
        policy.record(context)
        assert policy.evaluate(pair_step, context) == CompleteRunnable()

    def test_input_edited(self, root, context, policy, pair_step):
        (root / "in.md").write_text("# t")
        (root / "out.json").write_text("{}")
        policy.record(context)
        (root / "in.md").write_text("# t2")
        assert policy.evaluate(pair_step, context) == Runnable()

    def test_output_edited(self, root, context, policy, pair_step):
        (root / "in.md").write_text("# t")
        (root / "out.json").write_text("{}")
        policy.record(context)
        (root / "out.json").write_text('{"x": 1}')
        assert policy.evaluate(pair_step, context) == Runnable()

    def test_output_deleted(self, root, context, policy, pair_step):
        (root / "in.md").write_text("# t")
        (root / "out.json").write_text("{}")
        policy.record(context)
        (root / "out.json").unlink()
        assert policy.evaluate(pair_step, context) == Runnable()

    def test_state_stored_under_its_own_key(self, root, context, policy):
        (root / "in.md").write_text("# t")
        (root / "out.json").write_text("{}")
        policy.record(context)
        assert context.state_store.exists("pair_state")
        assert context.state_store.load("pair") is None


class TestFileState:
    def test_states(self, root: Path):
        (root / "a.txt").write_text("a")
        assert file_state("a.txt", fingerprint(b"a"), root) is FileState.MATCHING
        assert file_state("a.txt", fingerprint(b"b"), root) is FileState.CHANGED
        assert file_state("z.txt", fingerprint(b"a"), root) is FileState.MISSING

    def test_input_state_priority(self, root: Path):
        (root / "a.txt").write_text("a")
        (root / "b.txt").write_text("b")
        ok_a = FileRecord(path="a.txt", fingerprint=fingerprint(b"a"))
        stale_b = FileRecord(path="b.txt", fingerprint=fingerprint(b"old"))
        gone = FileRecord(path="gone.txt", fingerprint=fingerprint(b"a"))

        assert input_state([ok_a], root) is FileState.MATCHING
        assert input_state([ok_a, stale_b], root) is FileState.CHANGED
        assert input_state([stale_b, gone, ok_a], root) is FileState.MISSING
        assert input_state([], root) is FileState.MATCHING


def test_policies_satisfy_protocol():
    from stepforge.core.lifecycle import LifecyclePolicy

    assert isinstance(ManifestLifecycle(), LifecyclePolicy)
    assert isinstance(FingerprintPairLifecycle("a", "b", "k"), LifecyclePolicy)
