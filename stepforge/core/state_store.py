"""Persisted per-step manifests.

Storage layout: {state_dir}/{key}.stepstate.json

One document per key. ``save`` replaces the document wholesale through an
atomic rename, so a reader never observes a partial manifest.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from stepforge.core._files import atomic_write_text
from stepforge.models.files import StepManifest

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

STATE_SUFFIX = ".stepstate.json"


class CorruptStateError(RuntimeError):
    """Raised when a persisted state document exists but cannot be parsed."""


class StepStateStore:
    """Loads and saves step manifests and auxiliary step documents.

    Parameters
    ----------
    state_dir:
        Directory holding one ``<key>.stepstate.json`` per step key.
    """

    def __init__(self, state_dir: Path) -> None:
        self._dir = Path(state_dir)

    @property
    def state_dir(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        """Compute the document path for *key*."""
        if not key or key in (".", "..") or "/" in key or "\\" in key:
            raise ValueError(f"Invalid step state key: {key!r}")
        return self._dir / f"{key}{STATE_SUFFIX}"

    # ------------------------------------------------------------------
    # Manifests
    # ------------------------------------------------------------------

    def load(self, key: str) -> StepManifest | None:
        """Return the manifest for *key*, or ``None`` if never persisted."""
        return self.load_document(key, StepManifest)

    def save(self, manifest: StepManifest) -> Path:
        """Persist *manifest*, replacing any earlier manifest for its key."""
        path = self._write(manifest.key, manifest.to_document())
        logger.info(
            "Saved manifest %s (%d inputs, %d outputs)",
            manifest.key,
            len(manifest.inputs),
            len(manifest.outputs),
        )
        return path

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def delete(self, key: str) -> bool:
        """Remove the document for *key*. Returns whether one existed."""
        path = self.path_for(key)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted step state %s", key)
        return True

    # ------------------------------------------------------------------
    # Arbitrary documents
    # ------------------------------------------------------------------

    def load_document(self, key: str, model: type[_M]) -> _M | None:
        """Load the document for *key* as *model*.

        Returns ``None`` when no document exists. Raises
        ``CorruptStateError`` when one exists but is not valid *model* JSON.
        """
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            raise CorruptStateError(
                f"Step state {key!r} at {path} is corrupt: {exc}"
            ) from exc

    def save_document(self, key: str, document: BaseModel) -> Path:
        """Persist an arbitrary model under *key*."""
        return self._write(key, document.model_dump_json(by_alias=True, indent=2))

    def _write(self, key: str, text: str) -> Path:
        path = self.path_for(key)
        atomic_write_text(path, text)
        return path
