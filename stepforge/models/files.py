"""File fingerprint records and the per-step manifest.

A manifest is written only when a step completes successfully. Reruns
replace it wholesale; records are never merged across runs.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from stepforge.core.hasher import fingerprint_of_file


class FileState(str, Enum):
    """Live state of a file compared with a recorded fingerprint."""

    MATCHING = "matching"
    MISSING = "missing"
    CHANGED = "changed"


class FileRecord(BaseModel):
    """Observed content of one file at one point in time.

    Persisted as ``{"filename": ..., "hash": ...}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(alias="filename")
    fingerprint: str = Field(alias="hash", pattern=r"^[0-9a-f]{32}$")

    @classmethod
    def from_file(cls, path: str, root: Path | None = None) -> FileRecord:
        """Fingerprint *path* (relative to *root* when given) and record it."""
        return cls(path=path, fingerprint=fingerprint_of_file(path, root=root))


class StepManifest(BaseModel):
    """Input and output fingerprints of a step's last successful run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    inputs: list[FileRecord] = []
    outputs: list[FileRecord] = []

    def to_document(self) -> str:
        """Serialize with the persisted field names."""
        return self.model_dump_json(by_alias=True, indent=2)
