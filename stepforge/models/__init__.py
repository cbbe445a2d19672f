"""stepforge data models — all Pydantic v2, all frozen (immutable)."""

from stepforge.models.cache import CacheEntry
from stepforge.models.config import ProjectConfig
from stepforge.models.files import FileRecord, FileState, StepManifest
from stepforge.models.lifecycle import (
    CompleteNotRunnable,
    CompleteRunnable,
    LifecycleState,
    NotRunnable,
    Runnable,
    StepStatus,
)

__all__ = [
    # files
    "FileRecord",
    "FileState",
    "StepManifest",
    # lifecycle
    "NotRunnable",
    "Runnable",
    "CompleteRunnable",
    "CompleteNotRunnable",
    "LifecycleState",
    "StepStatus",
    # cache
    "CacheEntry",
    # config
    "ProjectConfig",
]
