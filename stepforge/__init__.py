"""stepforge: incremental step runner with memoized external calls.

  - Steps declare file inputs; a manifest of input/output fingerprints is
    saved after every successful run
  - Lifecycle (runnable / complete / missing inputs) is recomputed from
    disk on every query
  - External calls are memoized by the fingerprint of the canonical
    request, and every cache hit is checked against the live request
"""

__version__ = "0.1.0"
__description__ = "Incremental step runner with memoized external calls"

from stepforge.core.orchestrator import StepOrchestrator, build_orchestrator
from stepforge.core.request_cache import CachedAction, RequestCache
from stepforge.cli.app import app as cli

__all__ = [
    "StepOrchestrator",
    "build_orchestrator",
    "RequestCache",
    "CachedAction",
    "cli",
    "__version__",
]
