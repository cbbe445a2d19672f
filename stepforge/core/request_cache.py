"""Content-addressed memoization of external calls.

Storage layout: {cache_dir}/{fingerprint}.json holding
``{"request": <canonical>, "response": <canonical>}``.

The fingerprint is taken over the canonical request bytes. On every hit
the stored request is compared with the live one; a disagreement raises
``CacheCorruptionError`` instead of returning the stored response.

Entries are never updated in place. Two processes racing on the same miss
will both call the backend and both write the entry; the second write is
expected to carry the same request and is otherwise ignored.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stepforge.core._files import atomic_write_text
from stepforge.core.canonical import canonical_json_bytes, canonicalize
from stepforge.core.external import ExternalAction
from stepforge.core.hasher import fingerprint
from stepforge.models.cache import CacheEntry

logger = logging.getLogger(__name__)

_FINGERPRINT_RE = re.compile(r"^[0-9a-f]{32}$")


class CacheCorruptionError(RuntimeError):
    """Raised when a cache entry is unreadable or disagrees with its request."""


class RequestCache:
    """Filesystem memoization cache keyed by canonical request fingerprint.

    Parameters
    ----------
    cache_dir:
        Directory holding one JSON document per fingerprint. Created on
        first write.
    """

    def __init__(self, cache_dir: Path) -> None:
        self._dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._dir

    @staticmethod
    def key_for(request: Any) -> str:
        """Fingerprint of the canonical form of *request*."""
        return fingerprint(canonical_json_bytes(request))

    def path_for(self, key: str) -> Path:
        if not _FINGERPRINT_RE.match(key):
            raise ValueError(f"Not a fingerprint: {key!r}")
        return self._dir / f"{key}.json"

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, request: Any) -> Any | None:
        """Return the cached response for *request*, or ``None`` on a miss."""
        entry = self.lookup_entry(request)
        return None if entry is None else entry.response

    def lookup_entry(self, request: Any) -> CacheEntry | None:
        """Return the verified cache entry for *request*, or ``None``."""
        live = canonical_json_bytes(request)
        key = fingerprint(live)
        entry = self.entry(key)
        if entry is None:
            logger.debug("Cache miss %s", key)
            return None
        if canonical_json_bytes(entry.request) != live:
            raise CacheCorruptionError(
                f"Cache entry {key} holds a different request than the one "
                f"that maps to it; refusing to use {self.path_for(key)}"
            )
        logger.debug("Cache hit %s", key)
        return entry

    def entry(self, key: str) -> CacheEntry | None:
        """Read the raw entry stored under *key* without verifying it."""
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError as exc:
            raise CacheCorruptionError(
                f"Cache entry {key} at {path} is unreadable: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def store(self, request: Any, response: Any) -> CacheEntry:
        """Persist *response* for *request* and return the stored entry.

        If an entry already exists its request must match; its response is
        kept even if *response* differs. ``None`` values in *response* are
        stored as JSON nulls, so a lookup returns the response unchanged.
        """
        entry = CacheEntry(
            request=canonicalize(request),
            response=canonicalize(response, drop_none=False),
        )
        key = self.key_for(entry.request)

        existing = self.lookup_entry(entry.request)
        if existing is not None:
            if canonical_json_bytes(
                existing.response, drop_none=False
            ) != canonical_json_bytes(entry.response, drop_none=False):
                logger.warning(
                    "Cache entry %s already holds a different response; "
                    "keeping the stored one (non-deterministic backend?)",
                    key,
                )
            return existing

        atomic_write_text(self.path_for(key), entry.model_dump_json(indent=2))
        logger.debug("Cached response %s", key)
        return entry

    # ------------------------------------------------------------------
    # Memoized call
    # ------------------------------------------------------------------

    def fetch(self, request: Any, action: ExternalAction) -> tuple[Any, bool]:
        """Return ``(response, from_cache)``, calling *action* only on a miss."""
        cached = self.lookup_entry(request)
        if cached is not None:
            return cached.response, True
        response = action.issue(canonicalize(request))
        stored = self.store(request, response)
        return stored.response, False


class CachedAction:
    """An ``ExternalAction`` that consults a ``RequestCache`` first.

    Parameters
    ----------
    action:
        The backend to call on a cache miss.
    cache:
        The memoization cache.
    """

    def __init__(self, action: ExternalAction, cache: RequestCache) -> None:
        self.action = action
        self.cache = cache
        self.hits = 0
        self.misses = 0

    def issue(self, request: Any) -> Any:
        response, from_cache = self.cache.fetch(request, self.action)
        if from_cache:
            self.hits += 1
        else:
            self.misses += 1
        return response
