"""Memoization cache entry model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class CacheEntry(BaseModel):
    """A canonical request and the response observed for it.

    The entry's identity is the fingerprint of the canonical request; it
    is the storage key, not a stored field. Entries are never updated.
    """

    model_config = ConfigDict(frozen=True)

    request: Any
    response: Any
