"""Canonical serialization of request/response values.

Two values that mean the same thing must serialize to the same bytes:
- mapping keys are sorted
- ``None``-valued mapping entries (unset optional fields) are omitted,
  unless ``drop_none=False`` (responses keep their nulls)
- tuples serialize as lists
- Pydantic models are dumped by alias with unset optionals dropped
- compact separators, ASCII-only, UTF-8, no NaN/Infinity

Cache correctness depends on this module. Any change here changes every
request fingerprint.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel


def canonicalize(value: Any, *, drop_none: bool = True) -> Any:
    """Return the canonical JSON-compatible form of *value*.

    With *drop_none* false, ``None``-valued mapping entries are kept. Use
    that for responses, which are stored as the backend returned them.

    Raises ``TypeError`` for values with no canonical form (non-string
    mapping keys, sets, arbitrary objects).
    """
    if isinstance(value, BaseModel):
        return canonicalize(
            value.model_dump(mode="json", by_alias=True, exclude_none=drop_none),
            drop_none=drop_none,
        )
    if isinstance(value, Enum):
        return canonicalize(value.value, drop_none=drop_none)
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key in sorted(value, key=_key_for_sort):
            item = value[key]
            if item is None and drop_none:
                continue
            result[key] = canonicalize(item, drop_none=drop_none)
        return result
    if isinstance(value, (list, tuple)):
        return [canonicalize(item, drop_none=drop_none) for item in value]
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    raise TypeError(
        f"Cannot canonicalize value of type {type(value).__name__}"
    )


def _key_for_sort(key: Any) -> str:
    if not isinstance(key, str):
        raise TypeError(f"Mapping keys must be strings, got {type(key).__name__}")
    return key


def canonical_json_bytes(value: Any, *, drop_none: bool = True) -> bytes:
    """Canonical JSON bytes of *value* (see module docstring)."""
    return json.dumps(
        canonicalize(value, drop_none=drop_none),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
    ).encode("utf-8")
