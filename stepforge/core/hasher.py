"""Content fingerprints for staleness checks and cache keys.

A fingerprint is the first 32 lowercase hex characters (128 bits) of a
SHA-256 digest. It identifies content for deduplication; it is not a
tamper-evident seal.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

from stepforge.core.canonical import canonical_json_bytes

FINGERPRINT_LENGTH = 32


class FingerprintNotFoundError(FileNotFoundError):
    """Raised when a path to be fingerprinted does not exist."""


def sha256_hex(data: bytes) -> str:
    """Return the full SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def fingerprint(data: bytes) -> str:
    """Fingerprint raw bytes."""
    return sha256_hex(data)[:FINGERPRINT_LENGTH]


def fingerprint_of_value(value: Any) -> str:
    """Fingerprint the canonical JSON serialization of *value*."""
    return fingerprint(canonical_json_bytes(value))


def resolve_path(path: str | Path, root: Path | None = None) -> Path:
    """Resolve a declared path against the project root."""
    p = Path(path)
    if root is None or p.is_absolute():
        return p
    return Path(root) / p


def fingerprint_of_file(path: str | Path, root: Path | None = None) -> str:
    """Fingerprint the bytes of a file.

    Raises ``FingerprintNotFoundError`` when the file is absent. Any other
    ``OSError`` (permissions, path is a directory, ...) propagates.
    """
    resolved = resolve_path(path, root)
    try:
        data = resolved.read_bytes()
    except FileNotFoundError as exc:
        raise FingerprintNotFoundError(f"No such file: {path}") from exc
    return fingerprint(data)


def try_fingerprint_of_file(
    path: str | Path, root: Path | None = None
) -> str | None:
    """Like ``fingerprint_of_file`` but returns ``None`` for a missing file."""
    try:
        return fingerprint_of_file(path, root)
    except FingerprintNotFoundError:
        return None
