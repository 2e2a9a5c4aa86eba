"""Helpers for working with record digests."""

from __future__ import annotations

import hashlib
from typing import Optional

DEFAULT_ALGORITHM = "md5"


def normalize_digest(value: Optional[str]) -> Optional[str]:
    """Lower-case a hex digest, mapping blank values to ``None``."""
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


def compute_digest(data: bytes | str, *, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute a hex digest for in-memory content."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    hasher = hashlib.new(algorithm)
    hasher.update(data)
    return hasher.hexdigest()
