"""Canonical ID, digest and timestamp helpers.

Timestamp Rule
--------------
All timestamps are ``datetime`` with ``tzinfo=timezone.utc``, never naive.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from datetime import datetime, timezone
from typing import Any

TRANSCRIPT_HASH_LENGTH = 32


def new_id() -> str:
    """Generate a new UUID v4 string.  Use for audit entry and call IDs."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def transcript_digest(content: bytes) -> bytes:
    """SHA-256 digest of a transcript document (32 bytes)."""
    return hashlib.sha256(content).digest()


def payload_hash(payload: dict[str, Any], *, length: int = 16) -> str:
    """Generate a deterministic hash from a JSON-serializable dict.

    Use for audit integrity hashes.

    Parameters
    ----------
    payload:
        Dict to hash.  Serialized with sorted keys and ``default=str``;
        ``bytes`` values are hashed by their hex form.
    length:
        Number of hex characters to return (default 16).
    """
    raw = json.dumps(payload, sort_keys=True, default=_json_default)
    return hashlib.sha256(raw.encode()).hexdigest()[:length]


def _json_default(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)
