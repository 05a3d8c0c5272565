"""Append-only audit journal of registry mutations.

Contract:
    - append() MUST succeed or raise (no silent drops)
    - If append() raises, the mutation it describes is rolled back
    - Entries are immutable after append
    - No delete/update operations exist

In-memory with optional JSONL file persistence.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from diploma_registry.core.file_io import safe_append_line
from diploma_registry.core.ids import new_id, utc_now
from diploma_registry.core.ids import payload_hash as _payload_hash

logger = logging.getLogger(__name__)


class AuditEntry(BaseModel):
    """Single entry in the append-only audit log."""

    entry_id: str = Field(default_factory=new_id)
    timestamp: datetime = Field(default_factory=utc_now)
    call_id: str = ""
    actor: str = ""
    token_id: int | None = None
    block_height: int = 0

    event_type: str  # "diploma_minted", "diploma_revoked", ...
    payload: dict[str, Any] = Field(default_factory=dict)
    payload_hash: str = ""

    def model_post_init(self, __context: Any) -> None:
        if not self.payload_hash:
            self.payload_hash = _payload_hash(self.payload)


class AuditLog:
    """Append-only audit event journal.

    The registry refuses every mutating call while the log is unavailable.
    This is the fail-closed contract.
    """

    def __init__(
        self,
        persist_path: str | None = None,
        max_memory_entries: int = 100_000,
    ) -> None:
        self._entries: list[AuditEntry] = []
        self._by_token: dict[int, list[AuditEntry]] = defaultdict(list)
        self._persist_path = Path(persist_path) if persist_path else None
        self._max = max_memory_entries
        self._available = True

    def append(self, entry: AuditEntry) -> None:
        """Append an audit entry.

        Raises:
            RuntimeError: If the audit log is unavailable or persistence
                fails.  Callers MUST treat this as a hard stop.
        """
        if not self._available:
            raise RuntimeError("AuditLog is unavailable")

        if self._persist_path is not None:
            try:
                safe_append_line(self._persist_path, entry.model_dump_json())
            except OSError as exc:
                # Persistence failure makes the log unavailable
                self._available = False
                raise RuntimeError(f"AuditLog persistence failed: {exc}") from exc

        self._entries.append(entry)
        if entry.token_id is not None:
            self._by_token[entry.token_id].append(entry)

        # Memory cap: evict oldest entries, from the token index too
        if len(self._entries) > self._max:
            evicted = self._entries[: -self._max]
            self._entries = self._entries[-self._max :]
            for old in evicted:
                if old.token_id is None:
                    continue
                bucket = self._by_token[old.token_id]
                bucket.pop(0)
                if not bucket:
                    del self._by_token[old.token_id]

    def read_token(self, token_id: int) -> list[AuditEntry]:
        """All entries for one token, oldest first."""
        return list(self._by_token.get(token_id, []))

    def entries(self, event_type: str | None = None) -> list[AuditEntry]:
        if event_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.event_type == event_type]

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def is_available(self) -> bool:
        return self._available

    def set_available(self, available: bool) -> None:
        """Toggle availability. Primary use: testing."""
        self._available = available
