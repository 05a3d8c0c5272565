"""Diploma record store.

Exclusively owns the :class:`DiplomaRecord` entries keyed by token id.
Records are frozen models; every change replaces the stored instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from diploma_registry.core.errors import AlreadyMinted, InvalidId, NotAuthorized
from diploma_registry.core.models import DiplomaRecord

logger = logging.getLogger(__name__)


class DiplomaStore:
    """Keyed store of diploma metadata."""

    def __init__(self) -> None:
        self._records: dict[int, DiplomaRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._records

    def __iter__(self) -> Iterator[DiplomaRecord]:
        return iter(sorted(self._records.values(), key=lambda r: r.token_id))

    def get(self, token_id: int) -> DiplomaRecord | None:
        return self._records.get(token_id)

    def require(self, token_id: int) -> DiplomaRecord:
        """Return the record for *token_id* or raise InvalidId."""
        record = self._records.get(token_id)
        if record is None:
            raise InvalidId(f"no diploma with token id {token_id!r}")
        return record

    def require_issued_by(self, token_id: int, caller: str) -> DiplomaRecord:
        """Return the record if *caller* is its issuer."""
        record = self.require(token_id)
        if record.issuer != caller:
            raise NotAuthorized(f"{caller} is not the issuer of diploma {token_id}")
        return record

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, record: DiplomaRecord) -> None:
        if record.token_id in self._records:
            raise AlreadyMinted(f"token id {record.token_id} already minted")
        self._records[record.token_id] = record

    def discard(self, token_id: int) -> None:
        """Remove a record. Only used to undo an uncommitted insert."""
        self._records.pop(token_id, None)

    def amend(self, token_id: int, degree_type: str, gpa: int) -> DiplomaRecord:
        record = self.require(token_id)
        updated = record.model_copy(update={"degree_type": degree_type, "gpa": gpa})
        self._records[token_id] = updated
        return updated

    def revoke(self, token_id: int) -> DiplomaRecord:
        """Set status to False. Repeat calls leave the record unchanged."""
        record = self.require(token_id)
        if not record.status:
            return record
        revoked = record.model_copy(update={"status": False})
        self._records[token_id] = revoked
        logger.info("Diploma %d revoked", token_id)
        return revoked

    def restore(self, record: DiplomaRecord) -> None:
        """Put back an earlier version of an existing record (rollback only)."""
        self._records[record.token_id] = record

    def load(self, records: list[DiplomaRecord]) -> None:
        """Bulk-load records from a snapshot into an empty store."""
        if self._records:
            raise ValueError("DiplomaStore.load requires an empty store")
        for record in records:
            self.insert(record)
