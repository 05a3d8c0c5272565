"""JSON snapshots of the complete registry state.

A snapshot captures governance config, records, update history, owners,
the issuer allow-list and the value ledger. Writes go through an atomic
replace so a crash never leaves a half-written file.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from diploma_registry.audit_log import AuditLog
from diploma_registry.core.clock import IClock
from diploma_registry.core.file_io import atomic_write_text
from diploma_registry.core.ids import utc_now
from diploma_registry.core.interfaces import ICallerIdentity
from diploma_registry.core.models import (
    DiplomaRecord,
    GovernanceConfig,
    UpdateRecord,
    ValueTransfer,
)
from diploma_registry.issuers import StaticIssuerAllowList
from diploma_registry.payments import InMemoryValueLedger
from diploma_registry.registry.service import DiplomaRegistry

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class LedgerSnapshot(BaseModel):
    enforce_balances: bool = False
    balances: dict[str, int] = Field(default_factory=dict)
    transfers: list[ValueTransfer] = Field(default_factory=list)


class RegistrySnapshot(BaseModel):
    version: int = SNAPSHOT_VERSION
    saved_at: datetime = Field(default_factory=utc_now)
    governance: GovernanceConfig = Field(default_factory=GovernanceConfig)
    authorized_issuers: list[str] = Field(default_factory=list)
    records: list[DiplomaRecord] = Field(default_factory=list)
    updates: list[UpdateRecord] = Field(default_factory=list)
    owners: dict[int, str] = Field(default_factory=dict)
    ledger: LedgerSnapshot = Field(default_factory=LedgerSnapshot)


def take_snapshot(
    registry: DiplomaRegistry,
    ledger: InMemoryValueLedger,
    issuers: StaticIssuerAllowList,
) -> RegistrySnapshot:
    return RegistrySnapshot(
        governance=registry.config.model_copy(),
        authorized_issuers=list(issuers),
        records=list(registry.records),
        updates=registry.updates.all(),
        owners=dict(registry.owners.items()),
        ledger=LedgerSnapshot(
            enforce_balances=ledger.enforce_balances,
            balances=ledger.balances,
            transfers=ledger.transfers,
        ),
    )


def save_snapshot(
    registry: DiplomaRegistry,
    ledger: InMemoryValueLedger,
    issuers: StaticIssuerAllowList,
    path: str | Path,
) -> RegistrySnapshot:
    snapshot = take_snapshot(registry, ledger, issuers)
    atomic_write_text(Path(path), snapshot.model_dump_json(indent=2))
    logger.info(
        "Snapshot saved to %s (%d records, %d owners)",
        path,
        len(snapshot.records),
        len(snapshot.owners),
    )
    return snapshot


def load_snapshot(path: str | Path) -> RegistrySnapshot:
    snapshot = RegistrySnapshot.model_validate_json(Path(path).read_text())
    if snapshot.version != SNAPSHOT_VERSION:
        raise ValueError(
            f"Unsupported snapshot version {snapshot.version} (expected {SNAPSHOT_VERSION})"
        )
    return snapshot


def restore_registry(
    snapshot: RegistrySnapshot,
    identity: ICallerIdentity,
    clock: IClock | None = None,
    audit_log: AuditLog | None = None,
) -> tuple[DiplomaRegistry, InMemoryValueLedger, StaticIssuerAllowList]:
    """Rebuild a live registry and its reference collaborators."""
    issuers = StaticIssuerAllowList(snapshot.authorized_issuers)
    ledger = InMemoryValueLedger(
        balances=snapshot.ledger.balances,
        enforce_balances=snapshot.ledger.enforce_balances,
        history=snapshot.ledger.transfers,
    )
    registry = DiplomaRegistry(
        identity=identity,
        value_transfer=ledger,
        issuers=issuers,
        config=snapshot.governance.model_copy(),
        clock=clock,
        audit_log=audit_log,
    )
    registry.records.load(snapshot.records)
    registry.updates.load(snapshot.updates)
    registry.owners.load(snapshot.owners)
    return registry, ledger, issuers
