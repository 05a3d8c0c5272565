"""Shared fixtures for the diploma-registry test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from diploma_registry.audit_log import AuditLog
from diploma_registry.core.clock import SimClock
from diploma_registry.core.models import MintRequest
from diploma_registry.identity import CallerContext
from diploma_registry.issuers import StaticIssuerAllowList
from diploma_registry.payments import InMemoryValueLedger
from diploma_registry.registry.service import DiplomaRegistry

ISSUER = "ST1TEST"
AUTHORITY = "ST2TEST"
RECIPIENT = "ST3RECIPIENT"
STRANGER = "ST4FAKE"
NEW_HOLDER = "ST4NEW"

TRANSCRIPT = bytes(32)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def identity() -> CallerContext:
    return CallerContext()


@pytest.fixture
def ledger() -> InMemoryValueLedger:
    return InMemoryValueLedger()


@pytest.fixture
def issuers() -> StaticIssuerAllowList:
    return StaticIssuerAllowList([ISSUER])


@pytest.fixture
def clock() -> SimClock:
    return SimClock(start=100)


@pytest.fixture
def audit_log() -> AuditLog:
    return AuditLog()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@pytest.fixture
def registry(
    identity: CallerContext,
    ledger: InMemoryValueLedger,
    issuers: StaticIssuerAllowList,
    clock: SimClock,
    audit_log: AuditLog,
) -> DiplomaRegistry:
    """A freshly deployed registry: default governance, no authority."""
    return DiplomaRegistry(
        identity=identity,
        value_transfer=ledger,
        issuers=issuers,
        clock=clock,
        audit_log=audit_log,
    )


@pytest.fixture
def governed(registry: DiplomaRegistry, identity: CallerContext) -> DiplomaRegistry:
    """Registry with AUTHORITY configured (set by ISSUER)."""
    with identity.acting_as(ISSUER):
        registry.set_authority_contract(AUTHORITY).unwrap()
    return registry


@pytest.fixture
def make_request() -> Callable[..., MintRequest]:
    """Factory for a valid MintRequest; keyword overrides replace fields."""

    def _make(**overrides: Any) -> MintRequest:
        fields: dict[str, Any] = dict(
            recipient=RECIPIENT,
            degree_type="Bachelor",
            gpa=350,
            graduation_date=2025,
            honors="Cum Laude",
            major="Computer Science",
            minor="Math",
            transcript_hash=TRANSCRIPT,
            field_of_study="Engineering",
            credit_hours=120,
            thesis_title=None,
            advisor=None,
            awards=["Award1"],
            verification_level=3,
        )
        fields.update(overrides)
        return MintRequest(**fields)

    return _make


@pytest.fixture
def minted(
    governed: DiplomaRegistry,
    identity: CallerContext,
    make_request: Callable[..., MintRequest],
) -> int:
    """Token id of one diploma minted by ISSUER for RECIPIENT."""
    with identity.acting_as(ISSUER):
        return governed.mint(make_request()).unwrap()
