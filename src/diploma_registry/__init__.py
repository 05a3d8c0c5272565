"""Diploma registry: issues, tracks and governs diploma tokens.

Quick start::

    from diploma_registry import (
        CallerContext, DiplomaRegistry, InMemoryValueLedger, StaticIssuerAllowList,
    )

    identity = CallerContext()
    registry = DiplomaRegistry(identity, InMemoryValueLedger(), StaticIssuerAllowList(["ST1UNI"]))
    with identity.acting_as("ST1UNI"):
        registry.set_authority_contract("ST2GOV")
"""

from diploma_registry.audit_log import AuditEntry, AuditLog
from diploma_registry.core.errors import ErrorCode, RegistryError
from diploma_registry.core.models import (
    DiplomaRecord,
    GovernanceConfig,
    MintRequest,
    OperationResult,
    UpdateRecord,
)
from diploma_registry.identity import CallerContext
from diploma_registry.issuers import StaticIssuerAllowList
from diploma_registry.payments import InMemoryValueLedger
from diploma_registry.registry.service import DiplomaRegistry

__version__ = "0.1.0"

__all__ = [
    "AuditEntry",
    "AuditLog",
    "CallerContext",
    "DiplomaRecord",
    "DiplomaRegistry",
    "ErrorCode",
    "GovernanceConfig",
    "InMemoryValueLedger",
    "MintRequest",
    "OperationResult",
    "RegistryError",
    "StaticIssuerAllowList",
    "UpdateRecord",
]
