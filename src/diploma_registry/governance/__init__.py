"""Governance layer: authorization gate and governance store."""

from diploma_registry.governance.authorization import AuthorizationGate
from diploma_registry.governance.store import GovernanceStore

__all__ = ["AuthorizationGate", "GovernanceStore"]
