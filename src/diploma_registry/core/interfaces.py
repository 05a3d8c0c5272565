"""Protocol interfaces for the registry's external collaborators.

The registry only observes who is calling, whether a value transfer
succeeded, and whether a principal is a recognised issuer. How each of
those is answered lives behind these protocols.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .clock import IClock


@runtime_checkable
class ICallerIdentity(Protocol):
    """Identifies the principal making the current call."""

    def current_caller(self) -> str: ...


@runtime_checkable
class IValueTransfer(Protocol):
    """Moves value between principals. Returns False when refused."""

    def transfer(self, amount: int, sender: str, recipient: str) -> bool: ...


@runtime_checkable
class IIssuerAllowList(Protocol):
    """Externally maintained set of recognised issuing institutions."""

    def is_issuer_authorized(self, principal: str) -> bool: ...


__all__ = ["IClock", "ICallerIdentity", "IIssuerAllowList", "IValueTransfer"]
