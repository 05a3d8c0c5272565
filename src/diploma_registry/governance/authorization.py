"""Authorization gate.

Decides whether a caller may mint (it must be a recognised issuing
institution) and whether governance calls may proceed (an authority must
be configured). The authority principal is set once and never changes.
"""

from __future__ import annotations

import logging

from diploma_registry.core.errors import AuthorityNotVerified, NotAuthorized
from diploma_registry.core.interfaces import IIssuerAllowList
from diploma_registry.core.models import GovernanceConfig

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Issuer and authority checks over a shared :class:`GovernanceConfig`."""

    def __init__(self, issuers: IIssuerAllowList, config: GovernanceConfig) -> None:
        self._issuers = issuers
        self._config = config

    # ------------------------------------------------------------------
    # Issuers
    # ------------------------------------------------------------------

    def is_issuer_authorized(self, principal: str) -> bool:
        return self._issuers.is_issuer_authorized(principal)

    def require_issuer(self, principal: str) -> None:
        """Raise NotAuthorized unless *principal* is a recognised issuer."""
        if not self.is_issuer_authorized(principal):
            raise NotAuthorized(f"{principal} is not a recognised issuer")

    # ------------------------------------------------------------------
    # Authority
    # ------------------------------------------------------------------

    @property
    def authority(self) -> str | None:
        return self._config.authority_contract

    def require_authority(self) -> str:
        """Return the configured authority or raise AuthorityNotVerified."""
        authority = self._config.authority_contract
        if authority is None:
            raise AuthorityNotVerified("no authority contract configured")
        return authority

    def set_authority_contract(self, caller: str, principal: str) -> None:
        """Configure the governance authority. Set-once.

        Raises:
            NotAuthorized: *caller* proposes itself as the authority.
            AuthorityNotVerified: an authority is already configured.
        """
        if principal == caller:
            raise NotAuthorized("caller cannot appoint itself as authority")
        if self._config.authority_contract is not None:
            raise AuthorityNotVerified(
                f"authority already set to {self._config.authority_contract}"
            )
        self._config.authority_contract = principal
        logger.info("Authority contract set to %s by %s", principal, caller)
