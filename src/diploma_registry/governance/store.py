"""Governance store: capacity ceiling, mint fee and token-id counter.

Both setters are idempotent and have no effect beyond the stored scalar.
"""

from __future__ import annotations

import logging

from diploma_registry.core.errors import InvalidUpdateParam, MaxDiplomasExceeded
from diploma_registry.core.models import GovernanceConfig

from .authorization import AuthorizationGate

logger = logging.getLogger(__name__)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class GovernanceStore:
    """Owns the mutable fields of a registry's :class:`GovernanceConfig`."""

    def __init__(self, config: GovernanceConfig, gate: AuthorizationGate) -> None:
        self._config = config
        self._gate = gate

    @property
    def config(self) -> GovernanceConfig:
        return self._config

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def max_diplomas(self) -> int:
        return self._config.max_diplomas

    @property
    def mint_fee(self) -> int:
        return self._config.mint_fee

    @property
    def last_token_id(self) -> int:
        return self._config.last_token_id

    # ------------------------------------------------------------------
    # Governance setters
    # ------------------------------------------------------------------

    def set_max_diplomas(self, new_max: int) -> None:
        if not _is_int(new_max) or new_max <= 0:
            raise InvalidUpdateParam(f"max diplomas must be a positive integer, got {new_max!r}")
        self._gate.require_authority()
        self._config.max_diplomas = new_max
        logger.info("Max diplomas set to %d", new_max)

    def set_mint_fee(self, new_fee: int) -> None:
        if not _is_int(new_fee) or new_fee < 0:
            raise InvalidUpdateParam(f"mint fee must be a non-negative integer, got {new_fee!r}")
        self._gate.require_authority()
        self._config.mint_fee = new_fee
        logger.info("Mint fee set to %d", new_fee)

    # ------------------------------------------------------------------
    # Token ids
    # ------------------------------------------------------------------

    def check_capacity(self) -> None:
        """Raise MaxDiplomasExceeded once the ceiling has been reached."""
        if self._config.last_token_id >= self._config.max_diplomas:
            raise MaxDiplomasExceeded(
                f"{self._config.last_token_id} of {self._config.max_diplomas} diplomas issued"
            )

    def next_token_id(self) -> int:
        return self._config.next_token_id

    def advance_token_id(self, token_id: int) -> None:
        """Record *token_id* as the last assigned id. Ids only move forward."""
        if token_id != self._config.last_token_id + 1:
            raise ValueError(
                f"token id {token_id} does not follow {self._config.last_token_id}"
            )
        self._config.last_token_id = token_id

    def rewind_token_id(self, token_id: int) -> None:
        """Undo :meth:`advance_token_id` inside an uncommitted unit of work."""
        if self._config.last_token_id != token_id:
            raise ValueError(
                f"cannot rewind {token_id}: last id is {self._config.last_token_id}"
            )
        self._config.last_token_id = token_id - 1
