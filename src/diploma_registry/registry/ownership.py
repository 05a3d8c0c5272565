"""Ownership map: current holder per token id.

An entry exists from mint until burn. Burning only removes the entry; the
diploma record and its update history stay in place.
"""

from __future__ import annotations

import logging

from diploma_registry.core.errors import AlreadyMinted, NotAuthorized, NotOwner

logger = logging.getLogger(__name__)


class OwnershipMap:
    """Holder relation, keyed by token id."""

    def __init__(self) -> None:
        self._owners: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._owners)

    def owner_of(self, token_id: int) -> str | None:
        return self._owners.get(token_id)

    def tokens_of(self, principal: str) -> list[int]:
        """Token ids currently held by *principal*, ascending."""
        return sorted(tid for tid, holder in self._owners.items() if holder == principal)

    def items(self) -> list[tuple[int, str]]:
        return sorted(self._owners.items())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def assign(self, token_id: int, holder: str) -> None:
        """Create the ownership entry for a freshly minted token."""
        if token_id in self._owners:
            raise AlreadyMinted(f"token id {token_id} already has an owner")
        self._owners[token_id] = holder

    def release(self, token_id: int) -> None:
        """Drop an entry without checks. Only used to undo an uncommitted assign."""
        self._owners.pop(token_id, None)

    def _require_held_by(self, token_id: int, principal: str) -> None:
        holder = self._owners.get(token_id)
        if holder is None or holder != principal:
            raise NotOwner(f"{principal} does not hold token {token_id}")

    def transfer(self, token_id: int, caller: str, sender: str, recipient: str) -> None:
        """Move *token_id* from *sender* to *recipient*.

        The caller must be the declared sender, and the sender must be the
        recorded holder. Revocation status plays no part here.
        """
        if caller != sender:
            raise NotAuthorized(f"{caller} cannot transfer on behalf of {sender}")
        self._require_held_by(token_id, sender)
        self._owners[token_id] = recipient
        logger.info("Token %d transferred %s -> %s", token_id, sender, recipient)

    def burn(self, token_id: int, caller: str) -> None:
        self._require_held_by(token_id, caller)
        del self._owners[token_id]
        logger.info("Token %d burned by %s", token_id, caller)

    def restore(self, token_id: int, holder: str) -> None:
        """Reinstate *holder* after an uncommitted transfer or burn."""
        self._owners[token_id] = holder

    def load(self, owners: dict[int, str]) -> None:
        for token_id, holder in owners.items():
            self.assign(token_id, holder)
