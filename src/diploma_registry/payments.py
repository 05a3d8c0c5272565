"""In-memory value ledger implementing the value-transfer primitive.

Follows the substrate's native transfer rules: the amount must be positive
and sender and recipient must differ. When ``enforce_balances`` is on, the
sender must also hold at least ``amount``.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from diploma_registry.core.models import ValueTransfer

logger = logging.getLogger(__name__)


class InMemoryValueLedger:
    """Records every successful transfer in order."""

    def __init__(
        self,
        balances: dict[str, int] | None = None,
        enforce_balances: bool = False,
        history: list[ValueTransfer] | None = None,
    ) -> None:
        self._balances: dict[str, int] = defaultdict(int, balances or {})
        self._enforce = enforce_balances
        self._transfers: list[ValueTransfer] = list(history or [])

    @property
    def transfers(self) -> list[ValueTransfer]:
        return list(self._transfers)

    @property
    def enforce_balances(self) -> bool:
        return self._enforce

    def balance_of(self, principal: str) -> int:
        return self._balances.get(principal, 0)

    @property
    def balances(self) -> dict[str, int]:
        return {k: v for k, v in sorted(self._balances.items()) if v}

    def credit(self, principal: str, amount: int) -> None:
        """Add funds out of band (deployment, tests)."""
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative: {amount}")
        self._balances[principal] += amount

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        if amount <= 0:
            logger.warning("Transfer refused: non-positive amount %d", amount)
            return False
        if sender == recipient:
            logger.warning("Transfer refused: %s sending to itself", sender)
            return False
        if self._enforce and self._balances[sender] < amount:
            logger.warning(
                "Transfer refused: %s holds %d, needs %d",
                sender,
                self._balances[sender],
                amount,
            )
            return False
        self._move(amount, sender, recipient)
        self._transfers.append(ValueTransfer(amount=amount, sender=sender, recipient=recipient))
        return True

    def refund(self, amount: int, sender: str, recipient: str) -> bool:
        """Reverse the most recent matching transfer from *sender* to *recipient*."""
        for idx in range(len(self._transfers) - 1, -1, -1):
            t = self._transfers[idx]
            if t.amount == amount and t.sender == sender and t.recipient == recipient:
                del self._transfers[idx]
                self._move(amount, recipient, sender)
                logger.info("Refunded %d from %s to %s", amount, recipient, sender)
                return True
        logger.error("Refund of %d %s -> %s found no matching transfer", amount, sender, recipient)
        return False

    def _move(self, amount: int, sender: str, recipient: str) -> None:
        self._balances[sender] -= amount
        self._balances[recipient] += amount
