"""Static issuer allow-list.

The registry only reads this list. ``add``/``remove`` exist for deployment
tooling and tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class StaticIssuerAllowList:
    def __init__(self, issuers: Iterable[str] = ()) -> None:
        self._issuers: set[str] = set(issuers)

    def __len__(self) -> int:
        return len(self._issuers)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._issuers))

    def is_issuer_authorized(self, principal: str) -> bool:
        return principal in self._issuers

    def add(self, principal: str) -> None:
        self._issuers.add(principal)
        logger.info("Issuer added: %s", principal)

    def remove(self, principal: str) -> None:
        self._issuers.discard(principal)
        logger.info("Issuer removed: %s", principal)

    def clear(self) -> None:
        self._issuers.clear()
