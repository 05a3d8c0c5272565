"""Update ledger: the most recent amendment per token, for audit.

At most one :class:`UpdateRecord` per token id; each update overwrites the
previous one. Absence means the diploma was never amended.
"""

from __future__ import annotations

from diploma_registry.core.models import UpdateRecord


class UpdateLedger:
    def __init__(self) -> None:
        self._updates: dict[int, UpdateRecord] = {}

    def __len__(self) -> int:
        return len(self._updates)

    def record(self, update: UpdateRecord) -> None:
        self._updates[update.token_id] = update

    def get(self, token_id: int) -> UpdateRecord | None:
        return self._updates.get(token_id)

    def all(self) -> list[UpdateRecord]:
        return [self._updates[k] for k in sorted(self._updates)]

    def restore(self, token_id: int, previous: UpdateRecord | None) -> None:
        """Reinstate the update that was current before an uncommitted one."""
        if previous is None:
            self._updates.pop(token_id, None)
        else:
            self._updates[token_id] = previous

    def load(self, updates: list[UpdateRecord]) -> None:
        for update in updates:
            self.record(update)
