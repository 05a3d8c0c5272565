"""All-or-nothing unit of work with compensating actions.

A :class:`UnitOfWork` holds an ordered list of steps. ``commit()`` applies
them in order; if any step raises, the steps already applied are undone in
reverse order and the original exception is re-raised. Nothing is applied
before ``commit()``.

Usage::

    uow = UnitOfWork("mint")
    uow.add("fee", charge_fee, refund_fee)
    uow.add("record", lambda: store.insert(rec), lambda: store.discard(rec.token_id))
    uow.commit()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class _Step:
    name: str
    apply: Callable[[], object]
    undo: Callable[[], object] | None = None


class UnitOfWork:
    """Ordered steps committed together or not at all."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._steps: list[_Step] = []
        self._applied: list[_Step] = []
        self._committed = False

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self._steps]

    def add(
        self,
        name: str,
        apply: Callable[[], object],
        undo: Callable[[], object] | None = None,
    ) -> None:
        """Queue a step. *undo* reverses *apply* and must not need the result."""
        if self._committed:
            raise RuntimeError(f"UnitOfWork {self.name!r} already committed")
        self._steps.append(_Step(name, apply, undo))

    def commit(self) -> None:
        if self._committed:
            raise RuntimeError(f"UnitOfWork {self.name!r} already committed")
        for step in self._steps:
            try:
                step.apply()
            except Exception:
                if self._applied:
                    logger.warning(
                        "UnitOfWork %s: step %r failed, rolling back %d step(s)",
                        self.name,
                        step.name,
                        len(self._applied),
                    )
                    self._rollback()
                raise
            self._applied.append(step)
        self._committed = True

    def _rollback(self) -> None:
        while self._applied:
            step = self._applied.pop()
            if step.undo is None:
                continue
            try:
                step.undo()
            except Exception:
                # Keep undoing the rest; the caller still gets the original error.
                logger.error(
                    "UnitOfWork %s: undo of %r failed",
                    self.name,
                    step.name,
                    exc_info=True,
                )
