"""Caller identity backed by a context variable.

Stands in for the substrate's "who is calling" primitive. The principal is
scoped to the current thread or task, so nested ``acting_as`` blocks
restore the outer caller on exit.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from diploma_registry.core.errors import NotAuthorized


class CallerContext:
    """Context-scoped current caller."""

    def __init__(self, name: str = "caller") -> None:
        self._var: ContextVar[str | None] = ContextVar(name, default=None)

    def current_caller(self) -> str:
        caller = self._var.get()
        if not caller:
            raise NotAuthorized("no caller identity for this call")
        return caller

    @property
    def is_set(self) -> bool:
        return bool(self._var.get())

    @contextmanager
    def acting_as(self, principal: str) -> Iterator[str]:
        """Run the enclosed calls as *principal*."""
        if not principal:
            raise ValueError("principal must be a non-empty string")
        token = self._var.set(principal)
        try:
            yield principal
        finally:
            self._var.reset(token)
