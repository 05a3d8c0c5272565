"""Clock abstraction for ledger height markers.

WallClock: milliseconds since epoch, for standalone deployments
SimClock: deterministic height that only moves when told to (tests, replay)

Registry code never reads the system time directly; it asks the clock for
the current height and stores that as the change marker.
"""

from __future__ import annotations

import time
from typing import Protocol


class IClock(Protocol):
    """Source of the block/time marker recorded on amendments."""

    def height(self) -> int:
        """Current marker as a non-negative integer."""
        ...


class WallClock:
    """Real wall-clock time, expressed as epoch milliseconds."""

    def height(self) -> int:
        return int(time.time() * 1000)


class SimClock:
    """Simulated block height.

    Height advances only when explicitly set or advanced.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"SimClock height must be non-negative: {start}")
        self._height = start

    def height(self) -> int:
        return self._height

    def set_height(self, height: int) -> None:
        """Move to *height*. Must be monotonically increasing."""
        if height < self._height:
            raise ValueError(
                f"SimClock cannot go backwards: {height} < {self._height}"
            )
        self._height = height

    def advance(self, blocks: int = 1) -> None:
        """Advance by *blocks*."""
        self.set_height(self._height + blocks)
