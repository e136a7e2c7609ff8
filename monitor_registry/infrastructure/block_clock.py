"""Block clock implementations."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from ..ports.clock import BlockClockPort

# Bitcoin-anchored chains settle a block roughly every ten minutes
DEFAULT_BLOCK_INTERVAL_SECONDS = 600


class ManualBlockClock(BlockClockPort):
    """Clock whose height only moves when told to.

    Used for simulations and tests. The height can never move backwards.
    """

    def __init__(self, height: int = 0):
        if height < 0:
            raise ValueError("Block height cannot be negative")
        self._height = height

    def block_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move forward by ``blocks`` and return the new height."""
        if blocks < 0:
            raise ValueError("Block clock cannot move backwards")
        self._height += blocks
        return self._height

    def set(self, height: int) -> None:
        """Jump to an absolute height that is not lower than the current one."""
        if height < self._height:
            raise ValueError(f"Block clock cannot move backwards ({self._height} -> {height})")
        self._height = height


class WallClockBlockHeight(BlockClockPort):
    """Estimates block height from UTC wall time.

    Height is ``genesis_height`` plus the number of whole block intervals
    elapsed since ``genesis``. A wall clock stepping backwards never lowers
    the reported height.
    """

    def __init__(
        self,
        genesis: datetime,
        block_interval_seconds: int = DEFAULT_BLOCK_INTERVAL_SECONDS,
        genesis_height: int = 0,
        now: Callable[[], datetime] | None = None,
    ):
        """Initialize the clock.

        Args:
            genesis: Timezone-aware time of ``genesis_height``
            block_interval_seconds: Average seconds per block
            genesis_height: Height at ``genesis``
            now: Source of the current time (default: ``datetime.now(UTC)``)
        """
        if genesis.tzinfo is None:
            raise ValueError("genesis must be timezone-aware")
        if block_interval_seconds <= 0:
            raise ValueError("block_interval_seconds must be positive")
        self._genesis = genesis
        self._interval = block_interval_seconds
        self._genesis_height = genesis_height
        self._now = now or (lambda: datetime.now(UTC))
        self._last = genesis_height

    def block_height(self) -> int:
        elapsed = (self._now() - self._genesis).total_seconds()
        height = self._genesis_height + max(int(elapsed // self._interval), 0)
        self._last = max(self._last, height)
        return self._last
