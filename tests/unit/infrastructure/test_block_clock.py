"""Tests for block clock implementations."""

from datetime import UTC, datetime, timedelta

import pytest

from monitor_registry.infrastructure.block_clock import ManualBlockClock, WallClockBlockHeight


class TestManualBlockClock:
    """Test cases for ManualBlockClock."""

    def test_starts_at_given_height(self):
        assert ManualBlockClock().block_height() == 0
        assert ManualBlockClock(1000).block_height() == 1000

    def test_advance(self):
        clock = ManualBlockClock(10)
        assert clock.advance() == 11
        assert clock.advance(5) == 16
        assert clock.block_height() == 16

    def test_set(self):
        clock = ManualBlockClock(10)
        clock.set(10)
        clock.set(50)
        assert clock.block_height() == 50

    def test_never_moves_backwards(self):
        clock = ManualBlockClock(10)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(9)
        with pytest.raises(ValueError):
            ManualBlockClock(-1)


class TestWallClockBlockHeight:
    """Test cases for WallClockBlockHeight."""

    GENESIS = datetime(2024, 1, 1, tzinfo=UTC)

    def test_counts_whole_intervals(self):
        now = self.GENESIS + timedelta(seconds=600 * 3 + 599)
        clock = WallClockBlockHeight(self.GENESIS, genesis_height=100, now=lambda: now)
        assert clock.block_height() == 103

    def test_before_genesis_reports_genesis_height(self):
        now = self.GENESIS - timedelta(days=1)
        clock = WallClockBlockHeight(self.GENESIS, genesis_height=7, now=lambda: now)
        assert clock.block_height() == 7

    def test_wall_clock_stepping_back_does_not_lower_height(self):
        times = [self.GENESIS + timedelta(seconds=6000), self.GENESIS + timedelta(seconds=60)]
        clock = WallClockBlockHeight(self.GENESIS, block_interval_seconds=60, now=lambda: times.pop(0))

        assert clock.block_height() == 100
        assert clock.block_height() == 100

    def test_requires_aware_genesis(self):
        with pytest.raises(ValueError):
            WallClockBlockHeight(datetime(2024, 1, 1))

    def test_requires_positive_interval(self):
        with pytest.raises(ValueError):
            WallClockBlockHeight(self.GENESIS, block_interval_seconds=0)
