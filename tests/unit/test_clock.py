"""Test WallClock and SimClock."""

import time

import pytest

from diploma_registry.core.clock import IClock, SimClock, WallClock


class TestWallClock:
    def test_height_is_epoch_ms(self):
        before = int(time.time() * 1000)
        height = WallClock().height()
        after = int(time.time() * 1000)
        assert before <= height <= after

    def test_returns_int(self):
        assert isinstance(WallClock().height(), int)


class TestSimClock:
    def test_default_start(self):
        assert SimClock().height() == 0

    def test_custom_start(self):
        assert SimClock(start=100).height() == 100

    def test_negative_start_rejected(self):
        with pytest.raises(ValueError):
            SimClock(start=-1)

    def test_advance(self):
        clock = SimClock(start=5)
        clock.advance()
        assert clock.height() == 6
        clock.advance(10)
        assert clock.height() == 16

    def test_set_height(self):
        clock = SimClock()
        clock.set_height(42)
        assert clock.height() == 42

    def test_set_same_height_allowed(self):
        clock = SimClock(start=7)
        clock.set_height(7)
        assert clock.height() == 7

    def test_cannot_go_backwards(self):
        clock = SimClock(start=10)
        with pytest.raises(ValueError, match="cannot go backwards"):
            clock.set_height(9)

    def test_height_stable_without_advance(self):
        clock = SimClock(start=3)
        assert clock.height() == clock.height()


class TestClockProtocol:
    def test_both_satisfy_iclock(self):
        clocks: list[IClock] = [WallClock(), SimClock()]
        for clock in clocks:
            assert isinstance(clock.height(), int)
