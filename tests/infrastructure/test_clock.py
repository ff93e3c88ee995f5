"""Tests for clock implementations."""

from datetime import date, datetime, timezone

from batchledger.infrastructure.clock import FixedClock, SystemClock


class TestSystemClock:
    def test_now_is_naive_utc(self):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        now = SystemClock().now()
        assert now.tzinfo is None
        assert now >= before


class TestFixedClock:
    def test_pinned(self):
        clock = FixedClock(datetime(2026, 3, 2, 9, 30))
        assert clock.now() == datetime(2026, 3, 2, 9, 30)
        assert clock.today() == date(2026, 3, 2)

    def test_advance(self):
        clock = FixedClock(datetime(2026, 3, 2, 23, 0))
        clock.advance(hours=2)
        assert clock.today() == date(2026, 3, 3)
