"""Tests for the archive calendar."""

from datetime import UTC, date, datetime

from spirograph.archive import (
    can_go_next,
    can_go_prev,
    display_date_for,
    fetch_date_for,
    is_date_disabled,
    local_today,
    month_days,
)
from spirograph.config.schema import ArchiveConfig

ARCHIVE = ArchiveConfig()
TODAY = date(2026, 3, 10)


class TestDateMapping:
    def test_fetch_date(self):
        assert fetch_date_for(date(2026, 2, 23), 2024) == "2024-02-23"

    def test_display_date(self):
        assert display_date_for("2024-02-23", 2026) == date(2026, 2, 23)

    def test_local_today_uses_reference_timezone(self):
        # 05:00 UTC on Mar 1 is still Feb 28 in Anchorage
        now = datetime(2026, 3, 1, 5, 0, tzinfo=UTC)
        assert local_today("America/Anchorage", now) == date(2026, 2, 28)


class TestAvailability:
    def test_bounds(self):
        start = date(2026, 1, 1)
        assert is_date_disabled(date(2025, 12, 31), start, TODAY)
        assert not is_date_disabled(start, start, TODAY)
        assert not is_date_disabled(TODAY, start, TODAY)
        assert is_date_disabled(date(2026, 3, 11), start, TODAY)

    def test_month_days(self):
        days = month_days(2026, 3, ARCHIVE, TODAY)
        assert len(days) == 31
        available = [d.day.day for d in days if d.available]
        assert available == list(range(1, 11))
        assert days[0].fetch_date == "2024-03-01"

    def test_navigation(self):
        assert not can_go_prev(2026, 1, ARCHIVE)
        assert can_go_prev(2026, 2, ARCHIVE)
        assert can_go_next(2026, 2, TODAY)
        assert not can_go_next(2026, 3, TODAY)
