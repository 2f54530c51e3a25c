"""Archive calendar: which days can be opened and which date to fetch for each."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime

from spirograph.config.schema import ArchiveConfig
from spirograph.render.progress import local_now


@dataclass(frozen=True)
class ArchiveDay:
    day: date
    available: bool
    fetch_date: str


def local_today(timezone: str, now: datetime | None = None) -> date:
    return local_now(timezone, now).date()


def fetch_date_for(display_day: date, fetch_year: int) -> str:
    """Data is fetched from fetch_year for the displayed month and day."""
    return f"{fetch_year:04d}-{display_day.month:02d}-{display_day.day:02d}"


def display_date_for(fetch_date: str, display_year: int) -> date:
    d = date.fromisoformat(fetch_date)
    return date(display_year, d.month, d.day)


def is_date_disabled(day: date, start: date, today: date) -> bool:
    return day < start or day > today


def month_days(year: int, month: int, archive: ArchiveConfig, today: date) -> list[ArchiveDay]:
    start = date.fromisoformat(archive.start_date)
    _, days_in_month = calendar.monthrange(year, month)
    days = []
    for n in range(1, days_in_month + 1):
        d = date(year, month, n)
        days.append(
            ArchiveDay(
                day=d,
                available=not is_date_disabled(d, start, today),
                fetch_date=fetch_date_for(d, archive.fetch_year),
            )
        )
    return days


def can_go_prev(year: int, month: int, archive: ArchiveConfig) -> bool:
    start = date.fromisoformat(archive.start_date)
    return (year, month) > (start.year, start.month)


def can_go_next(year: int, month: int, today: date) -> bool:
    return (year, month) < (today.year, today.month)
