"""Freshness checks for cached climate data."""

from datetime import UTC, datetime


def is_cache_stale(
    cached_at_iso: str, max_age_hours: float, now: datetime | None = None
) -> bool:
    """Check if a cache entry is older than the freshness window.

    Unparseable timestamps count as stale.
    """
    age = cache_age_hours(cached_at_iso, now)
    return age > max_age_hours


def cache_age_hours(cached_at_iso: str, now: datetime | None = None) -> float:
    """Age of a cache entry in hours; inf when the timestamp is invalid."""
    if now is None:
        now = datetime.now(UTC)
    cached = _parse_timestamp(cached_at_iso)
    if cached is None:
        return float("inf")
    return (now - cached).total_seconds() / 3600


def _parse_timestamp(iso_str: str) -> datetime | None:
    """Parse an ISO timestamp, treating naive values as UTC."""
    try:
        dt = datetime.fromisoformat(iso_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt
    except (ValueError, TypeError):
        return None
