"""Hourly temperature reconstruction from a daily high/low pair."""

import math

from spirograph.models.common import HOURS_PER_DAY


def interpolate_hours(high: float, low: float) -> list[float]:
    """Sine model of one day from its high and low.

    The curve crosses the daily mean rising at 06:00 and falling at 18:00,
    so the low lands at midnight and the high at noon. Not adjusted for
    latitude or season.
    """
    amplitude = (high - low) / 2
    offset = (high + low) / 2
    return [
        offset + amplitude * math.sin(2 * math.pi * (hour - 6) / HOURS_PER_DAY)
        for hour in range(HOURS_PER_DAY)
    ]


def hourly_deltas(current: list[float], compare: list[float]) -> list[float]:
    return [c - p for c, p in zip(current, compare, strict=True)]
