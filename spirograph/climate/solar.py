"""Approximate daylight intensity by hour and day of year."""

import math
from datetime import date

SOLSTICE_DAY = 172  # ~June 21
DAYS_PER_YEAR = 365


def solar_intensity(hour: float, day_of_year: float | None = None) -> float:
    """Daylight intensity in [0, 1].

    Base is a half sine from 06:00 to 18:00 peaking at noon. When
    day_of_year is a finite number in [1, 365] the base is scaled by a
    seasonal day-length factor in [0.4, 1.0] peaking at the summer solstice;
    otherwise the base is returned unscaled.
    """
    base = max(0.0, math.sin((hour - 6) * (math.pi / 12)))
    if (
        isinstance(day_of_year, int | float)
        and not isinstance(day_of_year, bool)
        and math.isfinite(day_of_year)
        and 1 <= day_of_year <= DAYS_PER_YEAR
    ):
        seasonal = 0.5 + 0.5 * math.cos(
            (day_of_year - SOLSTICE_DAY) * (2 * math.pi / DAYS_PER_YEAR)
        )
        factor = 0.4 + 0.6 * seasonal
        return min(1.0, base * factor)
    return base


def day_of_year(d: date) -> int:
    """1-based ordinal day within the year (Jan 1 is 1)."""
    return d.timetuple().tm_yday
