"""Least-squares warming rate over same-date samples across years."""

from scipy.stats import linregress

from spirograph.models.climate import Sample


def slope(samples: list[Sample]) -> float:
    """Ordinary least-squares slope of temperature against year.

    Every sample is weighted equally; no outlier rejection.

    Returns:
        Degrees per year, or 0.0 with fewer than two samples or when all
        samples share a single year.
    """
    if len(samples) < 2:
        return 0.0
    years = [float(s.year) for s in samples]
    temps = [float(s.temperature) for s in samples]
    if all(y == years[0] for y in years):
        return 0.0
    return float(linregress(years, temps).slope)
