"""Climate observation models: samples, daily extremes, and the cached result."""

import math
from dataclasses import dataclass, field
from typing import Any

from spirograph.models.common import HOURS_PER_DAY


@dataclass(frozen=True)
class Sample:
    year: int
    temperature: float


@dataclass(frozen=True)
class DailyExtremes:
    high: float
    low: float


def fit_profile(values: list[float], fill: float = 0.0) -> list[float]:
    """Pad or truncate a sequence to exactly 24 hourly values."""
    out = list(values[:HOURS_PER_DAY])
    out.extend([fill] * (HOURS_PER_DAY - len(out)))
    return out


@dataclass(frozen=True)
class ClimateResult:
    acceleration: float  # regression slope, degrees F per year
    hourly_deltas: list[float] = field(default_factory=list)
    comparison_year: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "acceleration": self.acceleration,
            "hourlyDeltas": list(self.hourly_deltas),
            "comparisonYear": self.comparison_year,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ClimateResult | None":
        """Rebuild from a stored dict. Returns None when the shape is wrong."""
        if not isinstance(data, dict):
            return None
        acceleration = data.get("acceleration")
        deltas = data.get("hourlyDeltas")
        year = data.get("comparisonYear")
        if isinstance(acceleration, bool) or not isinstance(acceleration, int | float):
            return None
        if not isinstance(deltas, list) or not deltas:
            return None
        if not all(
            isinstance(d, int | float) and not isinstance(d, bool) and math.isfinite(d)
            for d in deltas
        ):
            return None
        if year is not None and (isinstance(year, bool) or not isinstance(year, int)):
            return None
        return cls(
            acceleration=float(acceleration),
            hourly_deltas=fit_profile([float(d) for d in deltas]),
            comparison_year=year,
        )
