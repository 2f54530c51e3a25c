"""Normalization of raw climate quantities into bounded curve parameters.

Two channels are normalized independently: the warming rate drives the
rolling radius and the hourly deltas drive the pen distance. Stroke weight
comes from the solar model. All input sanitation happens here, and every
normalized value carries an InputStatus tag so genuine data can be told
apart from substituted defaults.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from spirograph.climate.solar import solar_intensity
from spirograph.config.schema import SpirographConfig
from spirograph.geometry.curve import round_half_up
from spirograph.geometry.mapping import map_clamp
from spirograph.models.climate import ClimateResult, fit_profile
from spirograph.models.common import HOURS_PER_DAY, InputStatus
from spirograph.models.geometry import GeometryParams

logger = logging.getLogger(__name__)

# Spread below this counts as flat; interpolation leaves float noise.
FLAT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class NormalizedValue:
    value: float
    status: InputStatus


@dataclass(frozen=True)
class NormalizedProfile:
    values: list[float]
    status: InputStatus
    respread: bool = False


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def lobe_count(outer_radius: float, rolling_radius: float) -> float:
    """Petal count r / gcd(R - r, r) using rounded radii."""
    g = math.gcd(
        round_half_up(abs(outer_radius - rolling_radius)),
        round_half_up(abs(rolling_radius)),
    )
    if g == 0:
        return 0.0
    return rolling_radius / g


def is_simple_curve(outer_radius: float, rolling_radius: float, min_lobes: int = 15) -> bool:
    if rolling_radius <= 0 or outer_radius <= rolling_radius:
        return True
    return lobe_count(outer_radius, rolling_radius) < min_lobes


class Normalizer:
    def __init__(self, config: SpirographConfig):
        self.geometry = config.geometry
        self.norm = config.normalization

    # --- acceleration -> rolling radius ---

    def normalize_acceleration(self, raw: Any) -> NormalizedValue:
        """Rescale a raw warming rate into the visual acceleration band.

        Invalid input yields the band midpoint, tagged DEFAULTED.
        """
        visual = self.norm.visual_acceleration
        if not _is_finite_number(raw):
            logger.warning("Invalid acceleration %r, using midpoint %.3f", raw, visual.midpoint)
            return NormalizedValue(visual.midpoint, InputStatus.DEFAULTED)

        band = self.norm.raw_acceleration
        value = map_clamp(raw, band.min, band.max, visual.min, visual.max)
        logger.debug("Acceleration %.4f F/yr -> normalized %.4f", raw, value)
        return NormalizedValue(value, InputStatus.VALID)

    def map_to_radius(self, acceleration: float) -> float:
        visual = self.norm.visual_acceleration
        band = self.geometry.rolling_radius
        return map_clamp(acceleration, visual.min, visual.max, band.min, band.max)

    def apply_complexity_floor(self, radius: float) -> tuple[float, bool]:
        """Remap radii outside the simple band to floor + (|r*100| mod modulus).

        Returns the (possibly remapped) radius and whether it was remapped.
        The lobe count of the result is not re-checked.
        """
        if self.norm.simple_radius.contains(radius):
            return radius, False
        seed = math.fmod(abs(radius * 100), self.norm.complexity_modulus)
        remapped = self.norm.complexity_floor + seed
        logger.info("Complexity override: r changed from %s to %s", radius, remapped)
        return remapped, True

    # --- hourly deltas -> pen distances ---

    def normalize_deltas(self, raw: Any) -> NormalizedProfile:
        """Rescale 24 hourly deltas onto the full target delta band.

        A flat profile is respread as a ramp by hour so the curve never
        collapses to a circle. Non-finite entries become 0.0 and short
        profiles are padded with 0.0; both tag the result DEFAULTED.
        """
        target = self.norm.target_delta
        if not isinstance(raw, list | tuple) or len(raw) == 0:
            logger.warning("Invalid hourly deltas %r, using midpoint profile", raw)
            return NormalizedProfile([target.midpoint] * HOURS_PER_DAY, InputStatus.DEFAULTED)

        status = InputStatus.VALID
        if len(raw) != HOURS_PER_DAY:
            logger.warning("Expected %d hourly deltas, got %d", HOURS_PER_DAY, len(raw))
            if len(raw) < HOURS_PER_DAY:
                status = InputStatus.DEFAULTED
        cleaned = []
        for v in fit_profile(list(raw)):
            if _is_finite_number(v):
                cleaned.append(float(v))
            else:
                cleaned.append(0.0)
                status = InputStatus.DEFAULTED
        if status is InputStatus.DEFAULTED:
            logger.warning("Hourly deltas sanitized: non-finite or missing entries set to 0.0")

        raw_min = min(cleaned)
        raw_max = max(cleaned)
        logger.debug("Raw hourly deltas min %.2f max %.2f", raw_min, raw_max)

        if math.isclose(raw_max, raw_min, rel_tol=0.0, abs_tol=FLAT_TOLERANCE):
            last = HOURS_PER_DAY - 1
            values = [
                target.min + (target.max - target.min) * (i / last)
                for i in range(HOURS_PER_DAY)
            ]
            logger.info("Hourly deltas have no spread (%.2f), respreading by hour", raw_min)
            return NormalizedProfile(values, status, respread=True)

        values = [map_clamp(v, raw_min, raw_max, target.min, target.max) for v in cleaned]
        return NormalizedProfile(values, status)

    def map_to_pen_distance(self, delta: float) -> float:
        target = self.norm.target_delta
        band = self.geometry.pen_distance
        return map_clamp(delta, target.min, target.max, band.min, band.max)

    # --- solar -> thickness ---

    def map_to_thickness(self, solar: float) -> float:
        band = self.geometry.thickness
        return map_clamp(solar, 0.0, 1.0, band.min, band.max)

    def thicknesses(self, day_of_year: int | None) -> list[float]:
        return [
            self.map_to_thickness(solar_intensity(h, day_of_year))
            for h in range(HOURS_PER_DAY)
        ]

    def fallback_params(self, day_of_year: int | None) -> GeometryParams:
        """Varied placeholder curve shown while no data is available."""
        band = self.geometry.pen_distance
        phase = (day_of_year or 0) * 0.1
        pen_distances = []
        for h in range(HOURS_PER_DAY):
            wave = 0.5 + 0.5 * math.sin((h / HOURS_PER_DAY) * math.pi * 2 + phase)
            d = band.min + (band.max - band.min) * wave
            pen_distances.append(max(band.min, min(band.max, d)))
        doy = day_of_year if day_of_year is not None and day_of_year >= 0 else 172
        return GeometryParams(
            rolling_radius=self.norm.complexity_floor,
            pen_distances=pen_distances,
            thicknesses=self.thicknesses(doy),
            acceleration_status=InputStatus.DEFAULTED,
            deltas_status=InputStatus.DEFAULTED,
        )

    # --- full mapping ---

    def build_params(self, result: ClimateResult, day_of_year: int | None) -> GeometryParams:
        """Derive curve parameters from a climate result and a day of year."""
        accel = self.normalize_acceleration(result.acceleration)
        radius, overridden = self.apply_complexity_floor(self.map_to_radius(accel.value))

        deltas = self.normalize_deltas(result.hourly_deltas)
        pen_distances = [self.map_to_pen_distance(d) for d in deltas.values]
        thicknesses = self.thicknesses(day_of_year)

        outer = self.geometry.outer_radius
        if is_simple_curve(outer, radius, self.norm.min_lobes):
            logger.debug(
                "Rolling radius %.2f gives %.1f lobes (below %d)",
                radius, lobe_count(outer, radius), self.norm.min_lobes,
            )
        logger.info(
            "Curve params: r=%.1f d=[%.1f, %.1f] thickness=[%.2f, %.2f]",
            radius, min(pen_distances), max(pen_distances),
            min(thicknesses), max(thicknesses),
        )
        return GeometryParams(
            rolling_radius=radius,
            pen_distances=pen_distances,
            thicknesses=thicknesses,
            acceleration_status=accel.status,
            deltas_status=deltas.status,
            respread=deltas.respread,
            complexity_override=overridden,
        )
