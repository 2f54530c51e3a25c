"""Output formatters for climate results and curve parameters."""

import json
import math

from spirograph.archive import display_date_for
from spirograph.models.climate import ClimateResult
from spirograph.models.geometry import GeometryParams

PLACEHOLDER = "—"


def signed_temp(t: float) -> str:
    return f"{t:+.1f}°F"


def date_label(date_key: str, display_year: int, comparison_year: int) -> str:
    """E.g. 'Feb 23, 2026 vs 1976'."""
    shown = display_date_for(date_key, display_year)
    return f"{shown.strftime('%b')} {shown.day}, {shown.year} vs {comparison_year}"


def warming_text(acceleration: float | None) -> str:
    if acceleration is None or not math.isfinite(acceleration):
        return f"Warming: {PLACEHOLDER}"
    return f"Warming: {acceleration:+.2f}°F/year"


def delta_range_text(deltas: list[float] | None) -> str:
    if not deltas:
        return f"Delta range: {PLACEHOLDER}"
    return f"Delta range: {signed_temp(min(deltas))} to {signed_temp(max(deltas))}"


def format_info_panel(
    date_key: str,
    result: ClimateResult | None,
    display_year: int,
    comparison_year: int,
) -> str:
    """Plain text info panel. Reports the comparison year actually used."""
    if result is not None and result.comparison_year is not None:
        comparison_year = result.comparison_year
    lines = [date_label(date_key, display_year, comparison_year)]
    if result is None:
        lines.append("Unable to load climate data.")
        lines.append(warming_text(None))
        lines.append(delta_range_text(None))
    else:
        lines.append(warming_text(result.acceleration))
        lines.append(delta_range_text(result.hourly_deltas))
    return "\n".join(lines)


def format_params_text(params: GeometryParams) -> str:
    lines = [
        f"r: {params.rolling_radius:.2f}"
        + (" (complexity override)" if params.complexity_override else ""),
        f"d: {min(params.pen_distances):.1f} to {max(params.pen_distances):.1f}"
        + (" (respread)" if params.respread else ""),
        f"thickness: {min(params.thicknesses):.2f} to {max(params.thicknesses):.2f}",
        f"inputs: acceleration {params.acceleration_status}, deltas {params.deltas_status}",
    ]
    return "\n".join(lines)


def params_dict(params: GeometryParams) -> dict:
    return {
        "rolling_radius": params.rolling_radius,
        "pen_distances": params.pen_distances,
        "thicknesses": params.thicknesses,
        "acceleration_status": str(params.acceleration_status),
        "deltas_status": str(params.deltas_status),
        "respread": params.respread,
        "complexity_override": params.complexity_override,
    }


def format_result_json(result: ClimateResult) -> str:
    return json.dumps(result.to_dict(), indent=2)
