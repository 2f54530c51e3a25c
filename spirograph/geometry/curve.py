"""Hypotrochoid point generation with partial (time-scrubbed) rendering."""

import math

from spirograph.models.common import HOURS_PER_DAY
from spirograph.models.geometry import Segment


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def closure_angle(outer_radius: float, rolling_radius: float) -> float:
    """Parametric extent of one closed traversal: 2*pi*r / gcd(R-r, r)."""
    g = math.gcd(
        round_half_up(abs(outer_radius - rolling_radius)),
        round_half_up(abs(rolling_radius)),
    )
    if g == 0:
        g = 1
    return 2 * math.pi * rolling_radius / g


def curve_point(
    outer_radius: float, rolling_radius: float, pen_distance: float, t: float
) -> tuple[float, float]:
    diff = outer_radius - rolling_radius
    ratio = diff / rolling_radius
    x = diff * math.cos(t) + pen_distance * math.cos(ratio * t)
    y = diff * math.sin(t) - pen_distance * math.sin(ratio * t)
    return x, y


def hour_index(i: int, total_points: int) -> int:
    return min(HOURS_PER_DAY - 1, (i * HOURS_PER_DAY) // total_points)


def generate_curve(
    outer_radius: float,
    rolling_radius: float,
    pen_distances: list[float],
    thicknesses: list[float],
    total_points: int,
    points_to_draw: int | None = None,
) -> list[Segment]:
    """Generate the ordered segments of the curve up to points_to_draw.

    Pen distance and stroke weight are taken from the hour slice the point
    falls in: the point budget is split into 24 equal slices. Point 0 only
    seeds the first segment, so a full curve has exactly total_points
    segments and any partial curve is a prefix of it.

    Args:
        outer_radius: Fixed circle radius R.
        rolling_radius: Rolling circle radius r.
        pen_distances: 24 pen distances, one per hour.
        thicknesses: 24 stroke weights, one per hour.
        total_points: Point budget for one closed traversal.
        points_to_draw: Cursor into the budget. None or negative draws the
            whole curve; values above total_points are capped.

    Returns:
        Segments in drawing order. Empty when rolling_radius <= 0 or
        total_points <= 0.
    """
    if rolling_radius <= 0 or total_points <= 0:
        return []
    if points_to_draw is None or points_to_draw < 0:
        points_to_draw = total_points
    last = min(points_to_draw, total_points)

    t_max = closure_angle(outer_radius, rolling_radius)
    segments: list[Segment] = []
    prev: tuple[float, float] | None = None

    for i in range(last + 1):
        t = (i / total_points) * t_max
        hour = hour_index(i, total_points)
        x, y = curve_point(outer_radius, rolling_radius, pen_distances[hour], t)
        if prev is not None:
            segments.append(
                Segment(prev[0], prev[1], x, y, weight=thicknesses[hour], hour=hour)
            )
        prev = (x, y)

    return segments
