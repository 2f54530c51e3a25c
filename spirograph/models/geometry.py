"""Curve geometry models."""

from dataclasses import dataclass

from spirograph.models.common import InputStatus


@dataclass(frozen=True)
class GeometryParams:
    rolling_radius: float
    pen_distances: list[float]
    thicknesses: list[float]
    acceleration_status: InputStatus = InputStatus.VALID
    deltas_status: InputStatus = InputStatus.VALID
    respread: bool = False
    complexity_override: bool = False


@dataclass(frozen=True)
class Segment:
    x0: float
    y0: float
    x1: float
    y1: float
    weight: float
    hour: int
