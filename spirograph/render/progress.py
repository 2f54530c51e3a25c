"""Time-of-day progress and the draw cursor."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from zoneinfo import ZoneInfo

from spirograph.models.geometry import GeometryParams

SECONDS_PER_DAY = 86400


class ProgressMode(StrEnum):
    LIVE = "live"
    MANUAL = "manual"


class LoadStatus(StrEnum):
    LOADING = "loading"
    READY = "ready"
    NO_DATA = "no-data"


@dataclass
class RenderState:
    """Everything the render loop mutates between ticks."""

    params: GeometryParams | None = None
    date_key: str | None = None
    status: LoadStatus = LoadStatus.LOADING
    cursor: int = 0
    mode: ProgressMode = ProgressMode.LIVE
    scrub_fraction: float = 0.0


def local_now(timezone: str, now: datetime | None = None) -> datetime:
    """Current time (or the given aware time) in the reference timezone."""
    tz = ZoneInfo(timezone)
    if now is None:
        return datetime.now(tz)
    return now.astimezone(tz)


def day_progress(now: datetime) -> float:
    """Fraction of the local day elapsed, in [0, 1)."""
    seconds = now.hour * 3600 + now.minute * 60 + now.second
    return seconds / SECONDS_PER_DAY


def cursor_for(fraction: float, total_points: int) -> int:
    fraction = max(0.0, min(1.0, fraction))
    return min(total_points, math.floor(fraction * total_points))


def scrub(state: RenderState, fraction: float) -> None:
    """Any scrub interaction freezes the cursor in manual mode."""
    state.mode = ProgressMode.MANUAL
    state.scrub_fraction = max(0.0, min(1.0, fraction))


def go_live(state: RenderState) -> None:
    state.mode = ProgressMode.LIVE


def advance(state: RenderState, progress: float, total_points: int) -> int:
    """Update and return the draw cursor for this tick.

    The scrub position can never run ahead of the live time, in either mode.
    In live mode it follows the live time.
    """
    if state.scrub_fraction > progress or state.mode is ProgressMode.LIVE:
        state.scrub_fraction = progress
    if state.mode is ProgressMode.LIVE:
        state.cursor = cursor_for(progress, total_points)
    else:
        state.cursor = cursor_for(state.scrub_fraction, total_points)
    return state.cursor
