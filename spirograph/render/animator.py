"""Render loop: owns the render state and regenerates the visible curve each tick."""

import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime

from spirograph.climate.solar import day_of_year
from spirograph.config.schema import SpirographConfig
from spirograph.geometry.curve import generate_curve
from spirograph.geometry.normalizer import Normalizer
from spirograph.ingest.climate_fetcher import ClimateFetcher
from spirograph.models.geometry import Segment
from spirograph.render.progress import (
    LoadStatus,
    RenderState,
    advance,
    day_progress,
    local_now,
)

logger = logging.getLogger(__name__)


class Animator:
    """Drives progressive rendering of one date's curve.

    Data acquisition runs as a background task while ticks keep rendering
    with the previous parameters (or a placeholder curve). Results for a
    date that is no longer displayed are dropped.
    """

    def __init__(
        self,
        config: SpirographConfig,
        fetcher: ClimateFetcher,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config
        self.fetcher = fetcher
        self.normalizer = Normalizer(config)
        self.clock = clock
        self.state = RenderState()
        self._fetch_task: asyncio.Task | None = None

    def show_date(self, date_key: str) -> asyncio.Task:
        """Switch the display to date_key and start acquiring its data."""
        self.state.date_key = date_key
        self.state.status = LoadStatus.LOADING
        if self.state.params is None:
            self.state.params = self.normalizer.fallback_params(_day_of_year(date_key))
        self._fetch_task = asyncio.ensure_future(self._load(date_key))
        return self._fetch_task

    async def _load(self, date_key: str) -> None:
        result = await self.fetcher.fetch(date_key)
        if self.state.date_key != date_key:
            logger.debug("Dropping late result for %s", date_key)
            return
        if result is None:
            logger.error("Failed to load climate data for %s", date_key)
            self.state.params = None
            self.state.status = LoadStatus.NO_DATA
            return
        self.state.params = self.normalizer.build_params(result, _day_of_year(date_key))
        self.state.status = LoadStatus.READY

    def frame(self, now: datetime | None = None) -> list[Segment]:
        """Advance the cursor and return the segments visible this tick."""
        if now is None and self.clock is not None:
            now = self.clock()
        progress = day_progress(local_now(self.config.clock.timezone, now))
        geometry = self.config.geometry
        cursor = advance(self.state, progress, geometry.total_points)

        params = self.state.params
        if params is None:
            return []
        return generate_curve(
            geometry.outer_radius,
            params.rolling_radius,
            params.pen_distances,
            params.thicknesses,
            geometry.total_points,
            cursor,
        )

    async def run(
        self,
        on_frame: Callable[[list[Segment]], None],
        max_ticks: int | None = None,
    ) -> int:
        """Tick at the configured cadence. Returns the number of ticks run."""
        interval = self.config.clock.tick_interval_ms / 1000
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            on_frame(self.frame())
            ticks += 1
            await asyncio.sleep(interval)
        return ticks


def _day_of_year(date_key: str) -> int | None:
    try:
        return day_of_year(date.fromisoformat(date_key))
    except ValueError:
        return None
