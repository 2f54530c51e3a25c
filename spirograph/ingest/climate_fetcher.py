"""Climate fetcher: assembles a ClimateResult for a date, cache first."""

import asyncio
import logging

from spirograph.climate.diurnal import hourly_deltas, interpolate_hours
from spirograph.climate.regression import slope
from spirograph.config.schema import StationConfig
from spirograph.ingest.cdo_client import CdoClient, CdoClientError
from spirograph.models.climate import ClimateResult, DailyExtremes, Sample
from spirograph.models.common import DateKey, is_date_key
from spirograph.storage.climate_cache import ClimateCache

logger = logging.getLogger(__name__)


def comparison_candidates(primary: int, fallbacks: list[int]) -> list[int]:
    """Primary comparison year followed by the fallbacks, without repeats."""
    years = [primary]
    for y in fallbacks:
        if y not in years:
            years.append(y)
    return years


class ClimateFetcher:
    """Fetches and caches the data behind one curve.

    Concurrent requests for the same date share a single acquisition.
    Nothing is written to the cache unless the acquisition succeeds.
    """

    def __init__(
        self,
        client: CdoClient,
        station: StationConfig,
        cache: ClimateCache | None = None,
    ):
        self.client = client
        self.station = station
        self.cache = cache
        self._inflight: dict[str, asyncio.Task] = {}

    async def fetch(self, date_key: DateKey) -> ClimateResult | None:
        """Return the climate result for YYYY-MM-DD, or None on failure."""
        if not is_date_key(date_key):
            logger.error("Invalid date string %r, expected YYYY-MM-DD", date_key)
            return None

        if self.cache is not None:
            cached = self.cache.get(date_key)
            if cached is not None:
                logger.info("Using cached climate data for %s", date_key)
                return cached

        task = self._inflight.get(date_key)
        if task is None:
            task = asyncio.ensure_future(self._acquire(date_key))
            self._inflight[date_key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(date_key, None))
        return await asyncio.shield(task)

    async def _acquire(self, date_key: str) -> ClimateResult | None:
        try:
            return await self._assemble(date_key)
        except Exception:
            logger.exception("Failed to fetch climate data for %s", date_key)
            return None

    async def _assemble(self, date_key: str) -> ClimateResult | None:
        month_day = date_key[5:]

        samples, current = await asyncio.gather(
            self.trend_samples(month_day),
            self._extremes(date_key),
        )
        if current is None:
            logger.error("Missing high/low data for %s", date_key)
            return None
        if not samples:
            logger.error("No trend samples for %s", month_day)
            return None

        compare: DailyExtremes | None = None
        compare_year: int | None = None
        candidates = comparison_candidates(
            self.station.comparison_year, self.station.fallback_years
        )
        for candidate in candidates:
            compare = await self._extremes(f"{candidate}-{month_day}")
            if compare is not None:
                compare_year = candidate
                break
        if compare is None or compare_year is None:
            logger.error("No high/low data for any comparison year. Tried: %s", candidates)
            return None
        if compare_year != self.station.comparison_year:
            logger.warning(
                "No data for %d, using %d for comparison",
                self.station.comparison_year, compare_year,
            )

        deltas = hourly_deltas(
            interpolate_hours(current.high, current.low),
            interpolate_hours(compare.high, compare.low),
        )
        acceleration = slope(samples)
        logger.info(
            "Climate %s vs %d: acceleration %.4f F/yr, deltas [%.2f, %.2f] from %d samples",
            date_key, compare_year, acceleration, min(deltas), max(deltas), len(samples),
        )

        result = ClimateResult(
            acceleration=acceleration,
            hourly_deltas=deltas,
            comparison_year=compare_year,
        )
        if self.cache is not None:
            self.cache.put(date_key, result)
        return result

    async def trend_samples(self, month_day: str) -> list[Sample]:
        """Daily averages for month_day across the configured trend years.

        Years with no data or a failed request are skipped.
        """
        samples = []
        for year in range(self.station.trend_start_year, self.station.trend_end_year + 1):
            try:
                temp = await self.client.daily_average(f"{year}-{month_day}")
            except CdoClientError as e:
                logger.warning("Trend sample %d-%s failed: %s", year, month_day, e)
                continue
            if temp is not None:
                samples.append(Sample(year=year, temperature=temp))
        return samples

    async def _extremes(self, date_str: str) -> DailyExtremes | None:
        try:
            return await self.client.daily_extremes(date_str)
        except CdoClientError as e:
            logger.warning("High/low fetch for %s failed: %s", date_str, e)
            return None
