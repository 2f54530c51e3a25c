"""NOAA Climate Data Online (CDO v2) client with retry and rate limit handling."""

import asyncio
import logging

import httpx

from spirograph.models.climate import DailyExtremes

logger = logging.getLogger(__name__)

CDO_BASE_URL = "https://www.ncei.noaa.gov/cdo-web/api/v2"
DATASET_ID = "GHCND"

# Values above this are GHCND raw tenths of a degree C rather than degrees F.
TENTHS_CELSIUS_THRESHOLD = 150


class CdoClientError(Exception):
    """Raised when the CDO API returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def tenths_celsius_to_fahrenheit(value: float) -> float:
    return (value / 10) * (9 / 5) + 32


class CdoClient:
    def __init__(
        self,
        token: str,
        station_id: str,
        base_url: str = CDO_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 2.0,
    ):
        self.token = token
        self.station_id = station_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    async def get_data(self, date_str: str, datatypes: list[str]) -> list[dict]:
        """Fetch daily GHCND records for one station and one date.

        Retries on 503/429 and transport errors with exponential backoff.
        Returns the "results" list, empty when the API has no data.
        """
        url = f"{self.base_url}/data"
        params: list[tuple[str, str]] = [
            ("datasetid", DATASET_ID),
            ("stationid", self.station_id),
            ("startdate", date_str),
            ("enddate", date_str),
            ("units", "standard"),
        ]
        params.extend(("datatypeid", dt) for dt in datatypes)
        headers = {"token": self.token}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    resp = await client.get(url, params=params, headers=headers)
                except httpx.RequestError as e:
                    if attempt < self.max_retries:
                        delay = self.retry_base_delay * (2**attempt)
                        logger.warning(
                            "CDO request error, retrying in %.1fs: %s", delay, e
                        )
                        await asyncio.sleep(delay)
                        continue
                    raise CdoClientError(f"CDO request failed: {e}") from e

                if resp.status_code in (503, 429) and attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "CDO %s returned %d, retrying in %.1fs (attempt %d/%d)",
                        date_str, resp.status_code, delay, attempt + 1, self.max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                if resp.status_code >= 400:
                    raise CdoClientError(
                        f"CDO API error: {resp.status_code}", status_code=resp.status_code
                    )
                try:
                    body = resp.json()
                except ValueError:
                    # CDO answers "{}" or an empty body for dates without data
                    return []
                results = body.get("results") if isinstance(body, dict) else None
                return results if isinstance(results, list) else []

        raise CdoClientError("CDO retries exhausted")

    async def daily_average(self, date_str: str) -> float | None:
        """Daily average temperature (TAVG) in degrees F, or None if missing."""
        results = await self.get_data(date_str, ["TAVG"])
        for r in results:
            if r.get("datatype", "TAVG") == "TAVG" and r.get("value") is not None:
                return float(r["value"])
        return None

    async def daily_extremes(self, date_str: str) -> DailyExtremes | None:
        """Daily high (TMAX) and low (TMIN) in degrees F, or None if either is missing."""
        results = await self.get_data(date_str, ["TMAX", "TMIN"])
        high: float | None = None
        low: float | None = None
        for r in results:
            if r.get("value") is None:
                continue
            if r.get("datatype") == "TMAX":
                high = float(r["value"])
            elif r.get("datatype") == "TMIN":
                low = float(r["value"])

        if high is None or low is None:
            if results:
                logger.warning("No TMAX or TMIN for %s at %s", date_str, self.station_id)
            return None

        if high > TENTHS_CELSIUS_THRESHOLD or low > TENTHS_CELSIUS_THRESHOLD:
            high = tenths_celsius_to_fahrenheit(high)
            low = tenths_celsius_to_fahrenheit(low)
        logger.debug("Extremes %s: high %.1fF low %.1fF", date_str, high, low)
        return DailyExtremes(high=high, low=low)
