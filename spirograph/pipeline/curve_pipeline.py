"""Curve pipeline: date -> climate result -> curve parameters -> segments."""

import logging
from datetime import date

from spirograph.climate.solar import day_of_year
from spirograph.config.loader import config_hash
from spirograph.config.schema import SpirographConfig
from spirograph.geometry.curve import generate_curve
from spirograph.geometry.normalizer import Normalizer
from spirograph.ingest.cdo_client import CdoClient
from spirograph.ingest.climate_fetcher import ClimateFetcher
from spirograph.models.climate import ClimateResult
from spirograph.models.geometry import GeometryParams, Segment
from spirograph.storage.climate_cache import ClimateCache, SqliteStore
from spirograph.storage.database import open_database

logger = logging.getLogger(__name__)


class CurvePipeline:
    def __init__(
        self,
        config: SpirographConfig,
        db_path: str = "data/spirograph.db",
        client: CdoClient | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.conn = open_database(db_path)
        self.cache: ClimateCache | None = None
        if config.cache.enabled:
            self.cache = ClimateCache(
                SqliteStore(self.conn), max_age_hours=config.cache.max_age_hours
            )
        if client is None:
            station = config.station
            if not station.token:
                logger.warning("No CDO token configured; requests will be rejected")
            client = CdoClient(
                token=station.token,
                station_id=station.station_id,
                base_url=station.api_base,
                timeout=config.ops.request_timeout_s,
                max_retries=config.ops.max_retries,
                retry_base_delay=config.ops.retry_base_delay_s,
            )
        self.fetcher = ClimateFetcher(client, config.station, self.cache)
        self.normalizer = Normalizer(config)
        logger.debug("Pipeline ready (config %s, db %s)", config_hash(config), db_path)

    def close(self) -> None:
        self.conn.close()

    async def climate(self, date_key: str) -> ClimateResult | None:
        return await self.fetcher.fetch(date_key)

    async def params(self, date_key: str) -> GeometryParams | None:
        result = await self.climate(date_key)
        if result is None:
            return None
        return self.params_for(result, date_key)

    def params_for(self, result: ClimateResult, date_key: str) -> GeometryParams:
        return self.normalizer.build_params(
            result, day_of_year(date.fromisoformat(date_key))
        )

    def segments(self, params: GeometryParams, points_to_draw: int | None = None) -> list[Segment]:
        geometry = self.config.geometry
        return generate_curve(
            geometry.outer_radius,
            params.rolling_radius,
            params.pen_distances,
            params.thicknesses,
            geometry.total_points,
            points_to_draw,
        )
