"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, model_validator


class Band(BaseModel):
    """Closed numeric interval [min, max] used for linear mapping."""

    model_config = {"extra": "forbid"}

    min: float
    max: float

    @model_validator(mode="after")
    def _check_order(self) -> "Band":
        if self.min >= self.max:
            raise ValueError(f"band min must be below max, got [{self.min}, {self.max}]")
        return self

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class StationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    station_id: str = "GHCND:USW00026451"
    name: str = "Anchorage, AK"
    api_base: str = "https://www.ncei.noaa.gov/cdo-web/api/v2"
    token: str = ""
    comparison_year: int = Field(default=1976, ge=1800)
    fallback_years: list[int] = [1976, 1990, 2000, 1980, 2010]
    trend_start_year: int = Field(default=2017, ge=1800)
    trend_end_year: int = Field(default=2026, ge=1800)

    @model_validator(mode="after")
    def _check_trend_range(self) -> "StationConfig":
        if self.trend_start_year > self.trend_end_year:
            raise ValueError("trend_start_year must not exceed trend_end_year")
        return self


class GeometryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    outer_radius: float = Field(default=200.0, gt=0.0)
    rolling_radius: Band = Band(min=60.0, max=80.0)
    pen_distance: Band = Band(min=55.0, max=75.0)
    thickness: Band = Band(min=0.5, max=1.8)
    total_points: int = Field(default=4000, ge=1)


class NormalizationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    raw_acceleration: Band = Band(min=0.0, max=2.0)
    visual_acceleration: Band = Band(min=-0.5, max=0.5)
    target_delta: Band = Band(min=-15.0, max=15.0)
    simple_radius: Band = Band(min=67.0, max=74.0)
    complexity_floor: float = 67.0
    complexity_modulus: int = Field(default=8, ge=1)
    min_lobes: int = Field(default=15, ge=1)


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = True
    max_age_hours: float = Field(default=24.0, gt=0.0)


class ClockConfig(BaseModel):
    model_config = {"extra": "forbid"}

    timezone: str = "America/Anchorage"
    tick_interval_ms: int = Field(default=30, ge=1)


class ArchiveConfig(BaseModel):
    model_config = {"extra": "forbid"}

    start_date: str = "2026-01-01"  # YYYY-MM-DD, first selectable day
    display_year: int = 2026
    fetch_year: int = 2024


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    request_timeout_s: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay_s: float = Field(default=2.0, ge=0.0)


class SpirographConfig(BaseModel):
    model_config = {"extra": "forbid"}

    station: StationConfig = StationConfig()
    geometry: GeometryConfig = GeometryConfig()
    normalization: NormalizationConfig = NormalizationConfig()
    cache: CacheConfig = CacheConfig()
    clock: ClockConfig = ClockConfig()
    archive: ArchiveConfig = ArchiveConfig()
    ops: OpsConfig = OpsConfig()
