"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from spirograph.config.schema import SpirographConfig
from spirograph.ingest.cdo_client import CdoClient, CdoClientError
from spirograph.models.climate import DailyExtremes
from spirograph.storage.database import connect, run_migrations


@pytest.fixture
def tmp_db(tmp_path: Path) -> sqlite3.Connection:
    """Temporary SQLite database with all migrations applied."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    return conn


@pytest.fixture
def default_config() -> SpirographConfig:
    return SpirographConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "station": {"comparison_year": 1976},
        "geometry": {"total_points": 4000},
        "clock": {"timezone": "America/Anchorage"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


class FakeClock:
    """Settable UTC clock for cache expiry tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 2, 23, 12, 0, 0, tzinfo=UTC))


def make_cdo_client(
    extremes: dict[str, DailyExtremes | None],
    averages: dict[str, float] | None = None,
    failing: set[str] | None = None,
) -> MagicMock:
    """CdoClient double answering from dicts keyed by YYYY-MM-DD.

    Dates in `failing` raise CdoClientError.
    """
    averages = averages or {}
    failing = failing or set()
    client = MagicMock(spec=CdoClient)

    def _extremes(date_str: str) -> DailyExtremes | None:
        if date_str in failing:
            raise CdoClientError("boom", status_code=500)
        return extremes.get(date_str)

    def _average(date_str: str) -> float | None:
        if date_str in failing:
            raise CdoClientError("boom", status_code=500)
        return averages.get(date_str)

    client.daily_extremes.side_effect = _extremes
    client.daily_average.side_effect = _average
    return client


def linear_averages(month_day: str, start: int = 2017, end: int = 2026) -> dict[str, float]:
    """Trend averages rising exactly 1 degree per year from 30."""
    return {f"{y}-{month_day}": 30.0 + (y - start) for y in range(start, end + 1)}


@pytest.fixture
def cdo_client_factory() -> Callable[..., MagicMock]:
    return make_cdo_client


@pytest.fixture
def flat_delta_client() -> MagicMock:
    """Current {40, 20} against 1976 {30, 10}: a flat +10F hourly delta."""
    return make_cdo_client(
        extremes={
            "2024-02-23": DailyExtremes(high=40.0, low=20.0),
            "1976-02-23": DailyExtremes(high=30.0, low=10.0),
        },
        averages=linear_averages("02-23"),
    )
