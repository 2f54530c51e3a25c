"""Tests for the CDO API client with mocked httpx."""

import asyncio
import json
from pathlib import Path

import httpx
import pytest
import respx

from spirograph.ingest.cdo_client import (
    CdoClient,
    CdoClientError,
    tenths_celsius_to_fahrenheit,
)

FIXTURE_DIR = Path(__file__).parent.parent / "fixtures"
HOST = "test-cdo.example.com"


def _load(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def cdo() -> CdoClient:
    return CdoClient(
        token="test-token",
        station_id="GHCND:USW00026451",
        base_url=f"https://{HOST}/",
        max_retries=2,
        retry_base_delay=0,  # No waiting in tests
    )


class TestGetData:
    @respx.mock
    def test_request_shape(self, cdo: CdoClient):
        route = respx.get(host=HOST, path="/data").mock(
            return_value=httpx.Response(200, json=_load("cdo_extremes.json"))
        )

        results = asyncio.run(cdo.get_data("2024-02-23", ["TMAX", "TMIN"]))
        assert len(results) == 2

        request = route.calls[0].request
        assert request.headers["token"] == "test-token"
        params = request.url.params
        assert params["datasetid"] == "GHCND"
        assert params["stationid"] == "GHCND:USW00026451"
        assert params["startdate"] == "2024-02-23"
        assert params["enddate"] == "2024-02-23"
        assert params["units"] == "standard"
        assert params.get_list("datatypeid") == ["TMAX", "TMIN"]

    @respx.mock
    def test_empty_object_means_no_data(self, cdo: CdoClient):
        respx.get(host=HOST, path="/data").mock(return_value=httpx.Response(200, json={}))
        assert asyncio.run(cdo.get_data("1976-02-23", ["TAVG"])) == []

    @respx.mock
    def test_empty_body_means_no_data(self, cdo: CdoClient):
        respx.get(host=HOST, path="/data").mock(return_value=httpx.Response(200, text=""))
        assert asyncio.run(cdo.get_data("1976-02-23", ["TAVG"])) == []

    @respx.mock
    def test_retry_on_503(self, cdo: CdoClient):
        route = respx.get(host=HOST, path="/data").mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json=_load("cdo_average.json")),
            ]
        )
        results = asyncio.run(cdo.get_data("2020-02-23", ["TAVG"]))
        assert results[0]["value"] == 33.5
        assert route.call_count == 2

    @respx.mock
    def test_retry_on_429(self, cdo: CdoClient):
        route = respx.get(host=HOST, path="/data").mock(
            side_effect=[
                httpx.Response(429),
                httpx.Response(429),
                httpx.Response(200, json=_load("cdo_average.json")),
            ]
        )
        asyncio.run(cdo.get_data("2020-02-23", ["TAVG"]))
        assert route.call_count == 3

    @respx.mock
    def test_exhausted_retries(self, cdo: CdoClient):
        route = respx.get(host=HOST, path="/data").mock(return_value=httpx.Response(503))
        with pytest.raises(CdoClientError) as exc_info:
            asyncio.run(cdo.get_data("2020-02-23", ["TAVG"]))
        assert exc_info.value.status_code == 503
        assert route.call_count == 3

    @respx.mock
    def test_client_error_not_retried(self, cdo: CdoClient):
        route = respx.get(host=HOST, path="/data").mock(return_value=httpx.Response(400))
        with pytest.raises(CdoClientError) as exc_info:
            asyncio.run(cdo.get_data("2020-02-23", ["TAVG"]))
        assert exc_info.value.status_code == 400
        assert route.call_count == 1

    @respx.mock
    def test_transport_error(self, cdo: CdoClient):
        route = respx.get(host=HOST, path="/data").mock(
            side_effect=httpx.ConnectError("refused")
        )
        with pytest.raises(CdoClientError):
            asyncio.run(cdo.get_data("2020-02-23", ["TAVG"]))
        assert route.call_count == 3


class TestDailyValues:
    @respx.mock
    def test_daily_average(self, cdo: CdoClient):
        respx.get(host=HOST, path="/data").mock(
            return_value=httpx.Response(200, json=_load("cdo_average.json"))
        )
        assert asyncio.run(cdo.daily_average("2020-02-23")) == 33.5

    @respx.mock
    def test_daily_average_missing(self, cdo: CdoClient):
        respx.get(host=HOST, path="/data").mock(return_value=httpx.Response(200, json={}))
        assert asyncio.run(cdo.daily_average("2020-02-23")) is None

    @respx.mock
    def test_daily_extremes(self, cdo: CdoClient):
        respx.get(host=HOST, path="/data").mock(
            return_value=httpx.Response(200, json=_load("cdo_extremes.json"))
        )
        extremes = asyncio.run(cdo.daily_extremes("2024-02-23"))
        assert extremes is not None
        assert extremes.high == 40.0
        assert extremes.low == 20.0

    @respx.mock
    def test_tenths_celsius_converted(self, cdo: CdoClient):
        respx.get(host=HOST, path="/data").mock(
            return_value=httpx.Response(200, json=_load("cdo_extremes_tenths_c.json"))
        )
        extremes = asyncio.run(cdo.daily_extremes("1976-07-04"))
        assert extremes.high == pytest.approx(77.0)
        assert extremes.low == pytest.approx(50.0)

    @respx.mock
    def test_missing_tmin(self, cdo: CdoClient):
        body = _load("cdo_extremes.json")
        body["results"] = [r for r in body["results"] if r["datatype"] == "TMAX"]
        respx.get(host=HOST, path="/data").mock(return_value=httpx.Response(200, json=body))
        assert asyncio.run(cdo.daily_extremes("2024-02-23")) is None


class TestConversion:
    def test_tenths_celsius(self):
        assert tenths_celsius_to_fahrenheit(0) == 32.0
        assert tenths_celsius_to_fahrenheit(1000) == pytest.approx(212.0)
        assert tenths_celsius_to_fahrenheit(-400) == pytest.approx(-40.0)
