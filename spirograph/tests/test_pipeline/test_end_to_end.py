"""End-to-end: mocked CDO data through the pipeline to rendered segments."""

import asyncio
from pathlib import Path

import pytest

from spirograph.config.schema import SpirographConfig
from spirograph.geometry.curve import closure_angle, curve_point
from spirograph.pipeline.curve_pipeline import CurvePipeline
from spirograph.render.surface import FigureSurface, draw_curve


@pytest.fixture
def pipeline(tmp_path: Path, flat_delta_client):
    p = CurvePipeline(SpirographConfig(), str(tmp_path / "e2e.db"), client=flat_delta_client)
    yield p
    p.close()


class TestEndToEnd:
    def test_flat_delta_day(self, pipeline: CurvePipeline):
        params = asyncio.run(pipeline.params("2024-02-23"))

        assert params is not None
        assert params.respread is True
        assert params.complexity_override is False
        assert params.rolling_radius == pytest.approx(70.0)
        pens = params.pen_distances
        assert pens[0] == 55.0
        assert pens[-1] == pytest.approx(75.0)
        assert all(a < b for a, b in zip(pens, pens[1:]))

    def test_full_and_partial_render(self, pipeline: CurvePipeline):
        params = asyncio.run(pipeline.params("2024-02-23"))
        full = pipeline.segments(params)
        half = pipeline.segments(params, 2000)

        assert len(full) == 4000
        assert half == full[:2000]
        end = curve_point(200.0, params.rolling_radius, params.pen_distances[23],
                          closure_angle(200.0, params.rolling_radius))
        assert (full[-1].x1, full[-1].y1) == pytest.approx(end)

        surface = FigureSurface()
        assert draw_curve(surface, half) == 2000

    def test_second_request_served_from_cache(self, pipeline: CurvePipeline, flat_delta_client):
        asyncio.run(pipeline.climate("2024-02-23"))
        asyncio.run(pipeline.climate("2024-02-23"))
        assert flat_delta_client.daily_extremes.call_count == 2

    def test_failure_yields_no_params(self, pipeline: CurvePipeline):
        assert asyncio.run(pipeline.params("2024-03-01")) is None
