"""Spirograph API — FastAPI backend serving curve parameters, segments and live progress."""

import os
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from spirograph.archive import local_today, month_days
from spirograph.config.loader import load_config
from spirograph.config.schema import SpirographConfig
from spirograph.ingest.cdo_client import CdoClient
from spirograph.models.common import is_date_key
from spirograph.pipeline.curve_pipeline import CurvePipeline
from spirograph.render.progress import cursor_for, day_progress, local_now
from spirograph.render.surface import FigureSurface, draw_curve
from spirograph.reporting.formatters import (
    date_label,
    delta_range_text,
    params_dict,
    warming_text,
)

CONFIG_PATH = os.environ.get("SPIROGRAPH_CONFIG", "ops/configs/default.yaml")
DB_PATH = os.environ.get("SPIROGRAPH_DB", "data/spirograph.db")


def create_app(
    config: SpirographConfig | None = None,
    db_path: str = DB_PATH,
    client: CdoClient | None = None,
) -> FastAPI:
    if config is None:
        config = load_config(CONFIG_PATH)

    app = FastAPI(title="Climate Spirograph", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    def _pipeline() -> CurvePipeline:
        return CurvePipeline(config, db_path, client=client)

    def _check_date(date_key: str) -> None:
        if not is_date_key(date_key):
            raise HTTPException(400, f"Invalid date {date_key!r}, expected YYYY-MM-DD")

    async def _params(date_key: str):
        _check_date(date_key)
        pipeline = _pipeline()
        try:
            params = await pipeline.params(date_key)
            if params is None:
                raise HTTPException(404, f"No climate data for {date_key}")
            return pipeline, params
        except HTTPException:
            pipeline.close()
            raise

    # ── Data endpoints ──────────────────────────────────────────────

    @app.get("/api/climate/{date_key}")
    async def get_climate(date_key: str):
        """Climate result plus info panel lines."""
        _check_date(date_key)
        pipeline = _pipeline()
        try:
            result = await pipeline.climate(date_key)
        finally:
            pipeline.close()
        if result is None:
            raise HTTPException(404, f"No climate data for {date_key}")
        comparison_year = result.comparison_year or config.station.comparison_year
        return {
            "date": date_key,
            **result.to_dict(),
            "info": [
                date_label(date_key, config.archive.display_year, comparison_year),
                warming_text(result.acceleration),
                delta_range_text(result.hourly_deltas),
            ],
        }

    @app.get("/api/params/{date_key}")
    async def get_params(date_key: str):
        pipeline, params = await _params(date_key)
        pipeline.close()
        return {"date": date_key, **params_dict(params)}

    @app.get("/api/curve/{date_key}")
    async def get_curve(date_key: str, points: int | None = Query(default=None, ge=0)):
        """Segments as [x0, y0, x1, y1, weight] rows, optionally truncated."""
        pipeline, params = await _params(date_key)
        try:
            segments = pipeline.segments(params, points)
        finally:
            pipeline.close()
        return {
            "date": date_key,
            "total_points": config.geometry.total_points,
            "count": len(segments),
            "segments": [[s.x0, s.y0, s.x1, s.y1, s.weight] for s in segments],
        }

    @app.get("/api/svg/{date_key}")
    async def get_svg(date_key: str, points: int | None = Query(default=None, ge=0)):
        pipeline, params = await _params(date_key)
        try:
            segments = pipeline.segments(params, points)
        finally:
            pipeline.close()
        surface = FigureSurface()
        draw_curve(surface, segments)
        return Response(content=surface.to_svg(), media_type="image/svg+xml")

    @app.get("/api/progress")
    def get_progress():
        """Live time-of-day progress in the reference timezone."""
        now = local_now(config.clock.timezone)
        progress = day_progress(now)
        total = config.geometry.total_points
        return {
            "timezone": config.clock.timezone,
            "local_time": now.isoformat(),
            "progress": progress,
            "cursor": cursor_for(progress, total),
            "total_points": total,
        }

    @app.get("/api/archive/{year}/{month}")
    def get_archive(year: int, month: int):
        if not 1 <= month <= 12:
            raise HTTPException(400, "month must be 1-12")
        today = local_today(config.clock.timezone)
        days = month_days(year, month, config.archive, today)
        return {
            "year": year,
            "month": month,
            "days": [
                {**asdict(d), "day": d.day.isoformat()} for d in days
            ],
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8777)
