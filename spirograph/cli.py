"""CLI entry point for the climate spirograph."""

import argparse
import asyncio
import json
import logging
from datetime import date, datetime

from spirograph.archive import can_go_next, can_go_prev, fetch_date_for, local_today, month_days
from spirograph.config.loader import get_config_value, load_config, set_config_value
from spirograph.models.common import is_date_key
from spirograph.pipeline.curve_pipeline import CurvePipeline
from spirograph.render.animator import Animator
from spirograph.render.progress import cursor_for, day_progress, local_now
from spirograph.render.surface import FigureSurface, draw_curve
from spirograph.reporting.formatters import (
    format_info_panel,
    format_params_text,
    format_result_json,
)
from spirograph.storage import kv_repo
from spirograph.storage.climate_cache import CACHE_PREFIX, ClimateCache, SqliteStore
from spirograph.storage.database import open_database

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/spirograph.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="spirograph",
        description="Climate spirograph: temperature change drawn as a rolling-circle curve",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")

    sub = parser.add_subparsers(dest="command")

    # fetch / params
    fetch_p = sub.add_parser("fetch", help="Fetch climate data for a date")
    fetch_p.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today in fetch year)")
    fetch_p.add_argument("--json", action="store_true", help="Print raw result JSON")
    params_p = sub.add_parser("params", help="Show curve parameters for a date")
    params_p.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today in fetch year)")

    # render
    render_p = sub.add_parser("render", help="Render a date's curve to SVG")
    render_p.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today in fetch year)")
    render_p.add_argument("--out", default="spirograph.svg", help="Output SVG path")
    cursor = render_p.add_mutually_exclusive_group()
    cursor.add_argument("--points", type=int, help="Draw only the first N points")
    cursor.add_argument("--at", help="Draw up to a time of day, HH:MM")

    # animate
    anim_p = sub.add_parser("animate", help="Run the live render loop")
    anim_p.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today in fetch year)")
    anim_p.add_argument("--ticks", type=int, default=100, help="Number of ticks")
    anim_p.add_argument("--out", default="live.svg", help="SVG path for the last frame")

    # progress
    sub.add_parser("progress", help="Show live time-of-day progress")

    # archive
    arch_p = sub.add_parser("archive", help="List archive days for a month")
    arch_p.add_argument("month", nargs="?", help="YYYY-MM (default: current month)")

    # cache list / cache clear
    cache_p = sub.add_parser("cache", help="Cache operations")
    cache_sub = cache_p.add_subparsers(dest="cache_command")
    cache_sub.add_parser("list", help="List cached dates and their freshness")
    clear_p = cache_sub.add_parser("clear", help="Drop the cached entry for a date")
    clear_p.add_argument("date", help="YYYY-MM-DD")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    config = load_config(args.config)

    if args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "params":
        return _cmd_params(config, args)
    elif args.command == "render":
        return _cmd_render(config, args)
    elif args.command == "animate":
        return _cmd_animate(config, args)
    elif args.command == "progress":
        return _cmd_progress(config, args)
    elif args.command == "archive":
        return _cmd_archive(config, args)
    elif args.command == "cache":
        return _cmd_cache(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _resolve_date(config, value: str | None) -> str | None:
    """Date argument as YYYY-MM-DD, defaulting to today in the fetch year.

    Returns None and prints an error when the argument is not a valid date.
    """
    if value:
        if not is_date_key(value):
            print(f"Error: invalid date {value!r}, expected YYYY-MM-DD")
            return None
        return value
    today = local_today(config.clock.timezone)
    return fetch_date_for(today, config.archive.fetch_year)


def _cmd_fetch(config, args) -> int:
    date_key = _resolve_date(config, args.date)
    if date_key is None:
        return 1
    pipeline = CurvePipeline(config, args.db)
    try:
        result = asyncio.run(pipeline.climate(date_key))
    finally:
        pipeline.close()
    print(format_info_panel(
        date_key, result, config.archive.display_year, config.station.comparison_year
    ))
    if result is None:
        return 1
    if args.json:
        print(format_result_json(result))
    return 0


def _cmd_params(config, args) -> int:
    date_key = _resolve_date(config, args.date)
    if date_key is None:
        return 1
    pipeline = CurvePipeline(config, args.db)
    try:
        params = asyncio.run(pipeline.params(date_key))
    finally:
        pipeline.close()
    if params is None:
        print(f"No data for {date_key}")
        return 1
    print(format_params_text(params))
    return 0


def _cmd_render(config, args) -> int:
    date_key = _resolve_date(config, args.date)
    if date_key is None:
        return 1
    total = config.geometry.total_points
    points = args.points
    if args.at:
        try:
            t = datetime.strptime(args.at, "%H:%M")
        except ValueError:
            print("Error: --at must be HH:MM")
            return 1
        points = cursor_for(day_progress(t), total)

    pipeline = CurvePipeline(config, args.db)
    try:
        params = asyncio.run(pipeline.params(date_key))
        if params is None:
            print(f"No data for {date_key}")
            return 1
        segments = pipeline.segments(params, points)
    finally:
        pipeline.close()

    surface = FigureSurface()
    drawn = draw_curve(surface, segments)
    path = surface.save(args.out)
    print(f"Wrote {drawn} segments to {path}")
    return 0


def _cmd_animate(config, args) -> int:
    date_key = _resolve_date(config, args.date)
    if date_key is None:
        return 1
    pipeline = CurvePipeline(config, args.db)
    animator = Animator(config, pipeline.fetcher)
    last: list = []

    def _keep(segments) -> None:
        last[:] = segments

    async def _run() -> None:
        task = animator.show_date(date_key)
        await animator.run(_keep, max_ticks=args.ticks)
        await task
        # the fetch can outlast the tick budget
        _keep(animator.frame())

    try:
        asyncio.run(_run())
    finally:
        pipeline.close()

    surface = FigureSurface()
    drawn = draw_curve(surface, last)
    path = surface.save(args.out)
    state = animator.state
    print(f"Status: {state.status} | Cursor: {state.cursor}/{config.geometry.total_points}")
    print(f"Wrote {drawn} segments to {path}")
    return 0 if state.params is not None else 1


def _cmd_progress(config, args) -> int:
    now = local_now(config.clock.timezone)
    progress = day_progress(now)
    total = config.geometry.total_points
    print(f"Local time ({config.clock.timezone}): {now:%Y-%m-%d %H:%M:%S}")
    print(f"Progress: {progress * 100:.1f}% | Cursor: {cursor_for(progress, total)}/{total}")
    return 0


def _cmd_archive(config, args) -> int:
    today = local_today(config.clock.timezone)
    if args.month:
        try:
            first = date.fromisoformat(f"{args.month}-01")
        except ValueError:
            print("Error: month must be YYYY-MM")
            return 1
    else:
        first = today.replace(day=1)

    days = month_days(first.year, first.month, config.archive, today)
    print(f"{first:%B %Y}")
    for d in days:
        marker = "*" if d.available else " "
        print(f" {marker} {d.day.isoformat()} -> {d.fetch_date}")
    nav = []
    if can_go_prev(first.year, first.month, config.archive):
        nav.append("prev")
    if can_go_next(first.year, first.month, today):
        nav.append("next")
    print(f"Navigation: {', '.join(nav) or 'none'}")
    return 0


def _cmd_cache(config, args) -> int:
    if args.cache_command not in ("list", "clear"):
        print("Use: cache list | cache clear DATE")
        return 1
    conn = open_database(args.db)
    cache = ClimateCache(SqliteStore(conn), max_age_hours=config.cache.max_age_hours)
    try:
        if args.cache_command == "list":
            keys = kv_repo.list_keys(conn, CACHE_PREFIX)
            for key in keys:
                date_key = key[len(CACHE_PREFIX):]
                state = "fresh" if cache.get(date_key) is not None else "stale"
                print(f"{date_key}  {state}")
            print(f"{len(keys)} cached date(s)")
        else:
            removed = cache.invalidate(args.date)
            print(f"Cache entry for {args.date}: {'removed' if removed else 'not found'}")
    finally:
        conn.close()
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        data = config.model_dump(mode="json")
        if data["station"]["token"]:
            data["station"]["token"] = "***"
        print(json.dumps(data, indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1
