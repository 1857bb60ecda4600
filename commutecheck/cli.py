#!/usr/bin/env python3
"""
Commute Check command line.

Usage:
    python -m commutecheck --serve
    python -m commutecheck --stats
    python -m commutecheck --add-reading gwb-into 18
    python -m commutecheck --refresh
"""

import argparse
import asyncio
import logging
import sys

from commutecheck.config.loader import load_config, get_database_path
from commutecheck.models.crossings import CROSSINGS, get_status, validate_reading


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI flags."""
    parser = argparse.ArgumentParser(
        prog='commutecheck',
        description='Manhattan / New Jersey crossing wait times'
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument('--serve', action='store_true',
                         help='Start the API server')
    actions.add_argument('--stats', action='store_true',
                         help='Show reading counts per crossing')
    actions.add_argument('--add-reading', nargs=2, metavar=('CROSSING_ID', 'MINUTES'),
                         help='Record a manual wait-time reading')
    actions.add_argument('--refresh', action='store_true',
                         help='Fetch current wait times once and store them')

    parser.add_argument('--port', type=int, default=3000,
                        help='Port for the API server (default: 3000)')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Host for the API server (default: 0.0.0.0)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    return parser


def parse_reading_args(values) -> tuple:
    """Validate --add-reading values. Raises ValueError on bad input."""
    crossing_id, minutes = values
    try:
        wait_time = int(minutes)
    except ValueError:
        raise ValueError("wait_time must be an integer") from None
    validate_reading(crossing_id, wait_time)
    return crossing_id, wait_time


def main(argv=None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = load_config()

    if args.serve:
        _run_serve(config, args)
    elif args.add_reading:
        try:
            crossing_id, wait_time = parse_reading_args(args.add_reading)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(2)
        asyncio.run(_add_reading(config, crossing_id, wait_time))
    elif args.refresh:
        asyncio.run(_refresh_once(config))
    else:
        asyncio.run(_print_stats(config))


def _run_serve(config, args):
    """Start the API server."""
    import uvicorn

    from commutecheck.server.app import create_app
    app = create_app(config=config)

    print(f"\nCommute Check running at http://{args.host}:{args.port}")
    print("Press Ctrl+C to stop\n")

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


async def _add_reading(config, crossing_id: str, wait_time: int):
    from commutecheck.server.app import open_database
    from commutecheck.server.queries.reading_queries import add_reading

    db = await open_database(get_database_path(config))
    try:
        reading_id = await add_reading(db, crossing_id, wait_time)
    finally:
        await db.close()
    print(f"Recorded {wait_time} min for {crossing_id} (reading #{reading_id})")


async def _refresh_once(config):
    from commutecheck.server.app import open_database
    from commutecheck.traffic.cache import TrafficCache
    from commutecheck.traffic.directions import DirectionsClient

    directions = DirectionsClient(
        api_key=config.get("google_maps_api_key"),
        timeout=config.get("request_timeout_seconds", 30),
    )
    if not directions.is_configured():
        print("Error: no Google Maps API key configured (set GOOGLE_MAPS_API_KEY)")
        sys.exit(1)

    db = await open_database(get_database_path(config))
    try:
        cache = TrafficCache(directions.fetch_all_travel_times, db)
        results = await cache.refresh()
    finally:
        await directions.aclose()
        await db.close()

    by_id = {r.crossing_id: r for r in results}
    for crossing in CROSSINGS:
        result = by_id.get(crossing.id)
        if result is None or result.wait_time is None:
            error = result.error if result else "no result"
            print(f"{crossing.name:26} {crossing.direction:18} --      ({error})")
        else:
            status, _ = get_status(result.wait_time)
            print(f"{crossing.name:26} {crossing.direction:18} {result.wait_time:>3} min {status}")


async def _print_stats(config):
    from commutecheck.server.app import open_database
    from commutecheck.server.queries.reading_queries import get_count, get_latest

    db = await open_database(get_database_path(config))
    try:
        print("READING STATISTICS")
        print("-" * 60)
        for crossing in CROSSINGS:
            count = await get_count(db, crossing.id)
            latest = await get_latest(db, crossing.id)
            last = f"{latest.wait_time} min at {latest.recorded_at:%Y-%m-%d %H:%M}" if latest else "-"
            print(f"{crossing.id:14} {count:>8} readings   latest: {last}")
    finally:
        await db.close()


if __name__ == '__main__':
    main()
