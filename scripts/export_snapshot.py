#!/usr/bin/env python3
"""Export the current earthquake view without the dashboard.

Fetches one USGS summary feed, applies the magnitude filter and writes the
same map the dashboard would show, either as a standalone HTML page
(interactive, folium) or as a PNG image (static, OpenStreetMap tiles).

Usage:
    # Past week, M4.0 and above, as an interactive page
    python scripts/export_snapshot.py --range week --min-magnitude 4 --html quakes.html

    # Past day as an image
    python scripts/export_snapshot.py --png quakes.png

    # Both at once, printing the list to stdout
    python scripts/export_snapshot.py --html quakes.html --png quakes.png --list

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
    LOG_LEVEL: Logging level (default: INFO)
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import pytz

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.render import build_render_plan
from src.core.state import TimeRange
from src.core.view import visible_view
from src.shell.config_loader import load_config
from src.shell.feed_client import FeedClient, FetchError
from src.shell.map_renderer import RenderCoordinator
from src.shell.static_map_client import StaticMapClient

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export a USGS earthquake feed as an HTML map or PNG image",
    )
    parser.add_argument(
        "--range",
        dest="time_range",
        default=None,
        help="Feed to fetch: day, week or month (default: from config)",
    )
    parser.add_argument(
        "--min-magnitude",
        type=float,
        default=None,
        help="Minimum magnitude, inclusive (default: from config)",
    )
    parser.add_argument("--html", type=Path, help="Write an interactive HTML map here")
    parser.add_argument("--png", type=Path, help="Write a static PNG map here")
    parser.add_argument("--width", type=int, default=1200, help="PNG width in pixels")
    parser.add_argument("--height", type=int, default=700, help="PNG height in pixels")
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the visible earthquakes, strongest first",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if not (args.html or args.png or args.list):
        logger.error("Nothing to do: pass --html, --png and/or --list")
        return 2

    config = load_config()

    try:
        time_range = TimeRange.parse(args.time_range) if args.time_range else config.default_time_range
    except ValueError as e:
        logger.error("%s", e)
        return 2

    min_magnitude = (
        args.min_magnitude if args.min_magnitude is not None else config.default_min_magnitude
    )

    client = FeedClient(base_url=config.feed_base_url, timeout=config.request_timeout_seconds)
    try:
        snapshot = client.fetch_snapshot(time_range)
    except FetchError as e:
        logger.error("Failed to load data: %s", e)
        return 1

    visible = visible_view(snapshot, min_magnitude)
    tz = pytz.timezone(config.display_timezone) if config.display_timezone else None
    plan = build_render_plan(visible, min_magnitude, config.bounds_padding, tz)
    logger.info("%s (%s)", plan.stats, time_range.label)

    if args.list:
        for row in plan.rows:
            print(f"{row.badge:>6}  {row.time_label:>8}  {row.place}  ({row.depth_label})")

    if args.html:
        fmap = RenderCoordinator(config).render(plan)
        fmap.save(str(args.html))
        logger.info("Wrote %s", args.html)

    if args.png:
        result = StaticMapClient().generate_snapshot(plan, width=args.width, height=args.height)
        if not result.success:
            logger.error("Failed to render image: %s", result.error)
            return 1
        args.png.write_bytes(result.image_bytes)
        logger.info("Wrote %s (%d bytes)", args.png, len(result.image_bytes))

    return 0


if __name__ == "__main__":
    sys.exit(main())
