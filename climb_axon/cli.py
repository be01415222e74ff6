# ==============================================================================
# Climb Axon - Axonometric Climb Profile Renderer
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Command line interface.

    climb-axon render climb.json -o climb.svg --yaw 40 --units imperial
    climb-axon render --sample -o colombier.png --scale 3
    climb-axon fetch 229781 -o alpe.json --bin-km 0.5
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from . import __version__
from .core.climb_data import SAMPLE_CLIMB, load_profile, parse_data_param
from .core.config import DEFAULT_CONFIG, Config, ConfigError, RoofAnchor, Units, load_config
from .core.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="climb-axon",
        description="Render axonometric cycling climb profiles.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="render a profile to SVG or PNG")
    render.add_argument("input", nargs="?", help="profile JSON file")
    render.add_argument("-o", "--output", required=True,
                        help="output file (.svg or .png), '-' for SVG on stdout")
    render.add_argument("--config", help="config JSON file")
    render.add_argument("--sample", action="store_true", help="render the built-in sample climb")
    render.add_argument("--data", help="profile as URL-encoded or base64 JSON (share link data)")
    render.add_argument("--yaw", type=float, help="camera yaw (deg)")
    render.add_argument("--pitch", type=float, help="camera pitch (deg)")
    render.add_argument("--roll", type=float, help="camera roll (deg)")
    render.add_argument("--x-scale", type=float, help="distance axis stretch")
    render.add_argument("--exaggeration", type=float, help="vertical exaggeration")
    render.add_argument("--units", choices=[u.value for u in Units])
    render.add_argument("--anchor", choices=[a.value for a in RoofAnchor],
                        help="ribbon placement relative to the face")
    render.add_argument("--scale", type=float, default=2.0, help="PNG pixel density (default 2)")
    render.add_argument("--format", choices=["svg", "png"], help="override the output suffix")

    fetch = sub.add_parser("fetch", help="fetch a Strava segment as profile JSON")
    fetch.add_argument("segment_id")
    fetch.add_argument("-o", "--output", required=True, help="profile JSON file to write")
    fetch.add_argument("--bin-km", type=float, default=1.0, help="bin length (km)")
    fetch.add_argument("--lat-step", type=int, default=10, help="keep every Nth latlng sample")
    fetch.add_argument("--token", help="Strava access token (else refreshed from env)")
    fetch.add_argument("--raw", action="store_true",
                       help="write the full payload (streams, meta) instead of the profile")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Config file (or defaults) with command line overrides applied."""
    config = load_config(args.config) if args.config else DEFAULT_CONFIG

    camera = {
        "yaw_deg": args.yaw,
        "pitch_deg": args.pitch,
        "roll_deg": args.roll,
        "x_scale": args.x_scale,
        "vertical_exaggeration": args.exaggeration,
    }
    camera = {k: v for k, v in camera.items() if v is not None}
    if camera:
        config = config.with_camera(**camera)
    if args.units:
        config = replace(config, units=Units.parse(args.units))
    if args.anchor:
        config = replace(config, roof=replace(config.roof, anchor=RoofAnchor.parse(args.anchor)))
    return config


def cmd_render(args: argparse.Namespace) -> int:
    from .core.profile_renderer import render_profile
    from .core.svg_writer import render_svg_text
    from .core.theme import resolve_theme_vars

    if args.input:
        profile = load_profile(args.input)
    elif args.data:
        profile = parse_data_param(args.data)
        if profile is None:
            logger.error("Could not parse --data as a profile")
            return 1
    elif args.sample:
        profile = SAMPLE_CLIMB
    else:
        logger.error("No input profile given (pass a JSON file, --data or --sample)")
        return 1

    drawing = render_profile(profile, config_from_args(args))

    if args.output == "-":
        sys.stdout.write(resolve_theme_vars(render_svg_text(drawing)))
        return 0

    from .core.export import export_drawing

    path = export_drawing(drawing, args.output, fmt=args.format, scale=args.scale)
    print(path)
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    from .core.segment_source import SegmentSourceError, StravaSegmentSource

    try:
        payload = StravaSegmentSource(access_token=args.token).fetch(
            args.segment_id, bin_km=args.bin_km, lat_step=args.lat_step)
    except SegmentSourceError as e:
        logger.error("%s (HTTP %s)", e.message, e.status)
        if e.details:
            logger.debug("Details: %s", e.details)
        return 1

    data = payload.to_dict() if args.raw else payload.to_profile().to_dict()

    path = Path(args.output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info("Wrote %s (%d segments)", path, len(payload.segments))
    print(path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "render":
            return cmd_render(args)
        return cmd_fetch(args)
    except (ConfigError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
