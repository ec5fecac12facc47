#!/usr/bin/env python3
"""Load a route JSON/GeoJSON file and export it as CSV, GPX or JSON.

The input may be a GeoJSON ``Feature``/``FeatureCollection``, a bare
``LineString``, or any object with a ``polyline`` or ``geometry`` field.
Missing timestamps are spread evenly between the route's start/end times
(or one sample per second from now).

Usage examples:

    # Write route.csv and route.gpx into route_exports/
    python -m route_kinematics.tools.export_route trip.geojson --format all

    # Print the GPX track to stdout
    python -m route_kinematics.tools.export_route trip.json \
        --format gpx \
        --no-file

    # Save CSV to a specific file, polyline encoded at precision 6
    python -m route_kinematics.tools.export_route trip.json \
        --precision 6 \
        --output-file trip.csv
"""

from __future__ import annotations

import argparse
from datetime import datetime
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from route_kinematics.config import (
    DEFAULT_UNIT_SYSTEM,
    OUTPUT_DIR,
    OUTPUT_FILE_TIMESTAMP_ENABLED,
    POLYLINE_PRECISION,
)
from route_kinematics.errors import RouteError
from route_kinematics.models import CanonicalRoute
from route_kinematics.polyline_codec import encode as encode_polyline
from route_kinematics.session import RouteSession

LOGGER = logging.getLogger("export_route")

FORMATS = ("csv", "gpx", "json")


def route_to_json(route: CanonicalRoute, precision: int = POLYLINE_PRECISION) -> str:
    """Summarise the route as JSON, with the geometry re-encoded as a polyline."""

    stats = route.stats
    payload = {
        "label": route.meta.label,
        "direction": route.meta.direction,
        "point_count": route.point_count,
        "time_source": route.time_source,
        "polyline": encode_polyline(route.latlon, precision),
        "times_ms": list(route.times_ms),
        "stats": {
            "total_dist_m": stats.total_dist_m,
            "duration_s": stats.duration_s,
            "avg_mps": stats.avg_mps,
            "max_mps": stats.max_mps,
            "sampling_s": stats.sampling_s,
        },
    }
    return json.dumps(payload, indent=2)


def render_outputs(
    session: RouteSession, formats: Sequence[str], precision: int
) -> Dict[str, str]:
    """Render every requested format, keyed by file extension."""

    rendered: Dict[str, str] = {}
    for fmt in formats:
        if fmt == "csv":
            rendered["csv"] = session.to_csv()
        elif fmt == "gpx":
            rendered["gpx"] = session.to_gpx()
        elif fmt == "json":
            rendered["json"] = route_to_json(session.require_route(), precision)
    return rendered


def _resolve_formats(value: str) -> List[str]:
    return list(FORMATS) if value == "all" else [value]


def _output_path(
    base: str, ext: str, output_dir: Path, output_file: Optional[str], single: bool
) -> Path:
    if output_file and single:
        return Path(output_file)
    if output_file:
        stem = Path(output_file)
        return stem.with_suffix(f".{ext}")
    name = base
    if OUTPUT_FILE_TIMESTAMP_ENABLED:
        name = f"{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    return output_dir / f"{name}.{ext}"


def _safe_filename(name: str) -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in name)
    return cleaned.strip("._") or "route"


def _log_summary(session: RouteSession) -> None:
    summary = session.summary()
    LOGGER.info(
        "Route '%s' (%s): %d points, %.2f %s in %.0f s",
        summary["label"] or "-",
        summary["direction"] or "-",
        summary["points"],
        summary["distance"],
        summary["distance_unit"],
        summary["duration_s"],
    )
    LOGGER.info(
        "Avg speed %.2f %s, max %.2f %s, sampling %.1f s",
        summary["avg_speed"],
        summary["speed_unit"],
        summary["max_speed"],
        summary["speed_unit"],
        summary["sampling_s"],
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Normalize a JSON/GeoJSON route and export it as CSV, GPX or JSON"
    )
    parser.add_argument(
        "input",
        help="Path to the route JSON/GeoJSON file",
    )
    parser.add_argument(
        "--format",
        choices=[*FORMATS, "all"],
        default="csv",
        help="Output format (default: csv)",
    )
    parser.add_argument(
        "--output-file",
        help="Output file path (default: <output-dir>/<route label>.<ext>)",
    )
    parser.add_argument(
        "--output-dir",
        default=OUTPUT_DIR,
        help=f"Directory for exported files (default: {OUTPUT_DIR})",
    )
    parser.add_argument(
        "--no-file",
        action="store_true",
        help="Print to stdout instead of writing to file",
    )
    parser.add_argument(
        "--units",
        choices=["imperial", "metric"],
        default=DEFAULT_UNIT_SYSTEM,
        help="Unit system used for the logged summary",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=POLYLINE_PRECISION,
        help="Encoded polyline precision (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the export_route tool."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    session = RouteSession(args.units)
    try:
        session.load_file(args.input, precision=args.precision)
    except FileNotFoundError:
        LOGGER.error("Input file not found: %s", args.input)
        return 1
    except RouteError as exc:
        LOGGER.error("Failed to load route from %s: %s", args.input, exc)
        return 1

    _log_summary(session)

    formats = _resolve_formats(args.format)
    outputs = render_outputs(session, formats, args.precision)

    if args.no_file:
        for text in outputs.values():
            print(text)
        return 0

    base = _safe_filename(session.export_name())
    output_dir = Path(args.output_dir)
    for ext, text in outputs.items():
        output_path = _output_path(
            base, ext, output_dir, args.output_file, single=len(outputs) == 1
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        LOGGER.info("Output written to %s", output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
