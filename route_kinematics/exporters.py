"""Serialize a canonical route to CSV and GPX text.

Both exporters are pure: they return strings and leave writing bytes to the
caller.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np
import pandas as pd

from .config import DEFAULT_ROUTE_NAME, GPX_CREATOR
from .models import CanonicalRoute
from .timestamps import iso_utc

CSV_COLUMNS = ["index", "lat", "lon", "timestamp", "cum_distance_m", "speed_mps"]

# Fixed decimals per numeric CSV column.
_CSV_DIGITS = {"lat": 6, "lon": 6, "cum_distance_m": 3, "speed_mps": 3}


def export_basename(route: CanonicalRoute, default: str = DEFAULT_ROUTE_NAME) -> str:
    """Display name for a route: its label, else ``default``."""

    return route.meta.label or default


def point_speed(route: CanonicalRoute, index: int) -> float:
    """Speed shown for point ``index``.

    Point i reports segment i; the last point reuses the last segment.
    """

    speeds = route.seg_speeds_mps
    if not speeds:
        return 0.0
    return speeds[min(index, len(speeds) - 1)]


def route_to_frame(route: CanonicalRoute) -> pd.DataFrame:
    """Per-point table with raw numeric values and ISO-8601 UTC timestamps."""

    return pd.DataFrame(
        {
            "index": range(route.point_count),
            "lat": [p.lat for p in route.points],
            "lon": [p.lon for p in route.points],
            "timestamp": [iso_utc(t) for t in route.times_ms],
            "cum_distance_m": list(route.cum_dist_m),
            "speed_mps": [point_speed(route, i) for i in range(route.point_count)],
        },
        columns=CSV_COLUMNS,
    )


def route_to_csv(route: CanonicalRoute) -> str:
    """Render the route as CSV with fixed decimal precision per column."""

    df = route_to_frame(route)
    for column, digits in _CSV_DIGITS.items():
        df[column] = df[column].map(lambda v, d=digits: f"{v + 0.0:.{d}f}")
    return df.to_csv(index=False, lineterminator="\n")


def route_to_gpx(
    route: CanonicalRoute,
    name: Optional[str] = None,
    *,
    creator: str = GPX_CREATOR,
) -> str:
    """Convert the route to a GPX 1.1 track with one segment.

    Args:
        route: Canonical route to export.
        name: Track name; defaults to :func:`export_basename`.
        creator: Value of the ``creator`` attribute.

    Returns:
        GPX XML string.
    """

    track_name = name if name is not None else export_basename(route)
    description = route.meta.direction

    gpx_lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<gpx version="1.1" creator="{_escape_xml(creator)}"',
        '     xmlns="http://www.topografix.com/GPX/1/1"',
        '     xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"',
        '     xsi:schemaLocation="http://www.topografix.com/GPX/1/1 '
        'http://www.topografix.com/GPX/1/1/gpx.xsd">',
        "  <metadata>",
        f"    <name>{_escape_xml(track_name)}</name>",
    ]

    if route.times_ms:
        gpx_lines.append(f"    <time>{iso_utc(route.times_ms[0])}</time>")

    gpx_lines.extend(
        [
            "  </metadata>",
            "  <trk>",
            f"    <name>{_escape_xml(track_name)}</name>",
        ]
    )

    if description:
        gpx_lines.append(f"    <desc>{_escape_xml(description)}</desc>")

    gpx_lines.append("    <trkseg>")
    for point, time_ms in zip(route.points, route.times_ms):
        gpx_lines.append(
            f'      <trkpt lat="{_decimal(point.lat)}" lon="{_decimal(point.lon)}">'
        )
        gpx_lines.append(f"        <time>{iso_utc(time_ms)}</time>")
        gpx_lines.append("      </trkpt>")

    gpx_lines.extend(
        [
            "    </trkseg>",
            "  </trk>",
            "</gpx>",
        ]
    )

    return "\n".join(gpx_lines)


def _escape_xml(text: str) -> str:
    """Escape special XML characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _decimal(value: float) -> str:
    """Plain decimal text (no exponent, no negative zero) for xsd:decimal."""
    return np.format_float_positional(value + 0.0, trim="-")
