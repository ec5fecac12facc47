"""Build a canonical route from a parsed JSON document."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .config import DEFAULT_SAMPLE_SPACING_MS, POLYLINE_PRECISION
from .kinematics import (
    compute_stats,
    cumulative_distances,
    segment_bearings,
    segment_speeds,
)
from .models import CanonicalRoute, Extraction
from .normalizer import TimeParser, extract
from .timestamps import fill_missing_times, parse_scalar

LOGGER = logging.getLogger(__name__)


def route_from_extraction(
    extraction: Extraction,
    *,
    now: Optional[float] = None,
    spacing_ms: int = DEFAULT_SAMPLE_SPACING_MS,
) -> CanonicalRoute:
    """Fill missing times and derive kinematics for an extraction.

    When the document carried no usable times, samples are spread evenly
    from ``meta.start_ms`` (default ``now``) to ``meta.end_ms`` (default one
    sample per ``spacing_ms``).
    """

    points = [pt.geo for pt in extraction.points]
    meta = extraction.meta
    times_ms = list(extraction.times_ms)
    time_source = extraction.time_source
    if not times_ms:
        times_ms = fill_missing_times(
            len(points), meta.start_ms, meta.end_ms, now=now, spacing_ms=spacing_ms
        )
        time_source = "even"

    cum_dist = cumulative_distances(points)
    speeds = segment_speeds(times_ms, cum_dist)
    stats = compute_stats(times_ms, cum_dist, speeds)
    return CanonicalRoute(
        points=tuple(points),
        times_ms=tuple(times_ms),
        cum_dist_m=tuple(cum_dist),
        seg_speeds_mps=tuple(speeds),
        seg_bearings_deg=tuple(segment_bearings(points)),
        stats=stats,
        meta=meta,
        time_source=time_source,
    )


def build_route(
    document: Any,
    *,
    now: Optional[float] = None,
    precision: int = POLYLINE_PRECISION,
    parse_time: TimeParser = parse_scalar,
    spacing_ms: int = DEFAULT_SAMPLE_SPACING_MS,
) -> CanonicalRoute:
    """Run extraction, time fallback and kinematics for one document.

    Raises:
        NoCoordinatesFound: If the document has no usable geometry.
        MalformedEncoding: If its polyline is corrupt.
    """

    extraction = extract(
        document, precision=precision, parse_time=parse_time
    )
    route = route_from_extraction(extraction, now=now, spacing_ms=spacing_ms)
    LOGGER.info(
        "Built route '%s': %d points, %.1f m over %.1f s (times: %s)",
        route.meta.label or "-",
        route.point_count,
        route.stats.total_dist_m,
        route.stats.duration_s,
        route.time_source,
    )
    return route
