"""Distance, speed, bearing and summary statistics for a canonical route."""

from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray

from .config import EARTH_RADIUS_M
from .models import GeoPoint, RouteStats

FloatArray = NDArray[np.float64]


def haversine_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    """Great-circle distance in metres between two lat/lon points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    return 2.0 * radius_m * math.asin(min(1.0, math.sqrt(h)))


def _haversine_steps(points: Sequence[GeoPoint], radius_m: float) -> FloatArray:
    """Distances between consecutive points (length ``len(points) - 1``)."""

    lats = np.radians(np.asarray([p.lat for p in points], dtype=float))
    lons = np.radians(np.asarray([p.lon for p in points], dtype=float))
    d_phi = np.diff(lats)
    d_lambda = np.diff(lons)
    h = np.sin(d_phi / 2.0) ** 2 + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(d_lambda / 2.0) ** 2
    # Rounding can push sqrt(h) a hair above 1 for antipodal points.
    return 2.0 * radius_m * np.arcsin(np.minimum(1.0, np.sqrt(h)))


def cumulative_distances(
    points: Sequence[GeoPoint], radius_m: float = EARTH_RADIUS_M
) -> List[float]:
    """Return cumulative metres from the first point, starting at 0."""

    if not points:
        return []
    if len(points) == 1:
        return [0.0]
    steps = _haversine_steps(points, radius_m)
    cumulative = np.concatenate(([0.0], np.cumsum(steps)))
    return cumulative.tolist()


def segment_speeds(times_ms: Sequence[float], cum_dist_m: Sequence[float]) -> List[float]:
    """Speed (m/s) of each segment; segments with a time delta <= 0 are 0."""

    n = min(len(times_ms), len(cum_dist_m))
    if n < 2:
        return []
    times = np.asarray(times_ms[:n], dtype=float)
    dist = np.asarray(cum_dist_m[:n], dtype=float)
    dt_s = np.diff(times) / 1000.0
    dd_m = np.diff(dist)
    speeds = np.zeros(n - 1, dtype=float)
    np.divide(dd_m, dt_s, out=speeds, where=dt_s > 0)
    return speeds.tolist()


def bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing from ``a`` to ``b`` in degrees [0, 360)."""

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_lambda = math.radians(b.lon - a.lon)
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    deg = math.degrees(math.atan2(y, x))
    if deg < 0:
        deg += 360.0
    # -1e-15 + 360 rounds to 360.0
    return 0.0 if deg >= 360.0 else deg


def segment_bearings(points: Sequence[GeoPoint]) -> List[float]:
    """Bearing of each segment, aligned with :func:`segment_speeds`."""

    return [bearing(points[i], points[i + 1]) for i in range(len(points) - 1)]


def effective_sampling_interval(times_ms: Sequence[float]) -> float:
    """Median gap in seconds between consecutive samples (0 for < 2 samples)."""

    if len(times_ms) < 2:
        return 0.0
    deltas = sorted((times_ms[i + 1] - times_ms[i]) / 1000.0 for i in range(len(times_ms) - 1))
    mid = len(deltas) // 2
    if len(deltas) % 2:
        return float(deltas[mid])
    return (deltas[mid - 1] + deltas[mid]) / 2.0


def compute_stats(
    times_ms: Sequence[float],
    cum_dist_m: Sequence[float],
    speeds_mps: Sequence[float],
) -> RouteStats:
    """Aggregate totals; average and max fall back to 0 when undefined."""

    total = float(cum_dist_m[-1]) if cum_dist_m else 0.0
    duration = (times_ms[-1] - times_ms[0]) / 1000.0 if times_ms else 0.0
    return RouteStats(
        total_dist_m=total,
        duration_s=float(duration),
        avg_mps=total / duration if duration > 0 else 0.0,
        max_mps=float(max(speeds_mps)) if len(speeds_mps) else 0.0,
        sampling_s=effective_sampling_interval(times_ms),
    )


def nearest_point_index(points: Sequence[GeoPoint], lat: float, lon: float) -> int:
    """Index of the sample closest to (lat, lon), or -1 for an empty route."""

    best = -1
    best_d = math.inf
    for i, p in enumerate(points):
        d = haversine_m(lat, lon, p.lat, p.lon)
        if d < best_d:
            best, best_d = i, d
    return best
