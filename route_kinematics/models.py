"""Dataclasses describing route inputs and the canonical route."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


LatLon = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class TimedPoint:
    """A GeoPoint plus the per-sample time found in the input, if any.

    Only used during extraction; the canonical route carries times separately.
    """

    lat: float
    lon: float
    time_ms: Optional[float] = None

    @property
    def geo(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lon)


@dataclass(frozen=True, slots=True)
class RouteMeta:
    """Descriptive metadata; never used for computation except time bounds."""

    label: Optional[str] = None
    direction: Optional[str] = None
    start_ms: Optional[float] = None
    end_ms: Optional[float] = None


@dataclass(frozen=True, slots=True)
class RouteStats:
    """Aggregate route statistics in SI units."""

    total_dist_m: float
    duration_s: float
    avg_mps: float
    max_mps: float
    sampling_s: float


@dataclass(slots=True)
class Extraction:
    """Normalizer output before caller-side time fallbacks are applied.

    Attributes:
        points: Extracted samples in input order.
        meta: Resolved metadata.
        times_ms: Either one epoch-ms value per point or empty.
        time_source: ``samples``, ``samples_even``, ``timestamps`` or ``none``.
    """

    points: List[TimedPoint]
    meta: RouteMeta
    times_ms: List[int] = field(default_factory=list)
    time_source: str = "none"


@dataclass(frozen=True, slots=True)
class CanonicalRoute:
    """Normalized points, times and derived kinematics for one document.

    ``seg_speeds_mps`` and ``seg_bearings_deg`` have one entry per segment
    (``len(points) - 1``); the other sequences have one entry per point.
    ``time_source`` is ``even`` when times were filled by the pipeline.
    """

    points: Tuple[GeoPoint, ...]
    times_ms: Tuple[int, ...]
    cum_dist_m: Tuple[float, ...]
    seg_speeds_mps: Tuple[float, ...]
    seg_bearings_deg: Tuple[float, ...]
    stats: RouteStats
    meta: RouteMeta = field(default_factory=RouteMeta)
    time_source: str = "none"

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def latlon(self) -> List[LatLon]:
        return [(p.lat, p.lon) for p in self.points]
