"""Locate route geometry, metadata and timestamps in loosely-structured JSON.

Accepted inputs are GeoJSON ``Feature`` / ``FeatureCollection`` objects, bare
``LineString`` / ``MultiLineString`` geometries, and ad-hoc objects carrying
``polyline``, ``geometry``, ``timestamps`` and metadata fields at the top level
or under ``properties``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .config import POLYLINE_PRECISION
from .errors import InvalidTimestampArray, NoCoordinatesFound
from .models import Extraction, RouteMeta, TimedPoint
from .polyline_codec import decode as decode_polyline
from .timestamps import distribute_even, parse_scalar, round_half_up

LOGGER = logging.getLogger(__name__)

TimeParser = Callable[[Any], Optional[float]]

_GEOMETRY_TYPES = {"LineString", "MultiLineString"}


class DocumentShape(str, Enum):
    """Top-level shape of an input document."""

    FEATURE = "feature"
    FEATURE_COLLECTION = "feature_collection"
    GEOMETRY = "geometry"
    FEATURE_LIKE = "feature_like"
    BARE = "bare"


@dataclass(frozen=True, slots=True)
class ShapedDocument:
    """A document together with the feature selected from it."""

    shape: DocumentShape
    root: Mapping[str, Any] = field(default_factory=dict)
    feature: Optional[Mapping[str, Any]] = None

    @property
    def properties(self) -> Mapping[str, Any]:
        if self.feature is not None:
            props = self.feature.get("properties")
            if isinstance(props, Mapping):
                return props
        props = self.root.get("properties")
        return props if isinstance(props, Mapping) else {}

    @property
    def geometry(self) -> Any:
        if self.feature is not None and self.feature.get("geometry") is not None:
            return self.feature.get("geometry")
        return self.root.get("geometry")

    def lookup(self, prop_keys: Tuple[str, ...], root_keys: Tuple[str, ...] = ()) -> Any:
        """Return the first non-null value among property keys, then root keys."""

        props = self.properties
        for key in prop_keys:
            value = props.get(key)
            if value is not None:
                return value
        for key in root_keys:
            value = self.root.get(key)
            if value is not None:
                return value
        return None


def classify_document(document: Any) -> ShapedDocument:
    """Decide which input shape ``document`` has and select its feature."""

    if not isinstance(document, Mapping):
        return ShapedDocument(DocumentShape.BARE)
    doc_type = document.get("type")
    if doc_type == "Feature":
        return ShapedDocument(DocumentShape.FEATURE, document, document)
    if doc_type == "FeatureCollection":
        features = document.get("features")
        first = features[0] if isinstance(features, list) and features else None
        return ShapedDocument(
            DocumentShape.FEATURE_COLLECTION,
            document,
            first if isinstance(first, Mapping) else None,
        )
    if doc_type in _GEOMETRY_TYPES and "coordinates" in document:
        return ShapedDocument(DocumentShape.GEOMETRY, document, {"geometry": document})
    if document.get("geometry") is not None or document.get("properties") is not None:
        return ShapedDocument(DocumentShape.FEATURE_LIKE, document, document)
    return ShapedDocument(DocumentShape.BARE, document)


def extract_meta(shaped: ShapedDocument, parse_time: TimeParser = parse_scalar) -> RouteMeta:
    """Resolve label, direction and start/end bounds by precedence."""

    label = shaped.lookup(("route_label", "label", "name"), ("route_label", "label"))
    direction = shaped.lookup(("direction",), ("direction",))
    start_raw = shaped.lookup(("start_time",), ("start_time",))
    end_raw = shaped.lookup(("end_time",), ("end_time",))
    return RouteMeta(
        label=_as_text(label),
        direction=_as_text(direction),
        start_ms=parse_time(start_raw) if start_raw is not None else None,
        end_ms=parse_time(end_raw) if end_raw is not None else None,
    )


def extract_geometry(
    shaped: ShapedDocument,
    *,
    precision: int = POLYLINE_PRECISION,
    parse_time: TimeParser = parse_scalar,
) -> List[TimedPoint]:
    """Return route samples from the polyline or the geometry coordinates.

    Raises:
        MalformedEncoding: If a polyline is present but corrupt.
    """

    encoded = shaped.lookup(("polyline",), ("polyline",))
    if isinstance(encoded, str) and encoded:
        points = [TimedPoint(lat, lon) for lat, lon in decode_polyline(encoded, precision)]
        if points:
            return points

    geometry = shaped.geometry
    if isinstance(geometry, Mapping):
        geom_type = geometry.get("type")
        coords = geometry.get("coordinates")
        if geom_type == "LineString" and isinstance(coords, list):
            return _timed_points(coords, parse_time)
        if geom_type == "MultiLineString" and isinstance(coords, list):
            # Only the first line is used; later lines are dropped.
            first = coords[0] if coords else []
            if len(coords) > 1:
                LOGGER.info("MultiLineString has %d lines; using the first", len(coords))
            return _timed_points(first, parse_time)
    elif isinstance(geometry, list):
        return _timed_points(geometry, parse_time)
    return []


def extract(
    document: Any,
    *,
    precision: int = POLYLINE_PRECISION,
    parse_time: TimeParser = parse_scalar,
) -> Extraction:
    """Extract points, metadata and (when available) timestamps.

    ``times_ms`` is left empty when the document has no usable times; the
    caller then fills it from ``meta.start_ms`` / ``meta.end_ms``.

    Raises:
        NoCoordinatesFound: If no geometry could be located.
        MalformedEncoding: If the polyline is corrupt.
    """

    shaped = classify_document(document)
    meta = extract_meta(shaped, parse_time)
    points = extract_geometry(shaped, precision=precision, parse_time=parse_time)
    if not points:
        raise NoCoordinatesFound(
            "No coordinates found. Expected properties.polyline or geometry.coordinates"
        )
    times_ms, source = _resolve_times(points, meta, shaped, parse_time)
    LOGGER.debug(
        "Extracted %d points from %s document (times: %s)",
        len(points),
        shaped.shape.value,
        source,
    )
    return Extraction(points=points, meta=meta, times_ms=times_ms, time_source=source)


def _resolve_times(
    points: List[TimedPoint],
    meta: RouteMeta,
    shaped: ShapedDocument,
    parse_time: TimeParser,
) -> Tuple[List[int], str]:
    n = len(points)
    known = [pt.time_ms for pt in points if pt.time_ms is not None]
    if known:
        if len(known) == n:
            return [round_half_up(t) for t in known], "samples"
        start = meta.start_ms if meta.start_ms is not None else known[0]
        end = meta.end_ms if meta.end_ms is not None else known[-1]
        LOGGER.debug("%d of %d samples lack a time; distributing evenly", n - len(known), n)
        return distribute_even(start, end, n), "samples_even"

    raw = shaped.lookup(("timestamps",), ("timestamps",))
    if raw is not None:
        try:
            return _parse_timestamp_array(raw, n, parse_time), "timestamps"
        except InvalidTimestampArray as exc:
            LOGGER.info("Ignoring timestamps array: %s", exc)
    return [], "none"


def _parse_timestamp_array(raw: Any, n: int, parse_time: TimeParser) -> List[int]:
    if not isinstance(raw, list):
        raise InvalidTimestampArray(f"expected a list, got {type(raw).__name__}")
    if len(raw) != n:
        raise InvalidTimestampArray(f"{len(raw)} timestamps for {n} points")
    parsed: List[int] = []
    for index, value in enumerate(raw):
        ms = parse_time(value)
        if ms is None:
            raise InvalidTimestampArray(f"unparseable entry {value!r} at index {index}")
        parsed.append(round_half_up(ms))
    return parsed


def _timed_points(coords: Any, parse_time: TimeParser) -> List[TimedPoint]:
    """Map ``[lon, lat, time?]`` entries to samples (GeoJSON axis order)."""

    if not isinstance(coords, list):
        return []
    points: List[TimedPoint] = []
    skipped = 0
    for coord in coords:
        if not isinstance(coord, (list, tuple)) or len(coord) < 2:
            skipped += 1
            continue
        lon, lat = coord[0], coord[1]
        if not (_is_finite_number(lat) and _is_finite_number(lon)):
            skipped += 1
            continue
        time_ms = parse_time(coord[2]) if len(coord) > 2 else None
        points.append(TimedPoint(lat=float(lat), lon=float(lon), time_ms=time_ms))
    if skipped:
        LOGGER.debug("Skipped %d malformed coordinates", skipped)
    return points


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return None
    return str(value)


__all__ = [
    "DocumentShape",
    "ShapedDocument",
    "classify_document",
    "extract",
    "extract_geometry",
    "extract_meta",
]
