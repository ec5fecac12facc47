"""Host-side session holding the currently loaded route.

The pipeline itself is stateless; applications that display one route at a
time keep it (and the chosen unit system) in a :class:`RouteSession`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DEFAULT_UNIT_SYSTEM
from .errors import NoRouteLoaded, RouteParseError
from .exporters import export_basename, route_to_csv, route_to_gpx
from .models import CanonicalRoute
from .pipeline import build_route
from .units import UnitSystem, convert_distance, convert_speed

LOGGER = logging.getLogger(__name__)


def read_document(path: str | Path) -> Any:
    """Read and parse a JSON / GeoJSON file.

    Raises:
        RouteParseError: If the file is not valid JSON.
        FileNotFoundError: If the file does not exist.
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RouteParseError(f"Failed to parse JSON in {p}: {exc}") from exc


class RouteSession:
    """Holds one route at a time; a failed load keeps the previous route."""

    def __init__(self, unit_system: str | UnitSystem = DEFAULT_UNIT_SYSTEM) -> None:
        self.unit_system = UnitSystem.parse(unit_system)
        self._route: Optional[CanonicalRoute] = None

    @property
    def route(self) -> Optional[CanonicalRoute]:
        return self._route

    def require_route(self) -> CanonicalRoute:
        if self._route is None:
            raise NoRouteLoaded("No route has been loaded")
        return self._route

    def load(self, document: Any, *, now: Optional[float] = None, **kwargs: Any) -> CanonicalRoute:
        """Build a route from ``document`` and make it current."""

        route = build_route(document, now=now, **kwargs)
        self._route = route
        return route

    def load_file(self, path: str | Path, *, now: Optional[float] = None, **kwargs: Any) -> CanonicalRoute:
        LOGGER.info("Loading route from %s", path)
        return self.load(read_document(path), now=now, **kwargs)

    def set_units(self, unit_system: str | UnitSystem) -> None:
        self.unit_system = UnitSystem.parse(unit_system)

    def summary(self) -> Dict[str, Any]:
        """Route stats converted to the session's unit system."""

        route = self.require_route()
        stats = route.stats
        distance, distance_unit = convert_distance(stats.total_dist_m, self.unit_system)
        avg, speed_unit = convert_speed(stats.avg_mps, self.unit_system)
        max_speed, _ = convert_speed(stats.max_mps, self.unit_system)
        return {
            "label": route.meta.label,
            "direction": route.meta.direction,
            "points": route.point_count,
            "start_ms": route.times_ms[0],
            "end_ms": route.times_ms[-1],
            "distance": distance,
            "distance_unit": distance_unit,
            "duration_s": stats.duration_s,
            "avg_speed": avg,
            "max_speed": max_speed,
            "speed_unit": speed_unit,
            "sampling_s": stats.sampling_s,
        }

    def export_name(self) -> str:
        return export_basename(self.require_route())

    def to_csv(self) -> str:
        return route_to_csv(self.require_route())

    def to_gpx(self, name: Optional[str] = None) -> str:
        return route_to_gpx(self.require_route(), name)
