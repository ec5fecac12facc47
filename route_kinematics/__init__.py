"""Route normalization and kinematics package."""

from .errors import (
    MalformedEncoding,
    NoCoordinatesFound,
    NoRouteLoaded,
    RouteError,
    RouteParseError,
)
from .models import CanonicalRoute, GeoPoint, RouteMeta, RouteStats
from .pipeline import build_route
from .session import RouteSession

__all__ = [
    "build_route",
    "CanonicalRoute",
    "GeoPoint",
    "RouteMeta",
    "RouteStats",
    "RouteSession",
    "RouteError",
    "RouteParseError",
    "NoCoordinatesFound",
    "MalformedEncoding",
    "NoRouteLoaded",
]
