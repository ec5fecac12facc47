"""Central error types used across the route pipeline."""

from __future__ import annotations


class RouteError(RuntimeError):
    """Base error for route loading and export failures."""


class RouteParseError(RouteError):
    """Raised when a route file does not contain valid JSON."""


class NoCoordinatesFound(RouteError):
    """Raised when a document has no polyline or recognisable geometry."""


class MalformedEncoding(RouteError, ValueError):
    """Raised when an encoded polyline is truncated or contains invalid characters."""


class InvalidTimestampArray(RouteError):
    """Raised when a ``timestamps`` array cannot be used for the route.

    The normalizer absorbs this error and falls back to even distribution.
    """


class NoRouteLoaded(RouteError):
    """Raised when an export is requested before a route has been loaded."""


__all__ = [
    "RouteError",
    "RouteParseError",
    "NoCoordinatesFound",
    "MalformedEncoding",
    "InvalidTimestampArray",
    "NoRouteLoaded",
]
