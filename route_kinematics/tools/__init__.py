"""Command line entry points for route export."""

from .export_route import route_to_json

__all__ = ["route_to_json"]
