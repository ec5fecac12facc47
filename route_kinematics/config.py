"""Central configuration for the route kinematics tool.

All values are constants imported by the rest of the package. Environment
variables (optionally via a local `.env`) only change defaults; every core
function also accepts the value as an explicit argument.
"""

from __future__ import annotations

import os
from typing import Callable, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})

# Values from a .env in the working directory (or a parent) never override
# variables already set in the environment.
load_dotenv()


def _env(key: str, default: T, convert: Callable[[str], T]) -> T:
    """Read ``key`` through ``convert``; unset or unconvertible gives ``default``."""

    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return convert(raw)
    except ValueError:
        return default


def _to_bool(raw: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------
# Decimal precision of encoded polylines (5 for Google, 6 for OSRM).
POLYLINE_PRECISION = _env("ROUTE_POLYLINE_PRECISION", 5, int)

# Numeric timestamps below this value are treated as epoch seconds, anything
# else as epoch milliseconds. Misreads ms values before 2001-09-09.
EPOCH_SECONDS_THRESHOLD = _env("ROUTE_EPOCH_SECONDS_THRESHOLD", 1e12, float)

# Spacing used when a route has no usable end time.
DEFAULT_SAMPLE_SPACING_MS = _env("ROUTE_DEFAULT_SAMPLE_SPACING_MS", 1000, int)


# ---------------------------------------------------------------------------
# Kinematics
# ---------------------------------------------------------------------------
# Mean Earth radius (metres) used by the haversine formula.
EARTH_RADIUS_M = 6_371_000.0


# ---------------------------------------------------------------------------
# Export / presentation
# ---------------------------------------------------------------------------
# Value written to the GPX ``creator`` attribute.
GPX_CREATOR = os.getenv("ROUTE_GPX_CREATOR", "route_kinematics")

# Display name used when a route has no label.
DEFAULT_ROUTE_NAME = os.getenv("ROUTE_DEFAULT_NAME", "route")

# "imperial" (mi / ft) or "metric" (km / m).
DEFAULT_UNIT_SYSTEM = os.getenv("ROUTE_UNIT_SYSTEM", "imperial")

# Directory (absolute or relative) where the CLI writes exported files.
OUTPUT_DIR = os.getenv("ROUTE_OUTPUT_DIR", "route_exports")

# Append _YYYYMMDD_HHMMSS to exported file names when True.
OUTPUT_FILE_TIMESTAMP_ENABLED = _env("ROUTE_OUTPUT_TIMESTAMP_ENABLED", False, _to_bool)
