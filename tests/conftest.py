"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable route documents shared by
the normalizer, pipeline, exporter and CLI tests.
"""
from __future__ import annotations

import os
import sys
from typing import Any, Dict

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


# 2023-11-14T22:13:20Z
BASE_S = 1_700_000_000
BASE_MS = BASE_S * 1000

# Google's reference polyline: (38.5, -120.2), (40.7, -120.95), (43.252, -126.453)
REFERENCE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
REFERENCE_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]


# --- Factory helpers -------------------------------------------------
def make_line_feature(**properties: Any) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "properties": dict(properties),
        "geometry": {
            "type": "LineString",
            "coordinates": [
                [-122.42, 37.77],
                [-122.41, 37.78],
                [-122.40, 37.79],
            ],
        },
    }


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def fixed_now() -> int:
    return BASE_MS


@pytest.fixture
def timed_feature() -> Dict[str, Any]:
    """Three-point feature with a matching ``timestamps`` array (10 s apart)."""

    return make_line_feature(
        route_label="Morning Loop",
        direction="Northbound",
        timestamps=[
            "2023-11-14T22:13:20Z",
            "2023-11-14T22:13:30Z",
            "2023-11-14T22:13:40Z",
        ],
    )


@pytest.fixture
def polyline_feature() -> Dict[str, Any]:
    return {
        "type": "Feature",
        "properties": {
            "name": "Reference",
            "polyline": REFERENCE_POLYLINE,
            "start_time": BASE_S,
            "end_time": BASE_S + 600,
        },
        "geometry": None,
    }
