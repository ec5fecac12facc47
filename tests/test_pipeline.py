"""End-to-end tests for building a canonical route."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from route_kinematics.errors import NoCoordinatesFound
from route_kinematics.normalizer import extract
from route_kinematics.pipeline import build_route, route_from_extraction

from conftest import BASE_MS, BASE_S, make_line_feature


def test_bare_linestring_gets_one_second_spacing(fixed_now: int) -> None:
    doc = {"type": "LineString", "coordinates": [[-122.42, 37.77], [-122.41, 37.78]]}
    route = build_route(doc, now=fixed_now)
    assert route.point_count == 2
    assert route.times_ms == (fixed_now, fixed_now + 1000)
    assert route.time_source == "even"
    assert route.stats.duration_s == 1.0
    assert route.stats.sampling_s == 1.0


def test_mismatched_timestamps_fall_back_to_bounds() -> None:
    doc = make_line_feature(
        timestamps=[BASE_S],
        start_time=BASE_S,
        end_time=BASE_S + 20,
    )
    route = build_route(doc)
    assert route.times_ms == (BASE_MS, BASE_MS + 10_000, BASE_MS + 20_000)


def test_start_only_uses_default_spacing() -> None:
    route = build_route(make_line_feature(start_time=BASE_S))
    assert route.times_ms == (BASE_MS, BASE_MS + 1000, BASE_MS + 2000)


def test_end_only_starts_at_now(fixed_now: int) -> None:
    route = build_route(make_line_feature(end_time=BASE_S + 4), now=fixed_now)
    assert route.times_ms == (fixed_now, fixed_now + 2000, fixed_now + 4000)


def test_route_arrays_are_aligned(timed_feature: Dict[str, Any]) -> None:
    route = build_route(timed_feature)
    n = route.point_count
    assert len(route.times_ms) == n
    assert len(route.cum_dist_m) == n
    assert len(route.seg_speeds_mps) == n - 1
    assert len(route.seg_bearings_deg) == n - 1
    assert route.cum_dist_m[0] == 0.0


def test_route_stats_are_consistent(timed_feature: Dict[str, Any]) -> None:
    route = build_route(timed_feature)
    stats = route.stats
    assert stats.total_dist_m == route.cum_dist_m[-1]
    assert stats.duration_s == 20.0
    assert stats.avg_mps == pytest.approx(stats.total_dist_m / 20.0)
    assert stats.max_mps == max(route.seg_speeds_mps)
    assert stats.sampling_s == 10.0
    assert route.meta.label == "Morning Loop"


def test_non_monotonic_times_yield_zero_speed() -> None:
    doc = {
        "type": "LineString",
        "coordinates": [
            [0.0, 0.0, BASE_S],
            [0.0, 0.001, BASE_S + 10],
            [0.0, 0.002, BASE_S + 5],
            [0.0, 0.003, BASE_S + 5],
        ],
    }
    route = build_route(doc)
    assert route.seg_speeds_mps[0] > 0
    assert route.seg_speeds_mps[1:] == (0.0, 0.0)
    assert route.times_ms == (BASE_MS, BASE_MS + 10_000, BASE_MS + 5000, BASE_MS + 5000)


def test_single_point_route() -> None:
    route = build_route({"geometry": [[1.0, 2.0]]}, now=BASE_MS)
    assert route.point_count == 1
    assert route.times_ms == (BASE_MS,)
    assert route.cum_dist_m == (0.0,)
    assert route.seg_speeds_mps == ()
    assert route.stats.max_mps == 0.0
    assert route.stats.avg_mps == 0.0


def test_route_from_extraction_keeps_extracted_times(timed_feature: Dict[str, Any]) -> None:
    extraction = extract(timed_feature)
    route = route_from_extraction(extraction, now=0)
    assert list(route.times_ms) == extraction.times_ms
    assert route.time_source == "timestamps"


def test_build_route_raises_for_missing_geometry() -> None:
    with pytest.raises(NoCoordinatesFound):
        build_route({"properties": {"label": "empty"}})
