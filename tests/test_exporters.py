"""Tests for CSV and GPX export."""

from __future__ import annotations

import re
from typing import Any, Dict
import xml.etree.ElementTree as ET

import pytest

from route_kinematics.exporters import (
    CSV_COLUMNS,
    export_basename,
    point_speed,
    route_to_csv,
    route_to_gpx,
)
from route_kinematics.pipeline import build_route

from conftest import BASE_MS, make_line_feature

GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}
ROW_PATTERN = re.compile(
    r"^\d+,-?\d+\.\d{6},-?\d+\.\d{6},"
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z,"
    r"\d+\.\d{3},\d+\.\d{3}$"
)


def test_csv_has_header_and_one_row_per_point(timed_feature: Dict[str, Any]) -> None:
    text = route_to_csv(build_route(timed_feature))
    lines = text.splitlines()
    assert len(lines) == 4
    assert lines[0] == ",".join(CSV_COLUMNS)
    assert lines[0] == "index,lat,lon,timestamp,cum_distance_m,speed_mps"
    for line in lines[1:]:
        assert ROW_PATTERN.match(line), line


def test_csv_row_values(timed_feature: Dict[str, Any]) -> None:
    route = build_route(timed_feature)
    rows = [line.split(",") for line in route_to_csv(route).splitlines()[1:]]
    assert rows[0][:4] == ["0", "37.770000", "-122.420000", "2023-11-14T22:13:20.000Z"]
    assert rows[0][4] == "0.000"
    assert rows[2][3] == "2023-11-14T22:13:40.000Z"
    assert float(rows[2][4]) == pytest.approx(route.cum_dist_m[2], abs=5e-4)


def test_csv_last_row_reuses_last_segment_speed(timed_feature: Dict[str, Any]) -> None:
    route = build_route(timed_feature)
    rows = [line.split(",") for line in route_to_csv(route).splitlines()[1:]]
    assert rows[-1][5] == rows[-2][5]
    assert rows[-1][5] == f"{route.seg_speeds_mps[-1]:.3f}"


def test_csv_single_point_route_has_zero_speed() -> None:
    route = build_route({"geometry": [[1.0, 2.0]]}, now=BASE_MS)
    lines = route_to_csv(route).splitlines()
    assert len(lines) == 2
    assert lines[1].endswith(",0.000,0.000")


def test_csv_never_writes_negative_zero() -> None:
    route = build_route({"geometry": [[-0.0, -0.0], [-0.0000001, 0.001]]}, now=BASE_MS)
    rows = [line.split(",") for line in route_to_csv(route).splitlines()[1:]]
    assert rows[0][1:3] == ["0.000000", "0.000000"]
    assert rows[1][1:3] == ["0.001000", "-0.000000"]


def test_point_speed_clamps_index(timed_feature: Dict[str, Any]) -> None:
    route = build_route(timed_feature)
    assert point_speed(route, 0) == route.seg_speeds_mps[0]
    assert point_speed(route, 2) == route.seg_speeds_mps[1]
    assert point_speed(route, 99) == route.seg_speeds_mps[1]


def test_gpx_structure(timed_feature: Dict[str, Any]) -> None:
    route = build_route(timed_feature)
    text = route_to_gpx(route)
    root = ET.fromstring(text.encode("utf-8"))
    assert root.tag == "{http://www.topografix.com/GPX/1/1}gpx"
    assert root.get("version") == "1.1"
    assert root.get("creator")
    schema = root.get("{http://www.w3.org/2001/XMLSchema-instance}schemaLocation")
    assert schema == (
        "http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd"
    )
    tracks = root.findall("gpx:trk", GPX_NS)
    assert len(tracks) == 1
    assert tracks[0].findtext("gpx:name", namespaces=GPX_NS) == "Morning Loop"
    assert tracks[0].findtext("gpx:desc", namespaces=GPX_NS) == "Northbound"
    segments = tracks[0].findall("gpx:trkseg", GPX_NS)
    assert len(segments) == 1
    trkpts = segments[0].findall("gpx:trkpt", GPX_NS)
    assert len(trkpts) == 3
    assert float(trkpts[0].get("lat")) == 37.77
    assert float(trkpts[0].get("lon")) == -122.42
    assert trkpts[1].findtext("gpx:time", namespaces=GPX_NS) == "2023-11-14T22:13:30.000Z"


def test_gpx_escapes_name_and_description() -> None:
    doc = make_line_feature(label='A & B <"fast">', direction="N > S")
    route = build_route(doc, now=BASE_MS)
    text = route_to_gpx(route)
    assert "A &amp; B &lt;&quot;fast&quot;&gt;" in text
    assert "N &gt; S" in text
    root = ET.fromstring(text.encode("utf-8"))
    assert root.find("gpx:trk/gpx:name", GPX_NS).text == 'A & B <"fast">'


def test_gpx_omits_description_without_direction() -> None:
    route = build_route(make_line_feature(), now=BASE_MS)
    text = route_to_gpx(route, "custom")
    assert "<desc>" not in text
    root = ET.fromstring(text.encode("utf-8"))
    assert root.find("gpx:trk/gpx:name", GPX_NS).text == "custom"


def test_gpx_coordinates_near_zero_are_plain_decimals() -> None:
    doc = {"type": "LineString", "coordinates": [[0.00005, 0.00001], [-0.0, 0.0]]}
    text = route_to_gpx(build_route(doc, now=BASE_MS))
    assert '<trkpt lat="0.00001" lon="0.00005">' in text
    assert '<trkpt lat="0" lon="0">' in text
    assert "e-0" not in text


def test_export_basename_defaults_to_route() -> None:
    route = build_route(make_line_feature(), now=BASE_MS)
    assert export_basename(route) == "route"
    labelled = build_route(make_line_feature(label="Commute"), now=BASE_MS)
    assert export_basename(labelled) == "Commute"
