"""Encoded polyline helpers.

Decoding is a fold over the string's 5-bit groups: each completed group is a
zig-zag delta, and consecutive (lat, lon) deltas advance the running totals.
Truncated or corrupt input is rejected with :class:`MalformedEncoding` instead
of being decoded into a shorter (or garbage) route.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, List, Sequence

from polyline import encode as polyline_encode

from .config import POLYLINE_PRECISION
from .errors import MalformedEncoding
from .models import LatLon

LOGGER = logging.getLogger(__name__)

_CHAR_OFFSET = 63
_CONTINUATION_BIT = 0x20
_PAYLOAD_MASK = 0x1F
_MAX_CHAR_VALUE = 0x3F


@dataclass(frozen=True, slots=True)
class _GroupState:
    """Accumulator for one variable-length integer."""

    shift: int = 0
    result: int = 0

    def push(self, chunk: int) -> "_GroupState":
        return _GroupState(
            shift=self.shift + 5,
            result=self.result | ((chunk & _PAYLOAD_MASK) << self.shift),
        )

    @property
    def in_progress(self) -> bool:
        return self.shift > 0


@dataclass(frozen=True, slots=True)
class _RunningTotals:
    """Integer lat/lon totals reached after applying each delta pair."""

    lat: int = 0
    lon: int = 0

    def advance(self, lat_delta: int, lon_delta: int) -> "_RunningTotals":
        return _RunningTotals(lat=self.lat + lat_delta, lon=self.lon + lon_delta)

    def scaled(self, factor: float) -> LatLon:
        return (self.lat / factor, self.lon / factor)


def _zigzag(value: int) -> int:
    """Undo zig-zag encoding: odd values are negative."""

    return ~(value >> 1) if value & 1 else value >> 1


def _split_groups(encoded: str) -> List[int]:
    """Return the signed deltas of ``encoded``, alternating lat/lon.

    Raises:
        MalformedEncoding: On characters outside ``?``..``~``, a trailing
            unterminated group, or a latitude delta with no longitude.
    """

    deltas: List[int] = []
    state = _GroupState()
    for position, char in enumerate(encoded):
        chunk = ord(char) - _CHAR_OFFSET
        if chunk < 0 or chunk > _MAX_CHAR_VALUE:
            raise MalformedEncoding(
                f"Invalid polyline character {char!r} at position {position}"
            )
        state = state.push(chunk)
        if chunk < _CONTINUATION_BIT:
            deltas.append(_zigzag(state.result))
            state = _GroupState()
    if state.in_progress:
        raise MalformedEncoding("Polyline ends inside an unterminated value")
    if len(deltas) % 2:
        raise MalformedEncoding("Polyline has a latitude without a longitude")
    return deltas


def decode(encoded: str, precision: int = POLYLINE_PRECISION) -> List[LatLon]:
    """Decode an encoded polyline string into a list of (lat, lon) tuples."""

    if not encoded:
        return []
    deltas = _split_groups(encoded)
    factor = float(10**precision)
    totals = _RunningTotals()
    points: List[LatLon] = []
    for lat_delta, lon_delta in zip(deltas[0::2], deltas[1::2]):
        totals = totals.advance(lat_delta, lon_delta)
        points.append(totals.scaled(factor))
    LOGGER.debug("Decoded polyline into %d points (precision=%d)", len(points), precision)
    return points


def encode(
    points: Iterable[Sequence[float]], precision: int = POLYLINE_PRECISION
) -> str:
    """Encode (lat, lon) pairs into a polyline string."""

    coords = [(float(pt[0]), float(pt[1])) for pt in points]
    if not coords:
        return ""
    return polyline_encode(coords, precision)
