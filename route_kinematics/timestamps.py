"""Timestamp parsing, formatting and gap-filling helpers.

Every timestamp in the pipeline is an epoch-millisecond number. Inputs may be
epoch seconds, epoch milliseconds or date-time strings; anything that cannot
be interpreted resolves to ``None`` and callers decide how to fill the gap.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
import math
import time
from typing import Any, Callable, List, Optional
import warnings

import pandas as pd

from .config import DEFAULT_SAMPLE_SPACING_MS, EPOCH_SECONDS_THRESHOLD

LOGGER = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SecondsHeuristic = Callable[[float], bool]


def looks_like_epoch_seconds(
    value: float, threshold: float = EPOCH_SECONDS_THRESHOLD
) -> bool:
    """Return True when a numeric timestamp should be read as epoch seconds.

    Values below ``threshold`` (1e12 by default) are assumed to be seconds.
    The rule misreads millisecond values before 2001-09-09 and second values
    after year 33658; swap it out via ``parse_scalar(seconds_heuristic=...)``
    when a deployment knows better.
    """

    return value < threshold


def parse_scalar(
    value: Any,
    *,
    seconds_heuristic: SecondsHeuristic = looks_like_epoch_seconds,
) -> Optional[float]:
    """Convert a number or date-time string to epoch milliseconds.

    Args:
        value: Epoch seconds, epoch milliseconds or a date-time string.
            Strings without an offset are taken as UTC.
        seconds_heuristic: Decides whether a number is in seconds.

    Returns:
        Epoch milliseconds, or ``None`` if the value cannot be interpreted.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        if not math.isfinite(number):
            return None
        return number * 1000.0 if seconds_heuristic(number) else number
    if isinstance(value, str):
        return _parse_datetime_text(value)
    return None


def _parse_datetime_text(text: str) -> Optional[float]:
    stripped = text.strip()
    if not stripped:
        return None
    try:
        with warnings.catch_warnings():
            # Format inference warnings are noise for single values.
            warnings.simplefilter("ignore", UserWarning)
            stamp = pd.to_datetime(stripped, utc=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        LOGGER.debug("Could not parse timestamp text %r", text)
        return None
    if pd.isna(stamp):
        LOGGER.debug("Could not parse timestamp text %r", text)
        return None
    return float(round(stamp.timestamp() * 1000.0))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards positive infinity."""

    return int(math.floor(value + 0.5))


def distribute_even(start_ms: float, end_ms: float, n: int) -> List[int]:
    """Spread ``n`` timestamps linearly from ``start_ms`` to ``end_ms``.

    ``n <= 0`` yields an empty list; ``n == 1`` yields ``[start_ms]`` and the
    end bound is ignored.
    """

    if n <= 0:
        return []
    if n == 1:
        return [round_half_up(start_ms)]
    step = (end_ms - start_ms) / (n - 1)
    return [round_half_up(start_ms + step * i) for i in range(n)]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


def fill_missing_times(
    n: int,
    start_ms: Optional[float],
    end_ms: Optional[float],
    *,
    now: Optional[float] = None,
    spacing_ms: int = DEFAULT_SAMPLE_SPACING_MS,
) -> List[int]:
    """Build times for a route whose input carried none.

    Start defaults to ``now`` (or the wall clock) and end to one sample
    every ``spacing_ms`` after start.
    """

    if start_ms is None:
        start_ms = now if now is not None else now_ms()
    if end_ms is None:
        end_ms = start_ms + max(n - 1, 0) * spacing_ms
    return distribute_even(start_ms, end_ms, n)


def iso_utc(epoch_ms: float) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    dt = _EPOCH + timedelta(milliseconds=round_half_up(epoch_ms))
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
