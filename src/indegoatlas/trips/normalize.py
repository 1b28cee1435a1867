from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

from indegoatlas.schemas.core import TripRecord


TRIP_COLUMNS = (
    "trip_id",
    "duration",
    "start_time",
    "end_time",
    "start_station",
    "start_lat",
    "start_lon",
    "end_station",
    "end_lat",
    "end_lon",
    "bike_id",
    "plan_duration",
    "trip_route_category",
    "passholder_type",
    "bike_type",
)

NUMERIC_COLUMNS = frozenset(
    {"duration", "start_lat", "start_lon", "end_lat", "end_lon", "plan_duration"}
)


# Leading decimal number, optional exponent; anything after it is ignored ("12 min" -> 12).
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_float(value: Any) -> float:
    """
    Parse a numeric CSV field, defaulting to 0.0.

    Only the leading number is read, so unit suffixes are tolerated. Bad,
    NaN or infinite values never raise: every row must still count toward
    trip totals.
    """

    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        out = float(value)
    else:
        match = _NUMERIC_PREFIX.match(str(value).strip())
        if match is None:
            return 0.0
        out = float(match.group(0))
    if not math.isfinite(out):
        return 0.0
    return out


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def normalize_trip_record(raw: Mapping[str, Any]) -> TripRecord:
    values: dict[str, Any] = {}
    for col in TRIP_COLUMNS:
        value = raw.get(col)
        if col in NUMERIC_COLUMNS:
            values[col] = coerce_float(value)
        else:
            values[col] = "" if _is_missing(value) else str(value)
    return TripRecord(**values)


def normalize_trip_records(rows: Iterable[Mapping[str, Any]]) -> list[TripRecord]:
    return [normalize_trip_record(row) for row in rows]
