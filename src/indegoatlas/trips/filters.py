from __future__ import annotations

import calendar
import re
from typing import Iterable, Optional

from indegoatlas.schemas.core import TripRecord
from indegoatlas.utils.timeparse import month_key, parse_timestamp


ALL_MONTHS = "all"
DEFAULT_TIMEZONE = "America/New_York"

_MONTH_TOKEN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class InvalidMonthError(ValueError):
    """A month token that is neither "all" nor "YYYY-MM"."""


def is_all_months(month: Optional[str]) -> bool:
    # None, "" and "all" all mean "no month filter".
    return not month or month == ALL_MONTHS


def validate_month_token(month: Optional[str]) -> str:
    """Return a normalized month token ("all" or "YYYY-MM"); raise InvalidMonthError otherwise."""

    if not month or month == ALL_MONTHS:
        return ALL_MONTHS
    if not _MONTH_TOKEN.match(month):
        raise InvalidMonthError(f"Invalid month filter: {month!r} (expected 'all' or 'YYYY-MM')")
    return month


def matches_month(trip: TripRecord, month: Optional[str], *, tz: str = DEFAULT_TIMEZONE) -> bool:
    if is_all_months(month):
        return True
    started = parse_timestamp(trip.start_time, tz)
    if started is None:
        return False
    return month_key(started, tz) == month


def filter_by_month(
    trips: Iterable[TripRecord], month: Optional[str], *, tz: str = DEFAULT_TIMEZONE
) -> list[TripRecord]:
    if is_all_months(month):
        return list(trips)
    return [t for t in trips if matches_month(t, month, tz=tz)]


def available_months(year: int = 2025) -> list[dict[str, str]]:
    months = [{"value": ALL_MONTHS, "label": "All Months"}]
    for i in range(1, 13):
        months.append({"value": f"{year:04d}-{i:02d}", "label": f"{calendar.month_name[i]} {year}"})
    return months


def search_trips(
    trips: Iterable[TripRecord],
    *,
    term: str = "",
    bike_type: str = "all",
    passholder_type: str = "all",
) -> list[TripRecord]:
    """
    Free-text and category filtering for the trip browser.

    `term` matches case-insensitively against start station, end station and bike id.
    """

    needle = term.lower()
    out = []
    for trip in trips:
        if needle and not (
            needle in trip.start_station.lower()
            or needle in trip.end_station.lower()
            or needle in trip.bike_id.lower()
        ):
            continue
        if bike_type != "all" and trip.bike_type != bike_type:
            continue
        if passholder_type != "all" and trip.passholder_type != passholder_type:
            continue
        out.append(trip)
    return out


def passholder_types(trips: Iterable[TripRecord]) -> list[str]:
    # dict keeps first-seen order
    return list(dict.fromkeys(t.passholder_type for t in trips))
