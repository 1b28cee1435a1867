from __future__ import annotations

from functools import reduce
from typing import Iterable

from indegoatlas.schemas.core import Station, SystemStats


def summarize_stations(stations: Iterable[Station]) -> SystemStats:
    """
    Fold a station snapshot into system-wide totals.

    Each station contributes independently, so the result does not depend on
    list order and partial summaries can be combined with `+`.
    """

    return reduce(lambda acc, s: acc + SystemStats.from_station(s), stations, SystemStats())


def search_stations(stations: Iterable[Station], term: str) -> list[Station]:
    needle = term.lower()
    if not needle:
        return list(stations)
    return [s for s in stations if needle in s.name.lower() or needle in s.address_street.lower()]
