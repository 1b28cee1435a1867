from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Mapping, Optional

from indegoatlas.ingestion.http_base import SourceUnavailableError
from indegoatlas.schemas.core import Station


logger = logging.getLogger(__name__)

StationMapping = dict[str, str]

DEFAULT_TTL_MS = 5 * 60 * 1000


def _now_ms() -> float:
    return time.time() * 1000.0


def build_station_mapping(stations: Iterable[Station]) -> StationMapping:
    return {s.station_id: s.name for s in stations}


def station_name(station_id: str, mapping: Mapping[str, str]) -> str:
    # Unknown (or blank-named) stations fall back to the raw id.
    return mapping.get(station_id) or station_id


class StationNameCache:
    """
    Process-wide id -> name lookup, refreshed from the station feed at most every `ttl_ms`.

    A failed refresh returns an empty mapping and leaves both the cached mapping
    and the refresh timestamp untouched, so the very next call tries again.
    No lock: concurrent refreshes only duplicate work.
    """

    def __init__(
        self,
        fetch_stations: Callable[[], list[Station]],
        *,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self._fetch_stations = fetch_stations
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._mapping: Optional[StationMapping] = None
        self._refreshed_at = 0.0

    @property
    def refreshed_at(self) -> float:
        return self._refreshed_at

    def is_fresh(self, now_ms: float) -> bool:
        return self._mapping is not None and (now_ms - self._refreshed_at) < self._ttl_ms

    def get_mapping(self, now_ms: Optional[float] = None) -> StationMapping:
        now = self._clock() if now_ms is None else now_ms
        if self.is_fresh(now):
            return self._mapping  # type: ignore[return-value]

        try:
            stations = self._fetch_stations()
        except SourceUnavailableError:
            logger.exception("Station mapping refresh failed; falling back to raw station ids")
            return {}

        mapping = build_station_mapping(stations)
        self._mapping = mapping
        self._refreshed_at = now
        logger.info("Refreshed station mapping (%s stations)", len(mapping))
        return mapping
