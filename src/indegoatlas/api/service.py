from __future__ import annotations

import logging
from typing import Optional

from indegoatlas.config.models import AppConfig
from indegoatlas.ingestion.station_feed import StationFeedClient
from indegoatlas.ingestion.trip_files import TripFileClient
from indegoatlas.schemas.core import Station, SystemStats, TripInsights, TripRecord, TripStats
from indegoatlas.stations.mapping import StationMapping, StationNameCache
from indegoatlas.stations.summary import search_stations, summarize_stations
from indegoatlas.trips.filters import filter_by_month, passholder_types, search_trips, validate_month_token
from indegoatlas.trips.routes import RouteRow, RouteSortField, route_rows
from indegoatlas.trips.stats import calculate_trip_stats, trip_insights


logger = logging.getLogger(__name__)


# `TripService` sits between HTTP routes and the loaders/aggregator.
# Every call runs a full fetch-and-aggregate cycle; nothing besides the
# station-name cache is kept between requests.
class TripService:
    def __init__(self, config: AppConfig, *, trips: TripFileClient, names: StationNameCache) -> None:
        self._config = config
        self._trips = trips
        self._names = names

    @property
    def config(self) -> AppConfig:
        return self._config

    def trip_stats(self, month: Optional[str] = None) -> tuple[str, TripStats]:
        token = validate_month_token(month)
        records = self._trips.load_trips()
        stats = calculate_trip_stats(records, month=token, tz=self._config.temporal.timezone)
        logger.info("Computed stats for month=%s (%s trips)", token, stats.total_trips)
        return token, stats

    def route_table(
        self,
        month: Optional[str] = None,
        *,
        term: str = "",
        sort: RouteSortField = "count",
        descending: bool = True,
    ) -> tuple[str, list[RouteRow]]:
        token, stats = self.trip_stats(month)
        mapping = self._names.get_mapping()
        return token, route_rows(stats.popular_routes, mapping, term=term, sort=sort, descending=descending)

    def insights(self, month: Optional[str] = None) -> tuple[str, TripInsights]:
        token, stats = self.trip_stats(month)
        return token, trip_insights(stats)

    def search(
        self,
        month: Optional[str] = None,
        *,
        term: str = "",
        bike_type: str = "all",
        passholder_type: str = "all",
    ) -> tuple[str, list[TripRecord], list[str]]:
        """
        Trip browser query: month filter first, then text and category filters.

        The passholder labels come from the month-filtered set, before the other
        filters, so the dropdown keeps every choice that month offers.
        """

        token = validate_month_token(month)
        records = filter_by_month(self._trips.load_trips(), token, tz=self._config.temporal.timezone)
        matched = search_trips(records, term=term, bike_type=bike_type, passholder_type=passholder_type)
        return token, matched, passholder_types(records)


class StationService:
    def __init__(self, config: AppConfig, *, feed: StationFeedClient, names: StationNameCache) -> None:
        self._config = config
        self._feed = feed
        self._names = names

    def list_stations(self, term: str = "") -> list[Station]:
        return search_stations(self._feed.fetch_stations(), term)

    def system_stats(self) -> SystemStats:
        return summarize_stations(self._feed.fetch_stations())

    def station_mapping(self) -> tuple[StationMapping, float]:
        mapping = self._names.get_mapping()
        return mapping, self._names.refreshed_at
