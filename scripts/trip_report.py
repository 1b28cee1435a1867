from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_PATH))

# `argparse` provides a stable CLI interface for one-off reports.
import argparse
from dataclasses import asdict
import json
import logging

from indegoatlas.config.loader import load_config
from indegoatlas.ingestion.http_base import HttpClient, SourceUnavailableError
from indegoatlas.ingestion.station_feed import StationFeedClient
from indegoatlas.ingestion.trip_files import TripFileClient
from indegoatlas.stations.mapping import StationNameCache, station_name
from indegoatlas.trips.filters import InvalidMonthError, validate_month_token
from indegoatlas.trips.stats import calculate_trip_stats, trip_insights
from indegoatlas.utils.logging import configure_logging


logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch the quarterly trip exports and print aggregate statistics.")
    parser.add_argument("--config", default=None, help="Config JSON path (default: config/default.json).")
    parser.add_argument("--month", default="all", help="'all' or YYYY-MM.")
    parser.add_argument("--top-routes", type=int, default=10, help="How many routes to print.")
    parser.add_argument("--json", action="store_true", help="Print the full statistics object as JSON.")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging)

    try:
        month = validate_month_token(args.month)
    except InvalidMonthError as e:
        parser.error(str(e))

    with HttpClient.from_settings(config.http) as http:
        trips = TripFileClient(http=http, settings=config.trips)
        try:
            records = trips.load_trips()
        except SourceUnavailableError as e:
            logger.error("Failed to load trip data: %s", e)
            return 1

        stats = calculate_trip_stats(records, month=month, tz=config.temporal.timezone)
        if args.json:
            print(json.dumps({"month": month, **asdict(stats)}, indent=2, ensure_ascii=False))
            return 0

        feed = StationFeedClient(http=http, settings=config.stations)
        mapping = StationNameCache(feed.fetch_stations, ttl_ms=config.cache.station_mapping_ttl_ms).get_mapping()

    insights = trip_insights(stats)
    print(f"Month: {month}")
    print(f"Total trips: {stats.total_trips:,}")
    print(f"Average duration: {stats.average_duration} min")
    print(f"Total distance: {stats.total_distance:,} mi ({stats.trips_with_distance:,} trips with coordinates)")
    print(f"Peak hour: {stats.peak_hour}")
    print(f"Most popular start: {station_name(stats.most_popular_start_station, mapping)}")
    print(f"Most popular end: {station_name(stats.most_popular_end_station, mapping)}")
    print(f"Bike types: {stats.bike_type_breakdown}")
    print(f"Electric share: {insights.electric_percentage}%  Daily average: {insights.average_daily_trips}")
    print("Top routes:")
    for route in stats.popular_routes[: max(args.top_routes, 0)]:
        start = station_name(route.start_station, mapping)
        end = station_name(route.end_station, mapping)
        print(f"  {route.count:>6}  {start} -> {end}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
