from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from indegoatlas.schemas.core import DailyCount, HourlyCount, TripInsights, TripRecord, TripStats
from indegoatlas.trips.filters import ALL_MONTHS, DEFAULT_TIMEZONE, filter_by_month, is_all_months
from indegoatlas.trips.routes import TOP_ROUTES_LIMIT, aggregate_routes
from indegoatlas.utils.geo import haversine_miles
from indegoatlas.utils.numbers import round_half_up
from indegoatlas.utils.timeparse import INVALID_DATE, local_hour, parse_timestamp, utc_date_key


logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def _empty_hours() -> list[int]:
    return [0] * HOURS_PER_DAY


def _hourly(counts: Sequence[int]) -> list[HourlyCount]:
    return [HourlyCount(hour=h, trips=int(n)) for h, n in enumerate(counts)]


def empty_trip_stats() -> TripStats:
    return TripStats(
        total_trips=0,
        average_duration=0,
        total_distance=0,
        trips_with_distance=0,
        most_popular_start_station="",
        most_popular_end_station="",
        peak_hour="",
        bike_type_breakdown={"standard": 0, "electric": 0},
        passholder_type_breakdown={},
        daily_trips=[],
        hourly_distribution=_hourly(_empty_hours()),
        popular_routes=[],
    )


def most_frequent(counts: Mapping[str, int]) -> str:
    """
    Key with the highest count; ties go to the key inserted first.

    Only a strictly greater count replaces the current leader.
    """

    best_key = ""
    best_count = 0
    for key, count in counts.items():
        if count > best_count:
            best_key, best_count = key, count
    return best_key


def peak_hour_label(hourly: Sequence[int]) -> str:
    # Scan 0 -> 23 keeping the first maximum, so ties resolve to the earliest hour.
    peak, peak_trips = 0, 0
    for hour, trips in enumerate(hourly):
        if trips > peak_trips:
            peak, peak_trips = hour, trips
    return f"{peak}:00-{peak + 1}:00"


def calculate_trip_stats(
    trips: Sequence[TripRecord],
    *,
    month: Optional[str] = ALL_MONTHS,
    tz: str = DEFAULT_TIMEZONE,
    route_limit: int = TOP_ROUTES_LIMIT,
) -> TripStats:
    """
    Reduce a trip record sequence into the dashboard statistics.

    Records with missing coordinates still count toward every total except the
    distance sum and the route ranking. Unparseable start times are grouped
    under an "Invalid Date" day and left out of the hourly distribution.
    """

    if not is_all_months(month):
        trips = filter_by_month(trips, month, tz=tz)

    total_trips = len(trips)
    if total_trips == 0:
        return empty_trip_stats()

    total_duration = 0.0
    total_distance = 0.0
    trips_with_distance = 0
    start_stations: dict[str, int] = {}
    end_stations: dict[str, int] = {}
    bike_types = {"standard": 0, "electric": 0}
    passholders: dict[str, int] = {}
    daily: dict[str, int] = {}
    hourly = _empty_hours()

    for trip in trips:
        total_duration += trip.duration

        if trip.has_coordinates:
            trips_with_distance += 1
            total_distance += haversine_miles(trip.start_lat, trip.start_lon, trip.end_lat, trip.end_lon)

        start_stations[trip.start_station] = start_stations.get(trip.start_station, 0) + 1
        end_stations[trip.end_station] = end_stations.get(trip.end_station, 0) + 1

        if trip.bike_type == "electric":
            bike_types["electric"] += 1
        else:
            bike_types["standard"] += 1

        passholders[trip.passholder_type] = passholders.get(trip.passholder_type, 0) + 1

        started = parse_timestamp(trip.start_time, tz)
        day = utc_date_key(started)
        daily[day] = daily.get(day, 0) + 1

        if started is not None:
            hour = local_hour(started, tz)
            if 0 <= hour < HOURS_PER_DAY:
                hourly[hour] += 1

    invalid = daily.get(INVALID_DATE, 0)
    if invalid:
        logger.debug("%s of %s trips have an unparseable start_time", invalid, total_trips)

    return TripStats(
        total_trips=total_trips,
        average_duration=round_half_up(total_duration / total_trips),
        total_distance=round_half_up(total_distance),
        trips_with_distance=trips_with_distance,
        most_popular_start_station=most_frequent(start_stations),
        most_popular_end_station=most_frequent(end_stations),
        peak_hour=peak_hour_label(hourly),
        bike_type_breakdown=bike_types,
        passholder_type_breakdown=passholders,
        daily_trips=[DailyCount(date=d, trips=n) for d, n in sorted(daily.items())],
        hourly_distribution=_hourly(hourly),
        popular_routes=aggregate_routes(trips, limit=route_limit),
    )


def trip_insights(stats: TripStats) -> TripInsights:
    if stats.total_trips == 0:
        return TripInsights(electric_percentage=0, average_daily_trips=0, most_active_day=None)

    electric_pct = round_half_up(stats.bike_type_breakdown.get("electric", 0) / stats.total_trips * 100)
    days = len(stats.daily_trips)
    avg_daily = round_half_up(stats.total_trips / days) if days else 0

    most_active: Optional[DailyCount] = None
    for day in stats.daily_trips:
        if most_active is None or day.trips > most_active.trips:
            most_active = day

    return TripInsights(
        electric_percentage=electric_pct,
        average_daily_trips=avg_daily,
        most_active_day=most_active,
    )
