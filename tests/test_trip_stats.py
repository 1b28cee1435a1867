from __future__ import annotations

from indegoatlas.trips.normalize import normalize_trip_record
from indegoatlas.trips.stats import calculate_trip_stats, most_frequent, peak_hour_label, trip_insights


def test_empty_input_returns_zero_stats() -> None:
    stats = calculate_trip_stats([])
    assert stats.total_trips == 0
    assert stats.average_duration == 0
    assert stats.total_distance == 0
    assert stats.peak_hour == ""
    assert stats.popular_routes == []
    assert stats.daily_trips == []
    assert stats.passholder_type_breakdown == {}
    assert stats.bike_type_breakdown == {"standard": 0, "electric": 0}
    assert len(stats.hourly_distribution) == 24
    assert all(h.trips == 0 for h in stats.hourly_distribution)
    assert [h.hour for h in stats.hourly_distribution] == list(range(24))


def test_breakdowns_sum_to_total(make_trip) -> None:
    trips = [
        make_trip(bike_type="electric", passholder_type="Indego30"),
        make_trip(bike_type="standard", passholder_type="Walk-up"),
        make_trip(bike_type="cargo", passholder_type="Day Pass"),
        make_trip(bike_type="electric", passholder_type="Walk-up"),
    ]
    stats = calculate_trip_stats(trips)
    assert stats.total_trips == 4
    assert stats.bike_type_breakdown == {"standard": 2, "electric": 2}
    assert stats.passholder_type_breakdown == {"Indego30": 1, "Walk-up": 2, "Day Pass": 1}
    assert sum(stats.bike_type_breakdown.values()) == stats.total_trips
    assert sum(stats.passholder_type_breakdown.values()) == stats.total_trips
    assert sum(h.trips for h in stats.hourly_distribution) == stats.total_trips
    assert sum(d.trips for d in stats.daily_trips) == stats.total_trips


def test_average_duration_is_rounded(make_trip) -> None:
    stats = calculate_trip_stats([make_trip(duration=10), make_trip(duration=11)])
    assert stats.average_duration == 11


def test_distance_skips_trips_without_coordinates(make_trip) -> None:
    trips = [
        make_trip(),
        make_trip(),
        make_trip(start_lat=0.0),
        make_trip(end_lon=0.0),
    ]
    stats = calculate_trip_stats(trips)
    assert stats.total_trips == 4
    assert stats.trips_with_distance == 2
    # two trips of ~0.82 mi each
    assert stats.total_distance == 2
    assert stats.popular_routes[0].count == 2


def test_most_popular_station_ties_go_to_first_seen(make_trip) -> None:
    trips = [
        make_trip(start_station="B", end_station="Y"),
        make_trip(start_station="A", end_station="X"),
        make_trip(start_station="A", end_station="Y"),
        make_trip(start_station="B", end_station="X"),
    ]
    stats = calculate_trip_stats(trips)
    assert stats.most_popular_start_station == "B"
    assert stats.most_popular_end_station == "Y"


def test_most_frequent_requires_strictly_greater_count() -> None:
    assert most_frequent({"z": 3, "a": 3, "m": 1}) == "z"
    assert most_frequent({"z": 1, "a": 3}) == "a"
    assert most_frequent({}) == ""


def test_peak_hour_ties_resolve_to_lowest_hour(make_trip) -> None:
    trips = [
        make_trip(start_time="2025-03-05 17:05:00"),
        make_trip(start_time="2025-03-05 09:10:00"),
    ]
    stats = calculate_trip_stats(trips)
    assert stats.peak_hour == "9:00-10:00"
    assert stats.hourly_distribution[9].trips == 1
    assert stats.hourly_distribution[17].trips == 1


def test_peak_hour_label_formats_hour_range() -> None:
    counts = [0] * 24
    counts[23] = 5
    assert peak_hour_label(counts) == "23:00-24:00"
    assert peak_hour_label([0] * 24) == "0:00-1:00"


def test_daily_series_uses_utc_date_and_is_sorted(make_trip) -> None:
    trips = [
        # 22:30 in Philadelphia is 02:30 UTC the next day.
        make_trip(start_time="2025-03-31 22:30:00"),
        make_trip(start_time="2025-03-02 12:00:00"),
        make_trip(start_time="2025-03-02 13:00:00"),
    ]
    stats = calculate_trip_stats(trips, tz="America/New_York")
    assert [(d.date, d.trips) for d in stats.daily_trips] == [("2025-03-02", 2), ("2025-04-01", 1)]
    assert stats.hourly_distribution[22].trips == 1


def test_malformed_timestamp_still_counts_toward_totals(make_trip) -> None:
    trips = [make_trip(), make_trip(start_time="garbage")]
    stats = calculate_trip_stats(trips)
    assert stats.total_trips == 2
    assert sum(h.trips for h in stats.hourly_distribution) == 1
    assert {d.date for d in stats.daily_trips} == {"2025-03-05", "Invalid Date"}
    assert sum(d.trips for d in stats.daily_trips) <= stats.total_trips


def test_us_style_timestamps_are_understood(make_trip) -> None:
    stats = calculate_trip_stats([make_trip(start_time="3/5/2025 7:04")])
    assert stats.hourly_distribution[7].trips == 1
    assert stats.daily_trips[0].date == "2025-03-05"


def test_month_filter_applies_before_aggregation(make_trip) -> None:
    trips = [
        make_trip(start_time="2025-02-27 10:00:00"),
        make_trip(start_time="2025-03-01 10:00:00"),
        make_trip(start_time="2025-03-31 23:59:00"),
        make_trip(start_time="2025-04-01 00:01:00"),
    ]
    assert calculate_trip_stats(trips, month="2025-03").total_trips == 2
    assert calculate_trip_stats(trips, month="all").total_trips == 4
    empty = calculate_trip_stats(trips, month="2024-03")
    assert empty.total_trips == 0
    assert len(empty.hourly_distribution) == 24


def test_trip_insights(make_trip) -> None:
    trips = [
        make_trip(bike_type="electric", start_time="2025-03-01 10:00:00"),
        make_trip(start_time="2025-03-02 10:00:00"),
        make_trip(start_time="2025-03-02 11:00:00"),
    ]
    insights = trip_insights(calculate_trip_stats(trips))
    assert insights.electric_percentage == 33
    assert insights.average_daily_trips == 2
    assert insights.most_active_day is not None
    assert insights.most_active_day.date == "2025-03-02"


def test_trip_insights_on_empty_stats() -> None:
    insights = trip_insights(calculate_trip_stats([]))
    assert insights.electric_percentage == 0
    assert insights.most_active_day is None


def test_non_finite_numbers_do_not_break_aggregation(make_trip) -> None:
    raw = {
        "trip_id": "9",
        "duration": "inf",
        "start_time": "2025-03-05 09:00:00",
        "start_station": "3000",
        "start_lat": "39.9526",
        "start_lon": "-75.1652",
        "end_station": "3001",
        "end_lat": "1e999",
        "end_lon": "-75.1503",
        "bike_type": "standard",
    }
    stats = calculate_trip_stats([make_trip(duration=10.0), normalize_trip_record(raw)])
    assert stats.total_trips == 2
    assert stats.average_duration == 5
    assert stats.trips_with_distance == 1
    assert [r.count for r in stats.popular_routes] == [1]


def test_blank_month_means_no_filter(make_trip) -> None:
    trips = [make_trip(start_time="2025-03-01 10:00:00"), make_trip(start_time="2025-04-01 10:00:00")]
    assert calculate_trip_stats(trips, month="").total_trips == 2
    assert calculate_trip_stats(trips, month=None).total_trips == 2
