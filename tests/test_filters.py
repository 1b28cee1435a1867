from __future__ import annotations

import pytest

from indegoatlas.trips.filters import (
    available_months,
    filter_by_month,
    matches_month,
    passholder_types,
    search_trips,
    validate_month_token,
)


def test_filter_by_month_keeps_only_that_month(make_trip) -> None:
    trips = [
        make_trip(start_time="2025-03-01 00:05:00"),
        make_trip(start_time="2025-03-15 12:00:00"),
        make_trip(start_time="2025-04-02 09:00:00"),
        make_trip(start_time="2025-02-28 23:55:00"),
    ]
    march = filter_by_month(trips, "2025-03")
    assert [t.start_time for t in march] == ["2025-03-01 00:05:00", "2025-03-15 12:00:00"]
    assert len(filter_by_month(trips, "all")) == len(trips)
    assert len(filter_by_month(trips, None)) == len(trips)
    assert len(filter_by_month(trips, "")) == len(trips)
    assert matches_month(trips[2], "")


def test_month_is_derived_in_local_time(make_trip) -> None:
    # 03:30 UTC on April 1st is still March 31st in Philadelphia.
    trip = make_trip(start_time="2025-04-01T03:30:00Z")
    assert matches_month(trip, "2025-03", tz="America/New_York")
    assert matches_month(trip, "2025-04", tz="UTC")


def test_unparseable_start_time_never_matches_a_month(make_trip) -> None:
    trip = make_trip(start_time="")
    assert not matches_month(trip, "2025-03")
    assert matches_month(trip, "all")


def test_validate_month_token() -> None:
    assert validate_month_token("2025-03") == "2025-03"
    assert validate_month_token("all") == "all"
    assert validate_month_token(None) == "all"
    assert validate_month_token("") == "all"
    for bad in ("2025-3", "2025-13", "March", "2025/03"):
        with pytest.raises(ValueError):
            validate_month_token(bad)


def test_available_months_lists_all_then_each_month() -> None:
    months = available_months(2025)
    assert months[0] == {"value": "all", "label": "All Months"}
    assert len(months) == 13
    assert months[1] == {"value": "2025-01", "label": "January 2025"}
    assert months[-1]["value"] == "2025-12"


def test_search_trips_by_term_and_categories(make_trip) -> None:
    trips = [
        make_trip(start_station="3010", bike_id="A100", bike_type="electric", passholder_type="Walk-up"),
        make_trip(start_station="3020", end_station="3010", bike_id="B200", passholder_type="Indego30"),
        make_trip(start_station="3030", end_station="3040", bike_id="c300", passholder_type="Indego30"),
    ]
    assert len(search_trips(trips, term="3010")) == 2
    assert len(search_trips(trips, term="C3")) == 1
    assert len(search_trips(trips, bike_type="electric")) == 1
    assert len(search_trips(trips, passholder_type="Indego30")) == 2
    assert len(search_trips(trips, term="3010", passholder_type="Indego30")) == 1
    assert passholder_types(trips) == ["Walk-up", "Indego30"]
