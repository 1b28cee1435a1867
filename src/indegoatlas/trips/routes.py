from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Mapping

from indegoatlas.schemas.core import RouteData, TripRecord
from indegoatlas.stations.mapping import station_name
from indegoatlas.utils.geo import haversine_miles


TOP_ROUTES_LIMIT = 50

RouteSortField = Literal["count", "start_station", "end_station", "distance"]


def aggregate_routes(trips: Iterable[TripRecord], *, limit: int = TOP_ROUTES_LIMIT) -> list[RouteData]:
    """
    Group trips into directed (start, end) station pairs and rank by trip count.

    Trips without coordinates on both ends are skipped. The first trip seen for a
    pair fixes its coordinates; later trips only bump the count.
    """

    firsts: dict[tuple[str, str], TripRecord] = {}
    counts: dict[tuple[str, str], int] = {}
    for trip in trips:
        if not trip.has_coordinates:
            continue
        key = (trip.start_station, trip.end_station)
        if key in counts:
            counts[key] += 1
        else:
            firsts[key] = trip
            counts[key] = 1

    routes = [
        RouteData(
            start_station=start,
            end_station=end,
            start_lat=firsts[(start, end)].start_lat,
            start_lon=firsts[(start, end)].start_lon,
            end_lat=firsts[(start, end)].end_lat,
            end_lon=firsts[(start, end)].end_lon,
            count=count,
        )
        for (start, end), count in counts.items()
    ]
    routes.sort(key=lambda r: r.count, reverse=True)
    return routes[: max(limit, 0)]


def route_distance_miles(route: RouteData) -> float:
    return haversine_miles(route.start_lat, route.start_lon, route.end_lat, route.end_lon)


@dataclass(frozen=True)
class RouteRow:
    route: RouteData
    start_name: str
    end_name: str
    distance_miles: float


def route_rows(
    routes: Iterable[RouteData],
    mapping: Mapping[str, str],
    *,
    term: str = "",
    sort: RouteSortField = "count",
    descending: bool = True,
) -> list[RouteRow]:
    """
    Shape ranked routes for the route table: resolve names, attach distance,
    filter by a search term and sort by the chosen column.
    """

    rows = [
        RouteRow(
            route=r,
            start_name=station_name(r.start_station, mapping),
            end_name=station_name(r.end_station, mapping),
            distance_miles=route_distance_miles(r),
        )
        for r in routes
    ]

    needle = term.lower()
    if needle:
        rows = [
            row
            for row in rows
            if needle in row.route.start_station.lower()
            or needle in row.route.end_station.lower()
            or needle in row.start_name.lower()
            or needle in row.end_name.lower()
        ]

    if sort == "start_station":
        rows.sort(key=lambda row: row.start_name.lower(), reverse=descending)
    elif sort == "end_station":
        rows.sort(key=lambda row: row.end_name.lower(), reverse=descending)
    elif sort == "distance":
        rows.sort(key=lambda row: row.distance_miles, reverse=descending)
    elif sort == "count":
        rows.sort(key=lambda row: row.route.count, reverse=descending)
    else:
        raise ValueError(f"Unsupported route sort field: {sort}")
    return rows
