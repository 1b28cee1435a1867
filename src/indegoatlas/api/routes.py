from __future__ import annotations

# `asdict` flattens our frozen dataclasses into dicts that Pydantic can validate.
from dataclasses import asdict
import logging
# We use `Literal` to restrict query parameters to a small, documented set of values.
from typing import Literal, Optional

# - `APIRouter` groups endpoints so the app factory can include them cleanly.
# - `Depends` performs per-request dependency injection (no global variables needed).
# - `HTTPException` converts Python errors into proper HTTP status codes + JSON error payloads.
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from indegoatlas.api.schemas import (
    AppConfigOut,
    DailyCountOut,
    MonthOptionOut,
    RouteRowOut,
    RouteTableOut,
    StationMappingOut,
    StationOut,
    StationsResponseOut,
    SystemStatsOut,
    TripInsightsOut,
    TripOut,
    TripSearchOut,
    TripStatsOut,
)
from indegoatlas.api.service import StationService, TripService
from indegoatlas.ingestion.http_base import SourceUnavailableError
from indegoatlas.schemas.core import Station
from indegoatlas.trips.filters import InvalidMonthError, available_months


logger = logging.getLogger(__name__)

router = APIRouter()


def get_trip_service(request: Request) -> TripService:
    return request.app.state.trip_service  # type: ignore[attr-defined]


def get_station_service(request: Request) -> StationService:
    return request.app.state.station_service  # type: ignore[attr-defined]


def _bad_month(e: InvalidMonthError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


def _unavailable(what: str, e: SourceUnavailableError) -> HTTPException:
    # The client only gets a generic message; the URL/status stay in the server log.
    logger.error("Failed to load %s: %s", what, e)
    return HTTPException(status_code=502, detail=f"Failed to load {what}")


def _station_out(station: Station) -> StationOut:
    payload = asdict(station)
    payload["id"] = payload.pop("station_id")
    return StationOut(**payload)


@router.get("/config", response_model=AppConfigOut)
def get_config(service: TripService = Depends(get_trip_service)) -> AppConfigOut:
    cfg = service.config
    return AppConfigOut(
        app_name=cfg.app.name,
        quarter_files=list(cfg.trips.quarter_files),
        station_poll_interval_s=cfg.stations.poll_interval_s,
        station_mapping_ttl_ms=cfg.cache.station_mapping_ttl_ms,
        temporal={"timezone": cfg.temporal.timezone},
    )


@router.get("/months", response_model=list[MonthOptionOut])
def get_months(year: int = Query(default=2025, ge=1970, le=9999)) -> list[MonthOptionOut]:
    return [MonthOptionOut(**m) for m in available_months(year)]


@router.get("/trips", response_model=TripSearchOut)
def get_trips(
    month: Optional[str] = None,
    q: str = "",
    bike_type: str = "all",
    passholder_type: str = "all",
    # The full export is hundreds of thousands of rows; only a page goes over the wire.
    limit: int = Query(default=100, ge=1, le=5000),
    service: TripService = Depends(get_trip_service),
) -> TripSearchOut:
    try:
        token, matched, labels = service.search(
            month, term=q, bike_type=bike_type, passholder_type=passholder_type
        )
    except InvalidMonthError as e:
        raise _bad_month(e) from e
    except SourceUnavailableError as e:
        raise _unavailable("trip data", e) from e
    return TripSearchOut(
        month=token,
        total=len(matched),
        passholder_types=labels,
        items=[TripOut(**asdict(t)) for t in matched[:limit]],
    )


@router.get("/trips/stats", response_model=TripStatsOut)
def get_trip_stats(
    month: Optional[str] = None,
    service: TripService = Depends(get_trip_service),
) -> TripStatsOut:
    try:
        token, stats = service.trip_stats(month)
    except InvalidMonthError as e:
        raise _bad_month(e) from e
    except SourceUnavailableError as e:
        raise _unavailable("trip data", e) from e
    return TripStatsOut(month=token, **asdict(stats))


@router.get("/trips/routes", response_model=RouteTableOut)
def get_trip_routes(
    month: Optional[str] = None,
    q: str = "",
    sort: Literal["count", "start_station", "end_station", "distance"] = "count",
    order: Literal["asc", "desc"] = "desc",
    service: TripService = Depends(get_trip_service),
) -> RouteTableOut:
    try:
        token, rows = service.route_table(month, term=q, sort=sort, descending=order == "desc")
    except InvalidMonthError as e:
        raise _bad_month(e) from e
    except SourceUnavailableError as e:
        raise _unavailable("trip data", e) from e
    items = [
        RouteRowOut(
            **asdict(row.route),
            start_name=row.start_name,
            end_name=row.end_name,
            distance_miles=row.distance_miles,
        )
        for row in rows
    ]
    return RouteTableOut(month=token, items=items)


@router.get("/trips/insights", response_model=TripInsightsOut)
def get_trip_insights(
    month: Optional[str] = None,
    service: TripService = Depends(get_trip_service),
) -> TripInsightsOut:
    try:
        token, insights = service.insights(month)
    except InvalidMonthError as e:
        raise _bad_month(e) from e
    except SourceUnavailableError as e:
        raise _unavailable("trip data", e) from e
    day = insights.most_active_day
    return TripInsightsOut(
        month=token,
        electric_percentage=insights.electric_percentage,
        average_daily_trips=insights.average_daily_trips,
        most_active_day=None if day is None else DailyCountOut(date=day.date, trips=day.trips),
    )


@router.get("/stations", response_model=StationsResponseOut)
def get_stations(q: str = "", service: StationService = Depends(get_station_service)) -> StationsResponseOut:
    try:
        stations = service.list_stations(q)
    except SourceUnavailableError as e:
        raise _unavailable("station data", e) from e
    return StationsResponseOut(items=[_station_out(s) for s in stations], total=len(stations))


@router.get("/stations/summary", response_model=SystemStatsOut)
def get_station_summary(service: StationService = Depends(get_station_service)) -> SystemStatsOut:
    try:
        stats = service.system_stats()
    except SourceUnavailableError as e:
        raise _unavailable("station data", e) from e
    return SystemStatsOut(**asdict(stats), utilization_pct=stats.utilization_pct)


@router.get("/stations/mapping", response_model=StationMappingOut)
def get_station_mapping(service: StationService = Depends(get_station_service)) -> StationMappingOut:
    # Never fails: an unreachable feed yields an empty mapping.
    mapping, refreshed_at = service.station_mapping()
    return StationMappingOut(items=mapping, refreshed_at_ms=refreshed_at)
