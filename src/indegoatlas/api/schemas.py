from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TemporalConfigOut(BaseModel):
    timezone: str


class AppConfigOut(BaseModel):
    app_name: str
    quarter_files: list[str]
    station_poll_interval_s: int
    station_mapping_ttl_ms: int
    temporal: TemporalConfigOut


class MonthOptionOut(BaseModel):
    value: str = Field(..., examples=["all", "2025-03"])
    label: str


class DailyCountOut(BaseModel):
    date: str = Field(..., examples=["2025-03-01"])
    trips: int


class HourlyCountOut(BaseModel):
    hour: int
    trips: int


class RouteOut(BaseModel):
    start_station: str
    end_station: str
    start_lat: float
    start_lon: float
    end_lat: float
    end_lon: float
    count: int


class BikeTypeBreakdownOut(BaseModel):
    standard: int = 0
    electric: int = 0


class TripStatsOut(BaseModel):
    month: str
    total_trips: int
    average_duration: int
    total_distance: int
    trips_with_distance: int
    most_popular_start_station: str
    most_popular_end_station: str
    peak_hour: str
    bike_type_breakdown: BikeTypeBreakdownOut
    passholder_type_breakdown: dict[str, int] = Field(default_factory=dict)
    daily_trips: list[DailyCountOut] = Field(default_factory=list)
    hourly_distribution: list[HourlyCountOut] = Field(default_factory=list)
    popular_routes: list[RouteOut] = Field(default_factory=list)


class RouteRowOut(RouteOut):
    start_name: str
    end_name: str
    distance_miles: float


class RouteTableOut(BaseModel):
    month: str
    items: list[RouteRowOut] = Field(default_factory=list)


class TripOut(BaseModel):
    trip_id: str
    duration: float
    start_time: str
    end_time: str
    start_station: str
    start_lat: float
    start_lon: float
    end_station: str
    end_lat: float
    end_lon: float
    bike_id: str
    plan_duration: float
    trip_route_category: str
    passholder_type: str
    bike_type: str


class TripSearchOut(BaseModel):
    month: str
    # Matches before `limit` is applied.
    total: int = 0
    passholder_types: list[str] = Field(default_factory=list)
    items: list[TripOut] = Field(default_factory=list)


class TripInsightsOut(BaseModel):
    month: str
    electric_percentage: int
    average_daily_trips: int
    most_active_day: Optional[DailyCountOut] = None


class BikeSlotOut(BaseModel):
    dock_number: int
    is_electric: bool
    is_available: bool
    battery: Optional[float] = None


class StationOut(BaseModel):
    id: str
    name: str
    lat: float
    lon: float
    bikes_available: int
    docks_available: int
    total_docks: int
    classic_bikes_available: int
    electric_bikes_available: int
    smart_bikes_available: int
    kiosk_status: str
    kiosk_public_status: str
    address_street: str = ""
    address_city: str = ""
    address_state: str = ""
    address_zip_code: str = ""
    bikes: list[BikeSlotOut] = Field(default_factory=list)


class StationsResponseOut(BaseModel):
    items: list[StationOut] = Field(default_factory=list)
    total: int = 0


class SystemStatsOut(BaseModel):
    total_stations: int
    total_bikes: int
    total_docks: int
    available_bikes: int
    available_docks: int
    classic_bikes: int
    electric_bikes: int
    smart_bikes: int
    active_stations: int
    utilization_pct: int


class StationMappingOut(BaseModel):
    items: dict[str, str] = Field(default_factory=dict)
    refreshed_at_ms: float = 0.0
