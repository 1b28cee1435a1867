from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Optional

from indegoatlas.utils.numbers import round_half_up


@dataclass(frozen=True)
class TripRecord:
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

    @property
    def has_coordinates(self) -> bool:
        # 0 means "unknown" in the source exports.
        for value in (self.start_lat, self.start_lon, self.end_lat, self.end_lon):
            if not value or math.isnan(value):
                return False
        return True


@dataclass(frozen=True)
class RouteData:
    start_station: str
    end_station: str
    start_lat: float
    start_lon: float
    end_lat: float
    end_lon: float
    count: int


@dataclass(frozen=True)
class DailyCount:
    date: str
    trips: int


@dataclass(frozen=True)
class HourlyCount:
    hour: int
    trips: int


@dataclass(frozen=True)
class TripStats:
    total_trips: int
    average_duration: int
    total_distance: int
    trips_with_distance: int
    most_popular_start_station: str
    most_popular_end_station: str
    peak_hour: str
    bike_type_breakdown: dict[str, int]
    passholder_type_breakdown: dict[str, int]
    daily_trips: list[DailyCount]
    hourly_distribution: list[HourlyCount]
    popular_routes: list[RouteData]


@dataclass(frozen=True)
class TripInsights:
    electric_percentage: int
    average_daily_trips: int
    most_active_day: Optional[DailyCount]


@dataclass(frozen=True)
class BikeSlot:
    dock_number: int
    is_electric: bool
    is_available: bool
    battery: Optional[float] = None


@dataclass(frozen=True)
class Station:
    station_id: str
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
    bikes: tuple[BikeSlot, ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return self.kiosk_public_status == "Active"

    @property
    def available_slots(self) -> list[BikeSlot]:
        return [b for b in self.bikes if b.is_available]

    @property
    def unavailable_slots(self) -> list[BikeSlot]:
        return [b for b in self.bikes if not b.is_available]


@dataclass(frozen=True)
class SystemStats:
    """
    System-wide totals over one station snapshot.

    `total_bikes` and `available_bikes` carry the same quantity: bikes that are
    not available are not tracked separately at the aggregate level.
    """

    total_stations: int = 0
    total_bikes: int = 0
    total_docks: int = 0
    available_bikes: int = 0
    available_docks: int = 0
    classic_bikes: int = 0
    electric_bikes: int = 0
    smart_bikes: int = 0
    active_stations: int = 0

    @classmethod
    def from_station(cls, station: Station) -> "SystemStats":
        return cls(
            total_stations=1,
            total_bikes=station.bikes_available,
            total_docks=station.total_docks,
            available_bikes=station.bikes_available,
            available_docks=station.docks_available,
            classic_bikes=station.classic_bikes_available,
            electric_bikes=station.electric_bikes_available,
            smart_bikes=station.smart_bikes_available,
            active_stations=1 if station.is_active else 0,
        )

    def __add__(self, other: "SystemStats") -> "SystemStats":
        if not isinstance(other, SystemStats):
            return NotImplemented
        return SystemStats(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(SystemStats)}
        )

    @property
    def utilization_pct(self) -> int:
        return round_half_up(self.available_bikes / (self.total_docks or 1) * 100)
