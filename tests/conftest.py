from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


def pytest_configure() -> None:
    """
    Keep a `src/` layout while allowing `pytest` to run without requiring an editable install.
    """

    project_root = Path(__file__).resolve().parents[1]
    src_path = project_root / "src"
    sys.path.insert(0, str(src_path))


@pytest.fixture
def make_trip() -> Callable[..., Any]:
    from indegoatlas.schemas.core import TripRecord

    counter = {"n": 0}

    def _make(**overrides: Any) -> TripRecord:
        counter["n"] += 1
        values: dict[str, Any] = {
            "trip_id": str(counter["n"]),
            "duration": 10.0,
            "start_time": "2025-03-05 08:15:00",
            "end_time": "2025-03-05 08:25:00",
            "start_station": "3000",
            "start_lat": 39.9526,
            "start_lon": -75.1652,
            "end_station": "3001",
            "end_lat": 39.9496,
            "end_lon": -75.1503,
            "bike_id": "12345",
            "plan_duration": 30.0,
            "trip_route_category": "One Way",
            "passholder_type": "Indego30",
            "bike_type": "standard",
        }
        values.update(overrides)
        return TripRecord(**values)

    return _make
