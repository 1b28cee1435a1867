__all__ = [
    "aggregate_routes",
    "calculate_trip_stats",
    "filter_by_month",
    "normalize_trip_record",
    "trip_insights",
]

from indegoatlas.trips.filters import filter_by_month
from indegoatlas.trips.normalize import normalize_trip_record
from indegoatlas.trips.routes import aggregate_routes
from indegoatlas.trips.stats import calculate_trip_stats, trip_insights
