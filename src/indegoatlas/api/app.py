# Use postponed evaluation of annotations so type hints stay as strings at runtime.
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

# `FastAPI` exposes the aggregation engine as HTTP endpoints for the dashboard frontend.
from fastapi import FastAPI

from indegoatlas.api.routes import router
from indegoatlas.api.service import StationService, TripService
from indegoatlas.config.models import AppConfig
from indegoatlas.ingestion.http_base import HttpClient
from indegoatlas.ingestion.station_feed import StationFeedClient
from indegoatlas.ingestion.trip_files import TripFileClient
from indegoatlas.stations.mapping import StationNameCache
from indegoatlas.utils.logging import configure_logging


# App factory: build everything from a typed config (no module-level globals).
# Clients can be injected so tests run without network access.
def create_app(
    config: AppConfig,
    *,
    trip_client: Optional[TripFileClient] = None,
    station_client: Optional[StationFeedClient] = None,
) -> FastAPI:
    # Pitfall: `logging.basicConfig(...)` is a no-op if handlers already exist (common in tests).
    configure_logging(config.logging)

    http: Optional[HttpClient] = None
    if trip_client is None or station_client is None:
        http = HttpClient.from_settings(config.http)
    if trip_client is None:
        trip_client = TripFileClient(http=http, settings=config.trips)  # type: ignore[arg-type]
    if station_client is None:
        station_client = StationFeedClient(http=http, settings=config.stations)  # type: ignore[arg-type]

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if http is not None:
            http.close()

    app = FastAPI(title=config.app.name, lifespan=lifespan)

    # One name cache per process, shared by both services.
    names = StationNameCache(station_client.fetch_stations, ttl_ms=config.cache.station_mapping_ttl_ms)

    app.state.trip_service = TripService(config, trips=trip_client, names=names)
    app.state.station_service = StationService(config, feed=station_client, names=names)
    app.state.station_names = names

    app.include_router(router)
    return app
