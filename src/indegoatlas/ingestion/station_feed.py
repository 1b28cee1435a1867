from __future__ import annotations

# `logging` is used to record feed sizes without hiding failures behind silent fallbacks.
import logging
# Typing helpers keep our parsing rules explicit while we still consume raw GeoJSON dicts.
from typing import Any, Mapping, Optional

# Typed settings tell this client which feed URL to poll.
from indegoatlas.config.models import StationFeedSettings
# `HttpClient` handles retries, timeouts and error translation so this module stays focused on feed semantics.
from indegoatlas.ingestion.http_base import HttpClient, SourceUnavailableError
# Schemas define the normalized station snapshot consumed by the summarizer and name cache.
from indegoatlas.schemas.core import BikeSlot, Station


logger = logging.getLogger(__name__)


def _int(value: Any) -> int:
    # Counts are occasionally null for stations that are offline; treat those as zero.
    if value is None or value == "":
        return 0
    return int(value)


def _float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_bike_slot(item: Mapping[str, Any]) -> BikeSlot:
    if not isinstance(item, Mapping):
        raise ValueError(f"Bike slot is not an object: {item!r}")
    battery = item.get("battery")
    return BikeSlot(
        dock_number=_int(item.get("dockNumber")),
        is_electric=bool(item.get("isElectric", False)),
        is_available=bool(item.get("isAvailable", False)),
        battery=None if battery is None else float(battery),
    )


def parse_station_feature(feature: Mapping[str, Any]) -> Station:
    if not isinstance(feature, Mapping):
        raise ValueError(f"Station feature is not an object: {feature!r}")
    props = feature.get("properties")
    if not isinstance(props, Mapping):
        raise ValueError(f"Station feature missing `properties`: {feature}")

    station_id = props.get("id")
    # A station id is the join key for name lookups and route labels, so fail fast.
    if station_id is None or station_id == "":
        raise ValueError(f"Missing station id in feature: {props}")

    return Station(
        station_id=str(station_id),
        name=_str(props.get("name")),
        lat=_float(props.get("latitude")),
        lon=_float(props.get("longitude")),
        bikes_available=_int(props.get("bikesAvailable")),
        docks_available=_int(props.get("docksAvailable")),
        total_docks=_int(props.get("totalDocks")),
        classic_bikes_available=_int(props.get("classicBikesAvailable")),
        electric_bikes_available=_int(props.get("electricBikesAvailable")),
        smart_bikes_available=_int(props.get("smartBikesAvailable")),
        kiosk_status=_str(props.get("kioskStatus")),
        kiosk_public_status=_str(props.get("kioskPublicStatus")),
        address_street=_str(props.get("addressStreet")),
        address_city=_str(props.get("addressCity")),
        address_state=_str(props.get("addressState")),
        address_zip_code=_str(props.get("addressZipCode")),
        bikes=tuple(parse_bike_slot(b) for b in (props.get("bikes") or [])),
    )


def parse_station_status(payload: Any) -> list[Station]:
    if not isinstance(payload, Mapping):
        raise SourceUnavailableError(f"Unexpected station feed type: {type(payload).__name__}")
    features = payload.get("features")
    if not isinstance(features, list):
        raise SourceUnavailableError("Station feed missing `features` array")
    try:
        return [parse_station_feature(f) for f in features]
    except (TypeError, ValueError) as e:
        raise SourceUnavailableError(f"Malformed station feature: {e}") from e


class StationFeedClient:
    """
    Fetch one real-time station snapshot.

    Every call returns a fresh list; nothing is cached here (the name cache sits on top).
    """

    def __init__(self, *, http: HttpClient, settings: StationFeedSettings) -> None:
        self._http = http
        self._settings = settings

    def fetch_stations(self, *, url: Optional[str] = None) -> list[Station]:
        payload = self._http.get_json(url or self._settings.feed_url)
        stations = parse_station_status(payload)
        logger.info("Fetched %s stations", len(stations))
        return stations
