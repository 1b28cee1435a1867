from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from indegoatlas.config.models import (
    AppConfig,
    AppSettings,
    CacheSettings,
    HttpSettings,
    LoggingSettings,
    StationFeedSettings,
    TemporalSettings,
    TripSourceSettings,
)


DEFAULT_TRIPS_BASE_URL = "https://oilg24vboskpv84u.public.blob.vercel-storage.com"
DEFAULT_QUARTER_FILES = [
    "indego-trips-2025-q1.csv",
    "indego-trips-2025-q2.csv",
    "indego-trips-2025-q3.csv",
    "indego-trips-2025-q4.csv",
]
DEFAULT_STATION_FEED_URL = "https://bts-status.bicycletransit.workers.dev/phl"
DEFAULT_TIMEZONE = "America/New_York"


def load_dotenv_if_available(path: str = ".env") -> None:
    try:
        from dotenv import load_dotenv  # type: ignore
    except ModuleNotFoundError:
        return
    load_dotenv(path)


def _as_path(value: str, *, base_dir: Path) -> Path:
    candidate = Path(value)
    return candidate if candidate.is_absolute() else (base_dir / candidate)


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_config(path: Optional[str | Path] = None, *, base_dir: Optional[Path] = None) -> AppConfig:
    """
    Load typed application config from JSON.

    - Path resolution is relative to `base_dir` (defaults to current working directory).
    - `.env` is loaded when python-dotenv is installed (dev convenience).
    - A handful of `INDEGOATLAS_*` env vars override the file (URLs, timezone, log level).
    """

    load_dotenv_if_available()

    config_path = Path(
        path
        or os.getenv("INDEGOATLAS_CONFIG_PATH", "config/default.json")
    ).resolve()
    base_dir = (base_dir or Path.cwd()).resolve()

    raw = json.loads(config_path.read_text(encoding="utf-8"))

    app_raw: Mapping[str, Any] = raw.get("app", {})
    app = AppSettings(name=str(app_raw.get("name", "IndegoAtlas")))

    trips_raw: Mapping[str, Any] = raw.get("trips", {})
    quarter_files = [str(x) for x in trips_raw.get("quarter_files", DEFAULT_QUARTER_FILES)]
    if not quarter_files:
        raise ValueError("Config trips.quarter_files must not be empty")
    trips = TripSourceSettings(
        base_url=_env_str("INDEGOATLAS_TRIPS_BASE_URL")
        or str(trips_raw.get("base_url", DEFAULT_TRIPS_BASE_URL)),
        quarter_files=quarter_files,
    )

    stations_raw: Mapping[str, Any] = raw.get("stations", {})
    stations = StationFeedSettings(
        feed_url=_env_str("INDEGOATLAS_STATION_FEED_URL")
        or str(stations_raw.get("feed_url", DEFAULT_STATION_FEED_URL)),
        poll_interval_s=int(stations_raw.get("poll_interval_s", 30)),
    )
    if stations.poll_interval_s < 1:
        raise ValueError(f"Unsupported stations.poll_interval_s: {stations.poll_interval_s}")

    http_raw: Mapping[str, Any] = raw.get("http", {})
    http = HttpSettings(
        timeout_s=float(http_raw.get("timeout_s", 30.0)),
        max_retries=int(http_raw.get("max_retries", 3)),
        backoff_factor=float(http_raw.get("backoff_factor", 0.5)),
        user_agent=str(http_raw.get("user_agent", "indegoatlas/0.1.0")),
    )

    temporal_raw: Mapping[str, Any] = raw.get("temporal", {})
    temporal = TemporalSettings(
        timezone=_env_str("INDEGOATLAS_TIMEZONE") or str(temporal_raw.get("timezone", DEFAULT_TIMEZONE)),
    )
    try:
        ZoneInfo(temporal.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unsupported timezone: {temporal.timezone}") from e

    cache_raw: Mapping[str, Any] = raw.get("cache", {})
    cache = CacheSettings(
        station_mapping_ttl_ms=int(cache_raw.get("station_mapping_ttl_ms", 5 * 60 * 1000)),
    )
    if cache.station_mapping_ttl_ms <= 0:
        raise ValueError(f"Unsupported cache.station_mapping_ttl_ms: {cache.station_mapping_ttl_ms}")

    logging_raw: Mapping[str, Any] = raw.get("logging", {})
    file_value = logging_raw.get("file")
    log_file = None if not file_value else _as_path(str(file_value), base_dir=base_dir)
    logging_settings = LoggingSettings(
        level=_env_str("INDEGOATLAS_LOG_LEVEL") or str(logging_raw.get("level", "INFO")),
        format=str(logging_raw.get("format", "%(asctime)s %(levelname)s %(name)s - %(message)s")),
        file=log_file,
    )

    return AppConfig(
        app=app,
        trips=trips,
        stations=stations,
        http=http,
        temporal=temporal,
        cache=cache,
        logging=logging_settings,
    )
