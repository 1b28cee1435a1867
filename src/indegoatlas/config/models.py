from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class AppSettings:
    name: str = "IndegoAtlas"


@dataclass(frozen=True)
class TripSourceSettings:
    base_url: str
    quarter_files: list[str]


@dataclass(frozen=True)
class StationFeedSettings:
    feed_url: str
    poll_interval_s: int = 30


@dataclass(frozen=True)
class HttpSettings:
    timeout_s: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 0.5
    user_agent: str = "indegoatlas/0.1.0"


@dataclass(frozen=True)
class TemporalSettings:
    timezone: str


@dataclass(frozen=True)
class CacheSettings:
    station_mapping_ttl_ms: int = 5 * 60 * 1000


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str
    file: Optional[Path] = None


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    trips: TripSourceSettings
    stations: StationFeedSettings
    http: HttpSettings
    temporal: TemporalSettings
    cache: CacheSettings
    logging: LoggingSettings
