from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo


INVALID_DATE = "Invalid Date"

# Published quarterly exports have used both ISO and US-style timestamps.
_US_FORMATS = ("%m/%d/%Y %H:%M", "%m/%d/%Y %H:%M:%S")


@lru_cache(maxsize=16)
def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


@lru_cache(maxsize=65536)
def parse_timestamp(value: str, tz: str) -> Optional[datetime]:
    """
    Parse a trip timestamp into a timezone-aware datetime.

    Naive values are interpreted as wall-clock time in `tz`. Returns None when
    the value cannot be parsed; callers decide how to bucket such records.
    """

    text = (value or "").strip()
    if not text:
        return None

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _US_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=get_zone(tz))
    return parsed


def local_hour(dt: datetime, tz: str) -> int:
    return dt.astimezone(get_zone(tz)).hour


def month_key(dt: datetime, tz: str) -> str:
    local = dt.astimezone(get_zone(tz))
    return f"{local.year:04d}-{local.month:02d}"


def utc_date_key(dt: Optional[datetime]) -> str:
    if dt is None:
        return INVALID_DATE
    return dt.astimezone(timezone.utc).date().isoformat()
