from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

import pandas as pd

from indegoatlas.config.models import TripSourceSettings
from indegoatlas.ingestion.http_base import HttpClient, SourceUnavailableError
from indegoatlas.schemas.core import TripRecord
from indegoatlas.trips.normalize import normalize_trip_records


logger = logging.getLogger(__name__)


def parse_trip_csv(text: str) -> list[dict[str, str]]:
    """
    Parse one quarterly CSV into rows of named string fields (header row as keys).

    Everything is read as text; numeric coercion belongs to the normalizer.
    Blank lines are skipped.
    """

    if not text.strip():
        return []
    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.ParserError as e:
        raise SourceUnavailableError(f"Malformed trip CSV: {e}") from e
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


class TripFileClient:
    """
    Load the quarterly trip exports.

    All files are requested at once; normalization only starts after every file
    has arrived, and a single failed file fails the whole load.
    """

    def __init__(self, *, http: HttpClient, settings: TripSourceSettings) -> None:
        self._http = http
        self._settings = settings

    def file_urls(self, files: Optional[Iterable[str]] = None) -> list[str]:
        base = self._settings.base_url.rstrip("/")
        names = list(files) if files is not None else list(self._settings.quarter_files)
        return [f"{base}/{name.lstrip('/')}" for name in names]

    def fetch_texts(self, files: Optional[Iterable[str]] = None) -> list[str]:
        urls = self.file_urls(files)
        if not urls:
            return []
        with ThreadPoolExecutor(max_workers=len(urls)) as pool:
            # `map` keeps file order and re-raises the first failure here.
            return list(pool.map(self._http.get_text, urls))

    def load_trips(self, files: Optional[Iterable[str]] = None) -> list[TripRecord]:
        trips: list[TripRecord] = []
        for text in self.fetch_texts(files):
            trips.extend(normalize_trip_records(parse_trip_csv(text)))
        logger.info("Loaded %s trip records", len(trips))
        return trips
