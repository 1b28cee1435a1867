from __future__ import annotations

# `logging` reports request sizes and failures without dumping whole payloads.
import logging
# `threading.local` hands each worker thread its own session.
import threading
# Typing helpers keep the interface explicit while we still hand back raw JSON / text.
from typing import Any, Callable, Mapping, Optional

# `requests` performs HTTP calls; we wrap it to centralize retries, timeouts and error handling.
import requests
# `HTTPAdapter` lets us mount a retry policy onto a `requests.Session`.
from requests.adapters import HTTPAdapter
# `Retry` implements backoff for transient failures (rate limits, 5xx), without manual sleep loops.
from urllib3.util.retry import Retry

from indegoatlas.config.models import HttpSettings


logger = logging.getLogger(__name__)


# Raised whenever a source (quarterly CSV or station feed) cannot be read successfully.
class SourceUnavailableError(RuntimeError):
    # We subclass `RuntimeError` so callers can fail fast without checked-exception plumbing.

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HttpClient:
    """
    Thin `requests.Session` wrapper shared by the trip-file and station-feed loaders.

    - One session per calling thread, since a `requests.Session` is not safe to share
      across the quarter-file worker threads. Each thread reuses its own connections.
    - Retries for transient failures are handled by the mounted adapter.
    - Every failure surfaces as `SourceUnavailableError` with the URL attached.
    """

    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        user_agent: str = "indegoatlas/0.1.0",
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        # A single timeout value keeps behavior predictable and avoids hanging requests.
        self._timeout_s = timeout_s
        # A stable User-Agent helps the upstream operator identify our traffic.
        self._user_agent = user_agent
        # Tests inject a factory returning prepared sessions.
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

        self._retry = Retry(
            total=max_retries,
            connect=max_retries,
            read=max_retries,
            status=max_retries,
            backoff_factor=backoff_factor,
            # Retry only on status codes that are likely transient.
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            respect_retry_after_header=True,
            # Do not raise inside urllib3; we want a single `SourceUnavailableError` with context.
            raise_on_status=False,
        )

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update({"User-Agent": self._user_agent})
            session.mount("https://", HTTPAdapter(max_retries=self._retry))
            session.mount("http://", HTTPAdapter(max_retries=self._retry))
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> "HttpClient":
        return cls(
            timeout_s=settings.timeout_s,
            max_retries=settings.max_retries,
            backoff_factor=settings.backoff_factor,
            user_agent=settings.user_agent,
        )

    def _get(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> requests.Response:
        try:
            resp = self.session.get(url, params=params, timeout=self._timeout_s)
        except requests.RequestException as e:
            raise SourceUnavailableError(f"Request failed url={url}: {e}", url=url) from e

        # Any 4xx/5xx means the source is unavailable for this cycle; no partial results.
        if resp.status_code >= 400:
            raise SourceUnavailableError(
                f"Request failed ({resp.status_code}) url={url} body={resp.text[:200]}",
                url=url,
                status_code=resp.status_code,
            )
        return resp

    def get_text(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> str:
        resp = self._get(url, params=params)
        text = resp.text
        logger.info("Fetched %s bytes from %s", len(text), url)
        return text

    def get_json(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        resp = self._get(url, params=params)
        try:
            return resp.json()
        except ValueError as e:
            raise SourceUnavailableError(f"Response is not JSON url={url}", url=url) from e

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
