from __future__ import annotations

import threading
from typing import Any

import pytest
import requests

from indegoatlas.ingestion.http_base import HttpClient, SourceUnavailableError


def _response(status: int, body: str) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class _FakeSession(requests.Session):
    def __init__(self, outcome: Any) -> None:
        super().__init__()
        self.outcome = outcome
        self.calls: list[tuple[str, Any]] = []

    def get(self, url, **kwargs):  # type: ignore[no-untyped-def, override]
        self.calls.append((url, kwargs.get("timeout")))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def test_get_json_returns_payload() -> None:
    session = _FakeSession(_response(200, '{"features": []}'))
    client = HttpClient(timeout_s=5.0, session_factory=lambda: session)
    assert client.get_json("https://feed.test/phl") == {"features": []}
    assert session.calls == [("https://feed.test/phl", 5.0)]
    assert session.headers["User-Agent"].startswith("indegoatlas/")


def test_http_error_status_raises_source_unavailable() -> None:
    client = HttpClient(session_factory=lambda: _FakeSession(_response(503, "down")))
    with pytest.raises(SourceUnavailableError) as info:
        client.get_text("https://blob.test/q1.csv")
    assert info.value.status_code == 503
    assert info.value.url == "https://blob.test/q1.csv"


def test_connection_error_raises_source_unavailable() -> None:
    client = HttpClient(session_factory=lambda: _FakeSession(requests.ConnectionError("refused")))
    with pytest.raises(SourceUnavailableError):
        client.get_text("https://blob.test/q1.csv")


def test_non_json_body_raises_source_unavailable() -> None:
    client = HttpClient(session_factory=lambda: _FakeSession(_response(200, "<html>")))
    with pytest.raises(SourceUnavailableError):
        client.get_json("https://feed.test/phl")


def test_each_thread_gets_its_own_session() -> None:
    created: list[_FakeSession] = []

    def factory() -> _FakeSession:
        session = _FakeSession(_response(200, "ok"))
        created.append(session)
        return session

    client = HttpClient(session_factory=factory)
    client.get_text("https://blob.test/q1.csv")
    client.get_text("https://blob.test/q2.csv")
    assert len(created) == 1

    workers = [threading.Thread(target=client.get_text, args=(f"https://blob.test/q{i}.csv",)) for i in (3, 4)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()

    assert len(created) == 3
    assert [len(s.calls) for s in created] == [2, 1, 1]
    assert all(s.headers["User-Agent"].startswith("indegoatlas/") for s in created)


def test_close_closes_every_thread_session() -> None:
    closed: list[int] = []

    class _ClosingSession(_FakeSession):
        def close(self) -> None:
            closed.append(id(self))
            super().close()

    client = HttpClient(session_factory=lambda: _ClosingSession(_response(200, "ok")))
    client.get_text("https://blob.test/q1.csv")
    worker = threading.Thread(target=client.get_text, args=("https://blob.test/q2.csv",))
    worker.start()
    worker.join()

    client.close()
    assert len(closed) == 2
