# tests/conftest.py
import json
from typing import Any, Dict, List, Tuple

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.models import Base
from connectors import http


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    monkeypatch.setenv("HTTP_BACKOFF", "0")
    monkeypatch.setenv("SCRAPE_RENDER_JS", "false")
    monkeypatch.delenv("REACTIVATE_ONLY_REMOVED", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: str = ""):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text or json_data is None else json.dumps(json_data)
        self.reason = "OK" if status_code < 400 else "Error"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json is not None:
            return self._json
        return json.loads(self.text)


class FakeHttp:
    """Answers connectors.http.fetch from a table keyed on URL prefix; the longest prefix wins."""

    response = FakeResponse

    def __init__(self):
        self.routes: Dict[str, Any] = {}
        self.calls: List[Tuple[str, str, Any]] = []

    def add(self, prefix: str, response=None, *, json=None, text="", status=200):
        if response is None:
            response = FakeResponse(status, json, text)
        self.routes[prefix] = response
        return self

    def __call__(self, url, *, method="GET", headers=None, json_body=None):
        self.calls.append((method, url, json_body))
        matches = [p for p in self.routes if url.startswith(p)]
        if not matches:
            return FakeResponse(404, text="not found")
        handler = self.routes[max(matches, key=len)]
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(url, method=method, json_body=json_body)
        return handler

    def urls(self) -> List[str]:
        return [u for _, u, _ in self.calls]


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(http, "fetch", fake)
    return fake
