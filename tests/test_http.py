# tests/test_http.py
import pytest
import requests

from connectors import http
from connectors.base import FetchError


class Resp:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self.payload = payload
        self.text = text
        self.reason = "Service Unavailable" if status_code >= 500 else "OK"

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self.payload is None:
            raise ValueError("no json")
        return self.payload


@pytest.fixture
def sequence(monkeypatch):
    """Replays queued responses (or exceptions) from requests.request."""
    queue = []
    calls = []

    def fake_request(method, url, headers=None, json=None, timeout=None):
        calls.append({"method": method, "url": url, "headers": headers, "timeout": timeout})
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(http.requests, "request", fake_request)
    return queue, calls


def test_retries_5xx_then_succeeds(sequence):
    queue, calls = sequence
    queue.extend([Resp(503), Resp(200, {"ok": True})])

    assert http.get_json("https://example.test/api", "Example API") == {"ok": True}
    assert len(calls) == 2
    assert calls[0]["timeout"] == 20
    assert calls[0]["headers"]["User-Agent"] == http.BROWSER_USER_AGENT


def test_retry_exhaustion_is_a_fetch_error(sequence):
    queue, calls = sequence
    queue.extend([Resp(502), Resp(502), Resp(502)])

    with pytest.raises(FetchError, match="Example API error: 502"):
        http.get_json("https://example.test/api", "Example API")
    assert len(calls) == 3


def test_connection_errors_retry_then_raise(sequence):
    queue, calls = sequence
    queue.extend([requests.ConnectionError("refused")] * 3)

    with pytest.raises(FetchError, match="Request to https://example.test/api failed"):
        http.fetch("https://example.test/api")
    assert len(calls) == 3


def test_404_uses_not_found_message(sequence):
    queue, _ = sequence
    queue.append(Resp(404))

    with pytest.raises(FetchError, match="Board missing"):
        http.get_json("https://example.test/api", "Example API", not_found="Board missing")


def test_invalid_json(sequence):
    queue, _ = sequence
    queue.append(Resp(200, text="<html>"))

    with pytest.raises(FetchError, match="not valid JSON"):
        http.get_json("https://example.test/api", "Example API")


def test_html_requests_ask_for_html(sequence):
    queue, calls = sequence
    queue.append(Resp(200, text="<p>hi</p>"))

    assert http.get_text("https://example.test/careers", "Career page") == "<p>hi</p>"
    assert calls[0]["headers"]["Accept"].startswith("text/html")
