# connectors/http.py
# Outbound HTTP for connectors: browser-like headers, bounded timeout, tiny retry/backoff for 429/5xx.
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from app.config import get_settings
from connectors.base import FetchError

logger = logging.getLogger("jobsync.connectors")

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "application/json, text/plain, */*",
}

HTML_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml",
}

RETRY_STATUSES = (429, 500, 502, 503, 504)


def fetch(
    url: str,
    *,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    json_body: Any = None,
) -> requests.Response:
    """
    Issue one request with the configured timeout.
    Retries 429/5xx and connection/timeout errors; returns the last response,
    or raises FetchError when the network never answered.
    """
    cfg = get_settings()
    merged = dict(DEFAULT_HEADERS)
    if headers:
        merged.update(headers)

    attempt = 0
    while True:
        try:
            resp = requests.request(method, url, headers=merged, json=json_body, timeout=cfg.http_timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            if attempt < cfg.http_retries:
                time.sleep(cfg.http_backoff * (attempt + 1))
                attempt += 1
                continue
            raise FetchError(f"Request to {url} failed: {e}") from e

        if resp.status_code in RETRY_STATUSES and attempt < cfg.http_retries:
            logger.debug("[http] %s %s -> %s, retrying", method, url, resp.status_code)
            time.sleep(cfg.http_backoff * (attempt + 1))
            attempt += 1
            continue
        return resp


def ensure_ok(resp: requests.Response, label: str, not_found: Optional[str] = None) -> requests.Response:
    if resp.status_code == 404 and not_found:
        raise FetchError(not_found, status=404)
    if not resp.ok:
        raise FetchError(f"{label} error: {resp.status_code} {resp.reason or ''}".rstrip(), status=resp.status_code)
    return resp


def read_json(resp: requests.Response, label: str) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise FetchError(f"{label} returned a response that is not valid JSON") from e


def get_json(url: str, label: str, *, headers: Optional[Dict[str, str]] = None, not_found: Optional[str] = None) -> Any:
    resp = ensure_ok(fetch(url, headers=headers), label, not_found)
    return read_json(resp, label)


def post_json(
    url: str,
    body: Any,
    label: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    not_found: Optional[str] = None,
) -> Any:
    h = {"Content-Type": "application/json"}
    h.update(headers or {})
    resp = ensure_ok(fetch(url, method="POST", headers=h, json_body=body), label, not_found)
    return read_json(resp, label)


def get_text(url: str, label: str, *, headers: Optional[Dict[str, str]] = None, not_found: Optional[str] = None) -> str:
    h = dict(HTML_HEADERS)
    h.update(headers or {})
    resp = ensure_ok(fetch(url, headers=h), label, not_found)
    return resp.text


def render_page(url: str, wait_ms: int = 20000) -> str:
    """Load a page in headless Chromium and return the rendered DOM (for client-rendered career pages)."""
    from playwright.sync_api import sync_playwright

    with sync_playwright() as p:
        browser = p.chromium.launch(
            headless=True,
            args=["--disable-blink-features=AutomationControlled", "--no-sandbox", "--disable-dev-shm-usage"],
        )
        try:
            context = browser.new_context(
                user_agent=BROWSER_USER_AGENT,
                viewport={"width": 1366, "height": 768},
            )
            page = context.new_page()
            page.set_default_timeout(wait_ms)
            resp = page.goto(url, wait_until="domcontentloaded")
            if resp is not None and not resp.ok:
                raise FetchError(f"Failed to fetch {url}: {resp.status}", status=resp.status)
            page.wait_for_load_state("networkidle", timeout=wait_ms)
            return page.content()
        finally:
            browser.close()


__all__ = [
    "BROWSER_USER_AGENT",
    "DEFAULT_HEADERS",
    "fetch",
    "ensure_ok",
    "read_json",
    "get_json",
    "post_json",
    "get_text",
    "render_page",
]
