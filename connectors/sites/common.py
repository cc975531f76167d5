# connectors/sites/common.py
# Shared helpers for the per-company career page scrapers.
import re
from typing import Any, Callable, List, Optional, Tuple

from bs4 import BeautifulSoup

from app.config import get_settings
from connectors import http
from connectors.base import FetchedJob
from utils.text import collapse_whitespace, html_to_text

ST_JOHNS = "St. John's, NL"

SiteScraper = Callable[[str], List[FetchedJob]]


def fetch_page(url: str) -> str:
    """Plain GET, or headless Chromium when SCRAPE_RENDER_JS is on."""
    if get_settings().render_js:
        return http.render_page(url)
    return http.get_text(url, f"Career page {url}")


def fetch_json(url: str) -> Any:
    return http.get_json(url, f"Career page {url}")


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def node_text(node) -> str:
    return collapse_whitespace(node.get_text(" ")) if node is not None else ""


def inner_html(node) -> str:
    return node.decode_contents().strip() if node is not None else ""


def text_of(html: Optional[str]) -> str:
    """Single-line plain text, for titles and short fields."""
    return collapse_whitespace(html_to_text(html))


HEADING_RE_TEMPLATE = r"<{tag}([^>]*)>([\s\S]*?)</{tag}>"


def heading_sections(html: str, tag: str = "h3") -> List[Tuple[str, str, int]]:
    """(attrs, title text, start offset) for every non-empty <tag> heading in raw page order."""
    pattern = re.compile(HEADING_RE_TEMPLATE.format(tag=tag), re.I)
    out: List[Tuple[str, str, int]] = []
    for m in pattern.finditer(html or ""):
        title = text_of(m.group(2))
        if title:
            out.append((m.group(1) or "", title, m.start()))
    return out


def make_job(**fields) -> FetchedJob:
    """FetchedJob with description_text derived from description_html when not given."""
    html = fields.get("description_html")
    if html and not fields.get("description_text"):
        fields["description_text"] = html_to_text(html) or None
    return FetchedJob(**fields)


__all__ = [
    "ST_JOHNS",
    "SiteScraper",
    "fetch_page",
    "fetch_json",
    "soup_of",
    "node_text",
    "inner_html",
    "text_of",
    "heading_sections",
    "make_job",
]
