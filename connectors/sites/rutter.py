# connectors/sites/rutter.py
# WordPress + Divi; the careers page body comes from the WP REST API.
# Postings are "<p><strong>Title</strong>" lines, optionally followed by a deadline.
import re
from typing import List

from connectors.base import FetchedJob, parse_datetime
from connectors.sites.common import ST_JOHNS, fetch_json, make_job, text_of
from utils.text import slugify

API_URL = "https://rutter.ca/wp-json/wp/v2/pages"

NO_POSITIONS_MARKERS = ("no open positions presently available", "No open positions")
JOB_RE = re.compile(
    r"<p>\s*<strong>((?!Rutter Inc\.|There are no|Please)[^<]+?)(?:<br\s*/?>)?\s*</strong>",
    re.I,
)
DEADLINE_RE = re.compile(r"Deadline:\s*([^<]+)", re.I)


def parse_content(content: str, link: str, modified=None) -> List[FetchedJob]:
    if any(marker in content for marker in NO_POSITIONS_MARKERS):
        return []

    jobs: List[FetchedJob] = []
    for m in JOB_RE.finditer(content):
        title = text_of(m.group(1))
        if len(title) < 5:
            continue
        has_deadline = DEADLINE_RE.search(content[m.start():m.start() + 500]) is not None
        jobs.append(
            make_job(
                external_id=slugify(title),
                title=title,
                location=ST_JOHNS,
                url=link,
                posted_at=None if has_deadline else parse_datetime(modified),
            )
        )
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    pages = fetch_json(f"{API_URL}?slug=careers")
    if not pages:
        return []
    page = pages[0]
    return parse_content((page.get("content") or {}).get("rendered") or "", page.get("link"), page.get("modified"))
