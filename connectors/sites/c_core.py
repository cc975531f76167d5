# connectors/sites/c_core.py
# WordPress REST: job postings are child pages of the careers page.
from typing import List

from connectors.base import FetchedJob, map_all, parse_datetime
from connectors.sites.common import ST_JOHNS, fetch_json, make_job, text_of
from utils.text import strip_shortcodes

API_URL = "https://c-core.ca/wp-json/wp/v2/pages"
CAREERS_PARENT_ID = 735


def map_page(page: dict) -> FetchedJob:
    description = strip_shortcodes((page.get("content") or {}).get("rendered"))
    return make_job(
        external_id=str(page["id"]),
        title=text_of((page.get("title") or {}).get("rendered")),
        location=ST_JOHNS,
        description_html=description or None,
        url=page.get("link"),
        posted_at=parse_datetime(page.get("date")),
        updated_at=parse_datetime(page.get("modified")),
    )


def scrape(careers_url: str = "") -> List[FetchedJob]:
    pages = fetch_json(f"{API_URL}?parent={CAREERS_PARENT_ID}&per_page=100")
    listed = (p for p in pages or [] if isinstance(p, dict) and p.get("id") is not None)
    return map_all("custom:c-core", map_page, listed)
