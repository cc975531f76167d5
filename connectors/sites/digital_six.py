# connectors/sites/digital_six.py
# WordPress "WP Job Openings" plugin, exposed over REST as awsm_job_openings.
import re
from typing import List, Optional

from connectors.base import FetchedJob, classify_workplace, map_all, parse_datetime
from connectors.sites.common import fetch_json, make_job, text_of
from utils.text import collapse_whitespace, html_to_text

JOBS_API_URL = "https://digitalsixconsulting.com/wp-json/wp/v2/awsm_job_openings?per_page=100&status=publish"

LOCATION_RE = re.compile(r"Location:\s*(.*?)(?:\s+Type:|$)", re.I | re.M)


def extract_location(text: str) -> Optional[str]:
    m = LOCATION_RE.search(text)
    return collapse_whitespace(m.group(1)) or None if m else None


def map_opening(raw: dict) -> Optional[FetchedJob]:
    title = text_of((raw.get("title") or {}).get("rendered"))
    if not title:
        return None
    description = (raw.get("content") or {}).get("rendered") or ""
    text = html_to_text(description)
    location = extract_location(text)
    return make_job(
        external_id=str(raw["id"]),
        title=title,
        location=location,
        description_html=description or None,
        description_text=collapse_whitespace(text) or None,
        url=raw.get("link"),
        workplace_type=classify_workplace(f"{location or ''} {text}"),
        posted_at=parse_datetime(raw.get("date")),
        updated_at=parse_datetime(raw.get("modified")),
    )


def scrape(careers_url: str = "") -> List[FetchedJob]:
    listed = (r for r in fetch_json(JOBS_API_URL) or [] if isinstance(r, dict) and r.get("id") is not None)
    return map_all("custom:digital-six", map_opening, listed)
