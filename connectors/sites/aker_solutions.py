# connectors/sites/aker_solutions.py
# Job search page pre-filtered to Canada / St. John's; every card links with a jobPostId query param.
import re
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urljoin, urlparse

from connectors.base import FetchedJob, classify_workplace
from connectors.sites.common import fetch_page, make_job, node_text, soup_of
from utils.text import slugify

CAREERS_URL = "https://www.akersolutions.com/careers/job-search/?country=Canada&location=St.+John%27s"
DEFAULT_LOCATION = "St. John's, Canada"

TITLE_MARKER_RE = re.compile(r"St\.?\s*John'?s,\s*Canada|Position:|Deadline:", re.I)
ST_JOHNS_RE = re.compile(r"St\.?\s*John'?s,\s*Canada", re.I)


def job_post_id(url: str) -> Optional[str]:
    return (parse_qs(urlparse(url).query).get("jobPostId") or [None])[0]


def clean_title(raw: str) -> str:
    """Card anchors run the title into the location and deadline; keep the part before them."""
    m = TITLE_MARKER_RE.search(raw)
    return (raw[:m.start()] if m and m.start() > 0 else raw).strip()


def card_text(anchor) -> str:
    for parent in anchor.parents:
        classes = " ".join(parent.get("class") or []).lower()
        if "job-item" in classes:
            return node_text(parent)
    return ""


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    soup = soup_of(html)
    jobs: Dict[str, FetchedJob] = {}

    for anchor in soup.select('a[href*="jobPostId="]'):
        job_url = urljoin(url, anchor["href"])
        post_id = job_post_id(job_url)
        external_id = f"jobpost-{post_id}" if post_id else slugify(job_url)
        if not external_id or external_id in jobs:
            continue

        title = clean_title(node_text(anchor))
        if not 3 <= len(title) <= 120:
            continue

        card = card_text(anchor)
        # only St. John's postings, whatever the search filter let through
        if "canada" in card.lower() and not ST_JOHNS_RE.search(card):
            continue

        jobs[external_id] = make_job(
            external_id=external_id,
            title=title,
            location=DEFAULT_LOCATION,
            url=job_url,
            workplace_type=classify_workplace(f"{title} {card}"),
        )
    return list(jobs.values())


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
