# connectors/sites/strobeltek.py
# WordPress + Elementor, every job inline on one page as "Position Title:" blocks.
# The WP REST API is blocked there, and the blocks have no stable classes, so this one stays regex based.
import re
from typing import List

from connectors.base import FetchedJob
from connectors.sites.common import fetch_page, make_job, text_of
from utils.text import slugify

CAREERS_URL = "https://strobeltek.com/careers-2/"

SECTION_SPLIT_RE = re.compile(r"Position Title:\s*</b>", re.I)
TITLE_RE = re.compile(r"^\s*(?:<b>)?\s*([^<]+)", re.I)
LOCATION_RE = re.compile(r"Location:\s*</b>\s*(?:<b>)?\s*([^<]+)", re.I)
DURATION_RE = re.compile(r"Duration:\s*</b>\s*(?:<b>)?\s*([^<]+)", re.I)
PARENS_RE = re.compile(r"\([^)]*\)")

MAX_SECTION = 5000


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    jobs: List[FetchedJob] = []
    # first chunk is the page preamble
    for section in SECTION_SPLIT_RE.split(html)[1:]:
        m = TITLE_RE.match(section)
        title = text_of(m.group(1)) if m else ""
        if not title:
            continue

        loc = LOCATION_RE.search(section)
        location = PARENS_RE.sub("", text_of(loc.group(1))).strip() if loc else None
        duration = DURATION_RE.search(section)
        description = section[:MAX_SECTION]

        jobs.append(
            make_job(
                external_id=slugify(title),
                title=title,
                location=location or None,
                department=text_of(duration.group(1)) or None if duration else None,
                description_html=description or None,
                url=url,
            )
        )
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
