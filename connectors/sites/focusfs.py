# connectors/sites/focusfs.py
# The careers page lists hiring areas, not individual requisitions: a "We're Hiring!" heading
# followed by a <ul> whose items are "<strong>Area</strong> - skills".
import re
from typing import List

from connectors.base import FetchedJob
from connectors.sites.common import ST_JOHNS, fetch_page, make_job, node_text, soup_of
from utils.text import html_to_text, slugify

CAREERS_URL = "https://focusfs.com/careers/"

HIRING_RE = re.compile(r"we['\u2019]?re\s+hiring", re.I)
LEADING_DASH_RE = re.compile(r"^(?:&#821[12];|[\u2013\u2014-])\s*")


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    soup = soup_of(html)
    heading = next((h for h in soup.find_all(["h2", "h3"]) if HIRING_RE.search(node_text(h))), None)
    if heading is None:
        return []
    listing = heading.find_next_sibling("ul")
    if listing is None:
        return []

    jobs: List[FetchedJob] = []
    for item in listing.find_all("li", recursive=False):
        strong = item.find("strong")
        title = node_text(strong)
        if not title:
            continue
        strong.extract()
        description = LEADING_DASH_RE.sub("", item.decode_contents().strip()).strip()
        jobs.append(
            make_job(
                external_id=slugify(title),
                title=title,
                location=ST_JOHNS,
                description_html=description or None,
                description_text=html_to_text(description) or None,
                url=url,
            )
        )
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
