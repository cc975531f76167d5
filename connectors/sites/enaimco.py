# connectors/sites/enaimco.py
# WordPress ACF page: postings sit between the "Available Positions" and "Apply To Work With Us" headings.
import re
from typing import List
from urllib.parse import urljoin

from connectors.base import FetchedJob
from connectors.sites.common import ST_JOHNS, fetch_page, make_job, node_text, soup_of
from utils.text import slugify

CAREERS_URL = "https://enaimco.com/careers/"

HEADINGS = ["h2", "h3", "h4", "h5"]
NO_POSITIONS_RE = re.compile(r"no\s+open\s+positions", re.I)


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    soup = soup_of(html)
    headings = soup.find_all(HEADINGS)
    start = next((h for h in headings if re.search(r"available positions", node_text(h), re.I)), None)
    if start is None:
        return []
    stop = next((h for h in headings if re.search(r"apply to work with us", node_text(h), re.I)), None)

    section = []
    for node in start.find_next_siblings():
        if node is stop:
            break
        section.append(node)

    if NO_POSITIONS_RE.search("\n".join(node_text(n) for n in section)):
        return []

    jobs: List[FetchedJob] = []
    current = None

    def flush():
        if current:
            description = "\n".join(current["parts"]).strip()
            jobs.append(
                make_job(
                    external_id=slugify(current["title"]),
                    title=current["title"],
                    location=ST_JOHNS,
                    description_html=description or None,
                    url=current["url"],
                )
            )

    for node in section:
        if node.name in HEADINGS:
            flush()
            current = None
            title = node_text(node)
            if not title:
                continue
            link = node.select_one('a[href^="http"], a[href^="/"]')
            current = {"title": title, "url": urljoin(url, link["href"]) if link else url, "parts": []}
        elif current is not None:
            current["parts"].append(str(node).strip())

    flush()
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
