# connectors/sites/data_farms.py
# Elementor "Current Opportunities" cards; each card's apply button links a detail page with the full text.
import re
from typing import List, Optional
from urllib.parse import urljoin

from connectors.base import FetchedJob, classify_workplace, logger
from connectors.sites.common import ST_JOHNS, fetch_page, inner_html, make_job, node_text, soup_of, text_of
from utils.text import slugify

CAREERS_URL = "https://datafarms.ca/careers/"

LOCATION_RE = re.compile(r"(?:location|office location)\s*:\s*([^|]+)$", re.I)


def parse_location(meta: str) -> Optional[str]:
    m = LOCATION_RE.search(meta)
    if m:
        return m.group(1).strip() or None
    if "st. john" in meta.lower():
        return ST_JOHNS
    return None


def parse_detail_page(html: str) -> Optional[str]:
    main = soup_of(html).select_one("main#content")
    if main is None:
        return None
    blocks = [inner_html(n) for n in main.select(".elementor-widget-text-editor")]
    return "\n".join(b for b in blocks if b) or None


def parse_listing(html: str, url: str = CAREERS_URL) -> List[dict]:
    soup = soup_of(html)
    cards: List[dict] = []
    seen = set()

    for heading in soup.select("h3.elementor-heading-title"):
        title = node_text(heading)
        if not title:
            continue
        section = heading.find_parent("section", class_="elementor-inner-section")
        if section is None:
            continue
        apply = section.select_one("a.elementor-button-link[href]")
        if apply is None:
            continue

        job_url = urljoin(url, apply["href"])
        external_id = slugify(job_url) or slugify(title)
        if external_id in seen:
            continue
        seen.add(external_id)

        meta_node = section.select_one(".elementor-widget-text-editor")
        meta = text_of(inner_html(meta_node)) if meta_node is not None else ""
        cards.append(
            {
                "external_id": external_id,
                "title": title,
                "location": parse_location(meta),
                "url": job_url,
                "workplace_type": classify_workplace(meta),
            }
        )
    return cards


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    jobs: List[FetchedJob] = []
    for card in parse_listing(fetch_page(url), url):
        description = None
        try:
            description = parse_detail_page(fetch_page(card["url"]))
        except Exception as e:
            logger.warning("[custom:data-farms] failed to fetch details for %s: %s", card["external_id"], e)
        jobs.append(make_job(description_html=description, **card))
    return jobs
