# connectors/sites/bluedrop.py
# WordPress + Elementor with the azurecurve toggle plugin: one .azc_tsh_toggle per posting.
# Falls back to plain h2/h3 headings inside #jobs when the page carries no toggles.
import re
from typing import List

from connectors.base import FetchedJob
from connectors.sites.common import ST_JOHNS, fetch_page, inner_html, make_job, node_text, soup_of
from utils.text import slugify

CAREERS_URL = "https://bluedropism.com/careers/"

NON_JOB_HEADINGS = {
    "our current opportunities",
    "current opportunities",
    "available positions",
    "open positions",
    "career opportunities",
    "careers",
    "jobs",
}
NO_OPENINGS_RE = re.compile(r"^no (current )?(jobs|openings|positions|opportunities)")


def is_non_job_heading(value: str) -> bool:
    normalized = re.sub(r"[^a-z0-9]+", " ", value.lower()).strip()
    return normalized in NON_JOB_HEADINGS or NO_OPENINGS_RE.match(normalized) is not None


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    soup = soup_of(html)
    jobs: List[FetchedJob] = []

    for toggle in soup.select(".azc_tsh_toggle"):
        title = node_text(toggle.select_one(".azc_tsh_toggle_title, h1, h2, h3, h4, h5, h6, a"))
        if not title or is_non_job_heading(title):
            continue
        description = inner_html(toggle.select_one(".azc_tsh_toggle_container, .azc_tsh_contents"))
        jobs.append(
            make_job(
                external_id=slugify(title),
                title=title,
                location=ST_JOHNS,
                description_html=description or None,
                url=url,
            )
        )

    if not jobs:
        section = soup.select_one("#jobs")
        for heading in section.select("h2, h3") if section is not None else []:
            title = node_text(heading)
            if not title or is_non_job_heading(title):
                continue
            jobs.append(make_job(external_id=slugify(title), title=title, location=ST_JOHNS, url=url))

    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
