# connectors/sites/virtual_marine.py
# Squarespace rich text: each role is an <h3> followed by free-form content up to the next <h3>.
# Mailto subjects are identical for every role, so titles come from the headings only.
import re
from typing import List

from connectors.base import FetchedJob
from connectors.sites.common import ST_JOHNS, fetch_page, heading_sections, make_job
from utils.text import html_to_text, slugify

CAREERS_URL = "https://www.virtualmarine.ca/careers"

NEW_SUFFIX_RE = re.compile(r"\s*\(new\)\s*$", re.I)
SECTION_LIMIT = 8000


def _is_section_heading(title: str) -> bool:
    return (
        len(title) < 3
        or "careers at" in title.lower()
        or title == "Careers"
        or title.startswith(("WHO ", "WHAT "))
    )


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    headings = heading_sections(html, "h3")
    jobs: List[FetchedJob] = []

    for i, (_, title, start) in enumerate(headings):
        if _is_section_heading(title):
            continue
        title = NEW_SUFFIX_RE.sub("", title).strip()
        if not title:
            continue

        end = headings[i + 1][2] if i + 1 < len(headings) else len(html)
        section = html[start:end]
        # a real posting always has a role blurb or the careers mailto
        if "THE ROLE" not in section and "mailto:careers" not in section:
            continue

        close = section.find("</h3>")
        description = section[close + 5:SECTION_LIMIT].strip() if close > -1 else ""
        description_text = html_to_text(description) or None

        jobs.append(
            make_job(
                external_id=slugify(title),
                title=title,
                location=ST_JOHNS,
                description_html=description or None,
                description_text=description_text,
                url=url,
                workplace_type="remote" if "remote" in f"{title} {description_text or ''}".lower() else None,
            )
        )
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
