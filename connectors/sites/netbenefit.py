# connectors/sites/netbenefit.py
# Webflow CMS collection list (w-dyn-item). Each item links a PDF with the full posting; the PDF is linked, not parsed.
from typing import List
from urllib.parse import parse_qs, unquote, urlparse

from connectors.base import FetchedJob
from connectors.sites.common import ST_JOHNS, fetch_page, inner_html, make_job, node_text, soup_of
from utils.text import slugify

CAREERS_URL = "https://www.netbenefitsoftware.com/careers"
CAREERS_MAILTO = "mailto:careers@netbenefitsoftware.com"


def _mailto_subject(href: str) -> str:
    subject = (parse_qs(urlparse(href).query).get("subject") or [""])[0]
    return unquote(subject).strip()


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    soup = soup_of(html)
    jobs: List[FetchedJob] = []

    for item in soup.select('[role="listitem"].w-dyn-item'):
        title = node_text(item.select_one("div.h4"))
        if not title:
            continue

        description = inner_html(item.select_one("p.paragraph"))
        pdf = next(
            (a["href"] for a in item.select('a[href*="cdn"]') if a["href"].lower().endswith(".pdf")),
            None,
        )
        mailto = item.select_one(f'a[href^="{CAREERS_MAILTO}"]')
        subject = _mailto_subject(mailto["href"]) if mailto else ""

        jobs.append(
            make_job(
                external_id=slugify(subject or title),
                title=title,
                location=ST_JOHNS,
                description_html=description or None,
                url=pdf or url,
            )
        )
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
