# connectors/sites/vish.py
# Marketing page with inline roles: each role is an <h3> followed by rich content until the next role heading.
# The page repeats headings and embeds an application form and footer, all filtered here.
import re
from typing import List

from connectors.base import FetchedJob
from connectors.sites.common import fetch_page, heading_sections, make_job
from utils.text import html_to_text, slugify

CAREERS_URL = "https://getvish.com/careers/"

MIN_SECTION_TEXT = 120

ROLE_WORD_RE = re.compile(
    r"\b(engineer|developer|manager|director|lead|architect|analyst|specialist|representative"
    r"|coordinator|designer|sales|marketing|operations|consultant)\b",
    re.I,
)
SECTION_WORDS = (
    "qualities",
    "experience",
    "responsibilities",
    "requirements",
    "qualifications",
    "what we offer",
    "about vish",
)
FORM_MARKERS = ("enter your information below", "upload resume", "i agree to the privacy policy")


def is_non_job_heading(title: str) -> bool:
    t = title.lower()
    return t in ("interested?", "puestos disponibles", "careers") or "current openings" in t


def is_footer_heading(title: str, attrs: str) -> bool:
    t = title.lower()
    return (
        "infobox_title" in attrs.lower()
        or t in ("phone us:", "email us:")
        or "contact" in t
        or "follow us" in t
    )


def is_likely_job_title(title: str, attrs: str) -> bool:
    t = title.lower()
    if not t or is_non_job_heading(title) or is_footer_heading(title, attrs):
        return False
    if any(w in t for w in SECTION_WORDS) or t.endswith(":"):
        return False
    words = t.split()
    if not 2 <= len(words) <= 14:
        return False
    if t.startswith("join "):
        return True
    return ROLE_WORD_RE.search(title) is not None


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    headings = [h for h in heading_sections(html, "h3") if not is_non_job_heading(h[1])]
    jobs: List[FetchedJob] = []
    seen = set()

    for i, (attrs, title, start) in enumerate(headings):
        if not is_likely_job_title(title, attrs):
            continue

        end = len(html)
        for next_attrs, next_title, next_start in headings[i + 1:]:
            if is_likely_job_title(next_title, next_attrs) or is_footer_heading(next_title, next_attrs):
                end = next_start
                break

        section = html[start:end]
        text = html_to_text(section)
        if not text or any(m in text.lower() for m in FORM_MARKERS):
            continue
        # nav and footer captures are short
        if len(text) < MIN_SECTION_TEXT:
            continue

        external_id = slugify(title)
        if not external_id or external_id in seen:
            continue
        seen.add(external_id)

        jobs.append(
            make_job(
                external_id=external_id,
                title=title,
                description_html=section,
                description_text=text,
                url=url,
            )
        )
    return jobs


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
