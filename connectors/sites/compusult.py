# connectors/sites/compusult.py
# Liferay CMS. Postings follow an "Opportunity Available:" heading as a run of rich-text fragments:
# an <h3> title block (with a "Location:" line), then zero or more description blocks.
# The fragments carry no per-posting hooks, so the blocks are cut out of the raw markup.
import re
from typing import List, Optional

from connectors.base import FetchedJob
from connectors.sites.common import fetch_page, make_job, text_of
from utils.text import slugify

CAREERS_URL = "https://www.compusult.com/careers"

SECTION_MARKER = "Opportunity Available:"
BLOCK_RE = re.compile(r'data-lfr-editable-type="rich-text">([\s\S]*?)</div></div>(?:<style>|</div>)')
H3_RE = re.compile(r"<h3[^>]*>([\s\S]*?)</h3>", re.I)
LOCATION_RE = re.compile(r"Location:\s*([^<]+)", re.I)
LOCATION_PARA_RE = re.compile(r"<p>\s*<strong>\s*Location:[^<]*</strong>\s*</p>", re.I)


class _Posting:
    def __init__(self, title: str, location: Optional[str]):
        self.title = title
        self.location = location
        self.parts: List[str] = []

    def to_job(self, url: str) -> FetchedJob:
        description = "\n".join(self.parts)
        return make_job(
            external_id=slugify(self.title),
            title=self.title,
            location=self.location,
            description_html=description or None,
            url=url,
        )


def parse_page(html: str, url: str = CAREERS_URL) -> List[FetchedJob]:
    idx = html.find(SECTION_MARKER)
    if idx == -1:
        return []

    postings: List[_Posting] = []
    for m in BLOCK_RE.finditer(html[idx:]):
        block = m.group(1)
        h3 = H3_RE.search(block)
        if h3:
            loc = LOCATION_RE.search(block)
            current = _Posting(text_of(h3.group(1)), text_of(loc.group(1)) if loc else None)
            postings.append(current)
            rest = LOCATION_PARA_RE.sub("", block[h3.end():], count=1).strip()
            if rest:
                current.parts.append(rest)
        elif postings and block.strip():
            postings[-1].parts.append(block)

    return [p.to_job(url) for p in postings if p.title]


def scrape(careers_url: str = "") -> List[FetchedJob]:
    url = careers_url or CAREERS_URL
    return parse_page(fetch_page(url), url)
