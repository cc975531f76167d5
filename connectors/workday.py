# connectors/workday.py
# Workday career sites via the public CXS JSON API.
#   https://{company}.wd1.myworkdayjobs.com/{site}
# Source identifier: "company:site" or "company:site:searchText" (search text may contain colons).
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from app.config import get_settings
from connectors import http
from connectors.base import (
    ConfigurationError,
    Connector,
    FetchedJob,
    ImportSourceConfig,
    logger,
    merge_details,
    parse_datetime,
    safe_map,
)
from utils.text import html_to_text

PAGE_LIMIT = 100
JOB_ID_RE = re.compile(r"_([A-Z0-9-]+(?:-\d+)?)$")
DAYS_AGO_RE = re.compile(r"(\d+)\+?\s*days?\s*ago", re.I)

# Cloudflare in front of Workday rejects non-browser agents with a 400
HEADERS = {"User-Agent": http.BROWSER_USER_AGENT, "Accept": "application/json"}


def parse_identifier(identifier: str) -> Tuple[str, str, str]:
    parts = (identifier or "").strip().split(":")
    if len(parts) < 2 or not parts[0].strip() or not parts[1].strip():
        raise ConfigurationError(
            'Invalid source identifier format. Expected "company:site" or "company:site:searchText"'
        )
    return parts[0].strip(), parts[1].strip(), ":".join(parts[2:])


def base_url(company: str) -> str:
    # most tenants live on wd1
    return f"https://{company}.wd1.myworkdayjobs.com"


def parse_posted_on(posted_on: Optional[str], today: Optional[datetime] = None) -> Optional[datetime]:
    """'Posted Today' / 'Posted Yesterday' / 'Posted 30+ Days Ago' -> midnight of that day."""
    if not posted_on:
        return None
    if today is None:
        today = datetime.utcnow()
    today = today.replace(hour=0, minute=0, second=0, microsecond=0)

    lower = posted_on.lower()
    if "today" in lower:
        return today
    if "yesterday" in lower:
        return today - timedelta(days=1)
    m = DAYS_AGO_RE.search(lower)
    if m:
        return today - timedelta(days=int(m.group(1)))
    return None


def detect_workplace_type(location: Optional[str]) -> Optional[str]:
    loc = (location or "").lower()
    if "remote" in loc:
        return "hybrid" if "hybrid" in loc else "remote"
    if "hybrid" in loc:
        return "hybrid"
    if loc and "anywhere" not in loc:
        return "onsite"
    return None


def fetch_workday_page(
    company: str, site: str, search_text: str = "", offset: int = 0, limit: int = PAGE_LIMIT
) -> Dict[str, Any]:
    """One listing page. Workday only reports a reliable "total" on the first page."""
    body = {"appliedFacets": {}, "limit": limit, "offset": offset, "searchText": search_text}
    return http.post_json(
        f"{base_url(company)}/wday/cxs/{company}/{site}/jobs",
        body,
        "Workday API",
        headers=HEADERS,
        not_found=f'Career site "{company}/{site}" not found. Check the company and site identifiers.',
    )


def fetch_workday_postings(company: str, site: str, search_text: str = "") -> Dict[str, Any]:
    """All listing pages merged: {"total": N, "jobPostings": [...]}."""
    max_pages = get_settings().max_pages

    data = fetch_workday_page(company, site, search_text)
    postings: List[Dict[str, Any]] = list(data.get("jobPostings") or [])
    total = data.get("total") or 0

    pages = 1
    while len(postings) < total and pages < max_pages:
        page = fetch_workday_page(company, site, search_text, offset=len(postings))
        batch = page.get("jobPostings") or []
        if not batch:
            break
        postings.extend(batch)
        pages += 1

    return {"total": total, "jobPostings": postings}


def fetch_workday_detail(company: str, site: str, external_path: str) -> Dict[str, Any]:
    url = f"{base_url(company)}/wday/cxs/{company}/{site}{external_path}"
    return http.get_json(url, "Workday job detail", headers=HEADERS)


def map_workday_listing(posting: Dict[str, Any], company: str, site: str) -> FetchedJob:
    path = posting.get("externalPath") or ""
    m = JOB_ID_RE.search(path)
    location = posting.get("locationsText") or None
    return FetchedJob(
        external_id=m.group(1) if m else path,
        title=posting.get("title") or "",
        location=location,
        url=f"{base_url(company)}/{site}{path}",
        posted_at=parse_posted_on(posting.get("postedOn")),
        workplace_type=detect_workplace_type(location),
    )


def map_workday_detail(detail: Dict[str, Any], company: str, site: str) -> FetchedJob:
    info = detail.get("jobPostingInfo") or {}
    locations = [info.get("location")] + list(info.get("additionalLocations") or [])
    location = "; ".join(loc for loc in locations if loc) or None
    description = info.get("jobDescription") or None
    url = info.get("externalUrl")
    if not url and info.get("jobPostingId"):
        url = f"{base_url(company)}/{site}/job/{info['jobPostingId']}"
    return FetchedJob(
        external_id=str(info.get("jobReqId") or info.get("id") or ""),
        title=info.get("title") or "",
        location=location,
        description_html=description,
        description_text=html_to_text(description) if description else None,
        url=url,
        workplace_type=detect_workplace_type(info.get("location")),
        posted_at=parse_datetime(info.get("startDate")),
    )


class WorkdayConnector(Connector):
    source_type = "workday"
    label = "Workday"
    identifier_hint = "e.g., nasdaq:Global_External_Site:verafin (company:site:searchText)"
    identifier_required = 'Source identifier is required (format: "company:site" or "company:site:searchText")'

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        company, site, search_text = parse_identifier(config.source_identifier)
        data = fetch_workday_postings(company, site, search_text)

        jobs: List[FetchedJob] = []
        for posting in data["jobPostings"]:
            job = safe_map(self.source_type, map_workday_listing, posting, company, site)
            if job is None:
                continue
            try:
                detail = fetch_workday_detail(company, site, posting.get("externalPath") or "")
                job = merge_details(job, map_workday_detail(detail, company, site))
            except Exception as e:
                logger.warning("[workday] failed to fetch details for job %s: %s", job.external_id, e)
            jobs.append(job)
        return jobs

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        """external_id here is the posting's externalPath."""
        try:
            company, site, _ = parse_identifier(config.source_identifier)
        except ConfigurationError:
            return None
        return self._safe_details(
            external_id,
            lambda: map_workday_detail(fetch_workday_detail(company, site, external_id), company, site),
        )

    def count_jobs(self, config: ImportSourceConfig) -> int:
        company, site, search_text = parse_identifier(config.source_identifier)
        data = fetch_workday_page(company, site, search_text, limit=1)
        total = data.get("total")
        return total if isinstance(total, int) else len(data.get("jobPostings") or [])


__all__ = [
    "WorkdayConnector",
    "parse_identifier",
    "parse_posted_on",
    "fetch_workday_page",
    "fetch_workday_postings",
    "map_workday_listing",
    "map_workday_detail",
]
