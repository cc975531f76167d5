# connectors/rippling.py
# Rippling ATS boards: server-rendered Next.js pages; job data lives in script#__NEXT_DATA__.
#   listing: https://ats.rippling.com/{company}/jobs
#   detail:  https://ats.rippling.com/{company}/jobs/{id}
import json
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from connectors import http
from connectors.base import Connector, FetchError, FetchedJob, ImportSourceConfig, logger, safe_map
from utils.text import html_to_text

BASE_URL = "https://ats.rippling.com"

WORKPLACE_MAP = {"ON_SITE": "onsite", "REMOTE": "remote", "HYBRID": "hybrid"}
DESCRIPTION_SECTIONS = ("company", "role", "team", "compensation")


def extract_next_data(html: str) -> Optional[Dict[str, Any]]:
    soup = BeautifulSoup(html or "", "html.parser")
    script = soup.select_one("script#__NEXT_DATA__")
    payload = script.get_text().strip() if script else ""
    if not payload:
        return None
    try:
        return json.loads(payload)
    except ValueError:
        return None


def fetch_rippling_page(path: str) -> Dict[str, Any]:
    url = f"{BASE_URL}{path}"
    html = http.get_text(url, "Rippling fetch", not_found=f"Rippling career site not found at {url}")
    data = extract_next_data(html)
    if not data:
        raise FetchError("Failed to extract job data from Rippling page")
    return data


def listing_items(page: Dict[str, Any]) -> List[Dict[str, Any]]:
    """First non-empty `items` list among the dehydrated react-query entries."""
    queries = (((page.get("props") or {}).get("pageProps") or {}).get("dehydratedState") or {}).get("queries") or []
    for q in queries:
        items = ((q.get("state") or {}).get("data") or {}).get("items") if isinstance(q, dict) else None
        if isinstance(items, list) and items:
            return items
    return []


def job_post(page: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return (((page.get("props") or {}).get("pageProps") or {}).get("apiData") or {}).get("jobPost")


def format_locations(locations: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    parts: List[str] = []
    for loc in locations or []:
        if loc.get("city") and loc.get("stateCode"):
            part = f"{loc['city']}, {loc['stateCode']}"
        else:
            part = loc.get("city") or loc.get("name")
        if part and part not in parts:
            parts.append(part)
    return "; ".join(parts) or None


def primary_workplace(locations: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    if not locations:
        return None
    return WORKPLACE_MAP.get(locations[0].get("workplaceType") or "")


def _strip_meta(fragment: str) -> str:
    soup = BeautifulSoup(fragment, "html.parser")
    for meta in soup.find_all("meta"):
        meta.decompose()
    return str(soup).strip()


def build_description_html(description: Optional[Dict[str, Any]]) -> str:
    description = description or {}
    return "\n".join(_strip_meta(description[k]) for k in DESCRIPTION_SECTIONS if description.get(k))


def map_rippling_listing(listing: Dict[str, Any]) -> FetchedJob:
    return FetchedJob(
        external_id=str(listing["id"]),
        title=listing.get("name") or "",
        location=format_locations(listing.get("locations")),
        department=(listing.get("department") or {}).get("name") or None,
        url=listing.get("url") or None,
        workplace_type=primary_workplace(listing.get("locations")),
    )


def map_rippling_detail(post: Dict[str, Any], listing: FetchedJob) -> FetchedJob:
    description = build_description_html(post.get("description"))
    return FetchedJob(
        external_id=listing.external_id,
        title=post.get("name") or listing.title,
        location=format_locations(post.get("locations")) or listing.location,
        department=(post.get("department") or {}).get("name") or listing.department,
        description_html=description or None,
        description_text=html_to_text(description) if description else None,
        url=listing.url,
        workplace_type=primary_workplace(post.get("locations")) or listing.workplace_type,
    )


class RipplingConnector(Connector):
    source_type = "rippling"
    label = "Rippling"
    identifier_hint = "e.g., kraken-robotics-inc (from ats.rippling.com/kraken-robotics-inc/jobs)"
    identifier_required = (
        "Company slug is required (e.g., 'kraken-robotics-inc' from ats.rippling.com/kraken-robotics-inc/jobs)"
    )

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        company = config.source_identifier.strip()
        page = fetch_rippling_page(f"/{company}/jobs")

        jobs: List[FetchedJob] = []
        for listing in listing_items(page):
            if not isinstance(listing, dict) or not listing.get("id"):
                continue
            job = safe_map(self.source_type, map_rippling_listing, listing)
            if job is None:
                continue
            try:
                post = job_post(fetch_rippling_page(f"/{company}/jobs/{job.external_id}"))
                if post:
                    job = map_rippling_detail(post, job)
            except Exception as e:
                logger.warning("[rippling] failed to fetch details for job %s: %s", job.external_id, e)
            jobs.append(job)
        return jobs

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        company = config.source_identifier.strip()

        def _load():
            post = job_post(fetch_rippling_page(f"/{company}/jobs/{external_id}"))
            if not post:
                return None
            stub = FetchedJob(
                external_id=str(post.get("uuid") or external_id),
                title=post.get("name") or "",
                url=f"{BASE_URL}/{company}/jobs/{post.get('uuid') or external_id}",
            )
            return map_rippling_detail(post, stub)

        return self._safe_details(external_id, _load)

    def count_jobs(self, config: ImportSourceConfig) -> int:
        return len(listing_items(fetch_rippling_page(f"/{config.source_identifier.strip()}/jobs")))


__all__ = ["RipplingConnector", "extract_next_data", "listing_items", "format_locations", "build_description_html"]
