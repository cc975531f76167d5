# connectors/ashby.py
# Ashby hosted job boards. No public JSON API; the page embeds its state as `window.__appData = {...};`
#   listing: https://jobs.ashbyhq.com/{org}
#   detail:  https://jobs.ashbyhq.com/{org}/{job_id}
import json
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from connectors import http
from connectors.base import (
    Connector,
    FetchError,
    FetchedJob,
    ImportSourceConfig,
    classify_workplace,
    logger,
    parse_datetime,
    safe_map,
)
from utils.text import html_to_text

ASHBY_BASE = "https://jobs.ashbyhq.com"
APP_DATA_RE = re.compile(r"window\.__appData\s*=\s*")

WORKPLACE_RULES = (
    (("remote",), "remote"),
    (("hybrid",), "hybrid"),
    (("onsite", "on-site", "office"), "onsite"),
)


def extract_app_data(html: str) -> Dict[str, Any]:
    """Pull the `window.__appData` object literal out of an Ashby page."""
    m = APP_DATA_RE.search(html or "")
    if not m:
        raise FetchError("Could not find __appData in page. The page structure may have changed.")
    try:
        data, _ = json.JSONDecoder().raw_decode(html, m.end())
    except ValueError as e:
        raise FetchError("Failed to parse __appData JSON. The data format may have changed.") from e
    if not isinstance(data, dict):
        raise FetchError("Failed to parse __appData JSON. The data format may have changed.")
    return data


def _org_path(org: str) -> str:
    return quote(org.strip(), safe="")


def fetch_ashby_board(org: str) -> List[Dict[str, Any]]:
    html = http.get_text(
        f"{ASHBY_BASE}/{_org_path(org)}",
        "Ashby page",
        not_found=f'Organization "{org}" not found. Check the org slug is correct.',
    )
    board = extract_app_data(html).get("jobBoard") or {}
    return list(board.get("jobPostings") or [])


def fetch_ashby_posting(org: str, job_id: str) -> Dict[str, Any]:
    html = http.get_text(f"{ASHBY_BASE}/{_org_path(org)}/{quote(job_id, safe='')}", "Ashby job page")
    return extract_app_data(html).get("posting") or {}


def map_ashby_posting(raw: Dict[str, Any], org: str) -> FetchedJob:
    description = raw.get("descriptionHtml") or None
    return FetchedJob(
        external_id=str(raw["id"]),
        title=raw.get("title") or "",
        location=raw.get("locationName") or None,
        department=raw.get("departmentName") or raw.get("teamName") or None,
        description_html=description,
        description_text=html_to_text(description) if description else None,
        url=f"{ASHBY_BASE}/{_org_path(org)}/{raw['id']}",
        workplace_type=classify_workplace(raw.get("workplaceType"), WORKPLACE_RULES),
        posted_at=parse_datetime(raw.get("publishedDate")),
        updated_at=parse_datetime(raw.get("updatedAt")),
    )


class AshbyConnector(Connector):
    source_type = "ashby"
    label = "Ashby"
    identifier_hint = "e.g., acmecorp (from jobs.ashbyhq.com/acmecorp)"
    identifier_required = "Organization slug is required"

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        org = config.source_identifier
        jobs: List[FetchedJob] = []
        for raw in fetch_ashby_board(org):
            if not isinstance(raw, dict) or not raw.get("id"):
                continue
            job = safe_map(self.source_type, map_ashby_posting, raw, org)
            if job is None:
                continue
            try:
                description = fetch_ashby_posting(org, job.external_id).get("descriptionHtml")
                if description:
                    job = job.model_copy(
                        update={"description_html": description, "description_text": html_to_text(description)}
                    )
            except Exception as e:
                logger.warning("[ashby] failed to fetch details for job %s: %s", job.external_id, e)
            jobs.append(job)
        return jobs

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        def _load():
            posting = fetch_ashby_posting(config.source_identifier, external_id)
            return map_ashby_posting(posting, config.source_identifier) if posting.get("id") else None

        return self._safe_details(external_id, _load)

    def count_jobs(self, config: ImportSourceConfig) -> int:
        return len(fetch_ashby_board(config.source_identifier))


__all__ = ["AshbyConnector", "extract_app_data", "fetch_ashby_board", "map_ashby_posting"]
