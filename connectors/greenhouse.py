# connectors/greenhouse.py
# Greenhouse public job board API (no auth): boards-api.greenhouse.io/v1/boards/{token}/jobs
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from connectors import http
from connectors.base import Connector, FetchError, FetchedJob, ImportSourceConfig, map_all, parse_datetime
from utils.text import html_to_text

API_BASE = "https://boards-api.greenhouse.io/v1/boards"


def _jobs_url(board_token: str, include_content: bool = True) -> str:
    url = f"{API_BASE}/{quote(board_token.strip(), safe='')}/jobs"
    return url + "?content=true" if include_content else url


def fetch_greenhouse_jobs(board_token: str, include_content: bool = True) -> Dict[str, Any]:
    """Returns the raw board payload: {"jobs": [...], "meta": {"total": N}}"""
    data = http.get_json(
        _jobs_url(board_token, include_content),
        "Greenhouse API",
        not_found=f'Board "{board_token}" not found. Check the board token is correct.',
    )
    if not isinstance(data, dict) or not isinstance(data.get("jobs"), list):
        raise FetchError("Unexpected response format from Greenhouse API")
    return data


def detect_workplace_type(raw: Dict[str, Any]) -> Optional[str]:
    """Location first, then a remote-ish metadata field, then any concrete location means on-site."""
    location = ((raw.get("location") or {}).get("name") or "").lower()

    if "remote" in location:
        return "hybrid" if "hybrid" in location else "remote"
    if "hybrid" in location:
        return "hybrid"

    for meta in raw.get("metadata") or []:
        value = meta.get("value")
        value = value.lower() if isinstance(value, str) else ""
        if "remote" in (meta.get("name") or "").lower() or "remote" in value:
            return "hybrid" if "hybrid" in value else "remote"

    if location and "anywhere" not in location:
        return "onsite"
    return None


def map_greenhouse_job(raw: Dict[str, Any]) -> FetchedJob:
    content = raw.get("content") or None
    departments = ", ".join(d.get("name") for d in raw.get("departments") or [] if d.get("name"))
    return FetchedJob(
        external_id=str(raw["id"]),
        title=raw.get("title") or "",
        location=(raw.get("location") or {}).get("name") or None,
        department=departments or None,
        description_html=content,
        description_text=html_to_text(content) if content else None,
        url=raw.get("absolute_url"),
        workplace_type=detect_workplace_type(raw),
        updated_at=parse_datetime(raw.get("updated_at")),
    )


class GreenhouseConnector(Connector):
    source_type = "greenhouse"
    label = "Greenhouse"
    identifier_hint = "e.g., acmecorp (board token from boards.greenhouse.io/acmecorp)"
    identifier_required = "Board token is required"

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        data = fetch_greenhouse_jobs(config.source_identifier)
        listed = (j for j in data["jobs"] if isinstance(j, dict) and j.get("id") is not None)
        return map_all(self.source_type, map_greenhouse_job, listed)

    def count_jobs(self, config: ImportSourceConfig) -> int:
        data = fetch_greenhouse_jobs(config.source_identifier, include_content=False)
        total = (data.get("meta") or {}).get("total")
        return total if isinstance(total, int) else len(data["jobs"])


__all__ = ["GreenhouseConnector", "fetch_greenhouse_jobs", "map_greenhouse_job", "detect_workplace_type"]
