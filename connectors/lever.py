# connectors/lever.py
# Lever public postings API: api.lever.co/v0/postings/{company}
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from connectors import http
from connectors.base import (
    Connector,
    FetchError,
    FetchedJob,
    ImportSourceConfig,
    classify_workplace,
    map_all,
    parse_datetime,
)
from utils.text import html_to_text

API_BASE = "https://api.lever.co/v0/postings"

WORKPLACE_MAP = {
    "remote": "remote",
    "on-site": "onsite",
    "hybrid": "hybrid",
}

LOCATION_RULES = (
    (("remote",), "remote"),
    (("hybrid",), "hybrid"),
)


def fetch_lever_postings(company: str) -> List[Dict[str, Any]]:
    data = http.get_json(
        f"{API_BASE}/{quote(company.strip(), safe='')}",
        "Lever API",
        not_found=f'Lever company "{company}" not found. Check the company slug.',
    )
    if not isinstance(data, list):
        if isinstance(data, dict) and data.get("ok") is False:
            raise FetchError(data.get("error") or "Invalid Lever company")
        raise FetchError("Unexpected response format from Lever API")
    return data


def build_description_html(posting: Dict[str, Any]) -> str:
    parts: List[str] = []
    if posting.get("description"):
        parts.append(posting["description"])
    for section in posting.get("lists") or []:
        parts.append(f"<h3>{section.get('text') or ''}</h3>")
        parts.append(section.get("content") or "")
    if posting.get("additional"):
        parts.append(posting["additional"])
    return "\n".join(parts)


def _format_location(categories: Dict[str, Any]) -> Optional[str]:
    all_locations = [loc for loc in categories.get("allLocations") or [] if loc]
    if all_locations:
        return "; ".join(all_locations)
    return categories.get("location") or None


def map_lever_posting(posting: Dict[str, Any]) -> FetchedJob:
    categories = posting.get("categories") or {}
    description_html = build_description_html(posting)
    workplace = WORKPLACE_MAP.get((posting.get("workplaceType") or "").lower())
    if workplace is None:
        workplace = classify_workplace(categories.get("location"), LOCATION_RULES)

    return FetchedJob(
        external_id=str(posting["id"]),
        title=posting.get("text") or "",
        location=_format_location(categories),
        department=categories.get("department") or categories.get("team") or None,
        description_html=description_html or None,
        description_text=html_to_text(description_html) if description_html else None,
        url=posting.get("hostedUrl"),
        workplace_type=workplace,
        posted_at=parse_datetime(posting.get("createdAt")),
    )


class LeverConnector(Connector):
    source_type = "lever"
    label = "Lever"
    identifier_hint = "e.g., getmysa (from jobs.lever.co/getmysa)"
    identifier_required = "Company slug is required (e.g., 'getmysa' from jobs.lever.co/getmysa)"

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        postings = fetch_lever_postings(config.source_identifier)
        listed = (p for p in postings if isinstance(p, dict) and p.get("id"))
        return map_all(self.source_type, map_lever_posting, listed)

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        company = quote(config.source_identifier.strip(), safe="")

        def _load():
            posting = http.get_json(f"{API_BASE}/{company}/{quote(external_id, safe='')}", "Lever API")
            return map_lever_posting(posting)

        return self._safe_details(external_id, _load)


__all__ = ["LeverConnector", "fetch_lever_postings", "map_lever_posting", "build_description_html"]
