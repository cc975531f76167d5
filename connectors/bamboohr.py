# connectors/bamboohr.py
# BambooHR public careers JSON: https://{company}.bamboohr.com/careers/list
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from connectors import http
from connectors.base import Connector, FetchError, FetchedJob, ImportSourceConfig, logger, merge_details, safe_map
from utils.text import html_to_text

# locationType: "0" onsite, "1" remote, "2" hybrid
LOCATION_TYPES = {"0": "onsite", "1": "remote", "2": "hybrid"}


def base_url(company: str) -> str:
    return f"https://{quote(company.strip(), safe='')}.bamboohr.com"


def workplace_from_location_type(location_type, is_remote) -> Optional[str]:
    if str(location_type) == "1" or is_remote is True:
        return "remote"
    return LOCATION_TYPES.get(str(location_type)) if location_type is not None else None


def format_location(location: Optional[Dict[str, Any]]) -> Optional[str]:
    location = location or {}
    parts = [p for p in (location.get("city"), location.get("state")) if p]
    return ", ".join(parts) or None


def fetch_bamboohr_listing(company: str) -> Dict[str, Any]:
    data = http.get_json(
        f"{base_url(company)}/careers/list",
        "BambooHR API",
        not_found=f'Career site "{company}" not found. Check the company subdomain is correct.',
    )
    if not isinstance(data, dict) or not isinstance(data.get("result"), list):
        raise FetchError("Unexpected response format from BambooHR API")
    return data


def fetch_bamboohr_detail(company: str, job_id: str) -> Dict[str, Any]:
    return http.get_json(f"{base_url(company)}/careers/{quote(str(job_id), safe='')}/detail", "BambooHR job detail")


def map_bamboohr_listing(raw: Dict[str, Any], company: str) -> FetchedJob:
    job_id = str(raw["id"])
    return FetchedJob(
        external_id=job_id,
        title=raw.get("jobOpeningName") or "",
        location=format_location(raw.get("location")),
        department=raw.get("departmentLabel") or None,
        url=f"{base_url(company)}/careers/{job_id}",
        workplace_type=workplace_from_location_type(raw.get("locationType"), raw.get("isRemote")),
    )


def map_bamboohr_detail(detail: Dict[str, Any], company: str, job_id: str) -> FetchedJob:
    opening = (detail.get("result") or {}).get("jobOpening") or {}
    description = opening.get("description") or None
    return FetchedJob(
        external_id=job_id,
        title=opening.get("jobOpeningName") or "",
        location=format_location(opening.get("location")),
        department=opening.get("departmentLabel") or None,
        description_html=description,
        description_text=html_to_text(description) if description else None,
        url=opening.get("jobOpeningShareUrl") or None,
        workplace_type=workplace_from_location_type(opening.get("locationType"), opening.get("isRemote")),
    )


class BambooHRConnector(Connector):
    source_type = "bamboohr"
    label = "BambooHR"
    identifier_hint = "e.g., trophiai (from trophiai.bamboohr.com)"
    identifier_required = "Company subdomain is required (e.g., 'trophiai' from trophiai.bamboohr.com)"

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        company = config.source_identifier
        data = fetch_bamboohr_listing(company)

        jobs: List[FetchedJob] = []
        for raw in data["result"]:
            if not isinstance(raw, dict) or raw.get("id") is None:
                continue
            job = safe_map(self.source_type, map_bamboohr_listing, raw, company)
            if job is None:
                continue
            try:
                detail = fetch_bamboohr_detail(company, job.external_id)
                job = merge_details(job, map_bamboohr_detail(detail, company, job.external_id))
            except Exception as e:
                logger.warning("[bamboohr] failed to fetch details for job %s: %s", job.external_id, e)
            jobs.append(job)
        return jobs

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        company = config.source_identifier
        return self._safe_details(
            external_id,
            lambda: map_bamboohr_detail(fetch_bamboohr_detail(company, external_id), company, external_id),
        )

    def count_jobs(self, config: ImportSourceConfig) -> int:
        data = fetch_bamboohr_listing(config.source_identifier)
        total = (data.get("meta") or {}).get("totalCount")
        return total if isinstance(total, int) else len(data["result"])


__all__ = ["BambooHRConnector", "fetch_bamboohr_listing", "map_bamboohr_listing", "map_bamboohr_detail"]
