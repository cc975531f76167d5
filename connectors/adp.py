# connectors/adp.py
# ADP Workforce Now recruiting pages via the public job-requisitions endpoint.
# Source identifier: "cid:ccId", "cid:ccId:lang" or a recruitment.html URL carrying cid/ccId/lang.
import time
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import parse_qs, quote, urlencode, urlparse

from app.config import get_settings
from connectors import http
from connectors.base import (
    ConfigurationError,
    Connector,
    FetchedJob,
    ImportSourceConfig,
    classify_workplace,
    logger,
    parse_datetime,
    safe_map,
)
from utils.text import decode_entities, html_to_text

BASE_URL = "https://workforcenow.adp.com"
REQUISITIONS_PATH = "/mascsr/default/careercenter/public/events/staffing/v1/job-requisitions"
RECRUITMENT_URL = f"{BASE_URL}/mascsr/default/mdf/recruitment/recruitment.html"
DEFAULT_LANG = "en_CA"
PAGE_SIZE = 20

ADP_HEADERS = {"X-Requested-With": "XMLHttpRequest", "Content-Type": "application/json"}


class AdpTenant(NamedTuple):
    cid: str
    cc_id: str
    lang: str


def parse_identifier(identifier: str) -> AdpTenant:
    trimmed = (identifier or "").strip()
    if not trimmed:
        raise ConfigurationError("ADP source identifier is required")

    if trimmed.startswith(("http://", "https://")):
        qs = parse_qs(urlparse(trimmed).query)
        cid = (qs.get("cid") or [""])[0].strip()
        cc_id = (qs.get("ccId") or [""])[0].strip()
        lang = (qs.get("lang") or [""])[0].strip() or DEFAULT_LANG
        if not cid or not cc_id:
            raise ConfigurationError("ADP URL must include cid and ccId query params")
        return AdpTenant(cid, cc_id, lang)

    parts = [p.strip() for p in trimmed.split(":")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ConfigurationError(
            'Invalid ADP source identifier. Use "cid:ccId", "cid:ccId:lang", or full recruitment URL.'
        )
    return AdpTenant(parts[0], parts[1], (parts[2] if len(parts) > 2 else "") or DEFAULT_LANG)


def _tenant_params(tenant: AdpTenant) -> Dict[str, str]:
    return {
        "cid": tenant.cid,
        "ccId": tenant.cc_id,
        "lang": tenant.lang,
        "locale": tenant.lang,
        "timeStamp": str(int(time.time() * 1000)),
    }


def requisitions_url(tenant: AdpTenant, skip: int, top: int = PAGE_SIZE) -> str:
    params = _tenant_params(tenant)
    params.update({"$skip": str(skip), "$top": str(top), "sortBy": "postDate", "sortOrder": "desc"})
    return f"{BASE_URL}{REQUISITIONS_PATH}?{urlencode(params)}"


def requisition_detail_url(tenant: AdpTenant, item_id: str) -> str:
    return f"{BASE_URL}{REQUISITIONS_PATH}/{quote(item_id, safe='')}?{urlencode(_tenant_params(tenant))}"


def recruitment_job_url(tenant: AdpTenant, job_id: str) -> str:
    return f"{RECRUITMENT_URL}?{urlencode({'cid': tenant.cid, 'jobId': job_id, 'selectedMenuKey': 'CurrentOpenings'})}"


# ---------------------- custom fields ----------------------

def _custom_field(raw: Dict[str, Any], group: str, code: str, value_key: str):
    for entry in (raw.get("customFieldGroup") or {}).get(group) or []:
        if (entry.get("nameCode") or {}).get("codeValue") == code and entry.get(value_key):
            return entry[value_key]
    return None


def string_field(raw: Dict[str, Any], code: str) -> Optional[str]:
    value = _custom_field(raw, "stringFields", code, "stringValue")
    return value.strip() or None if isinstance(value, str) else None


def date_field(raw: Dict[str, Any], code: str):
    return parse_datetime(_custom_field(raw, "dateFields", code, "dateValue"))


def format_locations(raw: Dict[str, Any]) -> Optional[str]:
    out: List[str] = []
    for loc in raw.get("requisitionLocations") or []:
        name = decode_entities((loc.get("nameCode") or {}).get("shortName") or "")
        name = " ".join(name.replace(" ,", ",").split())
        if name:
            out.append(name)
            continue
        address = loc.get("address") or {}
        city = decode_entities(address.get("cityName") or "").strip()
        region = ((address.get("countrySubdivisionLevel1") or {}).get("codeValue") or "").strip()
        joined = ", ".join(p for p in (city, region) if p)
        if joined:
            out.append(joined)
    return "; ".join(out) or None


def map_adp_requisition(raw: Dict[str, Any], tenant: AdpTenant) -> FetchedJob:
    item_id = str(raw.get("itemID") or "")
    external_id = string_field(raw, "ExternalJobID") or item_id
    description_html = raw.get("requisitionDescription") or None
    description_text = html_to_text(description_html) if description_html else None
    location = format_locations(raw)
    job_id = string_field(raw, "ExternalJobID") or raw.get("clientRequisitionID") or item_id

    return FetchedJob(
        external_id=external_id,
        title=decode_entities(raw.get("requisitionTitle") or "").strip(),
        location=location,
        department=string_field(raw, "HomeDepartment"),
        description_html=description_html,
        description_text=description_text,
        url=recruitment_job_url(tenant, job_id),
        workplace_type=classify_workplace(f"{location or ''}\n{description_text or ''}"),
        posted_at=date_field(raw, "PostingDate"),
    )


def fetch_adp_requisitions(tenant: AdpTenant) -> List[Dict[str, Any]]:
    listings: List[Dict[str, Any]] = []
    skip = 0
    for _ in range(get_settings().max_pages):
        page = http.get_json(requisitions_url(tenant, skip), "ADP API", headers=ADP_HEADERS)
        batch = page.get("jobRequisitions") or []
        if not batch:
            break
        listings.extend(batch)
        total = (page.get("meta") or {}).get("totalNumber") or len(listings)
        skip += len(batch)
        if skip >= total or len(batch) < PAGE_SIZE:
            break
    return listings


class ADPConnector(Connector):
    source_type = "adp"
    label = "ADP Workforce Now"
    identifier_hint = "e.g., 7a8c1e2f-...:9200012345678_1 (cid:ccId[:lang]) or the recruitment page URL"
    identifier_required = "ADP source identifier is required"

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        tenant = parse_identifier(config.source_identifier)

        jobs: List[FetchedJob] = []
        for listing in fetch_adp_requisitions(tenant):
            if not isinstance(listing, dict):
                continue
            raw = listing
            item_id = str(listing.get("itemID") or "")
            try:
                raw = http.get_json(requisition_detail_url(tenant, item_id), "ADP API", headers=ADP_HEADERS)
            except Exception as e:
                logger.warning("[adp] failed to fetch details for requisition %s: %s", item_id, e)

            job = safe_map(self.source_type, map_adp_requisition, raw, tenant)
            if job is None or not job.external_id or not job.title:
                continue
            jobs.append(job)
        return jobs

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        try:
            tenant = parse_identifier(config.source_identifier)
        except ConfigurationError:
            return None

        def _load():
            raw = http.get_json(requisition_detail_url(tenant, external_id), "ADP API", headers=ADP_HEADERS)
            return map_adp_requisition(raw, tenant)

        return self._safe_details(external_id, _load)

    def count_jobs(self, config: ImportSourceConfig) -> int:
        tenant = parse_identifier(config.source_identifier)
        page = http.get_json(requisitions_url(tenant, 0, top=5), "ADP API", headers=ADP_HEADERS)
        total = (page.get("meta") or {}).get("totalNumber")
        return total if isinstance(total, int) else len(page.get("jobRequisitions") or [])


__all__ = ["ADPConnector", "AdpTenant", "parse_identifier", "map_adp_requisition", "fetch_adp_requisitions"]
