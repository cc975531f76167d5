# connectors/base.py
# Connector contract shared by every job source, plus the normalized record types.
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel

logger = logging.getLogger("jobsync.connectors")

WORKPLACE_TYPES = ("remote", "onsite", "hybrid")


# ---------------------- errors ----------------------

class ConnectorError(Exception):
    """Base for everything a connector raises on purpose."""


class ConfigurationError(ConnectorError):
    """Malformed source identifier, detected before any network call."""


class FetchError(ConnectorError):
    """Non-success status, timeout or unparseable payload from the platform."""

    def __init__(self, message: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# ---------------------- records ----------------------

class ImportSourceConfig(BaseModel):
    id: Optional[int] = None
    company_id: Optional[int] = None
    source_type: str
    source_identifier: str = ""
    source_url: Optional[str] = None


class FetchedJob(BaseModel):
    """One job as a connector sees it. Anything left as None is unknown, not empty."""

    external_id: str
    title: str
    location: Optional[str] = None
    department: Optional[str] = None
    description_html: Optional[str] = None
    description_text: Optional[str] = None
    url: Optional[str] = None
    workplace_type: Optional[str] = None
    posted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None
    job_count: Optional[int] = None


# ---------------------- workplace rules ----------------------

WorkplaceRules = Sequence[Tuple[Tuple[str, ...], str]]

# first match wins; needles are matched against lowercased text
DEFAULT_WORKPLACE_RULES: WorkplaceRules = (
    (("hybrid",), "hybrid"),
    (("remote",), "remote"),
    (("on-site", "onsite", "on site"), "onsite"),
)


def classify_workplace(text: str | None, rules: WorkplaceRules = DEFAULT_WORKPLACE_RULES) -> Optional[str]:
    t = (text or "").lower()
    if not t:
        return None
    for needles, value in rules:
        if any(n in t for n in needles):
            return value
    return None


# ---------------------- dates ----------------------

def parse_datetime(value) -> Optional[datetime]:
    """ISO strings (with Z / offsets / date-only) and epoch milliseconds -> naive UTC."""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            dt = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        else:
            s = str(value).strip()
            if s.endswith("Z"):
                s = s[:-1] + "+00:00"
            dt = datetime.fromisoformat(s)
    except (ValueError, OverflowError, OSError):
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


# ---------------------- interface ----------------------

class Connector(ABC):
    source_type: str = ""
    label: str = ""
    identifier_hint: str = ""
    identifier_required: str = "Source identifier is required"

    @abstractmethod
    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        """Full listing for one source. Raises FetchError/ConfigurationError only for the primary listing."""

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        return None

    def count_jobs(self, config: ImportSourceConfig) -> int:
        """Cheapest call that proves the source answers; overridden where the platform reports a total."""
        return len(self.fetch_jobs(config))

    def validate_config(self, config: ImportSourceConfig) -> ValidationResult:
        if not (config.source_identifier or "").strip():
            return ValidationResult(valid=False, error=self.identifier_required)
        try:
            count = self.count_jobs(config)
        except Exception as e:
            logger.info("[%s] validation failed for %r: %s", self.source_type, config.source_identifier, e)
            return ValidationResult(valid=False, error=str(e) or e.__class__.__name__)
        return ValidationResult(valid=True, job_count=count)

    def _safe_details(self, external_id: str, fetch) -> Optional[FetchedJob]:
        """Run a detail fetch, turning any failure into None."""
        try:
            return fetch()
        except Exception as e:
            logger.debug("[%s] details for %s unavailable: %s", self.source_type, external_id, e)
            return None


def merge_details(listing: FetchedJob, detail: FetchedJob) -> FetchedJob:
    """Overlay a detail record on its listing record; the listing keeps its external id."""
    updates = {
        k: v
        for k, v in detail.model_dump(exclude={"external_id"}).items()
        if v not in (None, "")
    }
    return listing.model_copy(update=updates)


def safe_map(source_type: str, mapper: Callable[..., Optional[FetchedJob]], raw, *args) -> Optional[FetchedJob]:
    """Map one raw record; a record that cannot be mapped is logged and skipped (None)."""
    try:
        return mapper(raw, *args)
    except Exception as e:
        record_id = raw.get("id") if isinstance(raw, dict) else None
        logger.warning("[%s] skipping malformed record %s: %s", source_type, record_id, e)
        return None


def map_all(source_type: str, mapper: Callable[..., Optional[FetchedJob]], items: Iterable, *args) -> List[FetchedJob]:
    out: List[FetchedJob] = []
    for raw in items:
        job = safe_map(source_type, mapper, raw, *args)
        if job is not None:
            out.append(job)
    return out


def dedupe_jobs(jobs: List[FetchedJob]) -> List[FetchedJob]:
    """Keep the first record per external id."""
    out: List[FetchedJob] = []
    seen: Dict[str, bool] = {}
    for j in jobs:
        if not j.external_id or j.external_id in seen:
            continue
        seen[j.external_id] = True
        out.append(j)
    return out


__all__ = [
    "Connector",
    "ConnectorError",
    "ConfigurationError",
    "FetchError",
    "ImportSourceConfig",
    "FetchedJob",
    "ValidationResult",
    "WORKPLACE_TYPES",
    "DEFAULT_WORKPLACE_RULES",
    "classify_workplace",
    "parse_datetime",
    "dedupe_jobs",
    "merge_details",
    "safe_map",
    "map_all",
]
