# app/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    source_id: int
    external_id: str
    title: str
    location: str | None = None
    department: str | None = None
    description_html: str | None = None
    description_text: str | None = None
    url: str | None = None
    workplace_type: str | None = None
    posted_at: datetime | None = None
    external_updated_at: datetime | None = None

    status: str
    first_seen_at: datetime
    last_seen_at: datetime
    removed_at: datetime | None = None


class ImportSourceIn(BaseModel):
    company_id: int
    source_type: str
    source_identifier: str
    source_url: str | None = None


class ValidateIn(BaseModel):
    source_type: str
    source_identifier: str = ""
    source_url: str | None = None


class ImportSourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    source_type: str
    source_identifier: str
    source_url: str | None = None
    last_fetched_at: datetime | None = None
    fetch_status: str | None = None
    fetch_error: str | None = None
    active_job_count: int = 0


class ImportSourceStats(ImportSourceOut):
    removed_job_count: int = 0
    total_job_count: int = 0


class SourceTypeOut(BaseModel):
    source_type: str
    label: str
    identifier_hint: str


class SyncResult(BaseModel):
    success: bool
    error: Optional[str] = None
    fetched: int = 0
    added: int = 0
    updated: int = 0
    changed: int = 0
    removed: int = 0
    reactivated: int = 0
    total_active: int = 0


class RunLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source_id: int
    source_type: str
    started_at: datetime
    ended_at: datetime | None = None
    fetched: int
    added: int
    updated: int
    removed: int
    reactivated: int
    status: str
    error: str | None = None


class TechnologyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class MentionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    technology: TechnologyOut
    confidence: int
    context: str | None = None
    created_at: datetime


class ExtractionResult(BaseModel):
    found: int = 0
    inserted: int = 0


class BatchExtractionResult(BaseModel):
    jobs: int = 0
    mentions: int = 0


class JobsSummary(BaseModel):
    total: int
    by_status: dict
    by_source_type: dict
    top_companies: List[dict]
