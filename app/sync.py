# app/sync.py
# Reconciliation: one source, one fetch, one transaction. Diff the fetched set against stored jobs
# and move every row through the active / removed / hidden lifecycle.
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import FETCH_ERROR, FETCH_PENDING, FETCH_SUCCESS, ImportSource, Job, RunLog, utcnow
from app.schemas import SyncResult
from connectors.base import FetchedJob, ImportSourceConfig, dedupe_jobs
from connectors.registry import resolve
from utils.delta import ACTIVE, plan_reconciliation
from utils.text import scrub_surrogates

logger = logging.getLogger("jobsync.sync")

# FetchedJob field -> Job column
FIELD_MAP = {
    "title": "title",
    "location": "location",
    "department": "department",
    "description_html": "description_html",
    "description_text": "description_text",
    "url": "url",
    "workplace_type": "workplace_type",
    "posted_at": "posted_at",
    "updated_at": "external_updated_at",
}


def source_config(source: ImportSource) -> ImportSourceConfig:
    return ImportSourceConfig(
        id=source.id,
        company_id=source.company_id,
        source_type=source.source_type,
        source_identifier=source.source_identifier or "",
        source_url=source.source_url,
    )


def apply_fields(job: Job, fetched: FetchedJob) -> bool:
    """Copy every field the connector populated; None means unknown and never clears. True if anything changed."""
    changed = False
    for attr, column in FIELD_MAP.items():
        value = getattr(fetched, attr)
        if value is None:
            continue
        if getattr(job, column) != value:
            setattr(job, column, value)
            changed = True
    return changed


def clean_fetched(fetched: FetchedJob) -> FetchedJob:
    """Lone surrogates (from JSON escapes) cannot be stored as UTF-8; swap them for U+FFFD."""
    updates = {}
    for field, value in fetched.model_dump().items():
        if isinstance(value, str):
            cleaned = scrub_surrogates(value)
            if cleaned != value:
                updates[field] = cleaned
    return fetched.model_copy(update=updates) if updates else fetched


def _new_job(source: ImportSource, fetched: FetchedJob, now: datetime) -> Job:
    job = Job(
        company_id=source.company_id,
        source_id=source.id,
        external_id=fetched.external_id,
        status=ACTIVE,
        first_seen_at=now,
        last_seen_at=now,
    )
    apply_fields(job, fetched)
    return job


def count_active(db: Session, source_id: int) -> int:
    return db.query(func.count(Job.id)).filter(Job.source_id == source_id, Job.status == ACTIVE).scalar() or 0


def _reconcile(db: Session, source: ImportSource, fetched: List[FetchedJob], now: datetime) -> Dict[str, int]:
    existing: Dict[str, Job] = {j.external_id: j for j in db.query(Job).filter(Job.source_id == source.id)}
    by_ext = {f.external_id: f for f in fetched}
    plan = plan_reconciliation(
        {ext: job.status for ext, job in existing.items()},
        [f.external_id for f in fetched],
        reactivate_only_removed=get_settings().reactivate_only_removed,
    )

    changed = 0
    for ext in plan["added"]:
        db.add(_new_job(source, by_ext[ext], now))

    for ext in plan["updated"]:
        job = existing[ext]
        if apply_fields(job, by_ext[ext]):
            changed += 1
        job.last_seen_at = now

    for ext in plan["reactivated"]:
        job = existing[ext]
        if apply_fields(job, by_ext[ext]):
            changed += 1
        job.mark_seen(now)

    # sticky rows: only last_seen moves
    for ext in plan["touched"]:
        existing[ext].last_seen_at = now

    for ext in plan["removed"]:
        existing[ext].mark_removed(now)

    return {
        "added": len(plan["added"]),
        "updated": len(plan["updated"]) + len(plan["touched"]),
        "changed": changed,
        "removed": len(plan["removed"]),
        "reactivated": len(plan["reactivated"]),
    }


def sync_source(db: Session, source_id: int) -> SyncResult:
    """
    Fetch one source and reconcile its jobs. Never raises: every failure comes back as
    SyncResult(success=False, error=...) and is persisted on the source as fetch_status=error.
    """
    source = db.get(ImportSource, source_id)
    if source is None:
        return SyncResult(success=False, error="Source not found")

    source.fetch_status = FETCH_PENDING
    source.fetch_error = None
    run = RunLog(source_id=source.id, source_type=source.source_type, status="running", started_at=utcnow())
    db.add(run)
    db.commit()

    fetched_count = 0
    try:
        connector = resolve(source.source_type)
        fetched = dedupe_jobs([clean_fetched(f) for f in connector.fetch_jobs(source_config(source))])
        fetched_count = len(fetched)

        now = utcnow()
        counts = _reconcile(db, source, fetched, now)
        db.flush()
        total_active = count_active(db, source.id)

        source.last_fetched_at = now
        source.fetch_status = FETCH_SUCCESS
        source.fetch_error = None
        run.finish(fetched=fetched_count, counts=counts, status="success")
        db.commit()
    except Exception as e:
        db.rollback()
        error = str(e) or e.__class__.__name__
        logger.exception("[%s] source=%s sync failed", source.source_type, source_id)
        try:
            source.last_fetched_at = utcnow()
            source.fetch_status = FETCH_ERROR
            source.fetch_error = error
            run.finish(fetched=fetched_count, status="error", error=error)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("[%s] source=%s could not record sync failure", source.source_type, source_id)
        return SyncResult(success=False, error=error, fetched=fetched_count)

    logger.info(
        "[%s] source=%s fetched=%d added=%d updated=%d removed=%d reactivated=%d active=%d",
        source.source_type,
        source.id,
        fetched_count,
        counts["added"],
        counts["updated"],
        counts["removed"],
        counts["reactivated"],
        total_active,
    )
    return SyncResult(success=True, fetched=fetched_count, total_active=total_active, **counts)


def sync_all_sources(db: Session) -> Dict[int, SyncResult]:
    """Every source in id order; one failing source never stops the rest."""
    results: Dict[int, SyncResult] = {}
    source_ids = [sid for (sid,) in db.query(ImportSource.id).order_by(ImportSource.id).all()]
    for sid in source_ids:
        results[sid] = sync_source(db, sid)
    ok = sum(1 for r in results.values() if r.success)
    logger.info("Sync finished: %d/%d sources succeeded", ok, len(results))
    return results


def get_active_jobs(db: Session, company_id: int) -> List[Job]:
    return (
        db.query(Job)
        .filter(Job.company_id == company_id, Job.status == ACTIVE)
        .order_by(Job.first_seen_at, Job.id)
        .all()
    )


__all__ = [
    "sync_source",
    "sync_all_sources",
    "get_active_jobs",
    "apply_fields",
    "clean_fetched",
    "count_active",
    "FIELD_MAP",
]
