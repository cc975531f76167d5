# app/crud.py
# Read/write helpers shared by the routes and the CLI. Sync and extraction live in app.sync / app.tech_extractor.
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import ImportSource, Job, RunLog
from app.schemas import ImportSourceIn, ImportSourceOut, ImportSourceStats, JobsSummary
from connectors.registry import UnsupportedSourceType, is_supported, available_source_types
from utils.delta import ACTIVE, HIDDEN, REMOVED


def _job_counts(db: Session, source_ids: List[int]) -> Dict[int, Dict[str, int]]:
    """source_id -> {status: count}"""
    counts: Dict[int, Dict[str, int]] = {sid: {} for sid in source_ids}
    if not source_ids:
        return counts
    rows = (
        db.query(Job.source_id, Job.status, func.count(Job.id))
        .filter(Job.source_id.in_(source_ids))
        .group_by(Job.source_id, Job.status)
        .all()
    )
    for sid, status, n in rows:
        counts[sid][status] = n
    return counts


def _source_out(source: ImportSource, counts: Dict[str, int]) -> ImportSourceOut:
    out = ImportSourceOut.model_validate(source)
    out.active_job_count = counts.get(ACTIVE, 0)
    return out


# ------------------ sources ------------------

def create_source(db: Session, data: ImportSourceIn) -> ImportSource:
    if not is_supported(data.source_type):
        raise UnsupportedSourceType(
            f"Unsupported job source type: {data.source_type}. Supported types: {', '.join(available_source_types())}"
        )
    source = ImportSource(
        company_id=data.company_id,
        source_type=data.source_type,
        source_identifier=data.source_identifier.strip(),
        source_url=data.source_url or None,
    )
    db.add(source)
    db.commit()
    db.refresh(source)
    return source


def get_source(db: Session, source_id: int) -> Optional[ImportSource]:
    return db.get(ImportSource, source_id)


def delete_source(db: Session, source_id: int) -> bool:
    """Deletes the source with its jobs, mentions and run logs."""
    source = db.get(ImportSource, source_id)
    if source is None:
        return False
    db.delete(source)
    db.commit()
    return True


def list_sources(db: Session, company_id: Optional[int] = None) -> List[ImportSourceOut]:
    q = db.query(ImportSource)
    if company_id is not None:
        q = q.filter(ImportSource.company_id == company_id)
    sources = q.order_by(ImportSource.id).all()
    counts = _job_counts(db, [s.id for s in sources])
    return [_source_out(s, counts[s.id]) for s in sources]


def source_stats(db: Session, source_id: int) -> Optional[ImportSourceStats]:
    source = db.get(ImportSource, source_id)
    if source is None:
        return None
    counts = _job_counts(db, [source.id])[source.id]
    stats = ImportSourceStats.model_validate(source)
    stats.active_job_count = counts.get(ACTIVE, 0)
    stats.removed_job_count = counts.get(REMOVED, 0)
    stats.total_job_count = sum(counts.values())
    return stats


def list_runs(db: Session, source_id: int, limit: int = 20) -> List[RunLog]:
    return (
        db.query(RunLog)
        .filter(RunLog.source_id == source_id)
        .order_by(RunLog.started_at.desc(), RunLog.id.desc())
        .limit(limit)
        .all()
    )


# ------------------ jobs ------------------

def get_job(db: Session, job_id: int) -> Optional[Job]:
    return db.get(Job, job_id)


def list_jobs(
    db: Session,
    company_id: Optional[int] = None,
    source_id: Optional[int] = None,
    status: Optional[str] = ACTIVE,
    title: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[Job]:
    q = db.query(Job)
    if company_id is not None:
        q = q.filter(Job.company_id == company_id)
    if source_id is not None:
        q = q.filter(Job.source_id == source_id)
    if status:
        q = q.filter(Job.status == status)
    if title:
        q = q.filter(Job.title.ilike(f"%{title}%"))
    return q.order_by(Job.id.desc()).limit(limit).offset(offset).all()


def _set_status(db: Session, job_id: int, status: str) -> Optional[Job]:
    job = db.get(Job, job_id)
    if job is None:
        return None
    job.status = status
    if status != REMOVED:
        job.removed_at = None
    db.commit()
    db.refresh(job)
    return job


def hide_job(db: Session, job_id: int) -> Optional[Job]:
    """Hidden rows are left alone by every later sync."""
    return _set_status(db, job_id, HIDDEN)


def unhide_job(db: Session, job_id: int) -> Optional[Job]:
    return _set_status(db, job_id, ACTIVE)


def jobs_summary(db: Session) -> JobsSummary:
    total = db.query(func.count(Job.id)).scalar() or 0
    by_status = db.query(Job.status, func.count(Job.id)).group_by(Job.status).all()
    by_type = (
        db.query(ImportSource.source_type, func.count(Job.id))
        .join(Job, Job.source_id == ImportSource.id)
        .group_by(ImportSource.source_type)
        .all()
    )
    by_company = (
        db.query(Job.company_id, func.count(Job.id))
        .filter(Job.status == ACTIVE)
        .group_by(Job.company_id)
        .order_by(func.count(Job.id).desc())
        .limit(20)
        .all()
    )
    return JobsSummary(
        total=total,
        by_status={k or "unknown": v for k, v in by_status},
        by_source_type={k or "unknown": v for k, v in by_type},
        top_companies=[{"company_id": c, "active": n} for c, n in by_company],
    )
