# app/routes/jobs.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import crud
from app.database import get_db
from app.schemas import BatchExtractionResult, ExtractionResult, JobOut, JobsSummary, MentionOut
from app.sync import get_active_jobs
from app.tech_extractor import (
    extract_technologies_for_all_jobs,
    extract_technologies_for_company,
    extract_technologies_from_job,
    get_tech_mentions_for_job,
)

router = APIRouter()


# ------------------ Read endpoints ------------------
@router.get("/", response_model=List[JobOut])
def list_jobs(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    company_id: Optional[int] = Query(None),
    source_id: Optional[int] = Query(None),
    status: Optional[str] = Query("active", description="active, removed, hidden, filled, expired; empty for all"),
    title: Optional[str] = Query(None, description="Search in title (ILIKE)"),
    db: Session = Depends(get_db),
):
    return crud.list_jobs(
        db,
        company_id=company_id,
        source_id=source_id,
        status=status or None,
        title=title,
        limit=limit,
        offset=offset,
    )


@router.get("/summary", response_model=JobsSummary)
def jobs_summary(db: Session = Depends(get_db)):
    return crud.jobs_summary(db)


@router.get("/company/{company_id}", response_model=List[JobOut])
def company_jobs(company_id: int, db: Session = Depends(get_db)):
    return get_active_jobs(db, company_id)


@router.post("/technologies/extract", response_model=BatchExtractionResult)
def extract_batch(
    company_id: Optional[int] = Query(None, description="Limit to one company's active jobs"),
    db: Session = Depends(get_db),
):
    if company_id is not None:
        return extract_technologies_for_company(db, company_id)
    return extract_technologies_for_all_jobs(db)


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: int, db: Session = Depends(get_db)):
    row = crud.get_job(db, job_id)
    if not row:
        raise HTTPException(status_code=404, detail="Job not found")
    return row


# ------------------ Moderation ------------------
@router.post("/{job_id}/hide", response_model=JobOut)
def hide_job(job_id: int, db: Session = Depends(get_db)):
    row = crud.hide_job(db, job_id)
    if not row:
        raise HTTPException(status_code=404, detail="Job not found")
    return row


@router.post("/{job_id}/unhide", response_model=JobOut)
def unhide_job(job_id: int, db: Session = Depends(get_db)):
    row = crud.unhide_job(db, job_id)
    if not row:
        raise HTTPException(status_code=404, detail="Job not found")
    return row


# ------------------ Technologies ------------------
@router.get("/{job_id}/technologies", response_model=List[MentionOut])
def job_technologies(job_id: int, db: Session = Depends(get_db)):
    if not crud.get_job(db, job_id):
        raise HTTPException(status_code=404, detail="Job not found")
    return get_tech_mentions_for_job(db, job_id)


@router.post("/{job_id}/technologies/extract", response_model=ExtractionResult)
def extract_job_technologies(job_id: int, db: Session = Depends(get_db)):
    if not crud.get_job(db, job_id):
        raise HTTPException(status_code=404, detail="Job not found")
    return extract_technologies_from_job(db, job_id)
