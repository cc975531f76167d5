# app/routes/sources.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import crud
from app.database import get_db
from app.schemas import (
    ImportSourceIn,
    ImportSourceOut,
    ImportSourceStats,
    RunLogOut,
    SourceTypeOut,
    SyncResult,
    ValidateIn,
)
from app.sync import sync_source
from connectors.base import ImportSourceConfig, ValidationResult
from connectors.registry import UnsupportedSourceType, describe_source_types, resolve

router = APIRouter()


@router.get("/types", response_model=List[SourceTypeOut])
def source_types():
    return describe_source_types()


@router.post("/validate", response_model=ValidationResult)
def validate_source(body: ValidateIn):
    try:
        connector = resolve(body.source_type)
    except UnsupportedSourceType as e:
        return ValidationResult(valid=False, error=str(e))
    return connector.validate_config(
        ImportSourceConfig(
            source_type=body.source_type,
            source_identifier=body.source_identifier,
            source_url=body.source_url,
        )
    )


@router.get("/", response_model=List[ImportSourceOut])
def list_sources(
    company_id: Optional[int] = Query(None, description="Only sources for this company"),
    db: Session = Depends(get_db),
):
    return crud.list_sources(db, company_id=company_id)


@router.post("/", response_model=ImportSourceOut, status_code=201)
def create_source(body: ImportSourceIn, db: Session = Depends(get_db)):
    try:
        source = crud.create_source(db, body)
    except UnsupportedSourceType as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ImportSourceOut.model_validate(source)


@router.get("/{source_id}", response_model=ImportSourceStats)
def get_source(source_id: int, db: Session = Depends(get_db)):
    stats = crud.source_stats(db, source_id)
    if stats is None:
        raise HTTPException(status_code=404, detail="Source not found")
    return stats


@router.delete("/{source_id}")
def delete_source(source_id: int, db: Session = Depends(get_db)):
    if not crud.delete_source(db, source_id):
        raise HTTPException(status_code=404, detail="Source not found")
    return {"deleted": source_id}


@router.post("/{source_id}/sync", response_model=SyncResult)
def run_sync(source_id: int, db: Session = Depends(get_db)):
    if crud.get_source(db, source_id) is None:
        raise HTTPException(status_code=404, detail="Source not found")
    return sync_source(db, source_id)


@router.get("/{source_id}/runs", response_model=List[RunLogOut])
def source_runs(
    source_id: int,
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    if crud.get_source(db, source_id) is None:
        raise HTTPException(status_code=404, detail="Source not found")
    return crud.list_runs(db, source_id, limit=limit)
