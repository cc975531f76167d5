# app/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import engine, test_connection
from app.logger import configure_logging
from app.models import Base, utcnow
from app.routes.jobs import router as jobs_router
from app.routes.sources import router as sources_router
from app.scheduler import setup_scheduler, shutdown_scheduler

configure_logging()
logger = logging.getLogger("jobsync")

SERVICE_NAME = "Job Sync API"
VERSION = "1.0.0"

ENDPOINTS = [
    "/health",
    "/api/sources",
    "/api/sources/types",
    "/api/sources/validate",
    "/api/sources/{id}/sync",
    "/api/sources/{id}/runs",
    "/api/jobs",
    "/api/jobs/summary",
    "/api/jobs/company/{company_id}",
    "/api/jobs/{id}/technologies",
]

app = FastAPI(title=SERVICE_NAME, version=VERSION)

origins = list(get_settings().cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sources_router, prefix="/api/sources", tags=["sources"])
app.include_router(jobs_router, prefix="/api/jobs", tags=["jobs"])


@app.on_event("startup")
def on_startup():
    # debug only; run.log is for sync summaries
    test_connection()
    Base.metadata.create_all(bind=engine)
    logger.debug("Database ready at %s", engine.url)
    setup_scheduler(app)


@app.on_event("shutdown")
def on_shutdown():
    shutdown_scheduler(app)


@app.get("/health", tags=["meta"])
def health():
    return {"status": "ok"}


@app.get("/", tags=["meta"])
def index():
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "endpoints": ENDPOINTS,
        "now": utcnow().isoformat(timespec="seconds"),
    }
