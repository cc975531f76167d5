# app/models.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

from utils.delta import ACTIVE, HIDDEN, REMOVED

Base = declarative_base()

FETCH_PENDING = "pending"
FETCH_SUCCESS = "success"
FETCH_ERROR = "error"


def utcnow() -> datetime:
    """Naive UTC, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ImportSource(Base):
    __tablename__ = "import_sources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, nullable=False, index=True)      # owning entity, lives outside this service
    source_type = Column(String, nullable=False)                  # greenhouse | lever | workday | ...
    source_identifier = Column(String, nullable=False)            # board token, org slug, composite key
    source_url = Column(Text, nullable=True)

    last_fetched_at = Column(DateTime, nullable=True)
    fetch_status = Column(String, nullable=True)                  # pending|success|error
    fetch_error = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    jobs = relationship("Job", back_populates="source", cascade="all, delete-orphan")
    runs = relationship("RunLog", back_populates="source", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<ImportSource({self.id} {self.source_type}:{self.source_identifier})>"


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        UniqueConstraint("source_id", "external_id", name="uq_jobs_source_external"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, nullable=False, index=True)
    source_id = Column(Integer, ForeignKey("import_sources.id", ondelete="CASCADE"), nullable=False, index=True)
    external_id = Column(String, nullable=False)

    # normalized catalog
    title = Column(String, nullable=False)
    location = Column(String, nullable=True)
    department = Column(String, nullable=True)
    description_html = Column(Text, nullable=True)
    description_text = Column(Text, nullable=True)
    url = Column(Text, nullable=True)
    workplace_type = Column(String, nullable=True)                # remote|onsite|hybrid
    posted_at = Column(DateTime, nullable=True)
    external_updated_at = Column(DateTime, nullable=True)

    # lifecycle
    status = Column(String, nullable=False, default=ACTIVE)       # active|removed|hidden|filled|expired
    first_seen_at = Column(DateTime, nullable=False, default=utcnow)
    last_seen_at = Column(DateTime, nullable=False, default=utcnow)
    removed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    source = relationship("ImportSource", back_populates="jobs")
    mentions = relationship(
        "TechnologyMention", back_populates="job", cascade="all, delete-orphan"
    )

    def mark_seen(self, now: datetime):
        """Present in a run: refresh last_seen_at, reopen if it had been removed."""
        self.last_seen_at = now
        if self.status != ACTIVE:
            self.status = ACTIVE
            self.removed_at = None

    def mark_removed(self, now: datetime):
        """Missing from a run while active."""
        if self.status == ACTIVE:
            self.status = REMOVED
            self.removed_at = now

    @property
    def is_hidden(self) -> bool:
        return self.status == HIDDEN

    def __repr__(self):
        return f"<Job({self.source_id}:{self.external_id} '{(self.title or '')[:40]}' {self.status})>"


class Technology(Base):
    __tablename__ = "technologies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    visible = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Technology({self.slug})>"


class TechnologyMention(Base):
    __tablename__ = "job_technology_mentions"
    __table_args__ = (
        UniqueConstraint("job_id", "technology_id", name="uq_mentions_job_technology"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    technology_id = Column(Integer, ForeignKey("technologies.id", ondelete="CASCADE"), nullable=False)
    confidence = Column(Integer, nullable=False, default=50)
    context = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    job = relationship("Job", back_populates="mentions")
    technology = relationship("Technology")


class RunLog(Base):
    __tablename__ = "run_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_id = Column(Integer, ForeignKey("import_sources.id", ondelete="CASCADE"), nullable=False, index=True)
    source_type = Column(String, nullable=False)

    started_at = Column(DateTime, nullable=False, default=utcnow)
    ended_at = Column(DateTime, nullable=True)

    fetched = Column(Integer, nullable=False, default=0)
    added = Column(Integer, nullable=False, default=0)
    updated = Column(Integer, nullable=False, default=0)
    removed = Column(Integer, nullable=False, default=0)
    reactivated = Column(Integer, nullable=False, default=0)

    status = Column(String, nullable=False, default="running")  # running|success|error
    error = Column(Text, nullable=True)

    source = relationship("ImportSource", back_populates="runs")

    def finish(self, fetched: int = 0, counts: dict | None = None, status: str = "success", error: str | None = None):
        counts = counts or {}
        self.fetched = fetched
        self.added = counts.get("added", 0)
        self.updated = counts.get("updated", 0)
        self.removed = counts.get("removed", 0)
        self.reactivated = counts.get("reactivated", 0)
        self.ended_at = utcnow()
        self.status = status
        self.error = error

    def __repr__(self):
        return f"<RunLog({self.source_type}:{self.source_id} fetched={self.fetched} added={self.added} removed={self.removed})>"
