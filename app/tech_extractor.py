# app/tech_extractor.py
# Scan job descriptions for known technologies and store one scored mention per (job, technology).
from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Sequence, Tuple

from sqlalchemy.orm import Session

from app.models import Job, Technology, TechnologyMention, utcnow
from app.schemas import BatchExtractionResult, ExtractionResult
from app.tech_aliases import SEED_NAMES, TECH_ALIASES
from utils.delta import ACTIVE
from utils.text import collapse_whitespace, html_to_text

logger = logging.getLogger("jobsync.tech")

# "word" boundaries that still work for c#, c++ and .net
_LEFT = r"(?<![A-Za-z0-9_])"
_RIGHT = r"(?![A-Za-z0-9_])"

BASE_CONFIDENCE = 50
EXACT_CASE_BONUS = 20
REPEAT_BONUS = 5
REPEAT_CAP = 20
MARKER_BONUS = 10
MARKER_WINDOW = 200
MARKERS = ("requirements", "qualifications", "experience with")
CONTEXT_CHARS = 100

TechPatterns = List[Tuple[Technology, List[Pattern]]]


def aliases_for(name: str, slug: str) -> List[str]:
    return list(TECH_ALIASES.get((slug or "").lower()) or TECH_ALIASES.get((name or "").lower()) or [])


def build_patterns(name: str, slug: str) -> List[Pattern]:
    """Name first, then aliases; duplicates (case-insensitive) dropped."""
    patterns: List[Pattern] = []
    seen = set()
    for term in [name] + aliases_for(name, slug):
        key = (term or "").lower()
        if not key or key in seen:
            continue
        seen.add(key)
        patterns.append(re.compile(_LEFT + re.escape(term) + _RIGHT, re.I))
    return patterns


def score_match(match: re.Match, text: str, tech_name: str) -> int:
    confidence = BASE_CONFIDENCE
    if match.group(0) == tech_name:
        confidence += EXACT_CASE_BONUS

    occurrences = len(re.findall(re.escape(match.group(0)), text, re.I))
    if occurrences > 1:
        confidence += min(REPEAT_CAP, occurrences * REPEAT_BONUS)

    i = match.start()
    window = text[max(0, i - MARKER_WINDOW):i + MARKER_WINDOW].lower()
    if any(marker in window for marker in MARKERS):
        confidence += MARKER_BONUS

    return min(100, confidence)


def match_context(text: str, match: re.Match, chars: int = CONTEXT_CHARS) -> str:
    start = max(0, match.start() - chars)
    end = min(len(text), match.end() + chars)
    snippet = text[start:end]
    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet = snippet + "..."
    return collapse_whitespace(snippet)


def find_mentions(text: str, techs: TechPatterns) -> List[Tuple[Technology, int, str]]:
    """(technology, confidence, context) for every technology found; first matching pattern wins."""
    found = []
    for tech, patterns in techs:
        for pattern in patterns:
            m = pattern.search(text)
            if m:
                found.append((tech, score_match(m, text, tech.name), match_context(text, m)))
                break
    return found


def load_tech_patterns(db: Session) -> TechPatterns:
    techs = db.query(Technology).filter(Technology.visible.is_(True)).order_by(Technology.id).all()
    return [(t, build_patterns(t.name, t.slug)) for t in techs]


def job_text(job: Job) -> str:
    return job.description_text or html_to_text(job.description_html)


def clear_tech_mentions_for_job(db: Session, job_id: int) -> int:
    deleted = (
        db.query(TechnologyMention)
        .filter(TechnologyMention.job_id == job_id)
        .delete(synchronize_session="fetch")
    )
    job = db.get(Job, job_id)
    if job is not None:
        db.expire(job, ["mentions"])
    return deleted


def _extract(db: Session, job: Job, techs: TechPatterns) -> ExtractionResult:
    clear_tech_mentions_for_job(db, job.id)
    text = job_text(job)
    if not text:
        return ExtractionResult()

    now = utcnow()
    mentions = find_mentions(text, techs)
    for tech, confidence, context in mentions:
        db.add(
            TechnologyMention(
                job_id=job.id,
                technology_id=tech.id,
                confidence=confidence,
                context=context,
                created_at=now,
            )
        )
    return ExtractionResult(found=len(mentions), inserted=len(mentions))


def extract_technologies_from_job(db: Session, job_id: int, techs: Optional[TechPatterns] = None) -> ExtractionResult:
    """Replace a job's mentions with a fresh scan. Idempotent."""
    job = db.get(Job, job_id)
    if job is None:
        return ExtractionResult()
    result = _extract(db, job, techs if techs is not None else load_tech_patterns(db))
    db.commit()
    return result


def _extract_many(db: Session, jobs: Sequence[Job]) -> BatchExtractionResult:
    techs = load_tech_patterns(db)
    total = 0
    for job in jobs:
        total += _extract(db, job, techs).inserted
    db.commit()
    return BatchExtractionResult(jobs=len(jobs), mentions=total)


def extract_technologies_for_company(db: Session, company_id: int) -> BatchExtractionResult:
    jobs = db.query(Job).filter(Job.company_id == company_id, Job.status == ACTIVE).order_by(Job.id).all()
    result = _extract_many(db, jobs)
    logger.info("[tech] company=%s jobs=%d mentions=%d", company_id, result.jobs, result.mentions)
    return result


def extract_technologies_for_all_jobs(db: Session) -> BatchExtractionResult:
    jobs = db.query(Job).filter(Job.status == ACTIVE).order_by(Job.id).all()
    result = _extract_many(db, jobs)
    logger.info("[tech] all active jobs=%d mentions=%d", result.jobs, result.mentions)
    return result


def get_tech_mentions_for_job(db: Session, job_id: int) -> List[TechnologyMention]:
    return (
        db.query(TechnologyMention)
        .join(Technology, TechnologyMention.technology_id == Technology.id)
        .filter(TechnologyMention.job_id == job_id)
        .order_by(TechnologyMention.confidence.desc(), Technology.name)
        .all()
    )


def seed_technologies(db: Session) -> int:
    """Insert any alias-table technology missing from the technologies table. Returns rows added."""
    existing = {slug for (slug,) in db.query(Technology.slug).all()}
    added = 0
    for slug, name in SEED_NAMES.items():
        if slug in existing:
            continue
        db.add(Technology(name=name, slug=slug, visible=True))
        added += 1
    db.commit()
    logger.info("[tech] seeded %d technologies", added)
    return added


__all__ = [
    "build_patterns",
    "score_match",
    "match_context",
    "find_mentions",
    "extract_technologies_from_job",
    "extract_technologies_for_company",
    "extract_technologies_for_all_jobs",
    "get_tech_mentions_for_job",
    "clear_tech_mentions_for_job",
    "seed_technologies",
]
