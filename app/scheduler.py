# app/scheduler.py
# Daily run: sync every source, then refresh technology mentions for companies whose sync succeeded.
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.config import get_settings
from app.database import SessionLocal
from app.models import ImportSource
from app.sync import sync_all_sources
from app.tech_extractor import extract_technologies_for_company

logger = logging.getLogger("jobsync.scheduler")

JOB_ID = "daily_job_sync"


def run_daily_job(session_factory=SessionLocal) -> None:
    logger.info("Scheduler triggered")
    db = session_factory()
    try:
        results = sync_all_sources(db)

        if get_settings().extract_after_sync:
            ok_ids = [sid for sid, r in results.items() if r.success]
            companies = sorted(
                {cid for (cid,) in db.query(ImportSource.company_id).filter(ImportSource.id.in_(ok_ids)).all()}
            ) if ok_ids else []
            for company_id in companies:
                try:
                    extract_technologies_for_company(db, company_id)
                except Exception:
                    db.rollback()
                    logger.exception("[tech] company=%s extraction failed", company_id)

        logger.info("Daily run finished")
        logger.info("-" * 55)
    except Exception:
        logger.exception("[scheduler] FATAL ERROR")
    finally:
        db.close()


def setup_scheduler(app) -> None:
    if getattr(app.state, "scheduler_started", False):
        return

    cfg = get_settings()
    if not cfg.scheduler_enabled:
        logger.info("[scheduler] DISABLED via SCHEDULER_ENABLED=false")
        return

    hour, minute = [int(x) for x in cfg.scheduler_time.split(":")]
    sched = BackgroundScheduler(timezone=cfg.scheduler_tz)
    sched.add_job(
        run_daily_job,
        trigger=CronTrigger(hour=hour, minute=minute, timezone=cfg.scheduler_tz),
        id=JOB_ID,
        replace_existing=True,
    )
    sched.start()
    app.state.scheduler = sched
    app.state.scheduler_started = True
    logger.info("[scheduler] ENABLED: set to run daily at %02d:%02d %s", hour, minute, cfg.scheduler_tz)


def shutdown_scheduler(app) -> None:
    sched = getattr(app.state, "scheduler", None)
    if sched is not None and sched.running:
        sched.shutdown(wait=False)
    app.state.scheduler_started = False
