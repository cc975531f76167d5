# tests/test_scheduler.py
from types import SimpleNamespace

from app import scheduler
from app.config import get_settings
from app.models import ImportSource, Job, Technology, TechnologyMention
from connectors import registry
from connectors.base import Connector, FetchedJob


class OneJob(Connector):
    source_type = "one"

    def fetch_jobs(self, config):
        return [FetchedJob(external_id="1", title="Dev", description_text="We use Python daily")]


def seed(session_factory):
    db = session_factory()
    db.add_all(
        [
            ImportSource(company_id=1, source_type="one", source_identifier="a"),
            ImportSource(company_id=2, source_type="missing", source_identifier="b"),
            Technology(name="Python", slug="python"),
        ]
    )
    db.commit()
    db.close()


def test_daily_job_syncs_and_extracts(session_factory, monkeypatch):
    monkeypatch.setitem(registry.CONNECTORS, "one", OneJob())
    seed(session_factory)

    scheduler.run_daily_job(session_factory)

    db = session_factory()
    try:
        assert db.query(Job).count() == 1
        assert db.query(TechnologyMention).count() == 1
        failed = db.query(ImportSource).filter(ImportSource.company_id == 2).one()
        assert failed.fetch_status == "error"
    finally:
        db.close()


def test_daily_job_can_skip_extraction(session_factory, monkeypatch):
    monkeypatch.setenv("EXTRACT_AFTER_SYNC", "false")
    get_settings.cache_clear()
    monkeypatch.setitem(registry.CONNECTORS, "one", OneJob())
    seed(session_factory)

    scheduler.run_daily_job(session_factory)

    db = session_factory()
    try:
        assert db.query(Job).count() == 1
        assert db.query(TechnologyMention).count() == 0
    finally:
        db.close()


def test_scheduler_disabled(monkeypatch):
    monkeypatch.setenv("SCHEDULER_ENABLED", "false")
    get_settings.cache_clear()
    app = SimpleNamespace(state=SimpleNamespace())

    scheduler.setup_scheduler(app)
    assert not getattr(app.state, "scheduler_started", False)


def test_scheduler_registers_daily_cron(monkeypatch):
    monkeypatch.setenv("SCHEDULER_TIME", "7:30")
    monkeypatch.setenv("SCHEDULER_TZ", "UTC")
    get_settings.cache_clear()
    app = SimpleNamespace(state=SimpleNamespace())

    scheduler.setup_scheduler(app)
    try:
        job = app.state.scheduler.get_job(scheduler.JOB_ID)
        assert job is not None
        assert str(job.trigger.fields[5]) == "7"   # hour
        assert str(job.trigger.fields[6]) == "30"  # minute
    finally:
        scheduler.shutdown_scheduler(app)
    assert app.state.scheduler_started is False
