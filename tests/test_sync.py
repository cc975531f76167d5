# tests/test_sync.py
from typing import List

import pytest

from app.config import get_settings
from app.models import ImportSource, Job, RunLog
from app.sync import get_active_jobs, sync_all_sources, sync_source
from connectors import registry
from connectors.base import Connector, FetchError, FetchedJob, ImportSourceConfig


class StubConnector(Connector):
    source_type = "stub"
    label = "Stub"

    def __init__(self):
        self.jobs: List[FetchedJob] = []
        self.error = None

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        if self.error:
            raise self.error
        return list(self.jobs)


def job(ext, title=None, **kw):
    return FetchedJob(external_id=ext, title=title or f"Job {ext}", **kw)


@pytest.fixture
def stub(monkeypatch):
    connector = StubConnector()
    monkeypatch.setitem(registry.CONNECTORS, "stub", connector)
    return connector


@pytest.fixture
def source(db):
    src = ImportSource(company_id=7, source_type="stub", source_identifier="acme")
    db.add(src)
    db.commit()
    return src


def stored(db, source_id):
    return {j.external_id: j for j in db.query(Job).filter(Job.source_id == source_id)}


def test_first_sync_inserts_everything(db, stub, source):
    stub.jobs = [job("A"), job("B", location="St. John's, NL")]
    result = sync_source(db, source.id)

    assert result.success
    assert (result.fetched, result.added, result.updated, result.removed) == (2, 2, 0, 0)
    assert result.total_active == 2
    rows = stored(db, source.id)
    assert rows["B"].location == "St. John's, NL"
    assert rows["A"].company_id == 7
    assert rows["A"].first_seen_at == rows["A"].last_seen_at

    db.refresh(source)
    assert source.fetch_status == "success"
    assert source.fetch_error is None
    assert source.last_fetched_at is not None


def test_added_removed_updated_scenario(db, stub, source):
    stub.jobs = [job("A"), job("B"), job("C")]
    sync_source(db, source.id)

    stub.jobs = [job("B", "Senior B"), job("C"), job("D")]
    result = sync_source(db, source.id)

    assert result.success
    assert result.added == 1
    assert result.updated == 2
    assert result.changed == 1
    assert result.removed == 1
    assert result.total_active == 3

    rows = stored(db, source.id)
    assert rows["A"].status == "removed"
    assert rows["A"].removed_at is not None
    assert rows["B"].title == "Senior B"
    assert {ext for ext, j in rows.items() if j.status == "active"} == {"B", "C", "D"}


def test_sync_is_idempotent(db, stub, source):
    stub.jobs = [job("A"), job("B")]
    sync_source(db, source.id)
    again = sync_source(db, source.id)

    assert again.success
    assert (again.added, again.changed, again.removed, again.reactivated) == (0, 0, 0, 0)
    assert again.updated == 2
    assert db.query(Job).count() == 2


def test_removed_job_is_reactivated(db, stub, source):
    stub.jobs = [job("A"), job("B")]
    sync_source(db, source.id)
    stub.jobs = [job("B")]
    sync_source(db, source.id)
    assert stored(db, source.id)["A"].removed_at is not None

    stub.jobs = [job("A"), job("B")]
    result = sync_source(db, source.id)

    assert result.reactivated == 1
    a = stored(db, source.id)["A"]
    assert a.status == "active"
    assert a.removed_at is None


def test_hidden_job_stays_hidden(db, stub, source):
    stub.jobs = [job("A")]
    sync_source(db, source.id)
    a = stored(db, source.id)["A"]
    a.status = "hidden"
    db.commit()

    stub.jobs = [job("A", "Renamed")]
    sync_source(db, source.id)
    assert stored(db, source.id)["A"].status == "hidden"

    # missing from a run: still hidden, never removed
    stub.jobs = []
    result = sync_source(db, source.id)
    a = stored(db, source.id)["A"]
    assert result.removed == 0
    assert a.status == "hidden"
    assert a.removed_at is None


def test_filled_job_reactivates_by_default(db, stub, source):
    stub.jobs = [job("A")]
    sync_source(db, source.id)
    stored(db, source.id)["A"].status = "filled"
    db.commit()

    result = sync_source(db, source.id)
    assert result.reactivated == 1
    assert stored(db, source.id)["A"].status == "active"


def test_filled_job_sticks_when_gated(db, stub, source, monkeypatch):
    monkeypatch.setenv("REACTIVATE_ONLY_REMOVED", "true")
    get_settings.cache_clear()

    stub.jobs = [job("A")]
    sync_source(db, source.id)
    stored(db, source.id)["A"].status = "expired"
    db.commit()

    result = sync_source(db, source.id)
    assert result.reactivated == 0
    assert stored(db, source.id)["A"].status == "expired"


def test_none_fields_never_clear_stored_values(db, stub, source):
    stub.jobs = [job("A", location="Halifax, NS", department="Engineering")]
    sync_source(db, source.id)
    stub.jobs = [job("A")]
    sync_source(db, source.id)

    a = stored(db, source.id)["A"]
    assert a.location == "Halifax, NS"
    assert a.department == "Engineering"


def test_duplicate_external_ids_keep_first(db, stub, source):
    stub.jobs = [job("A", "First"), job("A", "Second")]
    result = sync_source(db, source.id)

    assert result.fetched == 1
    assert stored(db, source.id)["A"].title == "First"


def test_fetch_failure_is_recorded_and_rows_untouched(db, stub, source):
    stub.jobs = [job("A")]
    sync_source(db, source.id)

    stub.error = FetchError("Greenhouse API error: 503")
    result = sync_source(db, source.id)

    assert not result.success
    assert result.error == "Greenhouse API error: 503"
    db.refresh(source)
    assert source.fetch_status == "error"
    assert source.fetch_error == "Greenhouse API error: 503"
    assert stored(db, source.id)["A"].status == "active"

    run = db.query(RunLog).filter(RunLog.source_id == source.id).order_by(RunLog.id.desc()).first()
    assert run.status == "error"
    assert run.error == "Greenhouse API error: 503"


def test_unknown_source(db):
    result = sync_source(db, 999)
    assert not result.success
    assert result.error == "Source not found"


def test_unsupported_type_fails_without_raising(db):
    src = ImportSource(company_id=1, source_type="nope", source_identifier="x")
    db.add(src)
    db.commit()

    result = sync_source(db, src.id)
    assert not result.success
    assert "Unsupported job source type: nope" in result.error


def test_run_log_written(db, stub, source):
    stub.jobs = [job("A"), job("B")]
    sync_source(db, source.id)

    run = db.query(RunLog).filter(RunLog.source_id == source.id).one()
    assert run.status == "success"
    assert (run.fetched, run.added, run.removed) == (2, 2, 0)
    assert run.ended_at is not None


def test_sync_all_continues_past_failures(db, stub, source):
    broken = ImportSource(company_id=8, source_type="nope", source_identifier="x")
    db.add(broken)
    db.commit()
    stub.jobs = [job("A")]

    results = sync_all_sources(db)
    assert results[source.id].success
    assert not results[broken.id].success


def test_get_active_jobs_scoped_to_company(db, stub, source):
    other = ImportSource(company_id=8, source_type="stub", source_identifier="other")
    db.add(other)
    db.commit()
    stub.jobs = [job("A"), job("B")]
    sync_source(db, source.id)
    sync_source(db, other.id)

    stub.jobs = [job("B")]
    sync_source(db, source.id)

    assert [j.external_id for j in get_active_jobs(db, 7)] == ["B"]
    assert len(get_active_jobs(db, 8)) == 2


def test_unstorable_text_and_broken_records_do_not_fail_the_run(db, fake_http):
    src = ImportSource(company_id=7, source_type="greenhouse", source_identifier="acme")
    db.add(src)
    db.commit()
    fake_http.add(
        "https://boards-api.greenhouse.io/v1/boards/acme/jobs",
        json={
            "jobs": [
                {"id": 1, "title": "Developer", "content": "<p>fine</p>"},
                {"id": 2, "title": "Odd \ud800 title", "content": "<p>bad &#xD800; char</p>"},
                {"id": 3, "title": "Broken", "metadata": [None]},
            ]
        },
    )

    result = sync_source(db, src.id)

    assert result.success, result.error
    assert (result.fetched, result.added) == (2, 2)
    rows = stored(db, src.id)
    assert rows["2"].title == "Odd \ufffd title"
    assert rows["2"].description_text == "bad \ufffd char"

    again = sync_source(db, src.id)
    assert (again.added, again.updated, again.total_active) == (0, 2, 2)


def test_unreachable_career_site_leaves_jobs_alone(db, fake_http):
    src = ImportSource(company_id=9, source_type="custom", source_identifier="triware")
    db.add(src)
    db.commit()
    listing = "https://triware.ca/wp-json/wp/v2/job-listings"
    fake_http.add(listing, json=[{"id": 5, "title": {"rendered": "Systems Analyst"}}])
    assert sync_source(db, src.id).added == 1

    fake_http.add(listing, status=503, text="down")
    fake_http.add("https://triware.ca/wp-json/wp/v2/job_listing", status=503, text="down")
    result = sync_source(db, src.id)

    assert not result.success
    assert "503" in result.error
    assert stored(db, src.id)["5"].status == "active"
    db.refresh(src)
    assert src.fetch_status == "error"
