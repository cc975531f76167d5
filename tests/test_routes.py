# tests/test_routes.py
import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app
from app.models import ImportSource, Job, Technology
from connectors import registry
from connectors.base import Connector, FetchedJob


class StaticConnector(Connector):
    source_type = "static"
    label = "Static"
    identifier_hint = "anything"

    def fetch_jobs(self, config):
        return [
            FetchedJob(external_id="1", title="Python Developer", description_text="Python and Docker"),
            FetchedJob(external_id="2", title="Designer"),
        ]


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setitem(registry.CONNECTORS, "static", StaticConnector())

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: startup (scheduler, real DB) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_source(client, company_id=7, source_type="static"):
    resp = client.post(
        "/api/sources/",
        json={"company_id": company_id, "source_type": source_type, "source_identifier": "acme"},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_meta(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert "/api/sources" in client.get("/").json()["endpoints"]


def test_source_types_and_validate(client, fake_http):
    types = client.get("/api/sources/types").json()
    assert types[0] == {
        "source_type": "greenhouse",
        "label": "Greenhouse",
        "identifier_hint": "e.g., acmecorp (board token from boards.greenhouse.io/acmecorp)",
    }

    resp = client.post("/api/sources/validate", json={"source_type": "greenhouse", "source_identifier": ""})
    assert resp.json() == {"valid": False, "error": "Board token is required", "job_count": None}

    resp = client.post("/api/sources/validate", json={"source_type": "taleo", "source_identifier": "x"})
    assert resp.json()["valid"] is False
    assert fake_http.calls == []


def test_create_rejects_unsupported_type(client):
    resp = client.post("/api/sources/", json={"company_id": 1, "source_type": "taleo", "source_identifier": "x"})
    assert resp.status_code == 400
    assert "Unsupported job source type: taleo" in resp.json()["detail"]


def test_sync_and_browse_jobs(client):
    source = create_source(client)

    result = client.post(f"/api/sources/{source['id']}/sync").json()
    assert result["success"] is True
    assert (result["added"], result["total_active"]) == (2, 2)

    listed = client.get("/api/sources/").json()
    assert listed[0]["active_job_count"] == 2

    stats = client.get(f"/api/sources/{source['id']}").json()
    assert (stats["active_job_count"], stats["removed_job_count"], stats["total_job_count"]) == (2, 0, 2)
    assert stats["fetch_status"] == "success"

    runs = client.get(f"/api/sources/{source['id']}/runs").json()
    assert [r["status"] for r in runs] == ["success"]

    jobs = client.get("/api/jobs/", params={"company_id": 7}).json()
    assert sorted(j["external_id"] for j in jobs) == ["1", "2"]
    assert client.get("/api/jobs/", params={"title": "python"}).json()[0]["title"] == "Python Developer"
    assert len(client.get("/api/jobs/company/7").json()) == 2

    summary = client.get("/api/jobs/summary").json()
    assert summary["total"] == 2
    assert summary["by_status"] == {"active": 2}
    assert summary["by_source_type"] == {"static": 2}


def test_hide_and_unhide(client, session_factory):
    source = create_source(client)
    client.post(f"/api/sources/{source['id']}/sync")
    job_id = client.get("/api/jobs/").json()[0]["id"]

    assert client.post(f"/api/jobs/{job_id}/hide").json()["status"] == "hidden"
    client.post(f"/api/sources/{source['id']}/sync")
    assert client.get(f"/api/jobs/{job_id}").json()["status"] == "hidden"
    assert job_id not in [j["id"] for j in client.get("/api/jobs/").json()]
    assert job_id in [j["id"] for j in client.get("/api/jobs/", params={"status": "hidden"}).json()]

    assert client.post(f"/api/jobs/{job_id}/unhide").json()["status"] == "active"


def test_technology_endpoints(client, session_factory):
    db = session_factory()
    db.add_all([Technology(name="Python", slug="python"), Technology(name="Docker", slug="docker")])
    db.commit()
    db.close()

    source = create_source(client)
    client.post(f"/api/sources/{source['id']}/sync")
    job = next(j for j in client.get("/api/jobs/").json() if j["external_id"] == "1")

    result = client.post(f"/api/jobs/{job['id']}/technologies/extract").json()
    assert result == {"found": 2, "inserted": 2}
    mentions = client.get(f"/api/jobs/{job['id']}/technologies").json()
    assert {m["technology"]["slug"] for m in mentions} == {"python", "docker"}

    batch = client.post("/api/jobs/technologies/extract", params={"company_id": 7}).json()
    assert batch == {"jobs": 2, "mentions": 2}


def test_not_found(client):
    assert client.get("/api/jobs/999").status_code == 404
    assert client.post("/api/jobs/999/hide").status_code == 404
    assert client.get("/api/jobs/999/technologies").status_code == 404
    assert client.get("/api/sources/999").status_code == 404
    assert client.delete("/api/sources/999").status_code == 404
    assert client.post("/api/sources/999/sync").status_code == 404


def test_delete_source_cascades(client, session_factory):
    source = create_source(client)
    client.post(f"/api/sources/{source['id']}/sync")

    assert client.delete(f"/api/sources/{source['id']}").json() == {"deleted": source["id"]}

    db = session_factory()
    try:
        assert db.query(ImportSource).count() == 0
        assert db.query(Job).count() == 0
    finally:
        db.close()
