# tests/test_custom_sites.py
from datetime import datetime
from pathlib import Path

import pytest

from connectors import custom
from connectors.base import ConfigurationError, FetchError, FetchedJob, ImportSourceConfig
from connectors.custom import SCRAPERS, CustomConnector
from connectors.sites import aker_solutions, bluedrop, compusult, focusfs, rutter, strobeltek, triware, vish
from connectors.sites.common import ST_JOHNS, heading_sections, make_job

FIXTURES = Path(__file__).parent / "fixtures"


def fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def cfg(identifier, url=None):
    return ImportSourceConfig(source_type="custom", source_identifier=identifier, source_url=url)


def test_compusult_blocks():
    jobs = compusult.parse_page(fixture("compusult.html"))

    assert [(j.external_id, j.title, j.location) for j in jobs] == [
        ("senior-gis-developer", "Senior GIS Developer", "St. John's, NL"),
        ("java-developer", "Java Developer", "Remote"),
    ]
    gis = jobs[0]
    assert "Location:" not in gis.description_html
    assert "Build mapping tools" in gis.description_text
    assert "PostGIS" in gis.description_text
    assert jobs[1].description_html is None


def test_compusult_without_marker():
    assert compusult.parse_page("<html><h3>Nothing here</h3></html>") == []


def test_strobeltek_sections():
    jobs = strobeltek.parse_page(fixture("strobeltek.html"))

    assert [j.title for j in jobs] == ["Marine Systems Technician", "Software Developer"]
    tech, dev = jobs
    assert tech.location == "St. John's, NL"
    assert tech.department == "12 months"
    assert "sea trials" in tech.description_text
    assert dev.location == "Mount Pearl"
    assert dev.department is None
    assert dev.external_id == "software-developer"


def test_vish_role_sections():
    jobs = vish.parse_page(fixture("vish.html"))

    assert [j.external_id for j in jobs] == ["senior-software-engineer", "sales-representative"]
    engineer = jobs[0]
    # the "Requirements" heading belongs to the role above it
    assert "Node.js" in engineer.description_text
    assert "Sales Representative" not in engineer.description_text
    assert "careers@getvish.com" not in jobs[1].description_text


def test_vish_title_heuristics():
    assert vish.is_likely_job_title("Full Stack Developer", "")
    assert vish.is_likely_job_title("Join our team", "")
    assert not vish.is_likely_job_title("Requirements", "")
    assert not vish.is_likely_job_title("Developer", "")
    assert not vish.is_likely_job_title("Contact Sales", "")
    assert not vish.is_likely_job_title("What we offer engineers", "")


def test_bluedrop_toggles():
    html = """
    <div class="azc_tsh_toggle"><h3 class="azc_tsh_toggle_title">Our Current Opportunities</h3></div>
    <div class="azc_tsh_toggle">
      <h3 class="azc_tsh_toggle_title">Instructional Designer</h3>
      <div class="azc_tsh_toggle_container"><p>Design courses.</p></div>
    </div>
    """
    [job] = bluedrop.parse_page(html)
    assert job.external_id == "instructional-designer"
    assert job.location == ST_JOHNS
    assert job.description_html == "<p>Design courses.</p>"
    assert job.description_text == "Design courses."


def test_bluedrop_heading_fallback():
    html = '<div id="jobs"><h2>Careers</h2><h3>No current openings</h3><h3>Simulation Engineer</h3></div>'
    jobs = bluedrop.parse_page(html)
    assert [j.title for j in jobs] == ["Simulation Engineer"]


def test_heading_sections_offsets():
    html = "<p>x</p><h3 class='a'>One</h3><p>y</p><h3> </h3><H3>Two</H3>"
    sections = heading_sections(html)
    assert [(attrs, title) for attrs, title, _ in sections] == [(" class='a'", "One"), ("", "Two")]
    assert html[sections[1][2]:].startswith("<H3>Two")


def test_make_job_derives_text():
    job = make_job(external_id="x", title="X", description_html="<p>Hello&nbsp;there</p>")
    assert job.description_text == "Hello there"


# ------------------ dispatcher ------------------

def test_custom_connector_dispatches_and_dedupes(monkeypatch):
    seen_urls = []

    def fake_scraper(careers_url=""):
        seen_urls.append(careers_url)
        return [FetchedJob(external_id="a", title="A"), FetchedJob(external_id="a", title="A again")]

    monkeypatch.setitem(SCRAPERS, "acme", fake_scraper)
    jobs = CustomConnector().fetch_jobs(cfg("acme", "https://acme.example/careers"))

    assert [j.title for j in jobs] == ["A"]
    assert seen_urls == ["https://acme.example/careers"]


def test_custom_connector_fetches_page(fake_http):
    fake_http.add(strobeltek.CAREERS_URL, text=fixture("strobeltek.html"))
    jobs = CustomConnector().fetch_jobs(cfg("strobeltek"))

    assert len(jobs) == 2
    assert fake_http.urls() == [strobeltek.CAREERS_URL]


def test_custom_connector_unknown_scraper(fake_http):
    with pytest.raises(ConfigurationError, match='No custom scraper found for "nope"'):
        CustomConnector().fetch_jobs(cfg("nope"))

    result = CustomConnector().validate_config(cfg("nope"))
    assert not result.valid
    assert result.error.startswith('No custom scraper for "nope". Available: strobeltek, c-core')
    assert fake_http.calls == []


def test_every_scraper_registered():
    assert custom.available_scrapers().split(", ") == [
        "strobeltek",
        "c-core",
        "virtual-marine",
        "netbenefit",
        "rutter",
        "compusult",
        "enaimco",
        "triware",
        "focusfs",
        "bluedrop",
        "vish",
        "aker-solutions",
        "data-farms",
        "digital-six",
    ]


# ------------------ smaller sites ------------------

def test_rutter_titles_and_deadlines():
    content = (
        "<p><strong>Marine Biologist</strong></p><p>Deadline: May 1, 2024</p>"
        "<p><strong>Rutter Inc. is an equal opportunity employer</strong></p>"
        "<p><strong>Software Developer<br/></strong></p>"
    )
    jobs = rutter.parse_content(content, "https://rutter.ca/careers/", "2024-04-01T10:00:00")

    assert [j.title for j in jobs] == ["Marine Biologist", "Software Developer"]
    assert jobs[0].posted_at is None
    assert jobs[1].posted_at == datetime(2024, 4, 1, 10, 0)
    assert all(j.location == ST_JOHNS for j in jobs)

    assert rutter.parse_content("<p>No open positions at this time.</p>", "https://rutter.ca/careers/") == []


def test_aker_cards_filtered_to_st_johns():
    html = """
    <div class="job-item"><a href="/careers/job?jobPostId=123">Piping Engineer St. John's, Canada Deadline: 2024-06-01</a></div>
    <div class="job-item"><a href="/careers/job?jobPostId=124">Welder Calgary, Canada</a></div>
    <div class="job-item"><a href="/careers/job?jobPostId=123">Piping Engineer</a></div>
    """
    [job] = aker_solutions.parse_page(html)
    assert job.external_id == "jobpost-123"
    assert job.title == "Piping Engineer"
    assert job.location == aker_solutions.DEFAULT_LOCATION
    assert job.url == "https://www.akersolutions.com/careers/job?jobPostId=123"


def test_focusfs_hiring_areas():
    html = """
    <h2>We&#8217;re Hiring!</h2>
    <ul>
      <li><strong>Software Developers</strong> &#8211; C#, SQL Server</li>
      <li>General inquiries welcome</li>
    </ul>
    """
    [job] = focusfs.parse_page(html)
    assert job.title == "Software Developers"
    assert job.description_text == "C#, SQL Server"
    assert job.location == ST_JOHNS


def test_triware_falls_back_to_second_route(fake_http):
    fake_http.add(
        "https://triware.ca/wp-json/wp/v2/job_listing",
        json=[
            {
                "id": 9,
                "title": {"rendered": "Systems Analyst &#8211; Contract"},
                "content": {"rendered": "<p>Analyze.</p>"},
                "link": "https://triware.ca/jobs/systems-analyst/",
                "date": "2024-04-02T09:00:00",
            }
        ],
    )
    [job] = triware.scrape()

    assert job.external_id == "9"
    assert job.title == "Systems Analyst - Contract"
    assert job.description_text == "Analyze."
    assert job.posted_at == datetime(2024, 4, 2, 9, 0)
    assert fake_http.urls()[0].startswith("https://triware.ca/wp-json/wp/v2/job-listings")


TRIWARE_ROUTES = ("https://triware.ca/wp-json/wp/v2/job-listings", "https://triware.ca/wp-json/wp/v2/job_listing")


def test_triware_down_is_an_error_not_an_empty_board(fake_http):
    for route in TRIWARE_ROUTES:
        fake_http.add(route, status=503, text="Service Unavailable")

    with pytest.raises(FetchError, match="503"):
        triware.scrape()
    # a 503 on the first route never falls through to the second
    assert len(fake_http.calls) == 1


def test_triware_without_any_listing_route(fake_http):
    with pytest.raises(FetchError, match="No job listing route"):
        triware.scrape()
    assert len(fake_http.calls) == 2


def test_triware_skips_malformed_listing(fake_http):
    fake_http.add(TRIWARE_ROUTES[0], json=[{"id": 1, "title": {"rendered": "Analyst"}}, {"id": 2, "title": "oops"}])
    assert [j.title for j in triware.scrape()] == ["Analyst"]
