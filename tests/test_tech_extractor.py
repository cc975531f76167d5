# tests/test_tech_extractor.py
import pytest

from app.models import ImportSource, Job, Technology, TechnologyMention
from app.tech_aliases import SEED_NAMES
from app.tech_extractor import (
    build_patterns,
    clear_tech_mentions_for_job,
    extract_technologies_for_all_jobs,
    extract_technologies_for_company,
    extract_technologies_from_job,
    find_mentions,
    get_tech_mentions_for_job,
    match_context,
    score_match,
    seed_technologies,
)


@pytest.fixture
def techs(db):
    rows = [
        Technology(name="Python", slug="python"),
        Technology(name="PostgreSQL", slug="postgresql"),
        Technology(name="C#", slug="c#"),
        Technology(name="Java", slug="java"),
        Technology(name="Kubernetes", slug="kubernetes"),
        Technology(name="Cobol", slug="cobol", visible=False),
    ]
    db.add_all(rows)
    db.commit()
    return {t.slug: t for t in rows}


def add_job(db, ext, text=None, html=None, company_id=1, status="active"):
    source = db.query(ImportSource).filter(ImportSource.company_id == company_id).first()
    if source is None:
        source = ImportSource(company_id=company_id, source_type="greenhouse", source_identifier=f"c{company_id}")
        db.add(source)
        db.flush()
    job = Job(
        company_id=company_id,
        source_id=source.id,
        external_id=ext,
        title=f"Job {ext}",
        description_text=text,
        description_html=html,
        status=status,
    )
    db.add(job)
    db.commit()
    return job


def mention_map(db, job_id):
    return {m.technology.slug: m for m in get_tech_mentions_for_job(db, job_id)}


def test_patterns_include_aliases_once():
    patterns = build_patterns("PostgreSQL", "postgresql")
    assert [p.pattern for p in patterns] == [
        r"(?<![A-Za-z0-9_])PostgreSQL(?![A-Za-z0-9_])",
        r"(?<![A-Za-z0-9_])postgres(?![A-Za-z0-9_])",
        r"(?<![A-Za-z0-9_])psql(?![A-Za-z0-9_])",
    ]


def test_boundaries_handle_symbols_and_prefixes():
    csharp = build_patterns("C#", "c#")
    assert csharp[0].search("Strong C# and .NET skills")
    java = build_patterns("Java", "java")
    assert not any(p.search("Modern JavaScript only") for p in java)
    assert any(p.search("java, kotlin") for p in java)


def test_score_exact_case_and_repeats():
    text = "Python developer. We love python."
    m = build_patterns("Python", "python")[0].search(text)
    # 50 base, +20 exact case, +10 for two occurrences
    assert score_match(m, text, "Python") == 80


def test_score_marker_and_cap():
    text = "Requirements: python " + "python " * 10
    m = build_patterns("Python", "python")[0].search(text)
    # lowercase match: 50 + 20 (repeat cap) + 10 marker
    assert score_match(m, text, "Python") == 80

    text = "Qualifications: Python " + "Python " * 10
    m = build_patterns("Python", "python")[0].search(text)
    assert score_match(m, text, "Python") == 100


def test_context_window():
    text = "x" * 150 + " Kubernetes " + "y" * 150
    m = build_patterns("Kubernetes", "kubernetes")[0].search(text)
    ctx = match_context(text, m)
    assert ctx.startswith("...")
    assert ctx.endswith("...")
    assert "Kubernetes" in ctx
    assert len(ctx) == 3 + 100 + len("Kubernetes") + 100 + 3

    short = "Use   Kubernetes\n daily"
    m = build_patterns("Kubernetes", "kubernetes")[0].search(short)
    assert match_context(short, m) == "Use Kubernetes daily"


def test_first_matching_pattern_wins():
    techs = [(Technology(id=1, name="PostgreSQL", slug="postgresql"), build_patterns("PostgreSQL", "postgresql"))]
    found = find_mentions("We run postgres and PostgreSQL", techs)
    assert len(found) == 1
    tech, confidence, context = found[0]
    # the name pattern matched "PostgreSQL" exactly
    assert confidence == 70


def test_extract_for_job(db, techs):
    job = add_job(db, "1", text="Requirements: 3+ years of Python and postgres. C# is a plus. Cobol welcome.")
    result = extract_technologies_from_job(db, job.id)

    assert result.found == 3
    assert result.inserted == 3
    mentions = mention_map(db, job.id)
    assert set(mentions) == {"python", "postgresql", "c#"}
    assert mentions["python"].confidence == 80
    assert mentions["postgresql"].confidence == 60
    assert "postgres" in mentions["postgresql"].context


def test_extract_falls_back_to_html(db, techs):
    job = add_job(db, "1", html="<p>Deploy on <strong>Kubernetes</strong></p>")
    result = extract_technologies_from_job(db, job.id)
    assert result.found == 1
    assert mention_map(db, job.id)["kubernetes"].context == "Deploy on Kubernetes"


def test_extraction_is_idempotent(db, techs):
    job = add_job(db, "1", text="Python, Java and Kubernetes")
    extract_technologies_from_job(db, job.id)
    extract_technologies_from_job(db, job.id)

    assert db.query(TechnologyMention).filter(TechnologyMention.job_id == job.id).count() == 3


def test_mentions_ordered_by_confidence(db, techs):
    job = add_job(db, "1", text="Java. Python Python Python.")
    extract_technologies_from_job(db, job.id)
    slugs = [m.technology.slug for m in get_tech_mentions_for_job(db, job.id)]
    assert slugs == ["python", "java"]


def test_empty_description_clears_mentions(db, techs):
    job = add_job(db, "1", text="Python")
    extract_technologies_from_job(db, job.id)
    job.description_text = None
    db.commit()

    result = extract_technologies_from_job(db, job.id)
    assert result.found == 0
    assert get_tech_mentions_for_job(db, job.id) == []


def test_clear_mentions(db, techs):
    job = add_job(db, "1", text="Python and Java")
    extract_technologies_from_job(db, job.id)
    assert clear_tech_mentions_for_job(db, job.id) == 2
    db.commit()
    assert get_tech_mentions_for_job(db, job.id) == []


def test_batch_extraction_only_touches_active_jobs(db, techs):
    a = add_job(db, "a", text="Python", company_id=1)
    gone = add_job(db, "b", text="Java", company_id=1, status="removed")
    other = add_job(db, "c", text="Kubernetes", company_id=2)

    result = extract_technologies_for_company(db, 1)
    assert (result.jobs, result.mentions) == (1, 1)
    assert get_tech_mentions_for_job(db, gone.id) == []
    assert get_tech_mentions_for_job(db, other.id) == []

    result = extract_technologies_for_all_jobs(db)
    assert (result.jobs, result.mentions) == (2, 2)
    assert set(mention_map(db, a.id)) == {"python"}


def test_seed_technologies(db):
    assert seed_technologies(db) == len(SEED_NAMES)
    assert seed_technologies(db) == 0
    python = db.query(Technology).filter(Technology.slug == "python").one()
    assert python.name == "Python"
    assert python.visible
