# connectors/collage.py
# Collage career sites, server-rendered HTML only: https://secure.collage.co/jobs/{company}
import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from connectors import http
from connectors.base import Connector, FetchedJob, ImportSourceConfig, logger
from utils.text import html_to_text

BASE_URL = "https://secure.collage.co"


def _page(path: str) -> str:
    url = f"{BASE_URL}{path}"
    return http.get_text(url, "Collage fetch", not_found=f"Collage career site not found at {url}")


def split_commitment_and_location(text: str) -> Dict[str, Optional[str]]:
    """'Full Time • St. John's, NL • Remote' -> commitment, location, workplace_type."""
    parts = [p.strip() for p in (text or "").split("•") if p.strip()]
    commitment = parts[0] if parts else ""
    rest = parts[1:]
    lower = ", ".join(rest).lower()

    workplace = None
    if "remote" in lower:
        workplace = "hybrid" if "hybrid" in lower else "remote"
        rest = [p for p in rest if p.lower() not in ("remote", "hybrid")]
    elif "hybrid" in lower:
        workplace = "hybrid"
        rest = [p for p in rest if p.lower() != "hybrid"]

    return {"commitment": commitment, "location": ", ".join(rest) or None, "workplace_type": workplace}


def parse_listing_page(html: str, company: str) -> List[FetchedJob]:
    """
    <div class="ATS-posting">
      <h1 class="ATS-department">Engineering</h1>
      <ul><li><a href="/jobs/{company}/12345">
        <div class="ATS-position-title">Title</div>
        <span class="ATS-commitment-and-location">Full Time • City • Remote</span>
      </a></li></ul>
    </div>
    """
    soup = BeautifulSoup(html or "", "html.parser")
    id_re = re.compile(rf"/jobs/{re.escape(company)}/(\d+)")
    jobs: List[FetchedJob] = []

    for posting in soup.select(".ATS-posting"):
        dept_el = posting.select_one(".ATS-department")
        department = dept_el.get_text(strip=True) if dept_el else ""
        for link in posting.select("a[href]"):
            href = link.get("href") or ""
            m = id_re.search(href)
            if not m:
                continue
            title_el = link.select_one(".ATS-position-title")
            title = title_el.get_text(strip=True) if title_el else ""
            if not title:
                continue
            meta_el = link.select_one(".ATS-commitment-and-location")
            meta = split_commitment_and_location(meta_el.get_text(" ", strip=True) if meta_el else "")
            jobs.append(
                FetchedJob(
                    external_id=m.group(1),
                    title=title,
                    location=meta["location"],
                    department=department or None,
                    url=href if href.startswith("http") else f"{BASE_URL}{href}",
                    workplace_type=meta["workplace_type"],
                )
            )
    return jobs


def parse_detail_page(html: str) -> Dict[str, str]:
    soup = BeautifulSoup(html or "", "html.parser")
    title_el = soup.select_one(".ATS-position-title-main")
    desc_el = soup.select_one(".ATS-position-description")
    return {
        "title": title_el.get_text(strip=True) if title_el else "",
        "description_html": desc_el.decode_contents().strip() if desc_el else "",
    }


class CollageConnector(Connector):
    source_type = "collage"
    label = "Collage"
    identifier_hint = "e.g., heyorca (from secure.collage.co/jobs/heyorca)"
    identifier_required = "Company slug is required (e.g., 'heyorca' from secure.collage.co/jobs/heyorca)"

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        company = config.source_identifier.strip()
        jobs: List[FetchedJob] = []
        for job in parse_listing_page(_page(f"/jobs/{company}"), company):
            try:
                detail = parse_detail_page(_page(f"/jobs/{company}/{job.external_id}"))
                description = detail["description_html"] or None
                job = job.model_copy(
                    update={
                        "title": detail["title"] or job.title,
                        "description_html": description,
                        "description_text": html_to_text(description) if description else None,
                    }
                )
            except Exception as e:
                logger.warning("[collage] failed to fetch details for job %s: %s", job.external_id, e)
            jobs.append(job)
        return jobs

    def fetch_job_details(self, external_id: str, config: ImportSourceConfig) -> Optional[FetchedJob]:
        company = config.source_identifier.strip()

        def _load():
            detail = parse_detail_page(_page(f"/jobs/{company}/{external_id}"))
            description = detail["description_html"] or None
            return FetchedJob(
                external_id=external_id,
                title=detail["title"],
                description_html=description,
                description_text=html_to_text(description) if description else None,
                url=f"{BASE_URL}/jobs/{company}/{external_id}",
            )

        return self._safe_details(external_id, _load)

    def count_jobs(self, config: ImportSourceConfig) -> int:
        company = config.source_identifier.strip()
        return len(parse_listing_page(_page(f"/jobs/{company}"), company))


__all__ = ["CollageConnector", "parse_listing_page", "parse_detail_page", "split_commitment_and_location"]
