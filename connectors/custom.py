# connectors/custom.py
# Dispatcher over the per-company career page scrapers in connectors/sites.
# source_identifier picks the scraper; source_url, when set, overrides the page the scraper reads.
from typing import Dict, List

from connectors.base import ConfigurationError, Connector, FetchedJob, ImportSourceConfig, ValidationResult, dedupe_jobs
from connectors.sites import (
    aker_solutions,
    bluedrop,
    c_core,
    compusult,
    data_farms,
    digital_six,
    enaimco,
    focusfs,
    netbenefit,
    rutter,
    strobeltek,
    triware,
    vish,
    virtual_marine,
)
from connectors.sites.common import SiteScraper

SCRAPERS: Dict[str, SiteScraper] = {
    "strobeltek": strobeltek.scrape,
    "c-core": c_core.scrape,
    "virtual-marine": virtual_marine.scrape,
    "netbenefit": netbenefit.scrape,
    "rutter": rutter.scrape,
    "compusult": compusult.scrape,
    "enaimco": enaimco.scrape,
    "triware": triware.scrape,
    "focusfs": focusfs.scrape,
    "bluedrop": bluedrop.scrape,
    "vish": vish.scrape,
    "aker-solutions": aker_solutions.scrape,
    "data-farms": data_farms.scrape,
    "digital-six": digital_six.scrape,
}


def available_scrapers() -> str:
    return ", ".join(SCRAPERS)


class CustomConnector(Connector):
    source_type = "custom"
    label = "Custom scraper"
    identifier_hint = f"one of: {available_scrapers()}"
    identifier_required = f"Company identifier required. Available: {available_scrapers()}"

    def _scraper(self, identifier: str) -> SiteScraper:
        scraper = SCRAPERS.get((identifier or "").strip())
        if scraper is None:
            raise ConfigurationError(f'No custom scraper found for "{identifier}". Available: {available_scrapers()}')
        return scraper

    def fetch_jobs(self, config: ImportSourceConfig) -> List[FetchedJob]:
        scraper = self._scraper(config.source_identifier)
        return dedupe_jobs(scraper(config.source_url or ""))

    def validate_config(self, config: ImportSourceConfig) -> ValidationResult:
        identifier = (config.source_identifier or "").strip()
        if identifier and identifier not in SCRAPERS:
            return ValidationResult(
                valid=False,
                error=f'No custom scraper for "{identifier}". Available: {available_scrapers()}',
            )
        return super().validate_config(config)


__all__ = ["CustomConnector", "SCRAPERS", "available_scrapers"]
