# connectors/sites/triware.py
# WordPress + WP Job Manager. The custom post type slug differs between plugin versions,
# so the second REST route is tried only when the first is not registered (404).
from typing import List

from connectors.base import FetchedJob, FetchError, logger, map_all, parse_datetime
from connectors.sites.common import ST_JOHNS, fetch_json, make_job, text_of

BASE_URL = "https://triware.ca/wp-json/wp/v2"
ENDPOINTS = ("job-listings", "job_listing")


def fetch_listings() -> list:
    error = None
    for endpoint in ENDPOINTS:
        try:
            return fetch_json(f"{BASE_URL}/{endpoint}?per_page=100") or []
        except FetchError as e:
            # anything but a missing route means the site itself is down
            if e.status != 404:
                raise
            logger.debug("[custom:triware] %s not registered: %s", endpoint, e)
            error = e
    raise FetchError(f"No job listing route found on {BASE_URL}: {error}", status=404)


def map_listing(raw: dict) -> FetchedJob:
    return make_job(
        external_id=str(raw["id"]),
        title=text_of((raw.get("title") or {}).get("rendered")),
        location=ST_JOHNS,
        description_html=(raw.get("content") or {}).get("rendered") or None,
        url=raw.get("link"),
        posted_at=parse_datetime(raw.get("date")),
        updated_at=parse_datetime(raw.get("modified")),
    )


def scrape(careers_url: str = "") -> List[FetchedJob]:
    listed = (r for r in fetch_listings() if isinstance(r, dict) and r.get("id") is not None)
    return map_all("custom:triware", map_listing, listed)
