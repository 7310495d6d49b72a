import json
from datetime import date

import requests

from errors import FetchError

from .base import BaseAdapter, SiteAvailability

AVAIL_BASE = "https://www.recreation.gov/api/camps/availability/campground"
HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}
DEFAULT_TIMEOUT = 20


def parse_month(raw: dict) -> dict:
    """
    Decodes a recreation.gov month response into {site_id: SiteAvailability}.

    Availability keys look like "2024-03-05T00:00:00Z"; only the date part is kept.
    """
    if not isinstance(raw, dict):
        raise FetchError("month response is not a JSON object")
    campsites = raw.get("campsites") or {}
    if not isinstance(campsites, dict):
        raise FetchError("campsites is not a JSON object")
    sites = {}
    for site_id, data in campsites.items():
        try:
            availabilities = {
                date.fromisoformat(dt_str[:10]): status
                for dt_str, status in (data.get("availabilities") or {}).items()
            }
        except (AttributeError, TypeError, ValueError) as e:
            raise FetchError(f"bad availability data for site {site_id}: {e}") from e
        sites[site_id] = SiteAvailability(
            site_id=site_id,
            availabilities=availabilities,
            name=data.get("site") or f"Site {site_id}",
            site_type=data.get("campsite_type") or "",
        )
    return sites


class RecreationGovAdapter(BaseAdapter):
    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def get_month_availability(self, campground_id: str, anchor: date) -> dict:
        try:
            resp = requests.get(
                f"{AVAIL_BASE}/{campground_id}/month",
                params={"start_date": f"{anchor.isoformat()}T00:00:00.000Z"},
                headers=HEADERS,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            raw = resp.json()
        except (requests.RequestException, json.JSONDecodeError) as e:
            raise FetchError(f"fetching campground {campground_id} for {anchor:%Y-%m}: {e}") from e
        return parse_month(raw)
