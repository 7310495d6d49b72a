import json
from datetime import date

from errors import FetchError

from .base import BaseAdapter
from .recreation_gov import parse_month


class FixtureAdapter(BaseAdapter):
    """Serves a saved recreation.gov month response from disk, for dry runs."""

    def __init__(self, path: str):
        self.path = path

    def get_month_availability(self, campground_id: str, anchor: date) -> dict:
        try:
            with open(self.path) as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FetchError(f"reading fixture {self.path}: {e}") from e
        return parse_month(raw)
