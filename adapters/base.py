from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date


@dataclass
class SiteAvailability:
    site_id: str
    availabilities: dict[date, str] = field(default_factory=dict)
    name: str = ""
    site_type: str = ""


class BaseAdapter(ABC):
    @abstractmethod
    def get_month_availability(self, campground_id: str, anchor: date) -> dict[str, SiteAvailability]:
        """
        Returns one calendar month of per-site, per-night status for a campground.

        Args:
            campground_id: provider campground id (e.g. "232447")
            anchor: first day of the month to fetch

        Returns:
            {site_id: SiteAvailability}, covering at least anchor's month

        Raises:
            FetchError: retrieval or decoding failed
        """
        raise NotImplementedError
