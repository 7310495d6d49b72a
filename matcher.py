from collections.abc import Mapping

from errors import MatchError

AVAILABLE = "Available"


def find_fully_available_sites(availability: dict, nights: list) -> list:
    """
    Returns ids of sites whose status is exactly AVAILABLE on every night.

    Args:
        availability: {site_id: SiteAvailability}; None counts as zero sites
        nights: dates that must all be free

    An empty `nights` matches nothing: an empty stay is a malformed request,
    not a zero-night success.
    """
    if not nights or availability is None:
        return []
    if not isinstance(availability, Mapping):
        raise MatchError(f"expected a mapping of sites, got {type(availability).__name__}")

    return [
        site_id
        for site_id, site in availability.items()
        # all() stops at the first night that isn't Available
        if all(site.availabilities.get(night) == AVAILABLE for night in nights)
    ]
