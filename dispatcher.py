import json
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from dates import (
    build_nights,
    format_display_date,
    month_anchor,
    parse_request_date,
)
from errors import CancellationError, MalformedRequestError, NotificationError
from matcher import find_fully_available_sites

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stay:
    arrival: date
    departure: date

    def nights(self) -> list:
        # departure <= arrival gives no nights, which the matcher treats as
        # matching no sites: the check ends as NO_MATCH_FOUND, not an error.
        return build_nights(self.arrival, self.departure)


@dataclass(frozen=True)
class CheckRequest:
    name: str
    campground: str
    stay: Stay
    job: str


class Outcome(Enum):
    NOTIFIED = "notified"
    NO_MATCH_FOUND = "no_match_found"


@dataclass
class CheckResult:
    outcome: Outcome
    request: CheckRequest
    sites: list


def decode_request(payload: bytes) -> CheckRequest:
    """
    Decodes {"name", "campground", "arrival", "departure"[, "job"]} JSON.
    Dates are YYYY-M-D. `job` defaults to `name`.
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise MalformedRequestError(f"payload is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedRequestError("payload must be a JSON object")

    name = data.get("name")
    if not name or not isinstance(name, str):
        raise MalformedRequestError("missing requester name")
    campground = data.get("campground")
    if not campground:
        raise MalformedRequestError("missing campground id")
    job = data.get("job")
    if job is not None and (not job or not isinstance(job, str)):
        raise MalformedRequestError("job must be a non-empty string")

    stay = Stay(
        arrival=parse_request_date(data.get("arrival")),
        departure=parse_request_date(data.get("departure")),
    )
    return CheckRequest(name=name, campground=str(campground), stay=stay, job=job or name)


def handle_check_request(payload: bytes, fetcher, notify, jobs) -> CheckResult:
    """
    One-shot check: decode, fetch the arrival month, match, then notify and cancel.

    Args:
        payload: raw check request bytes
        fetcher: BaseAdapter supplying month availability
        notify: callable(campground, sites, arrival, departure) sending the alert
        jobs: object with delete(job_name) cancelling the recurring check

    Returns:
        CheckResult; NO_MATCH_FOUND leaves the recurring job scheduled.

    Raises:
        MalformedRequestError, FetchError: nothing downstream ran
        NotificationError: matched, but the alert failed; job left scheduled
        CancellationError: alert sent, but the job is still scheduled
    """
    request = decode_request(payload)
    stay = request.stay
    nights = stay.nights()

    # Only the arrival month is fetched; nights past its end never match.
    availability = fetcher.get_month_availability(request.campground, month_anchor(stay.arrival))

    sites = sorted(find_fully_available_sites(availability, nights))
    if not sites:
        logger.info("No open sites for %s at %s", request.job, request.campground)
        return CheckResult(Outcome.NO_MATCH_FOUND, request, [])

    logger.info("Found %d open site(s) for %s at %s", len(sites), request.job, request.campground)
    try:
        notify(
            request.campground,
            sites,
            format_display_date(stay.arrival),
            format_display_date(stay.departure),
        )
    except NotificationError:
        raise
    except Exception as e:
        raise NotificationError({"notify": e}) from e

    try:
        jobs.delete(request.job)
    except CancellationError:
        raise
    except Exception as e:
        raise CancellationError(f"could not delete job {request.job!r}: {e}") from e

    return CheckResult(Outcome.NOTIFIED, request, sites)
