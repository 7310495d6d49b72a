from datetime import date, datetime, timedelta

from errors import MalformedRequestError

# Requests carry dates as non-padded YYYY-M-D (e.g. "2024-3-5").
# strptime's %m/%d accept one or two digits, so padded input decodes too.
REQUEST_DATE_FORMAT = "%Y-%m-%d"


def build_nights(arrival: date, departure: date) -> list:
    """
    Returns every night of the stay: arrival through departure - 1 day.
    departure <= arrival yields an empty list.
    """
    return [arrival + timedelta(days=i) for i in range((departure - arrival).days)]


def parse_request_date(value: str) -> date:
    if not value:
        raise MalformedRequestError("missing date")
    try:
        return datetime.strptime(value, REQUEST_DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise MalformedRequestError(f"bad date {value!r}, expected YYYY-M-D") from e


def format_request_date(day: date) -> str:
    return f"{day.year}-{day.month}-{day.day}"


def month_anchor(day: date) -> date:
    return day.replace(day=1)


def format_display_date(day: date) -> str:
    """e.g. 'Tue Mar 5'"""
    return f"{day:%a %b} {day.day}"
