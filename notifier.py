import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytz
import requests

from errors import NotificationError

logger = logging.getLogger(__name__)

QUIET_START = 23  # 11 PM
QUIET_END = 6     # 6 AM
CAMPSITE_URL = "https://www.recreation.gov/camping/campsites"
CAMPGROUND_URL = "https://www.recreation.gov/camping/campgrounds"
PUSH_TIMEOUT = 20


def is_quiet_hours(
    timezone_str: str,
    now: datetime = None,
    quiet_start: int = QUIET_START,
    quiet_end: int = QUIET_END,
) -> bool:
    """Returns True if current time is within quiet hours in the given timezone."""
    tz = pytz.timezone(timezone_str)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = tz.localize(now)
    hour = now.hour
    # Range wraps midnight: quiet if hour >= quiet_start OR hour < quiet_end
    return hour >= quiet_start or hour < quiet_end


def format_alert(campground: str, sites: list, arrival: str, departure: str) -> tuple:
    """
    Returns (subject, email_body, push_body) for the matched site ids.
    arrival/departure are already display-formatted (e.g. "Tue Mar 5").
    """
    count = len(sites)
    subject = f"Available sites found for {campground} between {arrival} and {departure}"

    lines = [f"Found {count} available site{'s' if count > 1 else ''} for every night of your stay:\n"]
    for site_id in sites:
        lines.append(f"• Site {site_id}")
        lines.append(f"  Book now: {CAMPSITE_URL}/{site_id}\n")
    email_body = "\n".join(lines)

    push_body = f"{count} site{'s' if count > 1 else ''} open {arrival} - {departure}: {', '.join(sites)}"
    return subject, email_body, push_body


def send_email(gmail_address: str, app_password: str, to: str, subject: str, body: str):
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = gmail_address
    msg["To"] = to
    msg.attach(MIMEText(body, "plain"))
    with smtplib.SMTP_SSL("smtp.gmail.com", 465) as server:
        server.login(gmail_address, app_password)
        server.sendmail(gmail_address, to, msg.as_string())


def send_push(ntfy_topic: str, title: str, body: str, url: str = None, timeout: float = PUSH_TIMEOUT):
    headers = {"Title": title}
    if url:
        headers["Click"] = url
    resp = requests.post(
        f"https://ntfy.sh/{ntfy_topic}",
        data=body.encode("utf-8"),
        headers=headers,
        timeout=timeout,
    )
    resp.raise_for_status()


def deliver(channels: dict):
    """
    Runs every channel concurrently and waits for all of them.

    Args:
        channels: {channel_name: zero-arg callable}

    Raises:
        NotificationError: listing every channel that raised
    """
    failures = {}
    with ThreadPoolExecutor(max_workers=max(len(channels), 1)) as pool:
        futures = {name: pool.submit(send) for name, send in channels.items()}
        for name, future in futures.items():
            exc = future.exception()
            if exc is not None:
                logger.error("Failed to send %s notification: %s", name, exc)
                failures[name] = exc
    if failures:
        raise NotificationError(failures)


def send_alert(
    config: dict,
    creds: dict,
    campground: str,
    sites: list,
    arrival: str,
    departure: str,
    force: bool = False,
):
    """
    Notify the requester that `sites` are open for the whole stay.

    Args:
        config: full config dict (needs config["notifications"])
        creds: {"gmail_address", "app_password", "ntfy_topic"}
        campground: campground id
        sites: matched site ids
        arrival, departure: display-formatted dates
        force: if True, bypass quiet hours (used by --test-notify)
    """
    if not sites:
        return

    notif = config["notifications"]
    subject, email_body, push_body = format_alert(campground, sites, arrival, departure)

    channels = {
        "email": lambda: send_email(
            creds["gmail_address"], creds["app_password"], notif["email"], subject, email_body
        ),
    }

    timeout = (config.get("http") or {}).get("timeout", PUSH_TIMEOUT)

    qh = notif.get("quiet_hours") or {}
    qs = int(qh["start"].split(":")[0]) if qh.get("start") else QUIET_START
    qe = int(qh["end"].split(":")[0]) if qh.get("end") else QUIET_END
    quiet = is_quiet_hours(notif["timezone"], quiet_start=qs, quiet_end=qe) if not force else False
    if not quiet:
        channels["push"] = lambda: send_push(
            creds["ntfy_topic"], f"\U0001f3d5 {subject}", push_body, f"{CAMPGROUND_URL}/{campground}", timeout
        )

    deliver(channels)
    logger.info("Sent %s alert for campground %s", "+".join(channels), campground)
