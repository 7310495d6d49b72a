import argparse
import json
import logging
import os
import sys
from functools import partial

import yaml

from adapters.fixture import FixtureAdapter
from adapters.recreation_gov import DEFAULT_TIMEOUT, RecreationGovAdapter
from dates import format_request_date, parse_request_date
from dispatcher import Outcome, handle_check_request
from errors import CheckError, JobStoreError
from jobs import JOBS_FILE, JobStore
from notifier import send_alert

logger = logging.getLogger(__name__)


def load_config(path: str = "config.yaml") -> dict:
    with open(path) as f:
        return yaml.safe_load(f)


def load_creds() -> dict:
    return {
        "gmail_address": os.environ["GMAIL_ADDRESS"],
        "app_password": os.environ["GMAIL_APP_PASSWORD"],
        "ntfy_topic": os.environ["NTFY_TOPIC"],
    }


class DryRunJobs:
    """Stands in for the job store during --dry-run: reports, deletes nothing."""

    def delete(self, name: str):
        print(f"[DRY RUN] Would delete job {name}")


def dry_run_notify(campground: str, sites: list, arrival: str, departure: str):
    print(f"[DRY RUN] Would alert for {len(sites)} site(s) at {campground}, {arrival} to {departure}:")
    for site_id in sites:
        print(f"  - {site_id}")


def job_payload(job: dict) -> bytes:
    """Check-request bytes for a scheduled job; validation happens on decode."""
    fields = ("name", "campground", "arrival", "departure")
    return json.dumps({k: "" if job.get(k) is None else str(job[k]) for k in fields}).encode("utf-8")


def run(config: dict, creds: dict, jobs: JobStore, adapter, dry_run: bool) -> int:
    """
    Runs every scheduled job once. Returns the number of jobs that failed,
    or 1 if the job file cannot be read.
    Separated from __main__ to allow unit testing without env vars or real files.
    """
    if dry_run:
        notify = dry_run_notify
        canceller = DryRunJobs()
    else:
        notify = partial(send_alert, config, creds)
        canceller = jobs

    try:
        scheduled = jobs.list_jobs()
    except JobStoreError as e:
        logger.error("Cannot read jobs: %s", e)
        return 1

    failed = 0
    for job in scheduled:
        try:
            result = handle_check_request(job_payload(job), adapter, notify, canceller)
        except CheckError as e:
            logger.error("Job %s failed: %s", job.get("name"), e)
            failed += 1
            continue
        if result.outcome is Outcome.NOTIFIED:
            logger.info("Job %s notified: %s", job["name"], ", ".join(result.sites))
    return failed


def send_test_alert(config: dict, creds: dict):
    send_alert(config, creds, "Test Campground", ["test-site"], "Mon Jan 1", "Tue Jan 2", force=True)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Campsite opening checker")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML")
    parser.add_argument("--dry-run", metavar="FIXTURE", help="Use a saved month response, print alerts, do not send")
    parser.add_argument("--test-notify", action="store_true", help="Send real test notification immediately")
    parser.add_argument("--list-jobs", action="store_true", help="Print scheduled jobs and exit")
    parser.add_argument(
        "--add", nargs=4, metavar=("NAME", "CAMPGROUND", "ARRIVAL", "DEPARTURE"),
        help="Schedule a recurring check (dates as YYYY-M-D)",
    )
    parser.add_argument("--payload", metavar="FILE", help="Handle one raw check request ('-' for stdin)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    cfg = load_config(args.config)
    jobs = JobStore(cfg.get("jobs_file", JOBS_FILE))

    if args.list_jobs:
        try:
            scheduled = jobs.list_jobs()
        except JobStoreError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
        for job in scheduled:
            print(f"{job.get('name')}: campground {job.get('campground')}, {job.get('arrival')} to {job.get('departure')}")
        return 0

    if args.add:
        name, campground, arrival, departure = args.add
        try:
            arrival = format_request_date(parse_request_date(arrival))
            departure = format_request_date(parse_request_date(departure))
            jobs.schedule(name, campground, arrival, departure)
        except (CheckError, ValueError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
        print(f"Scheduled {name}")
        return 0

    if args.dry_run:
        return 1 if run(cfg, {}, jobs, FixtureAdapter(args.dry_run), dry_run=True) else 0

    creds = load_creds()
    if args.test_notify:
        send_test_alert(cfg, creds)
        return 0

    adapter = RecreationGovAdapter(timeout=(cfg.get("http") or {}).get("timeout", DEFAULT_TIMEOUT))

    if args.payload:
        if args.payload == "-":
            payload = sys.stdin.buffer.read()
        else:
            with open(args.payload, "rb") as f:
                payload = f.read()
        try:
            result = handle_check_request(payload, adapter, partial(send_alert, cfg, creds), jobs)
        except CheckError as e:
            logger.error("Check failed: %s", e)
            return 1
        print(result.outcome.value)
        return 0

    return 1 if run(cfg, creds, jobs, adapter, dry_run=False) else 0


if __name__ == "__main__":
    sys.exit(main())
