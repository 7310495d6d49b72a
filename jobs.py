import logging

import yaml

from errors import CancellationError, JobStoreError

logger = logging.getLogger(__name__)

JOBS_FILE = "jobs.yaml"


class JobStore:
    """
    Recurring check jobs, kept as a YAML list in `path`.

    Each job is {name, campground, arrival, departure} with dates in YYYY-M-D.
    A cron-triggered run of main.py re-checks every job until it is deleted.
    """

    def __init__(self, path: str = JOBS_FILE):
        self.path = path

    def load(self) -> list:
        try:
            with open(self.path) as f:
                jobs = yaml.safe_load(f) or []
        except FileNotFoundError:
            return []
        except yaml.YAMLError as e:
            raise JobStoreError(f"{self.path} is not valid YAML: {e}") from e
        if not isinstance(jobs, list) or not all(isinstance(j, dict) for j in jobs):
            raise JobStoreError(f"{self.path} must be a list of jobs")
        return jobs

    def save(self, jobs: list):
        with open(self.path, "w") as f:
            yaml.safe_dump(jobs, f, sort_keys=False)

    def list_jobs(self) -> list:
        jobs = self.load()
        logger.info("%d scheduled job(s) in %s", len(jobs), self.path)
        return jobs

    def schedule(self, name: str, campground: str, arrival: str, departure: str) -> dict:
        jobs = self.load()
        if any(j["name"] == name for j in jobs):
            raise ValueError(f"job {name!r} already scheduled")
        job = {"name": name, "campground": campground, "arrival": arrival, "departure": departure}
        jobs.append(job)
        self.save(jobs)
        return job

    def delete(self, name: str):
        try:
            jobs = self.load()
            remaining = [j for j in jobs if j.get("name") != name]
            if len(remaining) == len(jobs):
                raise CancellationError(f"no scheduled job named {name!r}")
            self.save(remaining)
        except (OSError, JobStoreError) as e:
            raise CancellationError(f"could not delete job {name!r}: {e}") from e
        logger.info("Deleted job %s", name)
