class CheckError(Exception):
    """Base for every failure of a single check unit of work."""


class MalformedRequestError(CheckError):
    """Payload could not be decoded, or a required field is empty or unparseable."""


class FetchError(CheckError):
    """Upstream availability data could not be retrieved or decoded."""


class MatchError(CheckError):
    """Availability data has a shape the matcher cannot walk."""


class NotificationError(CheckError):
    """One or more notification channels failed.

    `failures` maps channel name -> the exception that channel raised.
    """

    def __init__(self, failures: dict):
        self.failures = failures
        detail = ", ".join(f"{channel}: {exc}" for channel, exc in failures.items())
        super().__init__(f"notification failed ({detail})")


class CancellationError(CheckError):
    """Recurring check job could not be cancelled; it stays scheduled."""


class JobStoreError(CheckError):
    """Job file exists but is not a YAML list of job mappings."""
