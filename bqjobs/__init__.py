"""BigQuery job snapshots.

A thin data-access layer over a server-provided job status document.
Network access is delegated to a caller-supplied ``Transport``; this
package never opens, retries, or pools connections itself.
"""

from .errors import ApiError, BigQueryJobError, MalformedDocument, NoTransportBound
from .job import JobSnapshot, JobState
from .results import PageOptions, ResultPage
from .transport import Transport, TransportResponse

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "BigQueryJobError",
    "JobSnapshot",
    "JobState",
    "MalformedDocument",
    "NoTransportBound",
    "PageOptions",
    "ResultPage",
    "Transport",
    "TransportResponse",
]
