"""Shared fixtures for the job snapshot test suite.

Provides document factories that mirror real BigQuery responses and a
recording fake transport, so no test touches the network.
"""

from typing import Any, Dict, List, Optional

import pytest

from bqjobs import Transport, TransportResponse


# ---------------------------------------------------------------------------
# Document factories
# ---------------------------------------------------------------------------

CREATED_MS = 1420070400000
STARTED_MS = 1420070401500
ENDED_MS = 1420070405250


def make_job_document(
    state: Optional[str] = "DONE",
    job_id: str = "job_9aBcD-1",
    project_id: str = "test-project",
    statistics: Optional[Dict[str, Any]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Build a job status document the way the server encodes it.

    ``state=None`` omits the status section entirely.
    """
    doc: Dict[str, Any] = {
        "kind": "bigquery#job",
        "id": f"{project_id}:{job_id}",
        "jobReference": {"jobId": job_id, "projectId": project_id},
    }
    if state is not None:
        doc["status"] = {"state": state}
    if statistics is not None:
        doc["statistics"] = statistics
    doc.update(extra)
    return doc


def make_results_document(
    rows: Optional[List[List[Any]]] = None,
    token: Optional[str] = None,
    total: int = 3,
    job_id: str = "job_9aBcD-1",
) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "kind": "bigquery#getQueryResultsResponse",
        "jobReference": {"jobId": job_id, "projectId": "test-project"},
        "schema": {
            "fields": [
                {"name": "name", "type": "STRING", "mode": "NULLABLE"},
                {"name": "age", "type": "INTEGER", "mode": "NULLABLE"},
            ]
        },
        "rows": [
            {"f": [{"v": name}, {"v": age}]}
            for name, age in (rows if rows is not None else [["Heidi", "36"]])
        ],
        "totalRows": str(total),
        "jobComplete": True,
        "cacheHit": False,
        "totalBytesProcessed": "1024",
    }
    if token is not None:
        doc["pageToken"] = token
    return doc


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------

class FakeTransport(Transport):
    """Transport that replays queued responses and records every call."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.job_responses: List[TransportResponse] = []
        self.results_responses: List[TransportResponse] = []

    def queue_job(self, data: Optional[Dict[str, Any]] = None, status: int = 200, message: str = ""):
        self.job_responses.append(TransportResponse(status=status, data=data, message=message))

    def queue_results(self, data: Optional[Dict[str, Any]] = None, status: int = 200, message: str = ""):
        self.results_responses.append(TransportResponse(status=status, data=data, message=message))

    def get_job(self, job_id):
        self.calls.append(("get_job", job_id))
        return self.job_responses.pop(0)

    def job_query_results(self, job_id, options):
        self.calls.append(("job_query_results", job_id, options))
        return self.results_responses.pop(0)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def job_document():
    return make_job_document


@pytest.fixture
def results_document():
    return make_results_document
