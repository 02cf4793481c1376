"""Job snapshot — typed view over a job status document.

The server drives the PENDING → RUNNING → DONE progression. A snapshot
mirrors the most recently fetched document and never infers transitions.
Polling, backoff and cancellation belong to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from .errors import ApiError, MalformedDocument, NoTransportBound
from .results import PageOptions, ResultPage
from .schemas.job import ErrorProto, JobDocument, JobReference, decode_job_document
from .transport.base import Transport

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"
    UNKNOWN = "UNKNOWN"


_KNOWN_STATES = {JobState.PENDING.value, JobState.RUNNING.value, JobState.DONE.value}


def _normalize_state(document: Optional[JobDocument]) -> Union[JobState, str]:
    """Map the server state onto ``JobState``.

    Unrecognised names pass through unchanged so that new server states
    never break decoding.
    """
    if document is None or document.status is None or document.status.state is None:
        return JobState.UNKNOWN
    raw = document.status.state
    if raw.upper() in _KNOWN_STATES:
        return JobState(raw.upper())
    logger.warning("Unrecognised job state %r for job %s", raw, document.job_reference.job_id)
    return raw


def _millis_to_time(millis: Optional[int]) -> Optional[datetime]:
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)


class JobSnapshot:
    """Locally held copy of one job's status.

    Every refresh replaces the decoded document wholesale. The transport is
    borrowed: the snapshot never opens or closes it.
    """

    def __init__(
        self,
        document: Optional[JobDocument] = None,
        transport: Optional[Transport] = None,
    ):
        self.transport = transport
        self._document: Optional[JobDocument] = None
        self._raw: Dict[str, Any] = {}
        self._state: Union[JobState, str] = JobState.UNKNOWN
        if document is not None:
            self._replace(document, document.model_dump(by_alias=True, exclude_none=True))

    @classmethod
    def from_document(cls, data: Any, transport: Optional[Transport] = None) -> "JobSnapshot":
        """New snapshot from a server status document.

        Raises
        ------
        MalformedDocument
            If the document has no ``jobReference``.
        """
        snapshot = cls(transport=transport)
        snapshot._ingest(data)
        return snapshot

    @classmethod
    def from_reference(
        cls,
        job_id: str,
        project_id: str,
        transport: Optional[Transport] = None,
    ) -> "JobSnapshot":
        """Snapshot that knows only its identity, ready to ``refresh()``."""
        reference = JobReference(job_id=job_id, project_id=project_id)
        return cls(JobDocument(job_reference=reference), transport)

    # -- identity ------------------------------------------------------------

    @property
    def document(self) -> Optional[JobDocument]:
        return self._document

    @property
    def raw(self) -> Dict[str, Any]:
        """The last ingested document as received."""
        return self._raw

    @property
    def job_id(self) -> Optional[str]:
        if self._document is None:
            return None
        return self._document.job_reference.job_id

    @property
    def project_id(self) -> Optional[str]:
        if self._document is None:
            return None
        return self._document.job_reference.project_id

    # -- state ---------------------------------------------------------------

    @property
    def state(self) -> Union[JobState, str]:
        return self._state

    def _state_is(self, name: str) -> bool:
        state = self._state
        value = state.value if isinstance(state, JobState) else state
        return value.lower() == name

    def is_running(self) -> bool:
        return self._state_is("running")

    def is_pending(self) -> bool:
        return self._state_is("pending")

    def is_done(self) -> bool:
        return self._state_is("done")

    @property
    def error_result(self) -> Optional[ErrorProto]:
        """Final error of a failed job. Only the server sets this."""
        if self._document is None or self._document.status is None:
            return None
        return self._document.status.error_result

    def failed(self) -> bool:
        return self.is_done() and self.error_result is not None

    # -- timestamps ----------------------------------------------------------

    @property
    def created_at(self) -> Optional[datetime]:
        stats = self._document.statistics if self._document else None
        return _millis_to_time(stats.creation_time if stats else None)

    @property
    def started_at(self) -> Optional[datetime]:
        """Set once the job has left PENDING."""
        stats = self._document.statistics if self._document else None
        return _millis_to_time(stats.start_time if stats else None)

    @property
    def ended_at(self) -> Optional[datetime]:
        """Set once the job is DONE."""
        stats = self._document.statistics if self._document else None
        return _millis_to_time(stats.end_time if stats else None)

    # -- network -------------------------------------------------------------

    def refresh(self) -> "JobSnapshot":
        """Reload this job's status through the bound transport.

        The previous status is kept untouched unless the new document was
        fetched and decoded successfully.

        Raises
        ------
        NoTransportBound
            If no transport is bound.
        ApiError
            If the transport reports a failure.
        MalformedDocument
            If the returned document has no ``jobReference``.
        """
        self._ensure_transport()
        job_id = self._require_job_id()
        logger.debug("Refreshing job %s", job_id)
        resp = self.transport.get_job(job_id)
        if not resp.success():
            raise ApiError.from_response(resp)
        self._ingest(resp.data)
        return self

    def query_results(self, options: Optional[PageOptions] = None, **kwargs: Any) -> ResultPage:
        """Fetch one page of this job's query results.

        Parameters
        ----------
        options : PageOptions, optional
            Page request options. Keyword arguments (``token``,
            ``max_results``, ``start_index``, ``timeout_ms``) build or
            override it.

        Returns
        -------
        ResultPage
            Exactly one page; use ``ResultPage.token`` or
            ``ResultPage.next()`` to continue.

        Raises
        ------
        NoTransportBound
            If no transport is bound.
        ApiError
            If the transport reports a failure.
        """
        self._ensure_transport()
        job_id = self._require_job_id()
        if options is None:
            options = PageOptions(**kwargs)
        elif kwargs:
            options = replace(options, **kwargs)
        logger.debug("Fetching results page for job %s (token=%s)", job_id, options.token)
        resp = self.transport.job_query_results(job_id, options)
        if not resp.success():
            raise ApiError.from_response(resp)
        return ResultPage.from_response(resp.data, self.transport, job_id=job_id, options=options)

    # -- internals -----------------------------------------------------------

    def _ingest(self, data: Any) -> None:
        document = decode_job_document(data)
        self._replace(document, dict(data))

    def _replace(self, document: JobDocument, raw: Dict[str, Any]) -> None:
        self._document = document
        self._raw = raw
        self._state = _normalize_state(document)

    def _ensure_transport(self) -> None:
        if self.transport is None:
            raise NoTransportBound()

    def _require_job_id(self) -> str:
        if self.job_id is None:
            raise MalformedDocument("Snapshot has no job reference")
        return self.job_id

    def __repr__(self) -> str:
        state = self._state.value if isinstance(self._state, JobState) else self._state
        return f"JobSnapshot(job_id={self.job_id!r}, state={state!r})"
