"""Query result pages.

A ``ResultPage`` wraps one decoded ``getQueryResults`` response. Rows are
converted to Python values using the page's schema. Following the page
token is left to the caller: ``next()`` fetches exactly one more page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .errors import ApiError, NoTransportBound
from .schemas.results import FieldSchema, ResultPageDocument, decode_result_page
from .transport.base import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000


@dataclass(frozen=True)
class PageOptions:
    """Immutable options for a single results-page request.

    ``start_index`` only applies to the first page; once ``token`` is set
    the server addresses the page by token and the offset is not sent.
    """

    token: Optional[str] = None
    max_results: Optional[int] = None
    start_index: Optional[int] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self):
        if self.max_results is not None and self.max_results < 0:
            raise ValueError(f"max_results must be >= 0, got {self.max_results}")
        if self.start_index is not None and self.start_index < 0:
            raise ValueError(f"start_index must be >= 0, got {self.start_index}")
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {self.timeout_ms}")

    def to_params(self) -> Dict[str, Any]:
        """Return the wire query parameters, omitting unset values."""
        params: Dict[str, Any] = {"timeoutMs": self.timeout_ms}
        if self.token:
            params["pageToken"] = self.token
        elif self.start_index is not None:
            params["startIndex"] = self.start_index
        if self.max_results is not None:
            params["maxResults"] = self.max_results
        return params


# ---------------------------------------------------------------------------
# Value conversion
# ---------------------------------------------------------------------------

def _convert_scalar(field: FieldSchema, value: Any) -> Any:
    if value is None:
        return None
    kind = field.type.upper()
    if kind in ("INTEGER", "INT64"):
        return int(value)
    if kind in ("FLOAT", "FLOAT64"):
        return float(value)
    if kind in ("BOOLEAN", "BOOL"):
        if isinstance(value, bool):
            return value
        return str(value).lower() == "true"
    if kind == "TIMESTAMP":
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    if kind in ("RECORD", "STRUCT"):
        return _format_row(field.fields, [cell.get("v") for cell in value.get("f", [])])
    return value


def _convert_value(field: FieldSchema, value: Any) -> Any:
    if value is None:
        return [] if field.mode.upper() == "REPEATED" else None
    if field.mode.upper() == "REPEATED":
        return [
            _convert_scalar(field, item.get("v") if isinstance(item, Mapping) else item)
            for item in value
        ]
    return _convert_scalar(field, value)


def _format_row(fields: List[FieldSchema], values: List[Any]) -> Dict[str, Any]:
    return {field.name: _convert_value(field, value) for field, value in zip(fields, values)}


# ---------------------------------------------------------------------------
# ResultPage
# ---------------------------------------------------------------------------

class ResultPage:
    """One page of query results bound to the transport that fetched it."""

    def __init__(
        self,
        document: ResultPageDocument,
        transport: Optional[Transport] = None,
        job_id: Optional[str] = None,
        options: Optional[PageOptions] = None,
    ):
        self.document = document
        self.transport = transport
        self.options = options or PageOptions()
        if job_id is None and document.job_reference is not None:
            job_id = document.job_reference.job_id
        self.job_id = job_id
        self.rows: List[Dict[str, Any]] = [
            _format_row(self.fields, [cell.v for cell in row.f]) for row in document.rows
        ]

    @classmethod
    def from_response(
        cls,
        data: Any,
        transport: Optional[Transport] = None,
        job_id: Optional[str] = None,
        options: Optional[PageOptions] = None,
    ) -> "ResultPage":
        return cls(decode_result_page(data), transport, job_id=job_id, options=options)

    @property
    def fields(self) -> List[FieldSchema]:
        if self.document.table_schema is None:
            return []
        return self.document.table_schema.fields

    @property
    def headers(self) -> List[str]:
        return [field.name for field in self.fields]

    @property
    def token(self) -> Optional[str]:
        """Continuation cursor for the following page, if any."""
        return self.document.page_token

    @property
    def total(self) -> Optional[int]:
        """Total rows in the full result set, not in this page."""
        return self.document.total_rows

    @property
    def complete(self) -> bool:
        return bool(self.document.job_complete)

    @property
    def cache_hit(self) -> bool:
        return bool(self.document.cache_hit)

    @property
    def total_bytes(self) -> Optional[int]:
        return self.document.total_bytes_processed

    def has_next(self) -> bool:
        return bool(self.token)

    def next(self) -> Optional["ResultPage"]:
        """Fetch the page after this one, or ``None`` on the last page.

        Raises
        ------
        NoTransportBound
            If the page was built without a transport.
        ApiError
            If the transport reports a failure.
        """
        if not self.has_next():
            return None
        if self.transport is None:
            raise NoTransportBound()
        options = replace(self.options, token=self.token, start_index=None)
        logger.debug("Fetching next results page for job %s", self.job_id)
        resp = self.transport.job_query_results(self.job_id, options)
        if not resp.success():
            raise ApiError.from_response(resp)
        return ResultPage.from_response(
            resp.data, self.transport, job_id=self.job_id, options=options
        )

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)
