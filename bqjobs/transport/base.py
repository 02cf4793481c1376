"""Transport interface — abstract base for connection objects.

Snapshots receive their transport by injection, so tests substitute a
fake and applications plug in whatever authenticated client they use.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ..results import PageOptions


@dataclass
class TransportResponse:
    """Standardised response from any transport call."""

    status: int = 200
    data: Optional[Dict[str, Any]] = None
    message: str = ""
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def success(self) -> bool:
        return 200 <= self.status < 300


class Transport(abc.ABC):
    """Abstract base class for job transports.

    Subclasses must implement:
    - ``get_job``: fetch the status document of one job
    - ``job_query_results``: fetch one page of a query job's results
    """

    @abc.abstractmethod
    def get_job(self, job_id: str) -> TransportResponse:
        """Fetch the current status document for ``job_id``.

        Returns
        -------
        TransportResponse
            ``data`` holds the job document on success.
        """
        ...

    @abc.abstractmethod
    def job_query_results(self, job_id: str, options: "PageOptions") -> TransportResponse:
        """Fetch a single page of results for ``job_id``.

        Parameters
        ----------
        job_id : str
            Job whose results are read.
        options : PageOptions
            Page token, row limits and server wait time. ``options.to_params()``
            gives the wire query parameters.

        Returns
        -------
        TransportResponse
            ``data`` holds the results document on success.
        """
        ...
