"""Exceptions raised by job snapshots and result pages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .transport.base import TransportResponse


class BigQueryJobError(Exception):
    """Base exception for this package."""


class MalformedDocument(BigQueryJobError, ValueError):
    """A server document is missing its required job reference."""


class NoTransportBound(BigQueryJobError, RuntimeError):
    """A network operation was requested on a snapshot without a transport."""

    def __init__(self, message: str = "Must have active connection"):
        super().__init__(message)


class ApiError(BigQueryJobError):
    """Non-success response reported by the transport.

    The status code and message are carried verbatim from the collaborator.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.errors = errors or []

    @classmethod
    def from_response(cls, resp: "TransportResponse") -> "ApiError":
        message = resp.message or f"Request failed with status {resp.status}"
        return cls(message, code=resp.status, errors=list(resp.errors))

    def __repr__(self) -> str:
        return f"ApiError(code={self.code!r}, message={self.message!r})"
