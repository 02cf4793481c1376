"""Job status document schemas.

Only the sections the snapshot reads are modelled; anything else the
server sends is ignored.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import MalformedDocument

__all__ = [
    "ErrorProto",
    "JobReference",
    "JobStatusSection",
    "JobStatistics",
    "JobDocument",
    "decode_job_document",
]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ErrorProto(_WireModel):
    reason: Optional[str] = None
    location: Optional[str] = None
    message: Optional[str] = None
    debug_info: Optional[str] = Field(default=None, alias="debugInfo")


class JobReference(_WireModel):
    job_id: str = Field(alias="jobId")
    project_id: str = Field(alias="projectId")


class JobStatusSection(_WireModel):
    state: Optional[str] = None
    error_result: Optional[ErrorProto] = Field(default=None, alias="errorResult")
    errors: List[ErrorProto] = Field(default_factory=list)


class JobStatistics(_WireModel):
    """Epoch-millisecond timestamps. int64 values may arrive as strings."""

    creation_time: Optional[int] = Field(default=None, alias="creationTime")
    start_time: Optional[int] = Field(default=None, alias="startTime")
    end_time: Optional[int] = Field(default=None, alias="endTime")


class JobDocument(_WireModel):
    job_reference: JobReference = Field(alias="jobReference")
    status: Optional[JobStatusSection] = None
    statistics: Optional[JobStatistics] = None
    etag: Optional[str] = None
    self_link: Optional[str] = Field(default=None, alias="selfLink")


def decode_job_document(data: Any) -> JobDocument:
    """Decode a job status document.

    Raises
    ------
    MalformedDocument
        If ``data`` is not a mapping, has no ``jobReference``, or any
        modelled section has the wrong shape.
    """
    if not isinstance(data, Mapping):
        raise MalformedDocument(
            f"Job document must be a mapping, got {type(data).__name__}"
        )
    if data.get("jobReference") is None:
        raise MalformedDocument("Job document has no jobReference")
    try:
        return JobDocument.model_validate(data)
    except ValidationError as exc:
        raise MalformedDocument(f"Invalid job document: {exc}") from exc
