"""Query results page schemas (``getQueryResults`` response)."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import Field, ValidationError

from ..errors import MalformedDocument
from .job import JobReference, _WireModel

__all__ = [
    "FieldSchema",
    "TableSchema",
    "Cell",
    "Row",
    "ResultPageDocument",
    "decode_result_page",
]


class FieldSchema(_WireModel):
    name: str
    type: str = "STRING"
    mode: str = "NULLABLE"
    fields: List["FieldSchema"] = Field(default_factory=list)


FieldSchema.model_rebuild()


class TableSchema(_WireModel):
    fields: List[FieldSchema] = Field(default_factory=list)


class Cell(_WireModel):
    v: Any = None


class Row(_WireModel):
    f: List[Cell] = Field(default_factory=list)


class ResultPageDocument(_WireModel):
    job_reference: Optional[JobReference] = Field(default=None, alias="jobReference")
    table_schema: Optional[TableSchema] = Field(default=None, alias="schema")
    rows: List[Row] = Field(default_factory=list)
    total_rows: Optional[int] = Field(default=None, alias="totalRows")
    page_token: Optional[str] = Field(default=None, alias="pageToken")
    job_complete: Optional[bool] = Field(default=None, alias="jobComplete")
    cache_hit: Optional[bool] = Field(default=None, alias="cacheHit")
    total_bytes_processed: Optional[int] = Field(
        default=None, alias="totalBytesProcessed"
    )
    etag: Optional[str] = None


def decode_result_page(data: Any) -> ResultPageDocument:
    """Decode one results page, raising ``MalformedDocument`` on bad shape."""
    if not isinstance(data, Mapping):
        raise MalformedDocument(
            f"Results document must be a mapping, got {type(data).__name__}"
        )
    try:
        return ResultPageDocument.model_validate(data)
    except ValidationError as exc:
        raise MalformedDocument(f"Invalid results document: {exc}") from exc
