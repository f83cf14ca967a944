"""
Shared data models for query execution.
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Status(str, Enum):
    """Status class of a per-query response."""

    OK = "ok"
    BAD_REQUEST = "bad_request"
    CANCELLED = "cancelled"
    INTERNAL = "internal"


class HealthStatus(str, Enum):
    """Outcome of a connectivity check."""

    OK = "ok"
    ERROR = "error"


class DataQuery(BaseModel):
    """A single inbound query, routed back to the caller by ``ref_id``."""

    ref_id: str
    payload: Union[Dict[str, Any], str, bytes] = Field(default_factory=dict)


class QueryDescriptor(BaseModel):
    """Decoded query model. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    filter_text: str = ""
    database: str = ""
    collection: str = ""


class FrameField(BaseModel):
    """One column of a frame."""

    name: str
    values: List[str] = Field(default_factory=list)


class Frame(BaseModel):
    """Column-oriented table with string-typed values."""

    name: str = "response"
    fields: List[FrameField] = Field(default_factory=list)

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    @property
    def row_count(self) -> int:
        if not self.fields:
            return 0
        return len(self.fields[0].values)

    def rows(self) -> Iterator[Dict[str, str]]:
        """Iterate the frame row by row."""
        for index in range(self.row_count):
            yield {field.name: field.values[index] for field in self.fields}


class DataResponse(BaseModel):
    """Result of one query: frames on success, an error message otherwise."""

    frames: List[Frame] = Field(default_factory=list)
    error: Optional[str] = None
    status: Status = Status.OK

    @property
    def ok(self) -> bool:
        return self.status == Status.OK

    @classmethod
    def error_response(cls, status: Status, message: str) -> "DataResponse":
        return cls(status=status, error=message)


class HealthCheckResult(BaseModel):
    """Two-valued status plus a human-readable message."""

    status: HealthStatus
    message: str
