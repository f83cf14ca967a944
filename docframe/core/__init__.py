"""Core interfaces, models and errors."""

from docframe.core.context import QueryContext
from docframe.core.errors import (
    DocFrameError,
    SettingsError,
    MalformedQuery,
    MalformedFilter,
    StoreConnectionError,
    ConnectFailed,
    PingFailed,
    QueryExecutionError,
    ResultReadError,
    QueryCancelled,
)
from docframe.core.interfaces import IStoreConnector, IQueryExecutor
from docframe.core.models import (
    Status,
    HealthStatus,
    DataQuery,
    QueryDescriptor,
    FrameField,
    Frame,
    DataResponse,
    HealthCheckResult,
)

__all__ = [
    "QueryContext",
    "DocFrameError",
    "SettingsError",
    "MalformedQuery",
    "MalformedFilter",
    "StoreConnectionError",
    "ConnectFailed",
    "PingFailed",
    "QueryExecutionError",
    "ResultReadError",
    "QueryCancelled",
    "IStoreConnector",
    "IQueryExecutor",
    "Status",
    "HealthStatus",
    "DataQuery",
    "QueryDescriptor",
    "FrameField",
    "Frame",
    "DataResponse",
    "HealthCheckResult",
]
