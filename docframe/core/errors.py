"""
Error taxonomy for query execution.

Every error is scoped to the single query that raised it. The per-query
boundary converts these into error responses using their ``status``.
"""

from docframe.core.models import Status


class DocFrameError(Exception):
    """Base class for all per-query failures."""

    status: Status = Status.BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class SettingsError(DocFrameError):
    """Data source settings could not be decoded."""


class MalformedQuery(DocFrameError):
    """The query model (database, collection, query text) could not be decoded."""


class MalformedFilter(DocFrameError):
    """The filter text is not a valid structured document."""


class StoreConnectionError(DocFrameError):
    """The document store is unreachable or unresponsive."""


class ConnectFailed(StoreConnectionError):
    """A client could not be established."""


class PingFailed(StoreConnectionError):
    """A client was established but did not answer the health probe."""


class QueryExecutionError(DocFrameError):
    """The store rejected the find operation."""


class ResultReadError(DocFrameError):
    """Draining the cursor failed after results started arriving."""


class QueryCancelled(DocFrameError):
    """The caller cancelled the query or its deadline expired."""

    status = Status.CANCELLED
