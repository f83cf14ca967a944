"""
MongoDB connection establishment and liveness checks.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import pymongo
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from docframe.core.context import QueryContext
from docframe.core.errors import ConnectFailed, PingFailed, QueryCancelled

logger = logging.getLogger(__name__)

DEADLINE_SLACK = 0.5


@contextmanager
def operation_timeout(context: Optional[QueryContext]) -> Iterator[None]:
    """
    Apply the context deadline to every pymongo operation in the block.

    Raises:
        QueryCancelled: If the context is already cancelled or expired
    """
    if context is None:
        yield
        return

    context.raise_if_cancelled()
    remaining = context.remaining()
    if remaining is None:
        yield
        return
    with pymongo.timeout(remaining):
        yield


def is_deadline_error(error: PyMongoError, context: Optional[QueryContext]) -> bool:
    """Whether a pymongo error was caused by the caller's deadline."""
    if context is None or context.deadline is None:
        return False
    if not getattr(error, "timeout", False):
        return False
    # pymongo gives up early once the budget left is below a round trip
    return context.expired or context.remaining() <= DEADLINE_SLACK


class MongoStoreConnector:
    """
    Creates and verifies MongoDB clients.

    Implements the IStoreConnector interface for MongoDB.
    """

    def __init__(
        self,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 5000,
    ):
        """
        Initialize the connector.

        Args:
            server_selection_timeout_ms: Upper bound for finding a usable server
            connect_timeout_ms: Upper bound for opening a socket
        """
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.connect_timeout_ms = connect_timeout_ms

    def connect(self, uri: str, context: Optional[QueryContext] = None) -> MongoClient:
        """
        Create a client for the given URI.

        The client connects lazily; call ``verify`` before using it.

        Raises:
            ConnectFailed: If the URI or options are rejected
            QueryCancelled: If the context is already cancelled
        """
        if context is not None:
            context.raise_if_cancelled()

        selection_timeout = self.server_selection_timeout_ms
        remaining = context.remaining() if context is not None else None
        if remaining is not None:
            selection_timeout = max(1, min(selection_timeout, int(remaining * 1000)))

        try:
            return MongoClient(
                uri,
                serverSelectionTimeoutMS=selection_timeout,
                connectTimeoutMS=self.connect_timeout_ms,
            )
        except (PyMongoError, ValueError, TypeError) as e:
            raise ConnectFailed(f"unable to connect to MongoDB: {e}") from e

    def verify(self, client: MongoClient, context: Optional[QueryContext] = None) -> None:
        """
        Ping the server.

        Raises:
            PingFailed: If the server does not answer
            QueryCancelled: If the caller's deadline expired during the ping
        """
        try:
            with operation_timeout(context):
                client.admin.command("ping")
        except PyMongoError as e:
            if is_deadline_error(e, context):
                raise QueryCancelled(f"MongoDB ping cancelled: {e}") from e
            raise PingFailed(f"MongoDB ping failed: {e}") from e

    def close(self, client: MongoClient) -> None:
        """Close a client, logging instead of raising."""
        try:
            client.close()
        except Exception:
            logger.warning("Failed to close MongoDB client", exc_info=True)
