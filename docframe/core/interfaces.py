"""
Abstract interfaces for document store adapters.

These protocols define the contract a store adapter must implement to be
driven by the query runner and the data source.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol

from docframe.core.context import QueryContext
from docframe.core.models import QueryDescriptor


class IStoreConnector(Protocol):
    """
    Establish and verify connections to a document store.

    A connection returned by ``connect`` is not guaranteed to be usable until
    ``verify`` has succeeded on it.
    """

    def connect(self, uri: str, context: Optional[QueryContext] = None) -> Any:
        """
        Establish a connection.

        Args:
            uri: Full connection URI, credentials included
            context: Deadline/cancellation signal of the caller

        Returns:
            A store client

        Raises:
            ConnectFailed: If the client could not be established
        """
        ...

    def verify(self, client: Any, context: Optional[QueryContext] = None) -> None:
        """
        Run a round-trip health probe on an established client.

        Raises:
            PingFailed: If the store does not answer
            QueryCancelled: If the caller's deadline expired
        """
        ...

    def close(self, client: Any) -> None:
        """Release a client. Never raises."""
        ...


class IQueryExecutor(Protocol):
    """
    Execute a filter against one collection and materialize the results.
    """

    def find_all(
        self,
        client: Any,
        descriptor: QueryDescriptor,
        filter_doc: Dict[str, Any],
        context: Optional[QueryContext] = None,
    ) -> List[Mapping[str, Any]]:
        """
        Run a find-style query and drain the cursor.

        Args:
            client: Verified store client
            descriptor: Target database and collection
            filter_doc: Decoded filter expression
            context: Deadline/cancellation signal of the caller

        Returns:
            Every matching document, in store iteration order

        Raises:
            QueryExecutionError: If the store rejected the query
            ResultReadError: If reading results failed partway
            QueryCancelled: If the caller cancelled the query
        """
        ...
