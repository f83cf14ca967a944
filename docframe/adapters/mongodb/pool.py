"""
Client pool keyed by connection URI.

A client is lent to exactly one query at a time. Clients that saw an error
are closed instead of being returned, so one failing query cannot leave a
broken client behind for the next one.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from docframe.core.context import QueryContext
from docframe.core.errors import StoreConnectionError
from docframe.core.interfaces import IStoreConnector

logger = logging.getLogger(__name__)


class ClientPool:
    """
    Lends verified store clients and keeps idle ones for reuse.

    With ``max_idle_seconds=0`` every client is closed on release, which
    gives one fresh connection per query.
    """

    def __init__(self, connector: IStoreConnector, max_idle_seconds: float = 300.0):
        """
        Initialize the pool.

        Args:
            connector: Store connector used to create and verify clients
            max_idle_seconds: How long a released client may stay idle
                before it is closed
        """
        self.connector = connector
        self.max_idle_seconds = max_idle_seconds
        self._idle: Dict[str, List[Tuple[Any, float]]] = {}
        self._lock = threading.Lock()
        self._closed = False

    @contextmanager
    def acquire(self, uri: str, context: Optional[QueryContext] = None) -> Iterator[Any]:
        """
        Borrow a verified client for ``uri``.

        The client is verified before it is handed out, whether it is new or
        reused. It goes back to the idle list when the block exits normally
        and is closed when the block raises.

        Raises:
            ConnectFailed: If no client could be created
            PingFailed: If the client does not answer the health probe
            QueryCancelled: If the context is cancelled while connecting
        """
        self.evict_idle()
        client = self._checkout(uri)
        if client is None:
            client = self.connector.connect(uri, context)
            logger.debug("Opened new client for pooled URI")

        try:
            self.connector.verify(client, context)
        except BaseException:
            self.connector.close(client)
            raise

        try:
            yield client
        except BaseException:
            self.connector.close(client)
            raise
        self._checkin(uri, client)

    def evict_idle(self) -> int:
        """
        Close clients idle for longer than ``max_idle_seconds``.

        Returns:
            Number of clients closed
        """
        now = time.monotonic()
        expired: List[Any] = []
        with self._lock:
            for uri, entries in list(self._idle.items()):
                keep = []
                for client, released_at in entries:
                    if now - released_at > self.max_idle_seconds:
                        expired.append(client)
                    else:
                        keep.append((client, released_at))
                if keep:
                    self._idle[uri] = keep
                else:
                    del self._idle[uri]

        for client in expired:
            self.connector.close(client)
        if expired:
            logger.debug("Evicted %d idle client(s)", len(expired))
        return len(expired)

    def idle_count(self, uri: Optional[str] = None) -> int:
        with self._lock:
            if uri is not None:
                return len(self._idle.get(uri, []))
            return sum(len(entries) for entries in self._idle.values())

    def close(self):
        """Close every idle client. The pool rejects check-ins afterwards."""
        with self._lock:
            self._closed = True
            clients = [client for entries in self._idle.values() for client, _ in entries]
            self._idle.clear()
        for client in clients:
            self.connector.close(client)

    def _checkout(self, uri: str) -> Optional[Any]:
        with self._lock:
            if self._closed:
                raise StoreConnectionError("unable to connect to MongoDB: client pool is closed")
            entries = self._idle.get(uri)
            if not entries:
                return None
            client, _ = entries.pop()
            return client

    def _checkin(self, uri: str, client: Any):
        with self._lock:
            if not self._closed and self.max_idle_seconds > 0:
                self._idle.setdefault(uri, []).append((client, time.monotonic()))
                return
        self.connector.close(client)
