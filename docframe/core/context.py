"""
Cancellation and deadline signal threaded through a query.
"""

import threading
import time
from typing import Optional

from docframe.core.errors import QueryCancelled


class QueryContext:
    """
    Carries the caller's deadline and cancellation flag.

    A context is owned by one query (or one health check); cancelling it
    never affects sibling queries of the same batch.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Args:
            timeout: Seconds the query may run before it is cancelled.
                None means no deadline.
            cancel_event: Event the caller sets to abort the query.
        """
        self.timeout = timeout
        self.cancel_event = cancel_event or threading.Event()
        self.deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self):
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def raise_if_cancelled(self):
        if self.cancelled:
            raise QueryCancelled("query cancelled by caller")
        if self.expired:
            raise QueryCancelled(f"query deadline of {self.timeout}s exceeded")
