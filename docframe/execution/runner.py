"""
Per-query pipeline and its failure boundary.

Each query is decoded, executed and flattened independently. Whatever goes
wrong is converted into an error response for that query only.
"""

import logging
from typing import Optional

from docframe.adapters.mongodb.pool import ClientPool
from docframe.core.context import QueryContext
from docframe.core.errors import DocFrameError
from docframe.core.interfaces import IQueryExecutor
from docframe.core.models import DataQuery, DataResponse, Frame, Status
from docframe.execution.frame_builder import build_frame
from docframe.execution.unifier import SchemaUnifier
from docframe.query.decoder import decode_filter, decode_query_model

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "unexpected error while processing query"


class QueryRunner:
    """
    Runs one query end to end and never raises.

    Wraps the store-specific executor with decoding, schema unification,
    frame building and error conversion.
    """

    def __init__(
        self,
        uri: str,
        pool: ClientPool,
        executor: IQueryExecutor,
        unifier: Optional[SchemaUnifier] = None,
        default_database: str = "",
    ):
        """
        Initialize query runner.

        Args:
            uri: Connection URI of the store
            pool: Pool lending verified clients
            executor: Store-specific query executor
            unifier: Schema unifier for result sets
            default_database: Database used by queries that name none
        """
        self.uri = uri
        self.pool = pool
        self.executor = executor
        self.unifier = unifier or SchemaUnifier()
        self.default_database = default_database

    def run(self, query: DataQuery, context: Optional[QueryContext] = None) -> DataResponse:
        """
        Execute a single query.

        Returns:
            A response with one frame, or an error response
        """
        try:
            frame = self.execute(query, context)
        except DocFrameError as e:
            logger.warning("Query %s failed: %s", query.ref_id, e.message)
            return DataResponse.error_response(e.status, e.message)
        except Exception:
            logger.exception("Unexpected failure in query %s", query.ref_id)
            return DataResponse.error_response(Status.INTERNAL, INTERNAL_ERROR_MESSAGE)

        return DataResponse(frames=[frame])

    def execute(self, query: DataQuery, context: Optional[QueryContext] = None) -> Frame:
        """
        Execute a single query, raising on failure.

        Raises:
            DocFrameError: For any expected per-query failure
        """
        descriptor = decode_query_model(query.payload, self.default_database)
        filter_doc = decode_filter(descriptor.filter_text)

        with self.pool.acquire(self.uri, context) as client:
            documents = self.executor.find_all(client, descriptor, filter_doc, context)

        field_set, normalized = self.unifier.unify(documents)
        frame = build_frame(field_set, normalized)
        logger.debug(
            "Query %s returned %d row(s) over %d column(s)",
            query.ref_id,
            frame.row_count,
            len(frame.fields),
        )
        return frame
