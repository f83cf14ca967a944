"""
MongoDB query executor.

Runs a find-style filter against one collection and materializes every
matching document.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from docframe.adapters.mongodb.connector import is_deadline_error, operation_timeout
from docframe.core.context import QueryContext
from docframe.core.errors import QueryCancelled, QueryExecutionError, ResultReadError
from docframe.core.models import QueryDescriptor

logger = logging.getLogger(__name__)


class MongoQueryExecutor:
    """
    Executes MongoDB find queries.

    Implements the IQueryExecutor interface for MongoDB.
    """

    def __init__(self, require_existing_collection: bool = True):
        """
        Initialize MongoDB query executor.

        Args:
            require_existing_collection: Fail when the target collection does
                not exist instead of returning an empty result
        """
        self.require_existing_collection = require_existing_collection

    def find_all(
        self,
        client: MongoClient,
        descriptor: QueryDescriptor,
        filter_doc: Dict[str, Any],
        context: Optional[QueryContext] = None,
    ) -> List[Mapping[str, Any]]:
        """
        Execute ``filter_doc`` and drain the cursor into memory.

        Failures before the first document arrives are reported as
        QueryExecutionError; failures after that as ResultReadError. No
        partial result is ever returned.

        Args:
            client: Verified MongoDB client
            descriptor: Target database and collection
            filter_doc: Decoded filter document
            context: Deadline/cancellation signal of the caller

        Returns:
            Documents in natural store order
        """
        documents: List[Mapping[str, Any]] = []
        try:
            with operation_timeout(context):
                database = client[descriptor.database]
                if self.require_existing_collection:
                    self._ensure_collection(database, descriptor)
                cursor = database[descriptor.collection].find(filter_doc)
                try:
                    for document in cursor:
                        documents.append(document)
                        if context is not None:
                            context.raise_if_cancelled()
                finally:
                    cursor.close()
        except (PyMongoError, BSONError) as e:
            if isinstance(e, PyMongoError) and is_deadline_error(e, context):
                raise QueryCancelled(f"MongoDB find cancelled: {e}") from e
            if not documents:
                raise QueryExecutionError(f"MongoDB find error: {e}") from e
            raise ResultReadError(
                f"cursor all error: {e} (after {len(documents)} document(s))"
            ) from e

        logger.debug(
            "Fetched %d document(s) from %s.%s",
            len(documents),
            descriptor.database,
            descriptor.collection,
        )
        return documents

    @staticmethod
    def _ensure_collection(database, descriptor: QueryDescriptor):
        names = database.list_collection_names(filter={"name": descriptor.collection})
        if descriptor.collection not in names:
            raise QueryExecutionError(
                f"MongoDB find error: collection '{descriptor.collection}' "
                f"does not exist in database '{descriptor.database}'"
            )
