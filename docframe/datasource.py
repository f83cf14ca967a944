"""
MongoDB data source - main entry point.

Fans a batch of queries out to the per-query runner and answers health
checks for the configured store.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from docframe.adapters.mongodb.connector import MongoStoreConnector
from docframe.adapters.mongodb.executor import MongoQueryExecutor
from docframe.adapters.mongodb.pool import ClientPool
from docframe.config import DataSourceSettings
from docframe.core.context import QueryContext
from docframe.core.errors import DocFrameError, QueryCancelled
from docframe.core.interfaces import IQueryExecutor, IStoreConnector
from docframe.core.models import DataQuery, DataResponse, HealthCheckResult, HealthStatus
from docframe.execution.runner import QueryRunner

logger = logging.getLogger(__name__)

HEALTH_OK_MESSAGE = "MongoDB connection successful"


class MongoDataSource:
    """
    Executes batches of MongoDB queries and returns one frame per query.

    Coordinates the connector, the client pool, the query executor and the
    per-query runner.
    """

    def __init__(
        self,
        settings: DataSourceSettings,
        connector: Optional[IStoreConnector] = None,
        executor: Optional[IQueryExecutor] = None,
        pool: Optional[ClientPool] = None,
    ):
        """
        Initialize the data source.

        Args:
            settings: Data source settings
            connector: Store connector; built from settings when omitted
            executor: Query executor; built from settings when omitted
            pool: Client pool; built from settings when omitted
        """
        self.settings = settings
        self.connector = connector or MongoStoreConnector(
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
            connect_timeout_ms=settings.connect_timeout_ms,
        )
        self.executor = executor or MongoQueryExecutor(
            require_existing_collection=settings.require_existing_collection,
        )
        self.pool = pool or ClientPool(
            self.connector, max_idle_seconds=settings.pool_max_idle_seconds
        )
        self.runner = QueryRunner(
            uri=self.uri,
            pool=self.pool,
            executor=self.executor,
            default_database=settings.database,
        )

    @classmethod
    def from_settings(cls, settings: DataSourceSettings) -> "MongoDataSource":
        return cls(settings)

    @classmethod
    def from_json(
        cls,
        json_data: Union[str, bytes, Dict[str, Any]],
        secure_json_data: Optional[Dict[str, str]] = None,
    ) -> "MongoDataSource":
        """
        Create a data source from a stored instance configuration.

        Raises:
            SettingsError: If the configuration cannot be decoded
        """
        return cls(DataSourceSettings.from_json(json_data, secure_json_data))

    @classmethod
    def from_env(cls) -> "MongoDataSource":
        """Create a data source from environment variables."""
        return cls(DataSourceSettings.from_env())

    @property
    def uri(self) -> str:
        return self.settings.connection_uri

    def new_context(self) -> QueryContext:
        """Fresh context using the configured query timeout."""
        return QueryContext(timeout=self.settings.query_timeout)

    def query_data(
        self,
        queries: Iterable[DataQuery],
        contexts: Optional[Mapping[str, QueryContext]] = None,
    ) -> Dict[str, DataResponse]:
        """
        Execute a batch of queries sequentially.

        Args:
            queries: Queries to run
            contexts: Optional cancellation contexts keyed by ``ref_id``;
                queries without one get a fresh context

        Returns:
            One response per query, keyed by ``ref_id``
        """
        contexts = contexts or {}
        responses: Dict[str, DataResponse] = {}
        for query in queries:
            context = contexts.get(query.ref_id) or self.new_context()
            responses[query.ref_id] = self.runner.run(query, context)
        return responses

    def check_health(self, context: Optional[QueryContext] = None) -> HealthCheckResult:
        """
        Verify that the store is reachable with the configured credentials.

        Uses a dedicated client that is closed afterwards, independent of the
        pool used by queries.
        """
        context = context or self.new_context()
        try:
            client = self.connector.connect(self.uri, context)
        except QueryCancelled as e:
            return HealthCheckResult(status=HealthStatus.ERROR, message=e.message)
        except DocFrameError as e:
            return HealthCheckResult(
                status=HealthStatus.ERROR, message=f"Unable to connect to MongoDB: {_detail(e)}"
            )

        try:
            self.connector.verify(client, context)
        except QueryCancelled as e:
            return HealthCheckResult(status=HealthStatus.ERROR, message=e.message)
        except DocFrameError as e:
            return HealthCheckResult(
                status=HealthStatus.ERROR, message=f"MongoDB ping failed: {_detail(e)}"
            )
        finally:
            self.connector.close(client)

        return HealthCheckResult(status=HealthStatus.OK, message=HEALTH_OK_MESSAGE)

    def dispose(self):
        """Release every pooled client."""
        self.pool.close()
        logger.debug("Disposed data source")

    def __enter__(self) -> "MongoDataSource":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


def _detail(error: DocFrameError) -> str:
    """Error message without the connector's own prefix."""
    message = error.message
    for prefix in ("unable to connect to MongoDB: ", "MongoDB ping failed: "):
        if message.startswith(prefix):
            return message[len(prefix):]
    return message
