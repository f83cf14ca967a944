"""
FastAPI REST API for docframe.

Runs batches of MongoDB find queries and returns one string-typed frame per
query, plus a health endpoint for validating the configured store.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from docframe import DataSourceSettings, MongoDataSource
from docframe.core.context import QueryContext
from docframe.core.models import DataQuery, DataResponse, HealthCheckResult, HealthStatus

load_dotenv()

logger = logging.getLogger("docframe.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = DataSourceSettings.from_env()
    logging.basicConfig(level=settings.log_level)
    app.state.datasource = MongoDataSource.from_settings(settings)
    logger.info("Data source ready")
    try:
        yield
    finally:
        app.state.datasource.dispose()


app = FastAPI(
    title="docframe API",
    description="Run MongoDB find queries and flatten the results into frames",
    version="1.0.0",
    lifespan=lifespan,
)


class QueryItem(BaseModel):
    """One query of a batch."""

    model_config = ConfigDict(populate_by_name=True)

    ref_id: str = Field(..., alias="refId", description="Caller-supplied query identifier")
    query_text: str = Field("", alias="queryText", description="Filter as (commented) JSON")
    database: str = Field("", description="Database name; defaults to the configured one")
    collection: str = Field("", description="Collection name")


class QueryDataRequest(BaseModel):
    """Batch of queries."""

    queries: List[QueryItem]
    timeout: Optional[float] = Field(None, gt=0, description="Per-query timeout in seconds")


class QueryDataResponse(BaseModel):
    """One response per query, keyed by refId."""

    results: Dict[str, DataResponse]


def get_datasource(request: Request) -> MongoDataSource:
    datasource = getattr(request.app.state, "datasource", None)
    if datasource is None:
        raise HTTPException(status_code=503, detail="Data source is not configured")
    return datasource


@app.post("/query", response_model=QueryDataResponse)
def query_data(
    request: QueryDataRequest,
    datasource: MongoDataSource = Depends(get_datasource),
):
    """
    Execute every query of the batch.

    Failures are reported per query in the response body; a failing query
    never fails the request.
    """
    ref_ids = [item.ref_id for item in request.queries]
    if len(set(ref_ids)) != len(ref_ids):
        raise HTTPException(status_code=400, detail="refId values must be unique")

    queries = [
        DataQuery(
            ref_id=item.ref_id,
            payload=item.model_dump(by_alias=True, exclude={"ref_id"}),
        )
        for item in request.queries
    ]
    contexts = None
    if request.timeout is not None:
        contexts = {ref_id: QueryContext(timeout=request.timeout) for ref_id in ref_ids}

    return QueryDataResponse(results=datasource.query_data(queries, contexts))


@app.get("/health", response_model=HealthCheckResult)
def check_health(response: Response, datasource: MongoDataSource = Depends(get_datasource)):
    """Ping the configured store."""
    result = datasource.check_health()
    if result.status != HealthStatus.OK:
        response.status_code = 503
    return result


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("API_PORT", "8000"))
    host = os.getenv("API_HOST", "0.0.0.0")

    uvicorn.run(app, host=host, port=port)
