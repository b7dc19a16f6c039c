"""Query catalog API routes.

Endpoints:
    GET  /v1/queries              List query summaries
    GET  /v1/queries/keys         List query names
    GET  /v1/queries/{name}       Get one query definition
    POST /v1/queries/run          Run selected queries against a definition
"""

import asyncio
import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from oas_analyzer.config import resolve_parallel_options
from oas_analyzer.errors import IsolationTransportError, QueryExecutionError
from oas_analyzer.executor.query_runner import run_queries
from oas_analyzer.executor.schemas import QueryExecutionResult
from oas_analyzer.queries.registry import get_query_catalog
from oas_analyzer.queries.schemas import QueryCategory, QueryDefinition, QuerySummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/queries", tags=["queries"])


class RunQueriesRequest(BaseModel):
    """Request to run catalog queries against a definition."""

    document: dict[str, Any] = Field(..., description="Parsed OpenAPI/Swagger definition")
    query_names: Optional[list[str]] = Field(
        default=None,
        description="Queries to run; all catalog queries when omitted",
    )
    use_workers: Optional[bool] = Field(
        default=None, description="Override the isolated-unit switch"
    )
    min_size_for_workers: Optional[int] = Field(
        default=None, ge=0, description="Override the size threshold for isolated units"
    )


@router.get("", response_model=list[QuerySummary])
async def list_queries(
    category: Optional[QueryCategory] = Query(None, description="Filter by category"),
) -> list[QuerySummary]:
    """List all catalog queries."""
    return get_query_catalog().list_summaries(category)


@router.get("/keys", response_model=list[str])
async def list_query_keys() -> list[str]:
    """List all query names."""
    return get_query_catalog().list_keys()


@router.get("/{query_name}", response_model=QueryDefinition)
async def get_query(query_name: str) -> QueryDefinition:
    """Get a query definition by name."""
    definition = get_query_catalog().get_definition(query_name)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"Query not found: {query_name}")
    return definition


@router.post("/run", response_model=QueryExecutionResult)
async def run_selected_queries(request: RunQueriesRequest) -> QueryExecutionResult:
    """Run queries and report which execution mode was used."""
    catalog = get_query_catalog()
    names = request.query_names if request.query_names is not None else catalog.list_keys()
    options = resolve_parallel_options(request.use_workers, request.min_size_for_workers)

    try:
        return await asyncio.to_thread(
            run_queries, names, request.document, options, catalog=catalog
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (QueryExecutionError, IsolationTransportError) as e:
        logger.error(f"Query run failed: {e}")
        raise HTTPException(
            status_code=500,
            detail={"query_name": e.query_name, "execution_mode": e.execution_mode, "error": e.message},
        )
