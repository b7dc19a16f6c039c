"""Analysis API route.

Endpoints:
    POST /v1/analyze              Full feature-usage report for a definition
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from oas_analyzer.analyzer.schemas import OASAnalysis
from oas_analyzer.analyzer.service import get_analyzer
from oas_analyzer.config import resolve_parallel_options
from oas_analyzer.errors import DereferenceError, IsolationTransportError, QueryExecutionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    """Request to analyze a parsed definition."""

    document: dict[str, Any] = Field(..., description="Parsed OpenAPI/Swagger definition")
    use_workers: Optional[bool] = Field(
        default=None, description="Override the isolated-unit switch"
    )
    min_size_for_workers: Optional[int] = Field(
        default=None, ge=0, description="Override the size threshold for isolated units"
    )


@router.post("", response_model=OASAnalysis)
async def analyze_definition(request: AnalyzeRequest) -> OASAnalysis:
    """Analyze a definition for OpenAPI and ReadMe feature usage."""
    options = resolve_parallel_options(request.use_workers, request.min_size_for_workers)
    try:
        return await get_analyzer().analyze(request.document, options)
    except DereferenceError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (QueryExecutionError, IsolationTransportError) as e:
        logger.error(f"Analysis failed: {e}")
        raise HTTPException(
            status_code=500,
            detail={"query_name": e.query_name, "execution_mode": e.execution_mode, "error": e.message},
        )
