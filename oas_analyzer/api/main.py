"""OAS Analyzer API - feature-usage reports for API definitions.

This API runs the analyzer over already-parsed definitions:
- Full reports (OpenAPI, JSON Schema and ReadMe extension usage)
- Individual catalog queries, with the execution mode that was used
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oas_analyzer import __version__
from oas_analyzer.api.routes import analyze, queries
from oas_analyzer.config import get_default_parallel_options
from oas_analyzer.executor.unit_executors import get_unit_executor
from oas_analyzer.queries.registry import get_query_catalog

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _isolation_available() -> bool:
    unit_executor = get_unit_executor(get_query_catalog())
    return unit_executor is not None and unit_executor.is_available()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: build the catalog once
    logger.info("Loading query catalog...")
    catalog = get_query_catalog()
    logger.info(f"Loaded {catalog.count()} queries")

    options = get_default_parallel_options()
    logger.info(
        f"Worker settings: use_workers={options.use_workers}, "
        f"min_size_for_workers={options.min_size_for_workers}, "
        f"isolation_available={_isolation_available()}"
    )

    logger.info("OAS Analyzer API ready")
    yield
    # Shutdown
    logger.info("Shutting down OAS Analyzer API")


# Create FastAPI app
app = FastAPI(
    title="OAS Analyzer API",
    description="""
## Feature-usage analysis for OpenAPI and Swagger definitions

Send a parsed definition and get back which OpenAPI, JSON Schema and
ReadMe-specific features it uses, and where.

### Key Endpoints

- `POST /v1/analyze` - Full feature-usage report
- `GET /v1/queries` - List catalog queries
- `POST /v1/queries/run` - Run selected queries
""",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with /v1 prefix
app.include_router(analyze.router, prefix="/v1")
app.include_router(queries.router, prefix="/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "OAS Analyzer API",
        "version": __version__,
        "description": "Feature-usage analysis for API definitions",
        "docs": "/docs",
        "endpoints": {
            "analyze": "/v1/analyze",
            "queries": "/v1/queries",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    options = get_default_parallel_options()
    return {
        "status": "healthy",
        "queries_loaded": get_query_catalog().count(),
        "isolation_available": _isolation_available(),
        "use_workers": options.use_workers,
        "min_size_for_workers": options.min_size_for_workers,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "oas_analyzer.api.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )
