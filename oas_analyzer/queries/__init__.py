"""Query catalog module."""

from oas_analyzer.queries.registry import (
    QueryCatalog,
    build_default_catalog,
    get_query_catalog,
    load_catalog,
)
from oas_analyzer.queries.schemas import (
    QueryCategory,
    QueryDefinition,
    QueryName,
    QueryResult,
    QuerySummary,
    ResultKind,
)

__all__ = [
    "QueryCatalog",
    "QueryCategory",
    "QueryDefinition",
    "QueryName",
    "QueryResult",
    "QuerySummary",
    "ResultKind",
    "build_default_catalog",
    "get_query_catalog",
    "load_catalog",
]
