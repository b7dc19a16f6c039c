"""Sequential execution: one query at a time in the caller's context."""

import logging
from typing import Any, Sequence

from oas_analyzer.errors import QueryExecutionError
from oas_analyzer.executor.schemas import ExecutionMode
from oas_analyzer.queries.registry import QueryCatalog

logger = logging.getLogger(__name__)


def run_sequentially(
    query_names: Sequence[str],
    document: dict[str, Any],
    catalog: QueryCatalog,
) -> dict[str, Any]:
    """Run queries in request order against the same document instance.

    Raises:
        QueryExecutionError: On the first failing query. Nothing else runs
            after it and no partial results are returned.
    """
    results: dict[str, Any] = {}
    for name in query_names:
        logger.debug(f"Running query {name}")
        try:
            results[name] = catalog.run(name, document)
        except Exception as e:
            logger.error(f"Query {name} failed in sequential mode: {e}")
            raise QueryExecutionError(
                name, ExecutionMode.SEQUENTIAL.value, f"{type(e).__name__}: {e}"
            ) from e
    return results
