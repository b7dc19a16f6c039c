"""Top-level query batch execution.

Measures the document once, picks sequential or parallel execution, runs
the batch and returns the results in request order together with the mode
that was used. Falls back to sequential execution transparently when no
isolation backend is available.
"""

import logging
import time
from typing import Any, Optional, Sequence

from oas_analyzer.config import get_default_parallel_options
from oas_analyzer.executor.dispatcher import run_in_units
from oas_analyzer.executor.mode_selector import (
    ModeStrategy,
    measure_document_size,
    select_execution_mode,
    size_threshold_strategy,
)
from oas_analyzer.executor.schemas import ExecutionMode, ParallelOptions, QueryExecutionResult
from oas_analyzer.executor.sequential import run_sequentially
from oas_analyzer.executor.unit_executors import (
    UnitExecutor,
    executor_serves_catalog,
    get_unit_executor,
)
from oas_analyzer.queries.registry import QueryCatalog, get_query_catalog

logger = logging.getLogger(__name__)


def run_queries(
    query_names: Sequence[str],
    document: dict[str, Any],
    options: Optional[ParallelOptions] = None,
    *,
    catalog: Optional[QueryCatalog] = None,
    unit_executor: Optional[UnitExecutor] = None,
    strategy: ModeStrategy = size_threshold_strategy,
) -> QueryExecutionResult:
    """Run a batch of catalog queries against one document.

    Args:
        query_names: Queries to run; duplicates are collapsed.
        document: Parsed API definition (never modified).
        options: Worker heuristic; defaults come from the environment.
        catalog: Query catalog; defaults to the global catalog.
        unit_executor: Isolation backend; defaults to one process per unit
            when the catalog can be loaded by name.
        strategy: Mode strategy ``(size, options) -> ExecutionMode``.

    Returns:
        QueryExecutionResult with every requested name exactly once.

    Raises:
        ValueError: If a requested query is not in the catalog, or the unit
            executor is bound to a different catalog.
        QueryExecutionError: If any query raised.
        IsolationTransportError: If an isolated unit failed.
    """
    start_time = time.time()
    catalog = catalog or get_query_catalog()
    options = options or get_default_parallel_options()

    names = list(dict.fromkeys(str(getattr(n, "value", n)) for n in query_names))
    unknown = [n for n in names if n not in catalog]
    if unknown:
        raise ValueError(f"Unknown queries: {unknown}. Available: {sorted(catalog.list_keys())}")

    if unit_executor is None:
        unit_executor = get_unit_executor(catalog)
    elif not executor_serves_catalog(unit_executor, catalog):
        raise ValueError("Unit executor is bound to a different catalog than the one being run")
    isolation_available = unit_executor is not None and unit_executor.is_available()

    try:
        document_size = measure_document_size(document)
    except RecursionError:
        # Too deep to serialize means too deep to ship to a unit as well
        logger.warning("Document is nested too deeply to measure, running sequentially")
        document_size = 0
        isolation_available = False
    mode = select_execution_mode(document_size, options, isolation_available, strategy)

    logger.info(
        f"Running {len(names)} queries in {mode.value} mode "
        f"(size={document_size}, threshold={options.min_size_for_workers}, "
        f"use_workers={options.use_workers}, isolation={isolation_available})"
    )

    if mode == ExecutionMode.PARALLEL:
        raw_results = run_in_units(names, document, unit_executor)
    else:
        raw_results = run_sequentially(names, document, catalog)

    elapsed = int((time.time() - start_time) * 1000)
    logger.info(f"Query batch complete: {len(raw_results)} results in {elapsed}ms ({mode.value})")

    return QueryExecutionResult(
        results={name: raw_results[name] for name in names},
        execution_mode=mode,
        document_size=document_size,
        duration_ms=elapsed,
    )
