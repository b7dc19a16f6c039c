"""Isolated-unit dispatcher: one unit per query, all-or-nothing join.

Each requested query gets exactly one UnitTask. Units run concurrently with
no ordering guarantee; outcomes are keyed by query name as they arrive, so
arrival order never affects the resulting mapping. A single failing unit
fails the whole batch and the other outcomes are discarded.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Sequence

from oas_analyzer.errors import AnalyzerError, IsolationTransportError, QueryExecutionError
from oas_analyzer.executor.schemas import ExecutionMode, UnitTask
from oas_analyzer.executor.unit_executors import UnitExecutor

logger = logging.getLogger(__name__)


def run_in_units(
    query_names: Sequence[str],
    document: dict[str, Any],
    unit_executor: UnitExecutor,
) -> dict[str, Any]:
    """Run every query in its own isolated unit and join all outcomes.

    Raises:
        QueryExecutionError: A unit reported that its query raised.
        IsolationTransportError: A unit crashed, exited abnormally, or its
            outcome could not be delivered.
    """
    if not query_names:
        return {}

    tasks = [UnitTask(query_name=name, document=document) for name in query_names]
    logger.info(f"Dispatching {len(tasks)} queries to isolated units")

    results: dict[str, Any] = {}
    # One waiter thread per unit; the units themselves do the work
    with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        futures = {
            executor.submit(unit_executor.submit, task): task.query_name
            for task in tasks
        }

        try:
            for future in as_completed(futures):
                name = futures[future]
                try:
                    outcome = future.result()
                except AnalyzerError:
                    raise
                except Exception as e:
                    raise IsolationTransportError(name, f"{type(e).__name__}: {e}") from e

                if outcome.query_name != name:
                    raise IsolationTransportError(
                        name, f"received outcome for '{outcome.query_name}' instead"
                    )
                if outcome.failed:
                    raise QueryExecutionError(name, ExecutionMode.PARALLEL.value, outcome.error)

                results[name] = outcome.result
                logger.debug(f"Unit {name} completed")
        except AnalyzerError as e:
            logger.error(f"Unit batch failed: {e}")
            for pending in futures:
                pending.cancel()
            raise

    return results
