"""Isolation backends for running one query per unit.

Every backend implements the same one-operation interface,
``submit(task) -> outcome``, so the dispatcher never depends on a specific
isolation mechanism:

- InProcessUnitExecutor: runs the query in the calling thread against the
  caller's catalog object. No isolation; useful for substitution in tests
  and on platforms without process support.
- ProcessUnitExecutor: starts a fresh process per task (no pooling, no
  reuse). The task is pickled in, the unit loads the catalog itself from its
  import path, runs exactly one query and sends exactly one outcome back.
"""

import logging
import multiprocessing
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from typing import Optional, Protocol, runtime_checkable

from oas_analyzer.errors import IsolationTransportError
from oas_analyzer.executor.schemas import UnitOutcome, UnitTask
from oas_analyzer.queries.registry import QueryCatalog, load_catalog

logger = logging.getLogger(__name__)

# Fresh interpreter per unit: nothing is inherited from the caller's memory
DEFAULT_START_METHOD = "spawn"


@runtime_checkable
class UnitExecutor(Protocol):
    """Protocol for isolated-unit backends."""

    def is_available(self) -> bool: ...

    def submit(self, task: UnitTask) -> UnitOutcome:
        """Run one task to completion and return its single outcome.

        Query failures come back as an outcome with ``error`` set. Failures
        of the unit itself raise IsolationTransportError.
        """
        ...


def execute_task(catalog: QueryCatalog, task: UnitTask) -> UnitOutcome:
    """Run a task's query and wrap the result or the error message."""
    try:
        result = catalog.run(task.query_name, task.document)
    except Exception as e:
        return UnitOutcome(query_name=task.query_name, error=f"{type(e).__name__}: {e}")
    return UnitOutcome(query_name=task.query_name, result=result)


def run_unit_task(task: UnitTask) -> UnitOutcome:
    """Entry point inside an isolated process."""
    if not task.catalog_source:
        raise ValueError(f"Task for '{task.query_name}' carries no catalog source")
    catalog = load_catalog(task.catalog_source)
    return execute_task(catalog, task)


def multiprocessing_supported() -> bool:
    """Whether this platform can start worker processes.

    Some sandboxes (e.g. serverless runtimes without /dev/shm) ship Python
    without working semaphores, which process pools need.
    """
    try:
        import multiprocessing.synchronize  # noqa: F401
    except ImportError:
        return False
    return True


class InProcessUnitExecutor:
    """Runs units in the caller's memory space."""

    def __init__(self, catalog: QueryCatalog):
        self.catalog = catalog

    def is_available(self) -> bool:
        return True

    def submit(self, task: UnitTask) -> UnitOutcome:
        logger.debug(f"Running unit {task.query_name} in-process")
        return execute_task(self.catalog, task)


class ProcessUnitExecutor:
    """Runs each unit in its own short-lived process."""

    def __init__(self, catalog_source: Optional[str], start_method: str = DEFAULT_START_METHOD):
        self.catalog_source = catalog_source
        self.start_method = start_method

    def is_available(self) -> bool:
        if not self.catalog_source:
            return False
        if self.start_method not in multiprocessing.get_all_start_methods():
            return False
        return multiprocessing_supported()

    def submit(self, task: UnitTask) -> UnitOutcome:
        if not self.catalog_source:
            raise IsolationTransportError(task.query_name, "catalog has no import source")

        context = multiprocessing.get_context(self.start_method)
        logger.debug(f"Starting unit process for {task.query_name} ({self.start_method})")
        try:
            with ProcessPoolExecutor(max_workers=1, mp_context=context) as unit:
                future = unit.submit(
                    run_unit_task, task.model_copy(update={"catalog_source": self.catalog_source})
                )
                outcome = future.result()
        except BrokenProcessPool as e:
            raise IsolationTransportError(
                task.query_name, f"unit process exited abnormally: {e}"
            ) from e
        except Exception as e:
            raise IsolationTransportError(
                task.query_name, f"{type(e).__name__}: {e}"
            ) from e

        if not isinstance(outcome, UnitOutcome):
            raise IsolationTransportError(
                task.query_name, f"unexpected outcome type {type(outcome).__name__}"
            )
        return outcome


def get_unit_executor(catalog: QueryCatalog) -> Optional[UnitExecutor]:
    """Default isolation backend for a catalog.

    Returns None when the catalog cannot be loaded by an isolated process,
    which makes the engine fall back to sequential execution.
    """
    if not catalog.source:
        return None
    return ProcessUnitExecutor(catalog.source)


def executor_serves_catalog(unit_executor: UnitExecutor, catalog: QueryCatalog) -> bool:
    """Whether a built-in backend runs the functions of ``catalog``.

    Other backends are trusted to be configured by their caller.
    """
    if isinstance(unit_executor, InProcessUnitExecutor):
        return unit_executor.catalog is catalog
    if isinstance(unit_executor, ProcessUnitExecutor):
        return unit_executor.catalog_source == catalog.source
    return True
