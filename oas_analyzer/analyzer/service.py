"""Analyze an OpenAPI or Swagger definition for OpenAPI, JSON Schema, and
ReadMe-specific feature usage.

Control flow for one call:
1. The auxiliary pair (circular refs, file sizes) and the synchronous query
   batch start together. The batch runs off the event loop, in whichever
   mode the selector picks.
2. Both join. Any failure aborts the call; there is no partial report.
3. The merged results are assembled into a frozen OASAnalysis.
"""

import asyncio
import logging
import time
from typing import Any, Optional

from oas_analyzer.analyzer.auxiliary import AuxiliaryResults, run_auxiliary_queries
from oas_analyzer.analyzer.report import (
    CIRCULAR_REFS,
    DEREFERENCED_FILE_SIZE,
    RAW_FILE_SIZE,
    assemble_report,
)
from oas_analyzer.analyzer.schemas import OASAnalysis
from oas_analyzer.documents.dereferencer import Dereferencer, get_dereferencer
from oas_analyzer.executor.mode_selector import ModeStrategy, size_threshold_strategy
from oas_analyzer.executor.query_runner import run_queries
from oas_analyzer.executor.schemas import ParallelOptions, QueryExecutionResult
from oas_analyzer.executor.unit_executors import UnitExecutor
from oas_analyzer.queries.registry import QueryCatalog, get_query_catalog
from oas_analyzer.queries.schemas import QueryName

logger = logging.getLogger(__name__)

# All synchronous queries the report needs
SYNC_QUERY_NAMES: tuple[str, ...] = tuple(name.value for name in QueryName)


class OASAnalyzer:
    """Runs the full analysis with injectable collaborators.

    Every collaborator defaults to the process-wide instance, so
    ``OASAnalyzer()`` is the production configuration and tests can swap in
    a substitute catalog, dereferencer or isolation backend.
    """

    def __init__(
        self,
        catalog: Optional[QueryCatalog] = None,
        dereferencer: Optional[Dereferencer] = None,
        unit_executor: Optional[UnitExecutor] = None,
        strategy: ModeStrategy = size_threshold_strategy,
    ):
        self.catalog = catalog or get_query_catalog()
        self.dereferencer = dereferencer or get_dereferencer()
        self.unit_executor = unit_executor
        self.strategy = strategy

    async def run_batch(
        self,
        document: dict[str, Any],
        options: Optional[ParallelOptions] = None,
    ) -> QueryExecutionResult:
        """Run the synchronous query batch without blocking the event loop."""
        return await asyncio.to_thread(
            run_queries,
            SYNC_QUERY_NAMES,
            document,
            options,
            catalog=self.catalog,
            unit_executor=self.unit_executor,
            strategy=self.strategy,
        )

    async def analyze(
        self,
        document: dict[str, Any],
        options: Optional[ParallelOptions] = None,
    ) -> OASAnalysis:
        """Produce the feature-usage report for one definition.

        Raises:
            DereferenceError: If references cannot be expanded.
            QueryExecutionError: If any catalog query raised.
            IsolationTransportError: If an isolated unit failed.
        """
        start_time = time.time()

        auxiliary, batch = await asyncio.gather(
            run_auxiliary_queries(document, self.dereferencer),
            self.run_batch(document, options),
        )

        report = assemble_report(merge_results(batch, auxiliary))

        elapsed = int((time.time() - start_time) * 1000)
        logger.info(
            f"Analysis complete in {elapsed}ms "
            f"({batch.execution_mode.value} batch, "
            f"{sum(f.present for f in report.openapi.values())} OpenAPI features, "
            f"{sum(f.present for f in report.readme.values())} ReadMe features)"
        )
        return report


def merge_results(batch: QueryExecutionResult, auxiliary: AuxiliaryResults) -> dict[str, Any]:
    """Combine catalog results and auxiliary results into one mapping."""
    merged = dict(batch.results)
    merged[CIRCULAR_REFS] = auxiliary.circular_refs
    merged[RAW_FILE_SIZE] = auxiliary.file_size.raw
    merged[DEREFERENCED_FILE_SIZE] = auxiliary.file_size.dereferenced
    return merged


# Global analyzer instance
_analyzer: Optional[OASAnalyzer] = None


def get_analyzer() -> OASAnalyzer:
    """Get the global analyzer instance."""
    global _analyzer
    if _analyzer is None:
        _analyzer = OASAnalyzer()
    return _analyzer


async def analyze(
    document: dict[str, Any],
    options: Optional[ParallelOptions] = None,
) -> OASAnalysis:
    """Analyze a definition with the default collaborators."""
    return await get_analyzer().analyze(document, options)
