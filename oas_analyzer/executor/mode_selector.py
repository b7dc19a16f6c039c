"""Execution mode selection.

Spawning isolated units costs more than running small batches in-process,
so units are only used when the document is large enough for the queries to
dominate. The size heuristic is a pluggable strategy
``(size, options) -> ExecutionMode``; isolation availability is checked here,
around whichever strategy is in use.
"""

import json
import logging
from typing import Any, Callable

from oas_analyzer.executor.schemas import ExecutionMode, ParallelOptions

logger = logging.getLogger(__name__)

ModeStrategy = Callable[[int, ParallelOptions], ExecutionMode]


def measure_document_size(document: Any) -> int:
    """Length of the compact JSON serialization, in characters."""
    return len(
        json.dumps(document, separators=(",", ":"), ensure_ascii=False, default=str)
    )


def size_threshold_strategy(size: int, options: ParallelOptions) -> ExecutionMode:
    """Parallel iff workers are enabled and the document reaches the threshold."""
    if options.use_workers and size >= options.min_size_for_workers:
        return ExecutionMode.PARALLEL
    return ExecutionMode.SEQUENTIAL


def select_execution_mode(
    size: int,
    options: ParallelOptions,
    isolation_available: bool,
    strategy: ModeStrategy = size_threshold_strategy,
) -> ExecutionMode:
    """Pick the mode for a batch; no isolation means sequential, always."""
    if not isolation_available:
        logger.debug("Isolated units unavailable, using sequential execution")
        return ExecutionMode.SEQUENTIAL
    return strategy(size, options)
