"""Process-level configuration for the query engine.

Defaults come from environment variables so deployments can tune the
worker heuristic without code changes:
- OAS_ANALYZER_USE_WORKERS: "1"/"true"/"yes" enables isolated units (default on)
- OAS_ANALYZER_MIN_SIZE_FOR_WORKERS: serialized size threshold in characters
"""

import logging
import os
from typing import Optional

from oas_analyzer.executor.schemas import ParallelOptions

logger = logging.getLogger(__name__)

USE_WORKERS_ENV = "OAS_ANALYZER_USE_WORKERS"
MIN_SIZE_FOR_WORKERS_ENV = "OAS_ANALYZER_MIN_SIZE_FOR_WORKERS"

DEFAULT_MIN_SIZE_FOR_WORKERS = 100_000


def get_default_parallel_options() -> ParallelOptions:
    """Build ParallelOptions from the environment (read on every call)."""
    raw_use_workers = os.environ.get(USE_WORKERS_ENV, "")
    use_workers = True
    if raw_use_workers:
        use_workers = raw_use_workers.strip().lower() in ("1", "true", "yes")

    min_size = DEFAULT_MIN_SIZE_FOR_WORKERS
    raw_min_size = os.environ.get(MIN_SIZE_FOR_WORKERS_ENV, "")
    if raw_min_size:
        try:
            min_size = max(0, int(raw_min_size))
        except ValueError:
            logger.warning(
                f"Ignoring invalid {MIN_SIZE_FOR_WORKERS_ENV}={raw_min_size!r}, "
                f"using {DEFAULT_MIN_SIZE_FOR_WORKERS}"
            )

    return ParallelOptions(use_workers=use_workers, min_size_for_workers=min_size)


def resolve_parallel_options(
    use_workers: Optional[bool] = None,
    min_size_for_workers: Optional[int] = None,
) -> ParallelOptions:
    """Environment defaults with explicit per-call overrides applied."""
    options = get_default_parallel_options()
    overrides: dict = {}
    if use_workers is not None:
        overrides["use_workers"] = use_workers
    if min_size_for_workers is not None:
        overrides["min_size_for_workers"] = min_size_for_workers
    if not overrides:
        return options
    return ParallelOptions.model_validate({**options.model_dump(), **overrides})
