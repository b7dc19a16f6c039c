"""Executor-side schemas: options, unit payloads, batch results."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ExecutionMode(str, Enum):
    """How a query batch was run."""
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class ParallelOptions(BaseModel):
    """Knobs for the worker heuristic."""

    use_workers: bool = Field(
        default=True,
        description="Allow isolated units at all; False forces sequential execution",
    )
    min_size_for_workers: int = Field(
        default=100_000,
        ge=0,
        description="Minimum serialized document size (characters) before isolated units are used",
    )


class UnitTask(BaseModel):
    """Self-contained payload for one isolated unit.

    Plain data only: it is pickled across the process boundary, so each unit
    receives its own private copy of the document.
    """

    query_name: str
    document: dict[str, Any]
    catalog_source: Optional[str] = Field(
        default=None,
        description="Import path (module:attribute) the unit loads its catalog from",
    )


class UnitOutcome(BaseModel):
    """What a unit reports back: a result or an error message."""

    query_name: str
    result: Any = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class QueryExecutionResult(BaseModel):
    """Results of one batch, keyed by query name in request order."""

    results: dict[str, Any] = Field(default_factory=dict)
    execution_mode: ExecutionMode
    document_size: int = Field(default=0, description="Serialized document size in characters")
    duration_ms: int = 0
