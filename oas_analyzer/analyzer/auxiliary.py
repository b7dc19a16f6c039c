"""Async auxiliary queries that need a dereferenced definition.

These two run concurrently with each other and with the synchronous query
batch. Both go through the injected dereferencer; if either fails the whole
analysis fails.
"""

import asyncio
import json
import logging
from typing import Any

from pydantic import BaseModel, Field

from oas_analyzer.analyzer.schemas import FileSizeResult
from oas_analyzer.documents.dereferencer import Dereferencer
from oas_analyzer.errors import DereferenceError

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class AuxiliaryResults(BaseModel):
    """Joined output of the auxiliary pair."""

    circular_refs: list[str] = Field(default_factory=list)
    file_size: FileSizeResult


def size_in_mb(document: Any) -> float:
    """UTF-8 size of the compact JSON serialization, in MB (2 decimals)."""
    encoded = json.dumps(
        document, separators=(",", ":"), ensure_ascii=False, default=str
    ).encode("utf-8")
    return round(len(encoded) / BYTES_PER_MB, 2)


async def circular_refs(document: dict[str, Any], dereferencer: Dereferencer) -> list[str]:
    """Locations of $refs that close a reference cycle (sorted)."""
    result = await dereferencer.dereference(document)
    return sorted(result.circular_refs)


async def file_size(document: dict[str, Any], dereferencer: Dereferencer) -> FileSizeResult:
    """Definition size before and after dereferencing."""
    result = await dereferencer.dereference(document)
    try:
        return FileSizeResult(raw=size_in_mb(document), dereferenced=size_in_mb(result.document))
    except RecursionError as e:
        raise DereferenceError(None, "document is nested too deeply to serialize") from e


async def run_auxiliary_queries(
    document: dict[str, Any],
    dereferencer: Dereferencer,
) -> AuxiliaryResults:
    """Run both auxiliary queries concurrently and join them."""
    cycles, sizes = await asyncio.gather(
        circular_refs(document, dereferencer),
        file_size(document, dereferencer),
    )
    logger.debug(
        f"Auxiliary queries done: {len(cycles)} circular refs, "
        f"raw={sizes.raw}MB, dereferenced={sizes.dereferenced}MB"
    )
    return AuxiliaryResults(circular_refs=cycles, file_size=sizes)
