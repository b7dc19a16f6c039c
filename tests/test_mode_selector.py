"""
Tests for execution mode selection

Parallel iff isolation is available AND use_workers AND size >= threshold.
"""
import json

import pytest

from oas_analyzer.executor.mode_selector import (
    measure_document_size,
    select_execution_mode,
    size_threshold_strategy,
)
from oas_analyzer.executor.schemas import ExecutionMode, ParallelOptions


class TestMeasureDocumentSize:
    """Tests for serialized size measurement"""

    def test_compact_serialization_length(self):
        document = {"openapi": "3.1.0", "paths": {}}
        assert measure_document_size(document) == len('{"openapi":"3.1.0","paths":{}}')

    def test_counts_characters_not_bytes(self):
        document = {"title": "café"}
        assert measure_document_size(document) == len(json.dumps(document, separators=(",", ":"), ensure_ascii=False))
        assert measure_document_size(document) == 16


class TestSizeThresholdStrategy:
    """Tests for the default strategy"""

    def test_below_threshold_is_sequential(self):
        options = ParallelOptions(min_size_for_workers=100)
        assert size_threshold_strategy(99, options) == ExecutionMode.SEQUENTIAL

    def test_at_threshold_is_parallel(self):
        options = ParallelOptions(min_size_for_workers=100)
        assert size_threshold_strategy(100, options) == ExecutionMode.PARALLEL

    def test_workers_off_always_sequential(self):
        options = ParallelOptions(use_workers=False, min_size_for_workers=0)
        assert size_threshold_strategy(10**9, options) == ExecutionMode.SEQUENTIAL

    def test_default_threshold(self):
        options = ParallelOptions()
        assert options.min_size_for_workers == 100_000
        assert size_threshold_strategy(99_999, options) == ExecutionMode.SEQUENTIAL
        assert size_threshold_strategy(100_000, options) == ExecutionMode.PARALLEL

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            ParallelOptions(min_size_for_workers=-1)


class TestSelectExecutionMode:
    """Tests for the availability guard around the strategy"""

    def test_no_isolation_means_sequential(self, always_parallel):
        mode = select_execution_mode(10**6, always_parallel, isolation_available=False)
        assert mode == ExecutionMode.SEQUENTIAL

    def test_strategy_consulted_when_available(self, always_parallel):
        mode = select_execution_mode(1, always_parallel, isolation_available=True)
        assert mode == ExecutionMode.PARALLEL

    def test_custom_strategy(self, always_parallel):
        calls = []

        def never(size, options):
            calls.append(size)
            return ExecutionMode.SEQUENTIAL

        mode = select_execution_mode(500, always_parallel, True, strategy=never)
        assert mode == ExecutionMode.SEQUENTIAL
        assert calls == [500]

    def test_custom_strategy_skipped_without_isolation(self, always_parallel):
        def explode(size, options):
            raise AssertionError("strategy should not run")

        mode = select_execution_mode(500, always_parallel, False, strategy=explode)
        assert mode == ExecutionMode.SEQUENTIAL
