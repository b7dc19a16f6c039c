"""
Pytest configuration and shared fixtures

Definitions under tests/fixtures/ are loaded fresh for every test so that a
test mutating its copy cannot leak into another.
"""
import json
from pathlib import Path

import pytest

from oas_analyzer.documents.loader import load_document
from oas_analyzer.executor.schemas import ParallelOptions
from oas_analyzer.executor.unit_executors import InProcessUnitExecutor
from oas_analyzer.queries.registry import build_default_catalog

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name):
    """Load a definition from tests/fixtures/."""
    return load_document(FIXTURES_DIR / name)


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def petstore():
    """Small OpenAPI 3.0 definition: 4 operations, only application/json."""
    return load_fixture("petstore.json")


@pytest.fixture
def circular_doc():
    """Two schemas (A and B) that reference each other."""
    return load_fixture("circular.json")


@pytest.fixture
def kitchen_sink():
    """OpenAPI 3.1 definition touching every catalog query."""
    return load_fixture("kitchen_sink.json")


@pytest.fixture
def swagger_doc():
    """Swagger 2.0 definition in YAML."""
    return load_fixture("swagger.yaml")


@pytest.fixture
def snapshot():
    """Deep copy helper for asserting a document was not modified."""
    def _snapshot(document):
        return json.loads(json.dumps(document))
    return _snapshot


@pytest.fixture
def catalog():
    return build_default_catalog()


@pytest.fixture
def in_process_executor(catalog):
    return InProcessUnitExecutor(catalog)


@pytest.fixture
def always_parallel():
    """Options that make every document large enough for isolated units."""
    return ParallelOptions(use_workers=True, min_size_for_workers=0)


@pytest.fixture
def never_parallel():
    return ParallelOptions(use_workers=False, min_size_for_workers=0)


@pytest.fixture
def deeply_nested():
    """Factory for a definition whose one schema nests ``depth`` levels of properties."""
    def _build(depth):
        schema = {"type": "string"}
        for _ in range(depth):
            schema = {"type": "object", "properties": {"child": schema}}
        return {"openapi": "3.1.0", "paths": {}, "components": {"schemas": {"Deep": schema}}}
    return _build
