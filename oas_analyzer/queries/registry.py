"""Query catalog - the table of named, pure synchronous queries.

The catalog is an explicit value handed to the query engine, not hidden
global state. A process-wide default is available via get_query_catalog(),
and tests or callers can build their own QueryCatalog with substitute
functions.

A catalog may carry a ``source`` import path ("package.module:attribute").
Isolated units use it to load the catalog independently inside their own
process; a catalog without a source can only run in-process.
"""

import importlib
import logging
from typing import Any, Iterable, Optional

from oas_analyzer.queries import openapi, readme
from oas_analyzer.queries.schemas import (
    QueryCategory,
    QueryDefinition,
    QueryFn,
    QueryName,
    QueryResult,
    QuerySummary,
    ResultKind,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_SOURCE = "oas_analyzer.queries.registry:get_query_catalog"


def _openapi(name: QueryName, kind: ResultKind, description: str) -> QueryDefinition:
    return QueryDefinition(
        name=name.value, category=QueryCategory.OPENAPI, result_kind=kind, description=description
    )


def _readme(name: QueryName, kind: ResultKind, description: str) -> QueryDefinition:
    return QueryDefinition(
        name=name.value, category=QueryCategory.README, result_kind=kind, description=description
    )


LOC = ResultKind.LOCATIONS
VAL = ResultKind.VALUES

BUILTIN_QUERIES: tuple[tuple[QueryDefinition, QueryFn], ...] = (
    # OpenAPI
    (_openapi(QueryName.ADDITIONAL_PROPERTIES, LOC, "additionalProperties usage"), openapi.additional_properties),
    (_openapi(QueryName.CALLBACKS, LOC, "Component and operation callbacks"), openapi.callbacks),
    (_openapi(QueryName.COMMON_PARAMETERS, LOC, "Path-level shared parameters"), openapi.common_parameters),
    (_openapi(QueryName.DISCRIMINATORS, LOC, "Discriminator objects"), openapi.discriminators),
    (_openapi(QueryName.LINKS, LOC, "Component and response links"), openapi.links),
    (_openapi(QueryName.MEDIA_TYPES, VAL, "Distinct request/response media types"), openapi.media_types),
    (_openapi(QueryName.PARAMETER_SERIALIZATION, LOC, "Parameters/headers/encodings with a style"), openapi.parameter_serialization),
    (_openapi(QueryName.POLYMORPHISM, LOC, "allOf/anyOf/oneOf schemas"), openapi.polymorphism),
    (_openapi(QueryName.SECURITY_TYPES, VAL, "Distinct security scheme types"), openapi.security_types),
    (_openapi(QueryName.SERVER_VARIABLES, LOC, "Servers with variables"), openapi.server_variables),
    (_openapi(QueryName.TOTAL_OPERATIONS, ResultKind.COUNT, "Number of operations"), openapi.total_operations),
    (_openapi(QueryName.WEBHOOKS, LOC, "Top-level webhooks"), openapi.webhooks),
    (_openapi(QueryName.XML, LOC, "Any XML usage"), openapi.xml),
    (_openapi(QueryName.XML_REQUESTS, LOC, "XML request bodies"), openapi.xml_requests),
    (_openapi(QueryName.XML_RESPONSES, LOC, "XML responses"), openapi.xml_responses),
    (_openapi(QueryName.XML_SCHEMAS, LOC, "Schemas with xml objects"), openapi.xml_schemas),
    # ReadMe extensions
    (_readme(QueryName.AUTH_DEFAULTS, LOC, "Security schemes with x-default"), readme.auth_defaults),
    (_readme(QueryName.CODE_SAMPLE_LANGUAGES, VAL, "Configured code sample languages"), readme.code_sample_languages),
    (_readme(QueryName.CODE_SAMPLES_DISABLED, LOC, "Code samples turned off"), readme.code_samples_disabled),
    (_readme(QueryName.CORS_PROXY_DISABLED, LOC, "CORS proxy turned off"), readme.cors_proxy_disabled),
    (_readme(QueryName.CUSTOM_CODE_SAMPLES, LOC, "Custom code samples"), readme.custom_code_samples),
    (_readme(QueryName.EXPLORER_DISABLED, LOC, "API explorer turned off"), readme.explorer_disabled),
    (_readme(QueryName.RAW_BODY, LOC, "RAW_BODY request schemas"), readme.raw_body),
    (_readme(QueryName.REF_NAMES, LOC, "x-readme-ref-name usage"), readme.ref_names),
    (_readme(QueryName.STATIC_HEADERS, LOC, "Static headers"), readme.static_headers),
)


class QueryCatalog:
    """Registry of query functions keyed by query name.

    The catalog is immutable once built: it holds no state between query
    invocations and every function it serves is pure.
    """

    def __init__(
        self,
        queries: Iterable[tuple[QueryDefinition, QueryFn]],
        source: Optional[str] = None,
    ):
        self.source = source
        self._definitions: dict[str, QueryDefinition] = {}
        self._functions: dict[str, QueryFn] = {}
        for definition, fn in queries:
            if definition.name in self._functions:
                raise ValueError(f"Duplicate query in catalog: {definition.name}")
            self._definitions[definition.name] = definition
            self._functions[definition.name] = fn

    def __contains__(self, query_name: object) -> bool:
        return query_name in self._functions

    def get(self, query_name: str) -> Optional[QueryFn]:
        """Get a query function by name."""
        return self._functions.get(query_name)

    def get_validated(self, query_name: str) -> QueryFn:
        """Get a query function by name, raising if not found."""
        fn = self.get(query_name)
        if fn is None:
            raise ValueError(
                f"Query not found: {query_name}. "
                f"Available: {sorted(self._functions)}"
            )
        return fn

    def get_definition(self, query_name: str) -> Optional[QueryDefinition]:
        return self._definitions.get(query_name)

    def run(self, query_name: str, document: dict[str, Any]) -> QueryResult:
        """Run one query against a document."""
        return self.get_validated(query_name)(document)

    def list_definitions(self, category: Optional[QueryCategory] = None) -> list[QueryDefinition]:
        """List query definitions, optionally for one category."""
        definitions = list(self._definitions.values())
        if category is not None:
            definitions = [d for d in definitions if d.category == category]
        return definitions

    def list_summaries(self, category: Optional[QueryCategory] = None) -> list[QuerySummary]:
        """List lightweight query summaries."""
        return [
            QuerySummary(name=d.name, category=d.category, result_kind=d.result_kind)
            for d in self.list_definitions(category)
        ]

    def list_keys(self) -> list[str]:
        """List all query names."""
        return list(self._functions.keys())

    def count(self) -> int:
        """Get total number of queries."""
        return len(self._functions)


def build_default_catalog() -> QueryCatalog:
    """Build the catalog of all built-in queries."""
    return QueryCatalog(BUILTIN_QUERIES, source=DEFAULT_CATALOG_SOURCE)


def load_catalog(source: str) -> QueryCatalog:
    """Load a catalog from a ``module:attribute`` import path.

    The attribute may be a QueryCatalog or a zero-argument callable that
    returns one.
    """
    module_name, sep, attr_name = source.partition(":")
    if not sep or not module_name or not attr_name:
        raise ValueError(f"Catalog source must look like 'module:attribute', got {source!r}")

    target = getattr(importlib.import_module(module_name), attr_name)
    if not isinstance(target, QueryCatalog) and callable(target):
        target = target()
    if not isinstance(target, QueryCatalog):
        raise TypeError(f"Catalog source {source!r} did not produce a QueryCatalog")
    return target


# Global registry instance
_catalog: Optional[QueryCatalog] = None


def get_query_catalog() -> QueryCatalog:
    """Get the global query catalog instance."""
    global _catalog
    if _catalog is None:
        _catalog = build_default_catalog()
        logger.debug(f"Built query catalog with {_catalog.count()} queries")
    return _catalog
