"""Query catalog schemas.

Query names and result shapes are fixed: the catalog is a closed set of 25
synchronous queries. Two further queries (circular refs, file size) need the
dereferencer and run separately as async auxiliaries.
"""

from enum import Enum
from typing import Any, Callable, Union

from pydantic import BaseModel, Field

QueryResult = Union[list[str], int]
QueryFn = Callable[[dict[str, Any]], QueryResult]


class QueryName(str, Enum):
    """Every synchronous query in the catalog."""

    # OpenAPI
    ADDITIONAL_PROPERTIES = "additionalProperties"
    CALLBACKS = "callbacks"
    COMMON_PARAMETERS = "commonParameters"
    DISCRIMINATORS = "discriminators"
    LINKS = "links"
    MEDIA_TYPES = "mediaTypes"
    PARAMETER_SERIALIZATION = "parameterSerialization"
    POLYMORPHISM = "polymorphism"
    SECURITY_TYPES = "securityTypes"
    SERVER_VARIABLES = "serverVariables"
    TOTAL_OPERATIONS = "totalOperations"
    WEBHOOKS = "webhooks"
    XML = "xml"
    XML_REQUESTS = "xmlRequests"
    XML_RESPONSES = "xmlResponses"
    XML_SCHEMAS = "xmlSchemas"
    # ReadMe extensions
    AUTH_DEFAULTS = "authDefaults"
    CODE_SAMPLE_LANGUAGES = "codeSampleLanguages"
    CODE_SAMPLES_DISABLED = "codeSamplesDisabled"
    CORS_PROXY_DISABLED = "corsProxyDisabled"
    CUSTOM_CODE_SAMPLES = "customCodeSamples"
    EXPLORER_DISABLED = "explorerDisabled"
    RAW_BODY = "rawBody"
    REF_NAMES = "refNames"
    STATIC_HEADERS = "staticHeaders"


class QueryCategory(str, Enum):
    """Which part of the report a query feeds."""

    OPENAPI = "openapi"
    README = "readme"


class ResultKind(str, Enum):
    """Shape of a query result."""

    LOCATIONS = "locations"  # list of #-prefixed JSON pointers
    VALUES = "values"  # list of distinct string values
    COUNT = "count"  # single non-negative integer


class QueryDefinition(BaseModel):
    """Static metadata for one catalog query."""

    name: str = Field(..., description="Query identifier (a QueryName value for built-ins)")
    category: QueryCategory = Field(..., description="Report category the query feeds")
    result_kind: ResultKind = Field(default=ResultKind.LOCATIONS)
    description: str = Field(default="", description="What the query looks for")


class QuerySummary(BaseModel):
    """Lightweight listing entry for the API."""

    name: str
    category: QueryCategory
    result_kind: ResultKind
