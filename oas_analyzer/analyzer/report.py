"""Report assembly from merged query results.

The layout is a declarative table: each entry names the report key, the
result it reads, and its inclusion rule. One generic assembler walks the
table, so adding a finding never means adding a branch.

Inclusion rules:
- ALWAYS: the finding is in the report with an explicit ``present`` flag.
- WHEN_PRESENT: the finding only appears when it has locations. Used for
  deprecated ReadMe features so that new definitions are not nagged about
  them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from oas_analyzer.analyzer.schemas import FeatureStat, Finding, OASAnalysis
from oas_analyzer.queries.schemas import QueryName

# Results produced by the async auxiliary queries, merged next to catalog results
CIRCULAR_REFS = "circularRefs"
RAW_FILE_SIZE = "rawFileSize"
DEREFERENCED_FILE_SIZE = "dereferencedFileSize"


class InclusionRule(str, Enum):
    ALWAYS = "always"
    WHEN_PRESENT = "when_present"


class ReportCategory(str, Enum):
    OPENAPI = "openapi"
    README = "readme"


@dataclass(frozen=True)
class StatSpec:
    key: str
    name: str
    source: str


@dataclass(frozen=True)
class FindingSpec:
    key: str
    source: str
    category: ReportCategory
    inclusion: InclusionRule = InclusionRule.ALWAYS


GENERAL_STATS: tuple[StatSpec, ...] = (
    StatSpec("dereferencedFileSize", "Dereferenced File Size", DEREFERENCED_FILE_SIZE),
    StatSpec("mediaTypes", "Media Type", QueryName.MEDIA_TYPES.value),
    StatSpec("operationTotal", "Operation", QueryName.TOTAL_OPERATIONS.value),
    StatSpec("rawFileSize", "Raw File Size", RAW_FILE_SIZE),
    StatSpec("securityTypes", "Security Type", QueryName.SECURITY_TYPES.value),
)

_OPENAPI = ReportCategory.OPENAPI
_README = ReportCategory.README

FINDINGS: tuple[FindingSpec, ...] = (
    FindingSpec("additionalProperties", QueryName.ADDITIONAL_PROPERTIES.value, _OPENAPI),
    FindingSpec("callbacks", QueryName.CALLBACKS.value, _OPENAPI),
    FindingSpec("circularRefs", CIRCULAR_REFS, _OPENAPI),
    FindingSpec("commonParameters", QueryName.COMMON_PARAMETERS.value, _OPENAPI),
    FindingSpec("discriminators", QueryName.DISCRIMINATORS.value, _OPENAPI),
    FindingSpec("links", QueryName.LINKS.value, _OPENAPI),
    FindingSpec("style", QueryName.PARAMETER_SERIALIZATION.value, _OPENAPI),
    FindingSpec("polymorphism", QueryName.POLYMORPHISM.value, _OPENAPI),
    FindingSpec("serverVariables", QueryName.SERVER_VARIABLES.value, _OPENAPI),
    FindingSpec("webhooks", QueryName.WEBHOOKS.value, _OPENAPI),
    FindingSpec("xml", QueryName.XML.value, _OPENAPI),
    FindingSpec("xmlSchemas", QueryName.XML_SCHEMAS.value, _OPENAPI),
    FindingSpec("xmlRequests", QueryName.XML_REQUESTS.value, _OPENAPI),
    FindingSpec("xmlResponses", QueryName.XML_RESPONSES.value, _OPENAPI),
    FindingSpec("x-default", QueryName.AUTH_DEFAULTS.value, _README),
    FindingSpec("x-readme.code-samples", QueryName.CUSTOM_CODE_SAMPLES.value, _README),
    FindingSpec("x-readme.headers", QueryName.STATIC_HEADERS.value, _README),
    FindingSpec("x-readme.explorer-enabled", QueryName.EXPLORER_DISABLED.value, _README),
    FindingSpec("x-readme.proxy-enabled", QueryName.CORS_PROXY_DISABLED.value, _README),
    FindingSpec("x-readme.samples-languages", QueryName.CODE_SAMPLE_LANGUAGES.value, _README),
    FindingSpec("x-readme-ref-name", QueryName.REF_NAMES.value, _README),
    # Deprecated
    FindingSpec(
        "x-readme.samples-enabled",
        QueryName.CODE_SAMPLES_DISABLED.value,
        _README,
        InclusionRule.WHEN_PRESENT,
    ),
    FindingSpec("raw_body", QueryName.RAW_BODY.value, _README, InclusionRule.WHEN_PRESENT),
)

# Catalog queries the report reads
REPORT_QUERY_NAMES: tuple[str, ...] = tuple(
    dict.fromkeys(
        entry.source
        for entry in (*GENERAL_STATS, *FINDINGS)
        if entry.source not in (CIRCULAR_REFS, RAW_FILE_SIZE, DEREFERENCED_FILE_SIZE)
    )
)


def assemble_report(
    results: Mapping[str, Any],
    stats: tuple[StatSpec, ...] = GENERAL_STATS,
    findings: tuple[FindingSpec, ...] = FINDINGS,
) -> OASAnalysis:
    """Build the report from ``{source -> result}``.

    ``results`` must hold every source named in the layout; a missing key is
    a caller bug and raises KeyError.
    """
    general = {stat.key: FeatureStat(name=stat.name, found=results[stat.source]) for stat in stats}

    categories: dict[ReportCategory, dict[str, Finding]] = {
        ReportCategory.OPENAPI: {},
        ReportCategory.README: {},
    }
    for finding in findings:
        locations = list(results[finding.source])
        if finding.inclusion == InclusionRule.WHEN_PRESENT and not locations:
            continue
        categories[finding.category][finding.key] = Finding.from_locations(locations)

    return OASAnalysis(
        general=general,
        openapi=categories[ReportCategory.OPENAPI],
        readme=categories[ReportCategory.README],
    )
