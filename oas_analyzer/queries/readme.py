"""ReadMe extension queries.

ReadMe extensions can be written nested under ``x-readme`` (``x-readme:
{explorer-enabled: false}``) or in the older flat form
(``x-explorer-enabled: false``). Both forms are reported.
"""

from typing import Any, Callable, Iterator, Optional

from oas_analyzer.documents.pointers import walk
from oas_analyzer.queries.openapi import locations, require_mapping

README_EXTENSION = "x-readme"


def _extension_nodes(
    definition: dict[str, Any],
    nested_key: str,
    flat_key: Optional[str] = None,
) -> Iterator[tuple[tuple, Any]]:
    """Yield ``(path, value)`` for ``x-readme.<nested_key>`` and ``<flat_key>``."""
    for path, value in walk(definition):
        if not path:
            continue
        if path[-1] == nested_key and len(path) >= 2 and path[-2] == README_EXTENSION:
            yield path, value
        elif flat_key is not None and path[-1] == flat_key:
            yield path, value


def _extension_locations(
    definition: dict[str, Any],
    nested_key: str,
    flat_key: Optional[str] = None,
    predicate: Optional[Callable[[Any], bool]] = None,
) -> list[str]:
    require_mapping(definition)
    return locations(
        path for path, value in _extension_nodes(definition, nested_key, flat_key)
        if predicate is None or predicate(value)
    )


def _is_disabled(value: Any) -> bool:
    return value is False


def auth_defaults(definition: dict[str, Any]) -> list[str]:
    """Security schemes that prefill credentials via ``x-default``."""
    require_mapping(definition)
    return locations(
        path[:-1] for path, _ in walk(definition)
        if len(path) >= 3
        and path[-1] == "x-default"
        and path[-3] in ("securitySchemes", "securityDefinitions")
    )


def code_sample_languages(definition: dict[str, Any]) -> list[str]:
    """Languages configured for generated code samples, in first-seen order."""
    require_mapping(definition)
    languages: list[str] = []
    for _, value in _extension_nodes(definition, "samples-languages", "x-samples-languages"):
        values = value if isinstance(value, list) else [value]
        for language in values:
            if isinstance(language, str) and language not in languages:
                languages.append(language)
    return languages


def code_samples_disabled(definition: dict[str, Any]) -> list[str]:
    """Places where code samples are turned off (deprecated extension)."""
    return _extension_locations(
        definition, "samples-enabled", "x-samples-enabled", _is_disabled
    )


def cors_proxy_disabled(definition: dict[str, Any]) -> list[str]:
    """Places where the CORS proxy is turned off."""
    return _extension_locations(
        definition, "proxy-enabled", "x-proxy-enabled", _is_disabled
    )


def custom_code_samples(definition: dict[str, Any]) -> list[str]:
    """Hand-written code samples."""
    return _extension_locations(definition, "code-samples", "x-code-samples")


def explorer_disabled(definition: dict[str, Any]) -> list[str]:
    """Places where the API explorer ("Try It") is turned off."""
    return _extension_locations(
        definition, "explorer-enabled", "x-explorer-enabled", _is_disabled
    )


def raw_body(definition: dict[str, Any]) -> list[str]:
    """Schemas whose only property is ``RAW_BODY`` (deprecated raw body editor)."""
    require_mapping(definition)
    return locations(
        path[:-2] for path, _ in walk(definition)
        if len(path) >= 2
        and path[-1] == "RAW_BODY"
        and path[-2] == "properties"
        and len(_properties_at(definition, path[:-1])) == 1
    )


def _properties_at(definition: dict[str, Any], path: tuple) -> dict:
    node: Any = definition
    for token in path:
        node = node[token]
    return node if isinstance(node, dict) else {}


def ref_names(definition: dict[str, Any]) -> list[str]:
    """Schemas carrying ``x-readme-ref-name``."""
    require_mapping(definition)
    return locations(
        path for path, _ in walk(definition)
        if path and path[-1] == "x-readme-ref-name"
    )


def static_headers(definition: dict[str, Any]) -> list[str]:
    """Static headers sent with every request."""
    return _extension_locations(definition, "headers", "x-headers")
