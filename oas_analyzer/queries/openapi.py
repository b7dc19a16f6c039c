"""OpenAPI feature queries.

Each query is a pure function of the parsed definition. Location results are
sorted, de-duplicated ``#``-prefixed JSON pointers; an empty list means the
feature is not used.
"""

from typing import Any, Iterator

from oas_analyzer.documents.pointers import to_pointer, walk

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

XML_MEDIA_TYPES = ("application/xml", "text/xml")

POLYMORPHISM_KEYWORDS = ("allOf", "anyOf", "oneOf")


def require_mapping(definition: Any) -> dict[str, Any]:
    """Reject anything that is not a parsed definition object."""
    if not isinstance(definition, dict):
        raise TypeError(
            f"API definition must be a mapping, got {type(definition).__name__}"
        )
    return definition


def locations(paths: Any) -> list[str]:
    """Sorted, de-duplicated pointers for the given token paths."""
    return sorted({to_pointer(path) for path in paths})


def _dict_items(node: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(node, dict):
        yield from node.items()


def iter_operations(definition: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield ``(path, method, operation)`` for every operation under ``paths``."""
    for path, path_item in _dict_items(definition.get("paths")):
        for method, operation in _dict_items(path_item):
            if method.lower() in HTTP_METHODS and isinstance(operation, dict):
                yield path, method, operation


def _walk_paths(definition: dict[str, Any]) -> Iterator[tuple[tuple, Any]]:
    paths = definition.get("paths")
    if isinstance(paths, dict):
        yield from walk(paths, ("paths",))


def is_xml_media_type(media_type: str) -> bool:
    essence = media_type.split(";", 1)[0].strip().lower()
    return essence in XML_MEDIA_TYPES or essence.endswith("+xml")


def additional_properties(definition: dict[str, Any]) -> list[str]:
    """Every use of ``additionalProperties``."""
    require_mapping(definition)
    return locations(
        path for path, _ in walk(definition)
        if path and path[-1] == "additionalProperties"
    )


def callbacks(definition: dict[str, Any]) -> list[str]:
    """Reusable callbacks in components plus callbacks declared on operations."""
    require_mapping(definition)
    found = []
    components = definition.get("components")
    if isinstance(components, dict) and components.get("callbacks"):
        found.append(("components", "callbacks"))
    for path, method, operation in iter_operations(definition):
        if operation.get("callbacks"):
            found.append(("paths", path, method, "callbacks"))
    return locations(found)


def common_parameters(definition: dict[str, Any]) -> list[str]:
    """Path items declaring parameters shared by all of their operations."""
    require_mapping(definition)
    return locations(
        ("paths", path, "parameters")
        for path, path_item in _dict_items(definition.get("paths"))
        if isinstance(path_item, dict) and path_item.get("parameters")
    )


def discriminators(definition: dict[str, Any]) -> list[str]:
    """Every ``discriminator`` object."""
    require_mapping(definition)
    return locations(
        path for path, _ in walk(definition)
        if path and path[-1] == "discriminator"
    )


def links(definition: dict[str, Any]) -> list[str]:
    """Reusable links in components plus links declared on responses."""
    require_mapping(definition)
    found = []
    components = definition.get("components")
    if isinstance(components, dict) and components.get("links"):
        found.append(("components", "links"))
    for path, method, operation in iter_operations(definition):
        for status, response in _dict_items(operation.get("responses")):
            if isinstance(response, dict) and response.get("links"):
                found.append(("paths", path, method, "responses", status, "links"))
    return locations(found)


def media_types(definition: dict[str, Any]) -> list[str]:
    """Distinct media types used by request and response content under ``paths``."""
    require_mapping(definition)
    found: set[str] = set()
    for path, value in _walk_paths(definition):
        if path[-1] == "content" and isinstance(value, dict):
            found.update(key for key in value if isinstance(key, str))
    return sorted(found)


def parameter_serialization(definition: dict[str, Any]) -> list[str]:
    """Parameters, headers and encodings that set a serialization ``style``."""
    require_mapping(definition)
    found = []
    for path, _ in walk(definition):
        if len(path) < 3 or path[-1] != "style":
            continue
        container, owner = path[-3], path[-2]
        if container == "parameters" and isinstance(owner, int):
            found.append(path[:-1])
        elif container in ("headers", "encoding") and isinstance(owner, str):
            found.append(path[:-1])
    return locations(found)


def polymorphism(definition: dict[str, Any]) -> list[str]:
    """Schemas composed with ``allOf``, ``anyOf`` or ``oneOf``."""
    require_mapping(definition)
    return locations(
        path[:-1] for path, _ in walk(definition)
        if path and path[-1] in POLYMORPHISM_KEYWORDS
    )


def security_types(definition: dict[str, Any]) -> list[str]:
    """Distinct security scheme types (OpenAPI 3.x and Swagger 2.0)."""
    require_mapping(definition)
    schemes: dict[str, Any] = {}
    components = definition.get("components")
    if isinstance(components, dict) and isinstance(components.get("securitySchemes"), dict):
        schemes.update(components["securitySchemes"])
    if isinstance(definition.get("securityDefinitions"), dict):
        schemes.update(definition["securityDefinitions"])

    return sorted({
        scheme["type"]
        for scheme in schemes.values()
        if isinstance(scheme, dict) and isinstance(scheme.get("type"), str)
    })


def server_variables(definition: dict[str, Any]) -> list[str]:
    """Server objects (root, path or operation level) that declare variables."""
    require_mapping(definition)
    return locations(
        path[:-1] for path, value in walk(definition)
        if len(path) >= 3
        and path[-1] == "variables"
        and path[-3] == "servers"
        and isinstance(path[-2], int)
        and value
    )


def total_operations(definition: dict[str, Any]) -> int:
    """Number of operations across all paths."""
    require_mapping(definition)
    return sum(1 for _ in iter_operations(definition))


def webhooks(definition: dict[str, Any]) -> list[str]:
    """Webhooks declared at the top level (OpenAPI 3.1)."""
    require_mapping(definition)
    return locations(
        ("webhooks", name) for name, _ in _dict_items(definition.get("webhooks"))
    )


def xml_schemas(definition: dict[str, Any]) -> list[str]:
    """Schemas that carry an ``xml`` object."""
    require_mapping(definition)
    return locations(
        path[:-1] for path, value in walk(definition)
        if len(path) >= 2
        and path[-1] == "xml"
        and path[-2] != "properties"
        and isinstance(value, dict)
    )


def xml_requests(definition: dict[str, Any]) -> list[str]:
    """Request bodies that accept an XML media type."""
    require_mapping(definition)
    return locations(
        path for path, _ in _walk_paths(definition)
        if len(path) >= 3
        and path[-3] == "requestBody"
        and path[-2] == "content"
        and isinstance(path[-1], str)
        and is_xml_media_type(path[-1])
    )


def xml_responses(definition: dict[str, Any]) -> list[str]:
    """Responses that return an XML media type."""
    require_mapping(definition)
    return locations(
        path for path, _ in _walk_paths(definition)
        if len(path) >= 4
        and path[-4] == "responses"
        and path[-2] == "content"
        and isinstance(path[-1], str)
        and is_xml_media_type(path[-1])
    )


def xml(definition: dict[str, Any]) -> list[str]:
    """Any XML usage: schemas, request bodies or responses."""
    return sorted(
        set(xml_schemas(definition))
        | set(xml_requests(definition))
        | set(xml_responses(definition))
    )
