"""
Tests for the OpenAPI feature queries

Each query is checked against the kitchen-sink definition (feature used) and
the petstore definition (feature absent).
"""
import pytest

from oas_analyzer.queries import openapi


class TestHelpers:
    """Tests for shared query helpers"""

    def test_require_mapping_rejects_non_dict(self):
        with pytest.raises(TypeError, match="must be a mapping"):
            openapi.require_mapping(["not", "a", "definition"])

    def test_locations_are_sorted_and_unique(self):
        paths = [("b",), ("a", "x"), ("b",)]
        assert openapi.locations(paths) == ["#/a/x", "#/b"]

    @pytest.mark.parametrize("media_type", [
        "application/xml",
        "text/xml",
        "application/vnd.thing+xml",
        "application/xml; charset=utf-8",
    ])
    def test_xml_media_types(self, media_type):
        assert openapi.is_xml_media_type(media_type)

    def test_json_is_not_xml(self):
        assert not openapi.is_xml_media_type("application/json")

    def test_iter_operations_skips_non_methods(self, petstore):
        """Path-level parameters are not operations"""
        methods = sorted((path, method) for path, method, _ in openapi.iter_operations(petstore))
        assert methods == [
            ("/pets", "get"),
            ("/pets", "post"),
            ("/pets/{petId}", "delete"),
            ("/pets/{petId}", "get"),
        ]


class TestStructureQueries:
    """Tests for queries over operations, paths and components"""

    def test_total_operations(self, petstore, kitchen_sink):
        assert openapi.total_operations(petstore) == 4
        # Webhook operations are not counted
        assert openapi.total_operations(kitchen_sink) == 2

    def test_total_operations_without_paths(self):
        assert openapi.total_operations({"openapi": "3.1.0"}) == 0

    def test_callbacks(self, kitchen_sink, petstore):
        assert openapi.callbacks(kitchen_sink) == ["#/paths/~1things/post/callbacks"]
        assert openapi.callbacks(petstore) == []

    def test_component_callbacks(self):
        definition = {"components": {"callbacks": {"onEvent": {}}}}
        assert openapi.callbacks(definition) == ["#/components/callbacks"]

    def test_common_parameters(self, petstore, kitchen_sink):
        assert openapi.common_parameters(petstore) == ["#/paths/~1pets~1{petId}/parameters"]
        assert openapi.common_parameters(kitchen_sink) == []

    def test_links(self, kitchen_sink, petstore):
        assert openapi.links(kitchen_sink) == ["#/paths/~1things/post/responses/201/links"]
        assert openapi.links(petstore) == []

    def test_webhooks(self, kitchen_sink, petstore):
        assert openapi.webhooks(kitchen_sink) == ["#/webhooks/thingCreated"]
        assert openapi.webhooks(petstore) == []

    def test_server_variables(self, kitchen_sink, petstore):
        assert openapi.server_variables(kitchen_sink) == ["#/servers/0"]
        assert openapi.server_variables(petstore) == []

    def test_empty_server_variables_ignored(self):
        definition = {"servers": [{"url": "https://example.com", "variables": {}}]}
        assert openapi.server_variables(definition) == []


class TestSchemaQueries:
    """Tests for JSON Schema feature queries"""

    def test_additional_properties(self, kitchen_sink, petstore):
        assert openapi.additional_properties(kitchen_sink) == [
            "#/components/schemas/Thing/additionalProperties"
        ]
        assert openapi.additional_properties(petstore) == []

    def test_discriminators(self, kitchen_sink, petstore):
        assert openapi.discriminators(kitchen_sink) == ["#/components/schemas/Pet/discriminator"]
        assert openapi.discriminators(petstore) == []

    def test_polymorphism_reports_owning_schema(self, kitchen_sink, petstore):
        assert openapi.polymorphism(kitchen_sink) == ["#/components/schemas/Pet"]
        assert openapi.polymorphism(petstore) == []

    def test_polymorphism_all_keywords(self):
        definition = {"components": {"schemas": {
            "A": {"allOf": []},
            "B": {"anyOf": []},
            "C": {"oneOf": []},
        }}}
        assert openapi.polymorphism(definition) == [
            "#/components/schemas/A",
            "#/components/schemas/B",
            "#/components/schemas/C",
        ]

    def test_parameter_serialization(self, kitchen_sink, petstore):
        assert openapi.parameter_serialization(kitchen_sink) == [
            "#/paths/~1things/post/parameters/0"
        ]
        assert openapi.parameter_serialization(petstore) == []

    def test_parameter_serialization_headers_and_encoding(self):
        definition = {"components": {
            "headers": {"X-Rate": {"style": "simple"}},
            "requestBodies": {"Form": {"content": {"multipart/form-data": {
                "encoding": {"tags": {"style": "form"}},
            }}}},
        }}
        assert openapi.parameter_serialization(definition) == [
            "#/components/headers/X-Rate",
            "#/components/requestBodies/Form/content/multipart~1form-data/encoding/tags",
        ]

    def test_property_named_style_is_not_serialization(self):
        definition = {"components": {"schemas": {"Shirt": {"properties": {"style": {"type": "string"}}}}}}
        assert openapi.parameter_serialization(definition) == []


class TestMediaAndSecurity:
    """Tests for value-style queries"""

    def test_media_types_single(self, petstore):
        assert openapi.media_types(petstore) == ["application/json"]

    def test_media_types_sorted_unique(self, kitchen_sink):
        assert openapi.media_types(kitchen_sink) == [
            "application/json",
            "application/vnd.thing+xml",
            "application/xml",
        ]

    def test_security_types(self, petstore, kitchen_sink):
        assert openapi.security_types(petstore) == ["apiKey"]
        assert openapi.security_types(kitchen_sink) == ["apiKey", "oauth2"]

    def test_security_types_swagger(self, swagger_doc):
        assert openapi.security_types(swagger_doc) == ["apiKey", "basic"]


class TestXmlQueries:
    """Tests for XML usage queries"""

    def test_xml_schemas(self, kitchen_sink):
        assert openapi.xml_schemas(kitchen_sink) == ["#/components/schemas/Thing"]

    def test_xml_property_name_is_not_xml_object(self):
        definition = {"components": {"schemas": {"Doc": {"properties": {"xml": {"type": "string"}}}}}}
        assert openapi.xml_schemas(definition) == []

    def test_xml_requests(self, kitchen_sink):
        assert openapi.xml_requests(kitchen_sink) == [
            "#/paths/~1things/post/requestBody/content/application~1xml"
        ]

    def test_xml_responses(self, kitchen_sink):
        assert openapi.xml_responses(kitchen_sink) == [
            "#/paths/~1things/post/responses/201/content/application~1vnd.thing+xml"
        ]

    def test_xml_is_union(self, kitchen_sink):
        expected = sorted(
            set(openapi.xml_schemas(kitchen_sink))
            | set(openapi.xml_requests(kitchen_sink))
            | set(openapi.xml_responses(kitchen_sink))
        )
        assert openapi.xml(kitchen_sink) == expected
        assert len(expected) == 3

    def test_no_xml(self, petstore):
        assert openapi.xml(petstore) == []
