"""
Tests for document helpers: pointers, loading and dereferencing
"""
import json
import time

import pytest

from oas_analyzer.documents.dereferencer import Dereferencer
from oas_analyzer.documents.loader import load_document
from oas_analyzer.documents.pointers import (
    escape_token,
    parse_pointer,
    resolve_pointer,
    to_pointer,
    walk,
)
from oas_analyzer.errors import DereferenceError


class TestPointers:
    """Tests for JSON pointer helpers"""

    def test_escape(self):
        assert escape_token("/pets/{id}") == "~1pets~1{id}"
        assert escape_token("a~b") == "a~0b"

    def test_to_pointer(self):
        assert to_pointer(("paths", "/pets", "get", "parameters", 0)) == "#/paths/~1pets/get/parameters/0"
        assert to_pointer(()) == "#"

    def test_parse_pointer_unescapes(self):
        assert parse_pointer("#/paths/~1pets/x~0y") == ("paths", "/pets", "x~y")

    def test_parse_pointer_percent_encoding(self):
        assert parse_pointer("#/components/schemas/Pet%20Name") == ("components", "schemas", "Pet Name")

    def test_parse_root(self):
        assert parse_pointer("#") == ()

    def test_parse_rejects_external(self):
        with pytest.raises(DereferenceError, match="not a local reference"):
            parse_pointer("other.yaml#/Pet")

    def test_parse_rejects_anchor(self):
        with pytest.raises(DereferenceError, match="not a JSON pointer"):
            parse_pointer("#Pet")

    def test_resolve_through_lists(self):
        document = {"servers": [{"url": "a"}, {"url": "b"}]}
        assert resolve_pointer(document, ("servers", "1", "url")) == "b"

    @pytest.mark.parametrize("tokens", [
        ("missing",),
        ("servers", "5"),
        ("servers", "first"),
        ("servers", "0", "url", "deeper"),
    ])
    def test_resolve_failures(self, tokens):
        document = {"servers": [{"url": "a"}]}
        with pytest.raises(DereferenceError):
            resolve_pointer(document, tokens)

    def test_walk_order(self):
        nodes = list(walk({"a": [1, {"b": 2}]}))
        assert [path for path, _ in nodes] == [(), ("a",), ("a", 0), ("a", 1), ("a", 1, "b")]


class TestLoader:
    """Tests for loading definitions from disk"""

    def test_load_json(self, fixtures_dir):
        document = load_document(fixtures_dir / "petstore.json")
        assert document["openapi"] == "3.0.3"

    def test_load_yaml(self, fixtures_dir):
        document = load_document(fixtures_dir / "swagger.yaml")
        assert document["swagger"] == "2.0"
        assert set(document["paths"]["/items"]) == {"get", "put"}

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(ValueError, match="must be a mapping"):
            load_document(path)


class TestDereferencer:
    """Tests for local $ref expansion"""

    def test_expands_refs(self, petstore):
        result = Dereferencer().dereference_sync(petstore)
        schema = result.document["paths"]["/pets"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["type"] == "array"
        assert schema["items"]["properties"]["name"] == {"type": "string"}
        assert result.circular_refs == []

    def test_input_not_modified(self, petstore, snapshot):
        before = snapshot(petstore)
        Dereferencer().dereference_sync(petstore)
        assert petstore == before

    def test_cycle_is_reported_not_raised(self, circular_doc):
        result = Dereferencer().dereference_sync(circular_doc)
        assert result.circular_refs == [
            "#/components/schemas/A/properties/b",
            "#/components/schemas/B/properties/a",
        ]

    def test_cycle_leaves_ref_in_place(self, circular_doc):
        result = Dereferencer().dereference_sync(circular_doc)
        schemas = result.document["components"]["schemas"]
        assert schemas["A"]["properties"]["b"] == {"$ref": "#/components/schemas/B"}
        assert schemas["B"]["properties"]["a"] == {"$ref": "#/components/schemas/A"}

    def test_cycle_entry_point_expanded(self, circular_doc):
        """A ref into a cycle from outside it is still expanded"""
        result = Dereferencer().dereference_sync(circular_doc)
        schema = result.document["paths"]["/nodes"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["type"] == "object"
        assert schema["properties"]["b"] == {"$ref": "#/components/schemas/B"}

    def test_acyclic_ref_inside_cycle_expanded(self, circular_doc):
        schemas = circular_doc["components"]["schemas"]
        schemas["Id"] = {"type": "integer"}
        schemas["A"]["properties"]["id"] = {"$ref": "#/components/schemas/Id"}

        result = Dereferencer().dereference_sync(circular_doc)
        assert result.document["components"]["schemas"]["A"]["properties"]["id"] == {"type": "integer"}
        assert "#/components/schemas/A/properties/id" not in result.circular_refs

    def test_densely_connected_schemas(self):
        """Twelve schemas that all reference each other expand promptly"""
        names = [f"S{i}" for i in range(12)]
        document = {"components": {"schemas": {
            name: {
                "type": "object",
                "properties": {
                    other: {"$ref": f"#/components/schemas/{other}"}
                    for other in names if other != name
                },
            }
            for name in names
        }}}

        start = time.perf_counter()
        result = Dereferencer().dereference_sync(document)
        elapsed = time.perf_counter() - start

        assert len(result.circular_refs) == 12 * 11
        assert elapsed < 5
        assert result.document["components"]["schemas"]["S0"]["properties"]["S1"] == {
            "$ref": "#/components/schemas/S1"
        }

    def test_chain_into_cycle(self):
        """Refs leading into a cycle are expanded, only the cycle edges are kept"""
        document = {"components": {"schemas": {
            "Entry": {"$ref": "#/components/schemas/Loop"},
            "Loop": {"properties": {"self": {"$ref": "#/components/schemas/Loop"}}},
        }}}
        result = Dereferencer().dereference_sync(document)
        assert result.circular_refs == ["#/components/schemas/Loop/properties/self"]
        assert result.document["components"]["schemas"]["Entry"] == {
            "properties": {"self": {"$ref": "#/components/schemas/Loop"}}
        }

    def test_deep_nesting_is_dereference_error(self, deeply_nested):
        document = deeply_nested(3000)
        with pytest.raises(DereferenceError, match="nested too deeply"):
            Dereferencer().dereference_sync(document)

    def test_self_reference(self):
        document = {"components": {"schemas": {"Node": {
            "type": "object",
            "properties": {"next": {"$ref": "#/components/schemas/Node"}},
        }}}}
        result = Dereferencer().dereference_sync(document)
        assert result.circular_refs == ["#/components/schemas/Node/properties/next"]

    def test_external_refs_untouched(self):
        document = {"paths": {"/a": {"$ref": "paths.yaml#/a"}}}
        result = Dereferencer().dereference_sync(document)
        assert result.document == document
        assert result.circular_refs == []

    def test_unresolvable_ref(self):
        document = {"schema": {"$ref": "#/components/schemas/Missing"}}
        with pytest.raises(DereferenceError) as exc_info:
            Dereferencer().dereference_sync(document)
        assert exc_info.value.ref == "#/components/schemas/Missing"

    def test_non_string_ref(self):
        with pytest.raises(DereferenceError, match="not a string"):
            Dereferencer().dereference_sync({"schema": {"$ref": 42}})

    def test_shared_target_expanded_everywhere(self):
        document = {
            "components": {"schemas": {"Id": {"type": "integer"}}},
            "a": {"$ref": "#/components/schemas/Id"},
            "b": {"$ref": "#/components/schemas/Id"},
        }
        result = Dereferencer().dereference_sync(document)
        assert result.document["a"] == result.document["b"] == {"type": "integer"}
