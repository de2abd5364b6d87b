"""Tests for reqtree.importers.swagger."""

from __future__ import annotations

import json
from typing import Any

import pytest

from reqtree.importers.swagger import generate_example, import_swagger
from reqtree.models import AuthType, BodyType, Collection, Request


def _by_name(collection: Collection) -> dict[str, Request]:
    return {r.name: r for r in collection.requests()}


class TestOpenAPI3:
    @pytest.fixture()
    def collection(self, openapi3_raw: dict[str, Any]) -> Collection:
        return import_swagger(openapi3_raw)

    def test_title(self, collection: Collection) -> None:
        assert collection.name == "Petstore"

    def test_one_request_per_operation(self, collection: Collection) -> None:
        assert [r.name for r in collection.items] == [
            "List pets",
            "createPet",
            "GET /pets/{petId}",
            "Delete pet",
        ]
        assert all(r.folder_path == [collection.id] for r in collection.items)

    def test_method_and_url(self, collection: Collection) -> None:
        req = _by_name(collection)["GET /pets/{petId}"]
        assert req.method == "GET"
        assert req.url == "https://petstore.example.com/v1/pets/{petId}"

    def test_operation_parameter_overrides_path_level(self, collection: Collection) -> None:
        req = _by_name(collection)["List pets"]
        assert [(p.name, p.value, p.enabled) for p in req.params] == [
            ("limit", "50", True),
            ("legacy", "", False),
        ]
        assert [h.name for h in req.headers] == ["X-Request-Id"]

    def test_path_level_parameter_inherited(self, collection: Collection) -> None:
        req = _by_name(collection)["createPet"]
        assert [(p.name, p.value) for p in req.params] == [("limit", "")]

    def test_json_body_from_referenced_schema(self, collection: Collection) -> None:
        req = _by_name(collection)["createPet"]
        assert req.body_type == BodyType.JSON
        assert [(h.name, h.value) for h in req.headers] == [
            ("Content-Type", "application/json"),
        ]
        assert json.loads(req.body) == {
            "id": 0,
            "name": "Rex",
            "tags": [],
            "vaccinated": False,
            "owner": {},
        }

    def test_bearer_header_default_becomes_auth(self, collection: Collection) -> None:
        auth = _by_name(collection)["Delete pet"].auth
        assert auth.type == AuthType.BEARER
        assert auth.bearer == "s3cret"

    def test_no_body(self, collection: Collection) -> None:
        req = _by_name(collection)["List pets"]
        assert req.body == ""
        assert req.body_type == BodyType.NONE


class TestSwagger2:
    @pytest.fixture()
    def collection(self, swagger2_raw: dict[str, Any]) -> Collection:
        return import_swagger(swagger2_raw)

    def test_base_url_from_host(self, collection: Collection) -> None:
        assert [r.url for r in collection.items] == [
            "http://legacy.example.com/api/orders",
            "http://legacy.example.com/api/orders",
        ]

    def test_query_default(self, collection: Collection) -> None:
        req = _by_name(collection)["List orders"]
        assert [(p.name, p.value) for p in req.params] == [("status", "open")]

    def test_body_parameter(self, collection: Collection) -> None:
        req = _by_name(collection)["Create order"]
        assert req.method == "POST"
        assert req.body_type == BodyType.JSON
        assert json.loads(req.body) == {"quantity": 1, "note": "string"}
        assert req.params == []

    def test_basic_auth_header(self, collection: Collection) -> None:
        auth = _by_name(collection)["Create order"].auth
        assert auth.type == AuthType.BASIC
        assert auth.basic.username == "user"
        assert auth.basic.password == "pass"


class TestEdgeCases:
    def test_default_title(self) -> None:
        assert import_swagger({"openapi": "3.0.0", "paths": {}}).name == "Imported API"

    def test_no_servers(self) -> None:
        doc = {"openapi": "3.0.0", "paths": {"/a": {"get": {}}}}
        assert import_swagger(doc).items[0].url == "/a"

    def test_non_method_keys_ignored(self) -> None:
        doc = {"openapi": "3.0.0", "paths": {"/a": {
            "summary": "x", "description": "y", "servers": [], "parameters": [],
            "get": {}, "x-internal": {"get": {}},
        }}}
        assert len(import_swagger(doc).items) == 1

    def test_form_body_without_example(self) -> None:
        doc = {"openapi": "3.0.0", "paths": {"/a": {"post": {"requestBody": {"content": {
            "application/x-www-form-urlencoded": {"schema": {"type": "object"}},
        }}}}}}
        req = import_swagger(doc).items[0]
        assert req.body_type == BodyType.FORM_URLENCODED
        assert req.body == ""

    def test_example_used_without_schema(self) -> None:
        doc = {"openapi": "3.0.0", "paths": {"/a": {"post": {"requestBody": {"content": {
            "application/json": {"example": {"a": 1}},
        }}}}}}
        assert json.loads(import_swagger(doc).items[0].body) == {"a": 1}

    def test_unresolvable_ref_does_not_fail(self) -> None:
        doc = {"openapi": "3.0.0", "info": {"title": "T"}, "paths": {"/a": {"post": {
            "requestBody": {"content": {"application/json": {
                "schema": {"$ref": "#/components/schemas/Missing"},
            }}},
        }}}}
        collection = import_swagger(doc)
        assert collection.name == "T"
        assert len(collection.items) == 1
        assert json.loads(collection.items[0].body) == {}

    def test_undecodable_basic_header(self) -> None:
        doc = {"openapi": "3.0.0", "paths": {"/a": {"get": {"parameters": [
            {"name": "Authorization", "in": "header", "default": "Basic !!!"},
        ]}}}}
        assert import_swagger(doc).items[0].auth.type == AuthType.NONE


class TestGenerateExample:
    def test_placeholders(self) -> None:
        schema = {"properties": {
            "s": {"type": "string"},
            "n": {"type": "number"},
            "b": {"type": "boolean"},
            "a": {"type": "array"},
            "o": {"type": "object"},
            "x": {"type": "null"},
        }}
        assert json.loads(generate_example(schema)) == {
            "s": "string", "n": 0, "b": False, "a": [], "o": {},
        }

    def test_example_and_default(self) -> None:
        schema = {"properties": {
            "s": {"type": "string", "default": "dflt"},
            "n": {"type": "integer", "example": 5, "default": 1},
        }}
        assert json.loads(generate_example(schema)) == {"s": "dflt", "n": 5}

    def test_pretty_printed(self) -> None:
        assert generate_example({"properties": {"id": {"type": "integer"}}}) == '{\n  "id": 0\n}'

    def test_no_properties(self) -> None:
        assert generate_example({"type": "string"}) == "{}"
