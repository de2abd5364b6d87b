"""Tests for the reqtree.importers entry points."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from reqtree.exceptions import ImportParseError, UnknownFormatError
from reqtree.importers import (
    detect_source,
    import_document,
    import_from_curl,
    import_from_file,
    parse_content,
)
from reqtree.models import BodyType, SourceFormat

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def _text(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class TestImportFromFile:
    @pytest.mark.parametrize(
        "fixture, name, requests",
        [
            ("postman.json", "Demo API", 6),
            ("insomnia.json", "Imported Insomnia Collection", 3),
            ("openapi3.json", "Petstore", 4),
            ("swagger2.json", "Legacy Orders", 2),
            ("har.json", "Imported HAR File", 4),
        ],
    )
    def test_fixtures(self, fixture: str, name: str, requests: int) -> None:
        collection = import_from_file(_text(fixture), fixture)
        assert collection is not None
        assert collection.name == name
        assert sum(1 for _ in collection.iter_requests()) == requests

    def test_yaml_openapi(self) -> None:
        collection = import_from_file(_text("openapi3.yaml"), "openapi3.yaml")
        assert collection is not None
        assert collection.name == "Todo"
        assert [r.name for r in collection.items] == ["List todos", "Add todo"]
        assert collection.items[1].body_type == BodyType.FORM_URLENCODED

    def test_json_without_extension(self) -> None:
        assert import_from_file(_text("har.json"), "capture") is not None

    def test_invalid_json(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="reqtree"):
            assert import_from_file("{not json", "broken.json") is None
        assert "broken.json" in caplog.text

    def test_unknown_format(self) -> None:
        assert import_from_file(json.dumps({"hello": "world"}), "data.json") is None

    def test_yaml_without_signature(self) -> None:
        assert import_from_file("name: value\n", "notes.yaml") is None

    def test_empty_content(self) -> None:
        assert import_from_file("", "empty.json") is None

    def test_malformed_document(self) -> None:
        assert import_from_file(json.dumps({"info": "x", "item": []}), "bad.json") is None


class TestImportDocument:
    def test_unknown_raises(self) -> None:
        with pytest.raises(UnknownFormatError, match="unknown collection format"):
            import_document({"a": 1}, "a.json")

    def test_yaml_message(self) -> None:
        with pytest.raises(UnknownFormatError, match="YAML"):
            import_document({"a": 1}, "a.yml")

    def test_malformed_document_raises_parse_error(self) -> None:
        with pytest.raises(ImportParseError, match="Malformed postman document"):
            import_document({"info": "not-an-object", "item": []}, "bad.json")

    def test_malformed_har_headers(self) -> None:
        with pytest.raises(ImportParseError, match="Malformed har document"):
            import_document(
                {"log": {"entries": [{"request": {"headers": ["not-a-header"]}}]}}, "bad.har"
            )


class TestParseContent:
    def test_json(self) -> None:
        assert parse_content('{"a": 1}', "a.json") == {"a": 1}

    def test_strict_json_extension(self) -> None:
        with pytest.raises(ImportParseError, match="Invalid JSON"):
            parse_content("a: 1", "a.json")

    def test_yaml_fallback(self) -> None:
        assert parse_content("a: 1", "") == {"a": 1}

    def test_yaml_extension_skips_json(self) -> None:
        assert parse_content("a: [1, 2]", "a.yaml") == {"a": [1, 2]}

    def test_unparsable(self) -> None:
        with pytest.raises(ImportParseError, match="JSON or YAML"):
            parse_content("a: [1, 2", "")

    def test_blank(self) -> None:
        with pytest.raises(ImportParseError, match="empty"):
            parse_content("  \n", "a.json")


class TestDetectSource:
    def test_structural(self) -> None:
        assert detect_source(_text("postman.json"), "x.json") == SourceFormat.POSTMAN

    def test_yaml_structural(self) -> None:
        assert detect_source(_text("openapi3.yaml"), "openapi3.yaml") == SourceFormat.SWAGGER

    def test_yaml_by_extension(self) -> None:
        assert detect_source("a: [1, 2", "broken.yaml") == SourceFormat.YAML

    def test_unknown(self) -> None:
        assert detect_source("{nope", "x.json") == SourceFormat.UNKNOWN


class TestImportFromCurl:
    def test_blank(self) -> None:
        assert import_from_curl("") is None
        assert import_from_curl("   ") is None

    def test_parses(self) -> None:
        req = import_from_curl("curl -X DELETE https://a.example/items/1")
        assert req is not None
        assert req.method == "DELETE"
        assert req.name == "DELETE items/1"
