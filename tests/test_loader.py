"""Tests for reqtree.loader."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from reqtree.exceptions import ImportParseError
from reqtree.loader import read_source

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestReadFile:
    def test_reads_content_and_name(self) -> None:
        content, name = read_source(str(FIXTURES_DIR / "har.json"))
        assert name == "har.json"
        assert '"entries"' in content

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ImportParseError, match="not found"):
            read_source(str(tmp_path / "nope.json"))

    def test_empty_file(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("  \n", encoding="utf-8")
        with pytest.raises(ImportParseError, match="empty"):
            read_source(str(empty))


class TestReadStdin:
    def test_reads_stdin(self) -> None:
        with patch("reqtree.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("curl https://a.example")
            assert read_source("-") == ("curl https://a.example", "stdin")

    def test_empty_stdin(self) -> None:
        with patch("reqtree.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("")
            with pytest.raises(ImportParseError, match="No input"):
                read_source("-")


class TestReadUrl:
    def test_name_from_path(self) -> None:
        response = httpx.Response(
            status_code=200,
            text='{"openapi": "3.0.0"}',
            request=httpx.Request("GET", "https://example.com/specs/api.json"),
        )
        with patch("reqtree.loader.httpx.get", return_value=response):
            content, name = read_source("https://example.com/specs/api.json")
        assert name == "api.json"
        assert content == '{"openapi": "3.0.0"}'

    def test_yaml_name_from_content_type(self) -> None:
        response = httpx.Response(
            status_code=200,
            text="openapi: 3.0.0\n",
            headers={"content-type": "application/x-yaml"},
            request=httpx.Request("GET", "https://example.com/openapi"),
        )
        with patch("reqtree.loader.httpx.get", return_value=response):
            _, name = read_source("https://example.com/openapi")
        assert name == "openapi.yaml"

    def test_http_error(self) -> None:
        response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("reqtree.loader.httpx.get", return_value=response):
            with pytest.raises(ImportParseError, match="HTTP 404"):
                read_source("https://example.com/missing.json")

    def test_connection_error(self) -> None:
        with patch(
            "reqtree.loader.httpx.get",
            side_effect=httpx.ConnectError("refused"),
        ):
            with pytest.raises(ImportParseError, match="Failed to fetch"):
                read_source("https://example.com/api.json")
