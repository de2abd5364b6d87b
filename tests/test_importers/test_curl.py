"""Tests for reqtree.importers.curl."""

from __future__ import annotations

import pytest

from reqtree.importers.curl import is_curl_command, parse_curl_command
from reqtree.models import AuthType, BodyType


class TestBasics:
    def test_simple_get(self) -> None:
        req = parse_curl_command("curl https://api.example.com/users")
        assert req is not None
        assert req.method == "GET"
        assert req.url == "https://api.example.com/users"
        assert req.name == "GET users"
        assert req.body == ""
        assert req.body_type == BodyType.NONE
        assert req.folder_path == []

    def test_blank_command(self) -> None:
        assert parse_curl_command("   ") is None

    def test_host_only_name(self) -> None:
        assert parse_curl_command("curl https://example.com").name == "GET example.com"

    def test_scheme_added(self) -> None:
        req = parse_curl_command("curl example.com/status")
        assert req.url == "https://example.com/status"
        assert req.name == "GET status"

    def test_query_moved_to_params(self) -> None:
        req = parse_curl_command("curl 'https://api.example.com/users?page=2&q=a%20b'")
        assert req.url == "https://api.example.com/users"
        assert [(p.name, p.value) for p in req.params] == [("page", "2"), ("q", "a b")]

    def test_url_flag(self) -> None:
        req = parse_curl_command("curl --url https://a.example/x -X DELETE")
        assert req.method == "DELETE"
        assert req.url == "https://a.example/x"

    def test_without_leading_curl(self) -> None:
        assert parse_curl_command("https://a.example/x").url == "https://a.example/x"


class TestMethods:
    @pytest.mark.parametrize(
        "command",
        [
            "curl -X PUT https://a.example/x",
            "curl --request put https://a.example/x",
            "curl -XPUT https://a.example/x",
        ],
    )
    def test_explicit_method(self, command: str) -> None:
        assert parse_curl_command(command).method == "PUT"

    def test_data_implies_post(self) -> None:
        assert parse_curl_command("curl https://a.example -d x=1").method == "POST"

    def test_explicit_method_kept_with_data(self) -> None:
        assert parse_curl_command("curl -X PATCH https://a.example -d x=1").method == "PATCH"


class TestHeadersAndAuth:
    def test_headers(self) -> None:
        req = parse_curl_command(
            "curl -H 'Accept: application/json' --header 'X-Id:  7 ' https://a.example"
        )
        assert [(h.name, h.value) for h in req.headers] == [
            ("Accept", "application/json"),
            ("X-Id", "7"),
        ]

    def test_header_without_colon_ignored(self) -> None:
        assert parse_curl_command("curl -H 'broken' https://a.example").headers == []

    def test_bearer(self) -> None:
        req = parse_curl_command("curl -H 'Authorization: Bearer xyz' https://a.example")
        assert req.auth.type == AuthType.BEARER
        assert req.auth.bearer == "xyz"

    def test_basic_user(self) -> None:
        req = parse_curl_command("curl -u alice:s3:cret https://a.example")
        assert req.auth.type == AuthType.BASIC
        assert req.auth.basic.username == "alice"
        assert req.auth.basic.password == "s3:cret"

    def test_user_without_password_ignored(self) -> None:
        assert parse_curl_command("curl -u alice https://a.example").auth.type == AuthType.NONE


class TestBodies:
    def test_json_with_content_type(self) -> None:
        req = parse_curl_command(
            """curl -X POST https://a.example/users -H 'Content-Type: application/json' -d '{"a": 1}'"""
        )
        assert req.body == '{"a": 1}'
        assert req.body_type == BodyType.JSON

    def test_json_guessed(self) -> None:
        req = parse_curl_command("""curl https://a.example --data-raw '[1, 2]'""")
        assert req.body_type == BodyType.JSON

    def test_invalid_json_is_plain_text(self) -> None:
        req = parse_curl_command("curl https://a.example -d '{oops'")
        assert req.body_type == BodyType.PLAIN_TEXT

    def test_form_guessed(self) -> None:
        req = parse_curl_command("curl https://a.example -d 'a=1&b=2'")
        assert req.body_type == BodyType.FORM_URLENCODED

    def test_content_type_wins_over_guess(self) -> None:
        req = parse_curl_command(
            "curl https://a.example -H 'Content-Type: text/plain' -d '{\"a\": 1}'"
        )
        assert req.body_type == BodyType.PLAIN_TEXT

    def test_repeated_data_joined(self) -> None:
        req = parse_curl_command("curl https://a.example -d a=1 --data b=2")
        assert req.body == "a=1&b=2"
        assert req.body_type == BodyType.FORM_URLENCODED

    def test_multipart_form(self) -> None:
        req = parse_curl_command("curl https://a.example -F 'file=@a.txt' --form name=x")
        assert req.method == "POST"
        assert req.body == "file: @a.txt\nname: x"
        assert req.body_type == BodyType.FORM_DATA


class TestTokenising:
    def test_line_continuations(self) -> None:
        command = (
            "curl -X POST \\\n"
            "  -H 'Content-Type: application/json' \\\n"
            "  -d '{\"k\": \"v\"}' \\\n"
            "  https://a.example/items"
        )
        req = parse_curl_command(command)
        assert req.method == "POST"
        assert req.url == "https://a.example/items"
        assert req.body_type == BodyType.JSON

    def test_ignored_flags_consume_values(self) -> None:
        req = parse_curl_command("curl -s -o out.json --compressed -A agent https://a.example/x")
        assert req.url == "https://a.example/x"

    def test_unbalanced_quotes_fall_back(self) -> None:
        req = parse_curl_command("curl 'https://a.example/x")
        assert req.url == "https://a.example/x"

    def test_malformed_ipv6_host_keeps_url(self) -> None:
        req = parse_curl_command('curl "http://[::1/?a=1"')
        assert req.url == "http://[::1/?a=1"
        assert req.params == []


class TestIsCurlCommand:
    @pytest.mark.parametrize("text", ["curl https://a", "  CURL -X GET x"])
    def test_positive(self, text: str) -> None:
        assert is_curl_command(text)

    @pytest.mark.parametrize("text", ["wget https://a", "curlish", ""])
    def test_negative(self, text: str) -> None:
        assert not is_curl_command(text)
