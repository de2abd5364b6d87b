"""Parse a single cURL command line into a canonical request.

The command is tokenised with :mod:`shlex` (POSIX rules, so quoting and
backslash-newline continuations behave as they do in a shell). Only the
flags that describe the request are interpreted; every other flag is
ignored, consuming its argument when curl expects one.

The parsed request is not placed in any tree: its ``folder_path`` is empty
and the caller decides where it goes.
"""

from __future__ import annotations

import logging
import shlex
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

from reqtree.importers.common import bearer_from_headers, find_header, looks_like_json
from reqtree.models import AuthType, BasicCredentials, BodyType, KeyValue, Request, RequestAuth

logger = logging.getLogger(__name__)

_METHOD_FLAGS = frozenset({"-X", "--request"})
_HEADER_FLAGS = frozenset({"-H", "--header"})
_DATA_FLAGS = frozenset(
    {"-d", "--data", "--data-raw", "--data-binary", "--data-ascii", "--data-urlencode"}
)
_FORM_FLAGS = frozenset({"-F", "--form"})
_USER_FLAGS = frozenset({"-u", "--user"})
_URL_FLAGS = frozenset({"--url"})

# Flags that take an argument but do not affect the request definition.
_IGNORED_VALUE_FLAGS = frozenset(
    {
        "-o", "--output", "-A", "--user-agent", "-b", "--cookie", "-c",
        "--cookie-jar", "-e", "--referer", "-m", "--max-time",
        "--connect-timeout", "-x", "--proxy", "-w", "--write-out", "-E",
        "--cert", "--key", "--cacert", "-T", "--upload-file", "--retry",
        "-r", "--range", "-K", "--config",
    }
)


def is_curl_command(text: str) -> bool:
    """Return True when *text* looks like a cURL invocation."""
    return text.strip().lower().startswith("curl ")


def parse_curl_command(command: str) -> Optional[Request]:
    """Convert a cURL command line into a :class:`~reqtree.models.Request`.

    Args:
        command: The full command, optionally starting with ``curl`` and
            optionally spanning several lines joined with ``\\``.

    Returns:
        The parsed request, or ``None`` when *command* is blank.

    Example::

        >>> req = parse_curl_command("curl -X POST https://api.example.com/users -d '{}'")
        >>> req.method, req.url, req.body_type.value
        ('POST', 'https://api.example.com/users', 'json')
    """
    if not command or not command.strip():
        return None

    method = "GET"
    url = ""
    headers: list[KeyValue] = []
    data_parts: list[str] = []
    form_parts: list[str] = []
    auth = RequestAuth()

    tokens = _tokenize(command)
    if tokens and tokens[0].lower() == "curl":
        tokens = tokens[1:]

    i = 0
    while i < len(tokens):
        token = tokens[i]
        has_value = i + 1 < len(tokens)
        value = tokens[i + 1] if has_value else ""

        if token in _METHOD_FLAGS and has_value:
            method = value.upper()
            i += 2
        elif token.startswith("-X") and len(token) > 2:
            method = token[2:].upper()
            i += 1
        elif token in _HEADER_FLAGS and has_value:
            name, sep, header_value = value.partition(":")
            if sep and name.strip():
                headers.append(KeyValue(name=name.strip(), value=header_value.strip()))
            i += 2
        elif token in _DATA_FLAGS and has_value:
            data_parts.append(value)
            if method == "GET":
                method = "POST"
            i += 2
        elif token in _FORM_FLAGS and has_value:
            key, _, form_value = value.partition("=")
            form_parts.append(f"{key}: {form_value}")
            if method == "GET":
                method = "POST"
            i += 2
        elif token in _USER_FLAGS and has_value:
            username, sep, password = value.partition(":")
            if sep and username:
                auth = RequestAuth(
                    type=AuthType.BASIC,
                    basic=BasicCredentials(username=username, password=password),
                )
            i += 2
        elif token in _URL_FLAGS and has_value:
            url = url or value
            i += 2
        elif token in _IGNORED_VALUE_FLAGS:
            i += 2
        elif token.startswith("-"):
            i += 1
        else:
            url = url or token
            i += 1

    url, params = _split_query(url)
    if url and not url.startswith("http"):
        url = f"https://{url}"

    if form_parts and not data_parts:
        body, body_type = "\n".join(form_parts), BodyType.FORM_DATA
    else:
        body = "&".join(data_parts)
        body_type = _body_type(body, headers)

    token = bearer_from_headers(headers)
    if token is not None:
        auth = auth.model_copy(update={"type": AuthType.BEARER, "bearer": token})

    return Request(
        name=_request_name(method, url),
        method=method,
        url=url,
        params=params,
        headers=headers,
        body=body,
        body_type=body_type,
        folder_path=[],
        auth=auth,
    )


def _tokenize(command: str) -> list[str]:
    """Split *command* into shell words, tolerating unbalanced quotes."""
    normalized = command.strip().replace("\\\r\n", " ").replace("\\\n", " ")
    try:
        return shlex.split(normalized, posix=True)
    except ValueError as exc:
        logger.debug("Falling back to whitespace tokenising: %s", exc)
        return [t.strip("'\"") for t in normalized.split()]


def _split_query(url: str) -> tuple[str, list[KeyValue]]:
    """Move the query string of *url* into params.

    The URL is returned unchanged when it carries no parameters or cannot
    be split (for example an unbalanced IPv6 bracket).
    """
    if "?" not in url:
        return url, []
    absolute = url if url.startswith("http") else f"https://{url}"
    try:
        query = urlsplit(absolute).query
    except ValueError as exc:
        logger.debug("Keeping unsplittable URL %r as is: %s", url, exc)
        return url, []
    params = [
        KeyValue(name=key, value=value)
        for key, value in parse_qsl(query, keep_blank_values=True)
    ]
    if not params:
        return url, []
    return url.split("?", 1)[0], params


def _body_type(body: str, headers: list[KeyValue]) -> BodyType:
    """Choose a body type from the Content-Type header, else from the body itself."""
    if not body:
        return BodyType.NONE

    content_type = find_header(headers, "content-type")
    if content_type is not None:
        if "application/json" in content_type.value:
            return BodyType.JSON
        if "application/x-www-form-urlencoded" in content_type.value:
            return BodyType.FORM_URLENCODED
        if "multipart/form-data" in content_type.value:
            return BodyType.FORM_DATA
        return BodyType.PLAIN_TEXT

    stripped = body.strip()
    if stripped.startswith(("{", "[")) and looks_like_json(stripped):
        return BodyType.JSON
    if "&" in body and "=" in body:
        return BodyType.FORM_URLENCODED
    return BodyType.PLAIN_TEXT


def _request_name(method: str, url: str) -> str:
    """Name a request ``METHOD path`` (or ``METHOD host`` for a bare host URL)."""
    parts = url.split("/")
    host = parts[2] if len(parts) > 2 else ""
    path = "/".join(parts[3:])
    return f"{method} {path or host}"
