"""Helpers shared by the format importers.

Every importer ends up answering the same small questions: which
:class:`~reqtree.models.BodyType` a MIME type stands for, how to
percent-encode form pairs, and what authentication an ``Authorization``
header implies. Keeping those answers here keeps the importers consistent
with each other.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Iterable
from urllib.parse import quote

from reqtree.models import AuthType, BasicCredentials, BodyType, KeyValue, RequestAuth

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "
_BASIC_PREFIX = "basic "

# Ordered substring checks; first match wins.
_MIME_BODY_TYPES: tuple[tuple[str, BodyType], ...] = (
    ("application/json", BodyType.JSON),
    ("application/x-www-form-urlencoded", BodyType.FORM_URLENCODED),
    ("multipart/form-data", BodyType.FORM_DATA),
    ("application/graphql", BodyType.GRAPHQL),
    ("application/xml", BodyType.XML),
)


def body_type_from_mime(mime_type: str | None, allow_graphql_xml: bool = True) -> BodyType:
    """Map a MIME type to a body type by substring match.

    Args:
        mime_type: The declared content type. An empty or missing value
            maps to :attr:`BodyType.NONE`.
        allow_graphql_xml: HAR captures only distinguish JSON and the two
            form encodings; pass ``False`` to treat GraphQL/XML as plain text.

    Returns:
        The matching body type, :attr:`BodyType.PLAIN_TEXT` when nothing
        matches.
    """
    if not mime_type:
        return BodyType.NONE
    for needle, body_type in _MIME_BODY_TYPES:
        if needle in mime_type:
            if not allow_graphql_xml and body_type in (BodyType.GRAPHQL, BodyType.XML):
                return BodyType.PLAIN_TEXT
            return body_type
    return BodyType.PLAIN_TEXT


def encode_component(value: Any) -> str:
    """Percent-encode *value* the way ``encodeURIComponent`` does."""
    return quote(str(value), safe="-_.!~*'()")


def urlencode_pairs(pairs: Iterable[tuple[Any, Any]]) -> str:
    """Join ``(key, value)`` pairs as a percent-encoded form body."""
    return "&".join(
        f"{encode_component(key)}={encode_component(value if value is not None else '')}"
        for key, value in pairs
    )


def looks_like_json(text: str) -> bool:
    """Return True when *text* parses as JSON."""
    try:
        json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return False
    return True


def text_value(value: Any) -> str:
    """Coerce an optional source-document value to text ("" for missing)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def find_header(headers: list[KeyValue], name: str) -> KeyValue | None:
    """Return the first header called *name* (case-insensitive)."""
    lowered = name.lower()
    for header in headers:
        if header.name.lower() == lowered:
            return header
    return None


def bearer_from_headers(headers: list[KeyValue]) -> str | None:
    """Return the token of an ``Authorization: Bearer ...`` header, if any."""
    header = find_header(headers, "authorization")
    if header is not None and header.value.lower().startswith(_BEARER_PREFIX):
        return header.value[len(_BEARER_PREFIX):].strip()
    return None


def auth_from_headers(headers: list[KeyValue]) -> RequestAuth:
    """Infer request authentication from an ``Authorization`` header.

    A ``Bearer`` value becomes bearer auth. A ``Basic`` value is base64
    decoded into ``username:password``; a value that does not decode
    leaves the request without authentication.
    """
    header = find_header(headers, "authorization")
    if header is None:
        return RequestAuth()

    lowered = header.value.lower()
    if lowered.startswith(_BEARER_PREFIX):
        return RequestAuth(
            type=AuthType.BEARER,
            bearer=header.value[len(_BEARER_PREFIX):].strip(),
        )
    if lowered.startswith(_BASIC_PREFIX):
        encoded = header.value[len(_BASIC_PREFIX):].strip()
        encoded += "=" * (-len(encoded) % 4)
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            logger.debug("Ignoring undecodable basic auth header: %s", exc)
            return RequestAuth()
        username, _, password = decoded.partition(":")
        return RequestAuth(
            type=AuthType.BASIC,
            basic=BasicCredentials(username=username, password=password),
        )
    return RequestAuth()
