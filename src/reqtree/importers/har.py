"""Convert a HAR (HTTP Archive) capture into a canonical collection.

Every ``log.entries[].request`` becomes one request at the collection root.
Captures taken from browsers are large and messy, so problems are handled
per entry: an entry whose URL cannot be parsed still imports, just without
query parameters and with the raw URL as its name.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import SplitResult, parse_qsl, urlsplit

from reqtree.importers.common import (
    auth_from_headers,
    body_type_from_mime,
    text_value,
    urlencode_pairs,
)
from reqtree.models import BodyType, Collection, KeyValue, Request

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Imported HAR File"


def import_har(har: dict[str, Any]) -> Collection:
    """Build a :class:`~reqtree.models.Collection` from a HAR document.

    Args:
        har: The parsed HAR JSON document (must contain ``log.entries``).

    Returns:
        A new collection with one request per entry that has a ``request``.
    """
    collection = Collection(name=DEFAULT_COLLECTION_NAME)
    entries = (har.get("log") or {}).get("entries")
    if not isinstance(entries, list):
        return collection

    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("request"), dict):
            continue
        collection.items.append(_convert_entry(entry["request"], collection.id))

    logger.debug("Imported HAR capture (%d requests)", len(collection.items))
    return collection


def parse_url(url: str) -> Optional[SplitResult]:
    """Split an absolute URL, returning None when it is not one.

    A URL counts as parsable when it has both a scheme and a network
    location, mirroring what a browser ``URL`` constructor accepts for HTTP
    captures.
    """
    try:
        parts = urlsplit(url)
        # Accessing the port validates it (raises ValueError when out of range).
        _ = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts


def _convert_entry(source: dict[str, Any], collection_id: str) -> Request:
    method = text_value(source.get("method")) or "GET"
    url = text_value(source.get("url"))

    headers = [
        KeyValue(name=text_value(h.get("name")), value=text_value(h.get("value")))
        for h in (source.get("headers") or [])
        if isinstance(h, dict)
    ]
    body, body_type = _convert_post_data(source.get("postData"))

    parts = parse_url(url)
    if parts is None:
        logger.debug("HAR entry URL %r is not parsable; importing without params", url)
        name = f"{method} {url}"
        params: list[KeyValue] = []
    else:
        name = f"{method} {parts.path or '/'}"
        params = [
            KeyValue(name=key, value=value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
        ]

    return Request(
        name=name,
        method=method,
        url=url,
        params=params,
        headers=headers,
        body=body,
        body_type=body_type,
        folder_path=[collection_id],
        auth=auth_from_headers(headers),
    )


def _convert_post_data(post_data: Any) -> tuple[str, BodyType]:
    """Map a HAR ``postData`` object to ``(text, body_type)``."""
    if not isinstance(post_data, dict):
        return "", BodyType.NONE

    if post_data.get("text"):
        mime_type = text_value(post_data.get("mimeType"))
        body_type = body_type_from_mime(mime_type, allow_graphql_xml=False)
        if body_type == BodyType.NONE:
            body_type = BodyType.PLAIN_TEXT
        return text_value(post_data["text"]), body_type

    params = post_data.get("params")
    if isinstance(params, list):
        body = urlencode_pairs(
            (text_value(p.get("name")), p.get("value"))
            for p in params
            if isinstance(p, dict)
        )
        return body, BodyType.FORM_URLENCODED

    return "", BodyType.NONE
