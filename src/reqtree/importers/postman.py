"""Convert a Postman collection (v2.0 / v2.1 schema) into a canonical collection.

Postman nests folders and requests in ``item`` arrays: a node carrying a
``request`` is a request, a node carrying ``item`` (or ``items``) is a
folder. The canonical tree allows one folder level, so folders nested more
deeply are flattened into their top-level folder in document order.

Every node gets a freshly generated id; Postman's own ids are discarded.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from reqtree.importers.common import (
    bearer_from_headers,
    looks_like_json,
    text_value,
    urlencode_pairs,
)
from reqtree.models import (
    AuthType,
    BasicCredentials,
    BodyType,
    Collection,
    Folder,
    Item,
    KeyValue,
    Request,
    RequestAuth,
)

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Imported Postman Collection"


def import_postman(collection: dict[str, Any]) -> Collection:
    """Build a :class:`~reqtree.models.Collection` from a Postman collection dict.

    Args:
        collection: The parsed Postman JSON document.

    Returns:
        A new collection whose requests carry ``folder_path`` chains made of
        the freshly generated ids.
    """
    info = collection.get("info") or {}
    name = info.get("name") or collection.get("name") or DEFAULT_COLLECTION_NAME
    result = Collection(name=str(name))

    items = collection.get("item")
    if isinstance(items, list):
        result.items = _convert_items(items, [result.id])

    logger.debug(
        "Imported Postman collection '%s' (%d requests)",
        result.name,
        sum(1 for _ in result.iter_requests()),
    )
    return result


def _children(node: dict[str, Any]) -> Optional[list[Any]]:
    """Return a folder node's child list, or None when *node* is not a folder."""
    children = node.get("item")
    if children is None:
        children = node.get("items")
    return children if isinstance(children, list) else None


def _convert_items(items: list[Any], parent_path: list[str]) -> list[Item]:
    """Convert one ``item`` array whose members live under *parent_path*.

    With a one-element *parent_path* the members sit at the collection root
    and folders become real :class:`Folder` nodes. Deeper down, a folder's
    contents are spliced into the current list instead.
    """
    converted: list[Item] = []
    for node in items:
        if not isinstance(node, dict):
            continue

        request = node.get("request")
        if request is not None and request != "":
            converted.append(_convert_request(node, parent_path))
            continue

        children = _children(node)
        if children is None:
            continue

        if len(parent_path) == 1:
            folder = Folder(
                name=str(node.get("name") or "Unnamed Folder"),
                parent_path=list(parent_path),
            )
            folder.items = _convert_items(children, [*parent_path, folder.id])
            converted.append(folder)
        else:
            converted.extend(_convert_items(children, parent_path))

    return converted


def _convert_request(node: dict[str, Any], folder_path: list[str]) -> Request:
    """Convert a single request-bearing Postman item."""
    source = node["request"]
    if isinstance(source, str):
        # The v2 schema allows a bare URL string in place of a request object.
        source = {"url": source}

    url_field = source.get("url")
    headers = _convert_headers(source.get("header"))
    body, body_type = _convert_body(source.get("body"))

    auth = _convert_auth(source.get("auth"))
    token = bearer_from_headers(headers)
    if token is not None:
        auth = auth.model_copy(update={"type": AuthType.BEARER, "bearer": token})

    return Request(
        name=str(node.get("name") or "Imported Request"),
        method=str(source.get("method") or "GET"),
        url=_convert_url(url_field),
        params=_convert_query(url_field),
        headers=headers,
        body=body,
        body_type=body_type,
        folder_path=list(folder_path),
        auth=auth,
    )


def _convert_url(url_field: Any) -> str:
    """Return the request URL with ``:name`` path variables substituted.

    A variable without a ``value`` or ``default`` leaves its token in place.
    """
    if isinstance(url_field, str):
        return url_field
    if not isinstance(url_field, dict):
        return ""

    url = text_value(url_field.get("raw"))
    variables = url_field.get("variable")
    if ":" in url and isinstance(variables, list):
        for variable in variables:
            if not isinstance(variable, dict):
                continue
            token = f":{text_value(variable.get('key'))}"
            replacement = variable.get("value") or variable.get("default") or token
            url = url.replace(token, text_value(replacement), 1)
    return url


def _convert_query(url_field: Any) -> list[KeyValue]:
    if not isinstance(url_field, dict) or not isinstance(url_field.get("query"), list):
        return []
    return [
        KeyValue(
            name=text_value(p.get("key")),
            value=text_value(p.get("value")),
            enabled=p.get("disabled") is not True,
        )
        for p in url_field["query"]
        if isinstance(p, dict)
    ]


def _convert_headers(headers: Any) -> list[KeyValue]:
    if not isinstance(headers, list):
        return []
    return [
        KeyValue(
            name=text_value(h.get("key") or h.get("name")),
            value=text_value(h.get("value")),
            enabled=h.get("disabled") is not True,
        )
        for h in headers
        if isinstance(h, dict)
    ]


def _convert_body(body: Any) -> tuple[str, BodyType]:
    """Map a Postman body object to ``(text, body_type)`` according to its ``mode``."""
    if not isinstance(body, dict):
        return "", BodyType.NONE

    mode = body.get("mode")

    if mode == "raw":
        text = text_value(body.get("raw"))
        language = ((body.get("options") or {}).get("raw") or {}).get("language")
        if language:
            if language == "json":
                return text, BodyType.JSON
            if language == "xml":
                return text, BodyType.XML
            return text, BodyType.PLAIN_TEXT
        return text, BodyType.JSON if looks_like_json(text) else BodyType.PLAIN_TEXT

    if mode == "urlencoded":
        pairs = body.get("urlencoded")
        if not isinstance(pairs, list):
            return "", BodyType.FORM_URLENCODED
        text = urlencode_pairs(
            (text_value(p.get("key")), p.get("value"))
            for p in pairs
            if isinstance(p, dict) and p.get("disabled") is not True
        )
        return text, BodyType.FORM_URLENCODED

    if mode == "formdata":
        fields = body.get("formdata")
        if not isinstance(fields, list):
            return "", BodyType.FORM_DATA
        text = "\n".join(
            f"{text_value(p.get('key'))}: {text_value(p.get('value'))}"
            for p in fields
            if isinstance(p, dict) and p.get("disabled") is not True
        )
        return text, BodyType.FORM_DATA

    if mode == "graphql":
        graphql = body.get("graphql")
        if not graphql:
            return "", BodyType.GRAPHQL
        try:
            return json.dumps(graphql, indent=2, ensure_ascii=False), BodyType.GRAPHQL
        except (TypeError, ValueError):
            query = graphql.get("query", "") if isinstance(graphql, dict) else ""
            return text_value(query), BodyType.GRAPHQL

    return "", BodyType.NONE


def _auth_entry(entries: Any, key: str) -> Optional[str]:
    """Look up *key* in a Postman auth attribute block.

    v2.1 stores attributes as ``[{"key": ..., "value": ...}]``; v2.0 used a
    plain mapping.
    """
    if isinstance(entries, dict):
        value = entries.get(key)
        return None if value is None else text_value(value)
    if isinstance(entries, list):
        for entry in entries:
            if isinstance(entry, dict) and entry.get("key") == key:
                return text_value(entry.get("value"))
    return None


def _convert_auth(auth: Any) -> RequestAuth:
    """Translate an explicit Postman ``auth`` block (bearer and basic only)."""
    if not isinstance(auth, dict):
        return RequestAuth()

    auth_type = auth.get("type")
    if auth_type == "bearer" and auth.get("bearer"):
        return RequestAuth(
            type=AuthType.BEARER,
            bearer=_auth_entry(auth["bearer"], "token") or "",
        )
    if auth_type == "basic" and auth.get("basic"):
        return RequestAuth(
            type=AuthType.BASIC,
            basic=BasicCredentials(
                username=_auth_entry(auth["basic"], "username") or "",
                password=_auth_entry(auth["basic"], "password") or "",
            ),
        )
    return RequestAuth()
