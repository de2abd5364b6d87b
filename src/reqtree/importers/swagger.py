"""Convert a Swagger 2.0 or OpenAPI 3.x document into a canonical collection.

Each (path, HTTP method) operation becomes one request at the collection
root; no folders are created. Internal ``$ref`` pointers are inlined first
so that request body examples can be synthesised from referenced schemas.

Parameter merging follows the OpenAPI rules: path-level parameters apply to
every operation under the path and operation-level parameters override them
when they share the same ``name`` and ``in`` values.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from reqtree.exceptions import ImportParseError
from reqtree.importers.common import auth_from_headers, text_value
from reqtree.importers.resolver import resolve_refs
from reqtree.models import BodyType, Collection, HTTPMethod, KeyValue, Request

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Imported API"

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def import_swagger(document: dict[str, Any]) -> Collection:
    """Build a :class:`~reqtree.models.Collection` from a Swagger/OpenAPI dict.

    Args:
        document: The parsed Swagger 2.0 or OpenAPI 3.x document.

    Returns:
        A new collection with one request per operation, in document order.
    """
    try:
        spec = resolve_refs(document)
    except ImportParseError as exc:
        logger.warning("Importing without $ref resolution: %s", exc)
        spec = document

    info = spec.get("info") or {}
    collection = Collection(name=text_value(info.get("title")) or DEFAULT_COLLECTION_NAME)
    base_url = _base_url(spec)

    paths = spec.get("paths")
    if not isinstance(paths, dict):
        return collection

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        path_params = path_item.get("parameters") or []
        for method, operation in path_item.items():
            if method.lower() not in _HTTP_METHODS or not isinstance(operation, dict):
                continue
            collection.items.append(
                _convert_operation(
                    spec, path, method, operation, path_params, base_url, collection.id
                )
            )

    logger.debug(
        "Imported API '%s' (%d operations)", collection.name, len(collection.items)
    )
    return collection


def _base_url(spec: dict[str, Any]) -> str:
    """Return the base URL from ``servers`` (OpenAPI 3) or ``host`` (Swagger 2)."""
    servers = spec.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        return text_value(servers[0].get("url"))
    host = spec.get("host")
    if host:
        schemes = spec.get("schemes") or []
        scheme = (schemes[0] if schemes else None) or "https"
        return f"{scheme}://{host}{text_value(spec.get('basePath'))}"
    return ""


def _merge_parameters(path_params: Any, op_params: Any) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameter lists, operation winning."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for param in [*(path_params or []), *(op_params or [])]:
        if isinstance(param, dict):
            merged[(text_value(param.get("name")), text_value(param.get("in")))] = param
    return list(merged.values())


def _convert_operation(
    spec: dict[str, Any],
    path: str,
    method: str,
    operation: dict[str, Any],
    path_params: Any,
    base_url: str,
    collection_id: str,
) -> Request:
    """Convert one operation object into a request."""
    request = Request(
        name=text_value(
            operation.get("summary")
            or operation.get("operationId")
            or f"{method.upper()} {path}"
        ),
        method=method,
        url=f"{base_url}{path}",
        folder_path=[collection_id],
    )

    body_param: dict[str, Any] | None = None
    for param in _merge_parameters(path_params, operation.get("parameters")):
        location = param.get("in")
        row = KeyValue(
            name=text_value(param.get("name")),
            value=text_value(param.get("default")),
            enabled=not param.get("deprecated"),
        )
        if location == "query":
            request.params.append(row)
        elif location == "header":
            request.headers.append(row)
        elif location == "body":
            body_param = param

    content = _request_content(spec, operation, body_param)
    if content:
        content_type = next(iter(content))
        _apply_body(request, content_type, content[content_type] or {})

    request.auth = auth_from_headers(request.headers)
    return request


def _request_content(
    spec: dict[str, Any],
    operation: dict[str, Any],
    body_param: dict[str, Any] | None,
) -> dict[str, Any]:
    """Return the request body ``content`` map in OpenAPI 3 shape.

    Swagger 2 describes the body as an ``in: body`` parameter plus a
    ``consumes`` list; it is translated into a single-entry content map.
    """
    request_body = operation.get("requestBody")
    if isinstance(request_body, dict) and isinstance(request_body.get("content"), dict):
        return request_body["content"]

    if body_param is not None:
        consumes = operation.get("consumes") or spec.get("consumes") or ["application/json"]
        return {consumes[0]: {"schema": body_param.get("schema")}}
    return {}


def _apply_body(request: Request, content_type: str, media: dict[str, Any]) -> None:
    """Set the Content-Type header, body type, and example body on *request*."""
    request.headers.append(KeyValue(name="Content-Type", value=content_type))

    if "application/json" in content_type:
        request.body_type = BodyType.JSON
        if media.get("schema"):
            request.body = generate_example(media["schema"])
        elif "example" in media:
            example = media["example"]
            request.body = (
                json.dumps(example, indent=2, ensure_ascii=False)
                if isinstance(example, (dict, list))
                else text_value(example)
            )
    elif "application/x-www-form-urlencoded" in content_type:
        request.body_type = BodyType.FORM_URLENCODED
    elif "multipart/form-data" in content_type:
        request.body_type = BodyType.FORM_DATA


def generate_example(schema: Any) -> str:
    """Synthesise a pretty-printed JSON example from a schema's top-level properties.

    Strings, numbers, and booleans use the property's ``example`` or
    ``default`` and otherwise a placeholder (``"string"``, ``0``, ``false``);
    arrays and objects become empty containers. Properties of any other type
    are omitted.

    Example::

        >>> print(generate_example({"properties": {"id": {"type": "integer"}}}))
        {
          "id": 0
        }
    """
    example: dict[str, Any] = {}
    properties = schema.get("properties") if isinstance(schema, dict) else None
    if isinstance(properties, dict):
        for name, prop in properties.items():
            if not isinstance(prop, dict):
                continue
            prop_type = prop.get("type")
            if prop_type == "string":
                example[name] = prop.get("example") or prop.get("default") or "string"
            elif prop_type in ("number", "integer"):
                example[name] = prop.get("example") or prop.get("default") or 0
            elif prop_type == "boolean":
                example[name] = prop.get("example") or prop.get("default") or False
            elif prop_type == "array":
                example[name] = []
            elif prop_type == "object":
                example[name] = {}

    try:
        return json.dumps(example, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return "{}"
