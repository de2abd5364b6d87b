"""Convert an Insomnia export (``_type: export``) into a canonical collection.

Insomnia exports are flat: every resource sits in one ``resources`` array
and points at its container through ``parentId``. The tree is rebuilt in
two passes:

1. Classify resources. Requests are kept for later; each request group
   becomes a :class:`~reqtree.models.Folder` right away so its new id is
   known before any request refers to it.
2. Place requests. A request whose ``parentId`` names a known group goes
   into that folder with ``folder_path == [collection, folder]``; any other
   request lands at the collection root.

Only one level of grouping is rebuilt. A group nested inside another group
is not attached to the tree, and requests that point at such a group are
placed at the collection root so no request is lost and no path refers to
a folder outside the tree.
"""

from __future__ import annotations

import logging
from typing import Any

from reqtree.importers.common import body_type_from_mime, text_value
from reqtree.models import Collection, Folder, KeyValue, Request

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Imported Insomnia Collection"


def import_insomnia(export: dict[str, Any]) -> Collection:
    """Build a :class:`~reqtree.models.Collection` from an Insomnia export dict.

    Args:
        export: The parsed Insomnia export document.

    Returns:
        A new collection. Folders appear after the root-level requests, in
        the order their groups appear in the export.
    """
    collection = Collection(name=DEFAULT_COLLECTION_NAME)
    resources = export.get("resources")
    if not isinstance(resources, list):
        return collection

    pending_requests: list[dict[str, Any]] = []
    groups: dict[str, Folder] = {}

    for resource in resources:
        if not isinstance(resource, dict):
            continue
        resource_type = resource.get("_type")
        if resource_type == "request":
            pending_requests.append(resource)
        elif resource_type == "request_group":
            parent = groups.get(resource.get("parentId") or "")
            parent_path = [collection.id]
            if parent is not None:
                parent_path.append(parent.id)
            groups[text_value(resource.get("_id"))] = Folder(
                name=text_value(resource.get("name")) or "Unnamed Folder",
                parent_path=parent_path,
            )

    for resource in pending_requests:
        folder = groups.get(resource.get("parentId") or "")
        if folder is not None and len(folder.parent_path) != 1:
            folder = None
        folder_path = [collection.id] if folder is None else [collection.id, folder.id]
        request = _convert_request(resource, folder_path)
        if folder is None:
            collection.items.append(request)
        else:
            folder.items.append(request)

    for folder in groups.values():
        if len(folder.parent_path) == 1:
            collection.items.append(folder)
        else:
            logger.debug(
                "Skipping nested Insomnia group '%s' (only one folder level is rebuilt)",
                folder.name,
            )

    return collection


def _convert_request(resource: dict[str, Any], folder_path: list[str]) -> Request:
    body = resource.get("body") if isinstance(resource.get("body"), dict) else {}
    headers = resource.get("headers")
    return Request(
        name=text_value(resource.get("name")) or "Imported Request",
        method=text_value(resource.get("method")) or "GET",
        url=text_value(resource.get("url")),
        headers=[
            KeyValue(
                name=text_value(h.get("name")),
                value=text_value(h.get("value")),
                enabled=not h.get("disabled"),
            )
            for h in (headers if isinstance(headers, list) else [])
            if isinstance(h, dict)
        ],
        body=text_value(body.get("text")),
        body_type=body_type_from_mime(body.get("mimeType")),
        folder_path=folder_path,
    )
