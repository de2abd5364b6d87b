"""Resolve ``$ref`` JSON Reference pointers in Swagger/OpenAPI documents.

Request body schemas usually point at shared definitions
(``{"$ref": "#/components/schemas/Pet"}`` in OpenAPI 3,
``#/definitions/Pet`` in Swagger 2). The Swagger importer synthesises
example bodies from schema properties, so it resolves these pointers first.

Only internal references (``#/...``) are followed. Circular references are
left unresolved at the cycle point to keep the traversal finite.
"""

from __future__ import annotations

import copy
from typing import Any

from reqtree.exceptions import ImportParseError


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *document* with internal ``$ref`` pointers inlined.

    Raises:
        ImportParseError: If a pointer targets a missing location or is an
            external (non-``#/``) reference.
    """
    root = copy.deepcopy(document)
    return _deep_resolve(root, root, seen=None)


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Follow one RFC 6901 pointer such as ``#/definitions/Pet`` through *root*."""
    if not ref.startswith("#/"):
        raise ImportParseError(f"External $ref not supported: {ref}")

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise ImportParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise ImportParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise ImportParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )

    return current


def _deep_resolve(obj: Any, root: dict[str, Any], seen: set[str] | None = None) -> Any:
    """Recursively inline ``$ref`` pointers in *obj*.

    ``seen`` holds the pointers on the current resolution stack; a new set
    is built per branch so sibling references do not block each other.
    """
    if seen is None:
        seen = set()

    if isinstance(obj, dict):
        if "$ref" in obj and isinstance(obj["$ref"], str):
            ref = obj["$ref"]
            if ref in seen:
                return obj
            seen = seen | {ref}
            return _deep_resolve(_resolve_ref(ref, root), root, seen)
        return {key: _deep_resolve(value, root, seen) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, seen) for item in obj]

    return obj
