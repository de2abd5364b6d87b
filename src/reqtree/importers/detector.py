"""Classify an import source so the right importer can be chosen.

Detection is a priority-ordered match on structural signatures; the first
signature that matches wins:

1. ``info`` and ``item``                       -> Postman collection
2. ``_type == "export"`` and ``resources``     -> Insomnia export
3. ``swagger`` or ``openapi``                  -> Swagger / OpenAPI
4. ``log.entries``                             -> HAR capture
5. ``.yaml`` / ``.yml`` file extension         -> YAML (content not inspected)
6. anything else                               -> unknown

A document that carries none of the signatures is reported as unknown
rather than imported by guesswork.
"""

from __future__ import annotations

from typing import Any

from reqtree.models import SourceFormat

_YAML_SUFFIXES = (".yaml", ".yml")


def detect_format(data: Any, file_name: str = "") -> SourceFormat:
    """Return the :class:`~reqtree.models.SourceFormat` of an import source.

    Args:
        data: The parsed document (normally a dict) or raw text when the
            content could not be parsed as JSON.
        file_name: Name of the file the content came from. Only the
            extension is consulted, and only after every structural
            signature has failed.

    Returns:
        The detected format. Detection is a pure function of its inputs.
    """
    if isinstance(data, dict):
        if _has(data, "info") and _has(data, "item"):
            return SourceFormat.POSTMAN
        if data.get("_type") == "export" and _has(data, "resources"):
            return SourceFormat.INSOMNIA
        if _has(data, "swagger") or _has(data, "openapi"):
            return SourceFormat.SWAGGER
        log = data.get("log")
        if isinstance(log, dict) and _has(log, "entries"):
            return SourceFormat.HAR

    if file_name.lower().endswith(_YAML_SUFFIXES):
        return SourceFormat.YAML
    return SourceFormat.UNKNOWN


def _has(data: dict[str, Any], key: str) -> bool:
    """Return True when *key* holds a value that counts as present.

    Empty containers count as present (an export with no requests is still
    an export); missing keys, null, false, zero and the empty string do not.
    """
    value = data.get(key)
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    return True
