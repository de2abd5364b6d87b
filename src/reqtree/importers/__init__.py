"""Import third-party API collections into the canonical request tree.

This sub-package turns already-read text into canonical models. It never
touches the filesystem or the network; callers supply the content.

Typical usage::

    from reqtree.importers import import_from_curl, import_from_file

    collection = import_from_file(text, "petstore.json")   # Collection | None
    request = import_from_curl("curl https://example.com")  # Request | None

Sub-modules:

* :mod:`~reqtree.importers.detector` -- structural format detection.
* :mod:`~reqtree.importers.postman`, :mod:`~reqtree.importers.insomnia`,
  :mod:`~reqtree.importers.swagger`, :mod:`~reqtree.importers.har` -- one
  pure converter per collection format.
* :mod:`~reqtree.importers.curl` -- single cURL command parsing.
* :mod:`~reqtree.importers.resolver` -- ``$ref`` inlining for Swagger/OpenAPI.
* :mod:`~reqtree.importers.common` -- helpers shared by the converters.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

import yaml

from reqtree.exceptions import ImportParseError, ReqtreeError, UnknownFormatError
from reqtree.importers.curl import is_curl_command, parse_curl_command
from reqtree.importers.detector import detect_format
from reqtree.importers.har import import_har
from reqtree.importers.insomnia import import_insomnia
from reqtree.importers.postman import import_postman
from reqtree.importers.swagger import import_swagger
from reqtree.models import Collection, Request, SourceFormat

logger = logging.getLogger(__name__)

_IMPORTERS: dict[SourceFormat, Callable[[dict[str, Any]], Collection]] = {
    SourceFormat.POSTMAN: import_postman,
    SourceFormat.INSOMNIA: import_insomnia,
    SourceFormat.SWAGGER: import_swagger,
    SourceFormat.HAR: import_har,
}

__all__ = [
    "detect_format",
    "detect_source",
    "import_document",
    "import_from_curl",
    "import_from_file",
    "is_curl_command",
    "parse_content",
]


def import_from_curl(command: str) -> Optional[Request]:
    """Parse one cURL command into a request, or return None for blank input."""
    if not command or not command.strip():
        return None
    return parse_curl_command(command)


def import_from_file(file_content: str, file_name: str) -> Optional[Collection]:
    """Detect the format of *file_content* and import it as a new collection.

    Args:
        file_content: The full text of the file.
        file_name: The file's name; its extension selects the parser
            (``.yaml``/``.yml`` are read as YAML, everything else as JSON).

    Returns:
        The imported collection, or ``None`` when the content cannot be
        parsed or matches no known format. A failed import never returns a
        partial collection.
    """
    try:
        data = parse_content(file_content, file_name)
        return import_document(data, file_name)
    except ReqtreeError as exc:
        logger.warning("Could not import %s: %s", file_name or "input", exc)
    return None


def import_document(data: Any, file_name: str = "") -> Collection:
    """Import an already-parsed document, raising on failure.

    Args:
        data: The parsed document.
        file_name: Optional source file name, consulted by detection.

    Returns:
        The imported collection.

    Raises:
        UnknownFormatError: If the document matches no supported format.
        ImportParseError: If the document matches a format but its
            structure cannot be converted.
    """
    source_format = detect_format(data, file_name)
    importer = _IMPORTERS.get(source_format)
    if importer is None:
        if source_format == SourceFormat.YAML:
            raise UnknownFormatError(
                "YAML document does not look like an OpenAPI or collection export"
            )
        raise UnknownFormatError("Could not parse file: unknown collection format")

    logger.debug("Detected %s format for %s", source_format.value, file_name or "input")
    try:
        return importer(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ImportParseError(
            f"Malformed {source_format.value} document: {exc}"
        ) from exc


def detect_source(file_content: str, file_name: str = "") -> SourceFormat:
    """Detect the format of raw file content without importing it.

    Content that does not parse is classified from its raw text, which can
    only yield ``yaml`` (by extension) or ``unknown``.
    """
    try:
        data: Any = parse_content(file_content, file_name)
    except ImportParseError:
        data = file_content
    return detect_format(data, file_name)


def parse_content(content: str, file_name: str = "") -> Any:
    """Parse import content as JSON or YAML.

    ``.json`` files are parsed strictly as JSON and ``.yaml``/``.yml``
    files as YAML. Without a recognised extension JSON is tried first, then
    YAML, since valid JSON is also valid YAML but JSON parsing is stricter.

    Raises:
        ImportParseError: If the content is empty or cannot be parsed.
    """
    if not content or not content.strip():
        raise ImportParseError("Import content is empty")

    lowered = file_name.lower()
    is_yaml = lowered.endswith((".yaml", ".yml"))

    json_error: Exception | None = None
    if not is_yaml:
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            if lowered.endswith(".json"):
                raise ImportParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse content as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ImportParseError(msg) from exc
