"""Read import sources from a URL, a local file, or stdin.

The importers never perform I/O themselves; this module fetches the raw
text and hands it over together with a file name, which detection uses to
recognise YAML by extension.

* :func:`read_source` -- Read a source given as a URL, a path, or ``-``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from reqtree.exceptions import ImportParseError

STDIN_NAME = "stdin"


def read_source(source: str) -> tuple[str, str]:
    """Read an import source.

    Args:
        source: An ``http``/``https`` URL, a file path, or ``-`` for stdin.

    Returns:
        A ``(content, file_name)`` pair. For URLs the file name is the last
        path segment, or a ``.json``/``.yaml`` name derived from the response
        content type when the URL does not end in one.

    Raises:
        ImportParseError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _read_stdin(), STDIN_NAME
    if source.startswith(("http://", "https://")):
        return _read_url(source)
    return _read_file(source)


def _read_stdin() -> str:
    try:
        content = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ImportParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ImportParseError("No input received from stdin")
    return content


def _read_url(url: str) -> tuple[str, str]:
    """Fetch *url*, following redirects.

    Raises:
        ImportParseError: On an HTTP error status or a transport failure.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ImportParseError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ImportParseError(f"Failed to fetch {url}: {exc}") from exc

    content = response.text
    if not content.strip():
        raise ImportParseError(f"Empty response from {url}")

    file_name = urlsplit(url).path.rsplit("/", 1)[-1]
    if not file_name.lower().endswith((".json", ".yaml", ".yml", ".har")):
        content_type = response.headers.get("content-type", "")
        if "yaml" in content_type or "yml" in content_type:
            file_name = f"{file_name or 'download'}.yaml"
        elif "json" in content_type:
            file_name = f"{file_name or 'download'}.json"
    return content, file_name


def _read_file(path: str) -> tuple[str, str]:
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ImportParseError(f"File not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ImportParseError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise ImportParseError(f"File is empty: {path}")
    return content, file_path.name
