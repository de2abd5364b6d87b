"""Whole-snapshot persistence for the collection forest.

The tree repository never writes deltas: every save replaces the stored
forest with a complete snapshot, and every load returns the complete
forest. Backends report failures through :class:`~reqtree.models.LoadResult`
and :class:`~reqtree.models.SaveResult` instead of raising, so a failing
disk never interrupts an edit.

Two backends are provided:

* :class:`JsonFileStorage` -- one JSON file, written atomically.
* :class:`MemoryStorage` -- keeps the last snapshot in memory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from reqtree.config import atomic_write
from reqtree.models import Collection, LoadResult, SaveResult

logger = logging.getLogger(__name__)

_SNAPSHOT_ADAPTER = TypeAdapter(list[Collection])


class Storage(Protocol):
    """Interface the tree repository expects from a persistence backend."""

    def load(self) -> LoadResult:
        """Return the stored forest (an empty list when nothing is stored yet)."""
        ...

    def save(self, collections: Sequence[Collection]) -> SaveResult:
        """Replace the stored forest with *collections*."""
        ...


def dump_snapshot(collections: Sequence[Collection]) -> str:
    """Serialise a forest to the JSON snapshot format (camelCase keys)."""
    data = [c.model_dump(mode="json", by_alias=True) for c in collections]
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def parse_snapshot(text: str) -> list[Collection]:
    """Deserialise a JSON snapshot produced by :func:`dump_snapshot`.

    Raises:
        json.JSONDecodeError: If *text* is not JSON.
        pydantic.ValidationError: If the JSON does not describe a forest.
    """
    return _SNAPSHOT_ADAPTER.validate_python(json.loads(text))


class JsonFileStorage:
    """Store the forest as a single JSON file.

    Args:
        path: The snapshot file. Parent directories are created on save.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """The snapshot file location."""
        return self._path

    def load(self) -> LoadResult:
        if not self._path.is_file():
            return LoadResult(success=True, collections=[])
        try:
            collections = parse_snapshot(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Failed to load collections from %s: %s", self._path, exc)
            return LoadResult(success=False, error=str(exc))
        return LoadResult(success=True, collections=collections)

    def save(self, collections: Sequence[Collection]) -> SaveResult:
        try:
            atomic_write(self._path, dump_snapshot(collections))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Failed to save collections to %s: %s", self._path, exc)
            return SaveResult(success=False, error=str(exc))
        return SaveResult(success=True)


class MemoryStorage:
    """Keep the most recent snapshot in memory.

    Useful for embedding the repository without a disk and in tests, where
    :attr:`saves` records how many snapshots were written.

    Args:
        collections: Optional initial forest returned by :meth:`load`.
    """

    def __init__(self, collections: Optional[Sequence[Collection]] = None) -> None:
        self._snapshot: list[Collection] = [
            c.model_copy(deep=True) for c in (collections or [])
        ]
        self.saves = 0

    @property
    def snapshot(self) -> list[Collection]:
        """The last saved forest."""
        return self._snapshot

    def load(self) -> LoadResult:
        return LoadResult(
            success=True,
            collections=[c.model_copy(deep=True) for c in self._snapshot],
        )

    def save(self, collections: Sequence[Collection]) -> SaveResult:
        self._snapshot = [c.model_copy(deep=True) for c in collections]
        self.saves += 1
        return SaveResult(success=True)
