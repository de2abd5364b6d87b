"""Built-in command groups and the helpers they share.

Every command that reads or edits the forest opens a
:class:`~reqtree.tree.repository.TreeRepository` over the JSON snapshot
selected by ``--storage`` / ``REQTREE_STORAGE`` / the config file, and
closes it before returning so that queued saves reach the disk.
"""

from __future__ import annotations

from typing import Optional

import typer

from reqtree.exceptions import InvalidUsageError, NotFoundError, StorageError
from reqtree.models import ItemType, ReqtreeConfig
from reqtree.tree.paths import locate_item
from reqtree.tree.repository import TreeRepository


def get_config(ctx: typer.Context) -> ReqtreeConfig:
    """Return the configuration loaded by the root callback (or load it now)."""
    from reqtree.config import load_config

    obj = ctx.ensure_object(dict)
    config = obj.get("config")
    if config is None:
        config = load_config()
        obj["config"] = config
    return config


def open_repository(ctx: typer.Context) -> TreeRepository:
    """Open and load the repository for the active snapshot file.

    Raises:
        StorageError: If the snapshot exists but cannot be read.
    """
    from reqtree.config import resolve_storage_path
    from reqtree.output import debug
    from reqtree.storage import JsonFileStorage

    obj = ctx.ensure_object(dict)
    path = resolve_storage_path(obj.get("storage"), get_config(ctx))
    debug(f"Using snapshot {path}")

    storage = JsonFileStorage(path)
    result = storage.load()
    if not result.success:
        raise StorageError(f"Cannot read collections from {path}: {result.error}")
    return TreeRepository(storage, result.collections)


def finish(repo: TreeRepository) -> None:
    """Close *repo*, raising if any queued save failed."""
    if not repo.close():
        raise StorageError("Failed to save collections (see log output with --verbose)")


def locate(repo: TreeRepository, item_id: str) -> tuple[ItemType, list[str]]:
    """Find any node by id.

    Raises:
        NotFoundError: If no collection, folder or request has *item_id*.
    """
    found = locate_item(repo.collections, item_id)
    if found is None:
        raise NotFoundError(f"No item with id {item_id}")
    return found


def container_path(repo: TreeRepository, container_id: Optional[str]) -> list[str]:
    """Turn a collection or folder id into the path that addresses it.

    Raises:
        InvalidUsageError: If *container_id* is missing or names a request.
        NotFoundError: If *container_id* does not exist.
    """
    if not container_id:
        raise InvalidUsageError("A collection or folder id is required")
    item_type, path = locate(repo, container_id)
    if item_type == ItemType.REQUEST:
        raise InvalidUsageError(f"{container_id} is a request, not a collection or folder")
    return [*path, container_id]
