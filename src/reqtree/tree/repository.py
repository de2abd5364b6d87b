"""The authoritative in-memory collection forest and its mutation API.

:class:`TreeRepository` owns the list of collections that every other part
of the program reads. Edits follow two rules:

* Every applied mutation replaces :attr:`TreeRepository.collections` with a
  new list object, so observers can detect a change by identity. Folders and
  requests already in the tree are edited in place and keep their identity.
* After every applied mutation a deep copy of the forest is handed to the
  storage backend on a single background thread. Saves run in submission
  order and the caller never waits for them; :meth:`TreeRepository.flush`
  blocks until the queue is drained.

Operations that cannot be applied (an unknown id, a path that resolves to
nothing) leave the forest untouched, log a warning, and return ``None`` or
``False``. Nothing here raises for a bad address.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Optional, Sequence

from reqtree.models import Collection, Folder, ItemType, Request, SaveResult, new_id
from reqtree.storage import Storage
from reqtree.tree.paths import (
    Container,
    find_collection,
    find_first_request,
    find_request_by_id,
    resolve_container,
    update_request_in_collections,
)

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "New Collection"
DEFAULT_FOLDER_NAME = "New Folder"
COPY_SUFFIX = " (Copy)"


class TreeRepository:
    """Hold the forest, apply edits to it, and persist snapshots.

    Args:
        storage: Backend that receives whole-forest snapshots.
        collections: Optional initial forest. Use :meth:`load` to start from
            what the backend holds instead.
        autosave: When False, mutations are not persisted automatically and
            :meth:`save` must be called explicitly.
    """

    def __init__(
        self,
        storage: Storage,
        collections: Optional[Sequence[Collection]] = None,
        autosave: bool = True,
    ) -> None:
        self._storage = storage
        self._autosave = autosave
        self.collections: list[Collection] = list(collections or [])
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: list[Future] = []
        self._lock = Lock()

    # --- Lifecycle ---

    def load(self) -> bool:
        """Replace the forest with the backend's stored snapshot.

        Returns:
            True on success. On failure the current forest is kept.
        """
        result = self._storage.load()
        if not result.success:
            logger.warning("Could not load collections: %s", result.error)
            return False
        self.collections = list(result.collections or [])
        logger.debug("Loaded %d collections", len(self.collections))
        return True

    def save(self) -> Future:
        """Queue a snapshot of the current forest for the backend.

        Returns:
            A future resolving to the backend's :class:`~reqtree.models.SaveResult`.
        """
        snapshot = [c.model_copy(deep=True) for c in self.collections]
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="reqtree-save"
                )
            future = self._executor.submit(self._storage.save, snapshot)
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        future.add_done_callback(_log_save_outcome)
        return future

    def flush(self) -> bool:
        """Block until every queued save has finished.

        Returns:
            True when all of them succeeded.
        """
        with self._lock:
            pending, self._pending = self._pending, []
        return all(
            future.exception() is None and future.result().success for future in pending
        )

    def close(self) -> bool:
        """Flush pending saves and stop the background writer."""
        ok = self.flush()
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        return ok

    def __enter__(self) -> TreeRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _commit(self, collections: list[Collection]) -> None:
        self.collections = collections
        if self._autosave:
            self.save()

    # --- Read helpers ---

    def find_request(self, request_id: str) -> Optional[Request]:
        """Return the request with *request_id*, or None."""
        return find_request_by_id(self.collections, request_id)

    def first_request(self) -> Optional[Request]:
        """Return the first request in the forest, or None when there is none."""
        return find_first_request(self.collections)

    def find_collection(self, collection_id: str) -> Optional[Collection]:
        """Return the top-level collection with *collection_id*, or None."""
        return find_collection(self.collections, collection_id)

    # --- Mutations ---

    def add_folder(self, name: str = DEFAULT_COLLECTION_NAME) -> Collection:
        """Create a new, empty top-level collection and return it."""
        collection = Collection(name=name)
        self._commit([*self.collections, collection])
        return collection

    def add_collection(self, collection: Collection) -> Collection:
        """Append an already-built collection (typically a fresh import)."""
        self._commit([*self.collections, collection])
        return collection

    def add_subfolder(
        self, collection_id: str, name: str = DEFAULT_FOLDER_NAME
    ) -> Optional[Folder]:
        """Create an empty folder directly under a collection.

        Returns:
            The new folder, or None when the collection does not exist.
        """
        collection = self.find_collection(collection_id)
        if collection is None:
            logger.warning("Cannot add folder: collection %s not found", collection_id)
            return None
        folder = Folder(name=name, parent_path=[collection_id])
        collection.items.append(folder)
        self._commit(list(self.collections))
        return folder

    def add_request(
        self, folder_path: Sequence[str], request: Optional[Request] = None
    ) -> Optional[Request]:
        """Insert a request into the container addressed by *folder_path*.

        Args:
            folder_path: ``[collection_id]`` or ``[collection_id, folder_id]``.
            request: The request to insert. A default ``GET`` request named
                ``New Request`` is created when omitted. Its ``folder_path``
                is overwritten with *folder_path*.

        Returns:
            The inserted request, or None when the path does not resolve.
        """
        container = resolve_container(self.collections, folder_path)
        if container is None:
            logger.warning("Cannot add request: path %s does not resolve", list(folder_path))
            return None
        if request is None:
            request = Request()
        request.folder_path = list(folder_path)
        container.items.append(request)
        self._commit(list(self.collections))
        return request

    def rename_item(
        self,
        item_id: str,
        new_name: str,
        item_type: ItemType,
        path: Sequence[str] = (),
    ) -> bool:
        """Rename a collection, folder or request.

        Collections are looked up at the top level and *path* is ignored;
        folders and requests are looked up in the container *path* addresses.
        """
        if item_type == ItemType.COLLECTION:
            node = self.find_collection(item_id)
        else:
            node = self._child(item_id, item_type, path)
        if node is None:
            logger.warning("Cannot rename: %s %s not found", item_type.value, item_id)
            return False
        node.name = new_name
        self._commit(list(self.collections))
        return True

    def delete_item(self, item_id: str, item_type: ItemType, path: Sequence[str] = ()) -> bool:
        """Remove a node and, with it, everything below it.

        A collection is removed from the top level. A folder or request is
        removed only from the container *path* addresses.
        """
        if item_type == ItemType.COLLECTION:
            remaining = [c for c in self.collections if c.id != item_id]
            if len(remaining) == len(self.collections):
                logger.warning("Cannot delete: collection %s not found", item_id)
                return False
            self._commit(remaining)
            return True

        container = resolve_container(self.collections, path)
        node = self._child(item_id, item_type, path)
        if container is None or node is None:
            logger.warning("Cannot delete: %s %s not found at %s", item_type.value, item_id, list(path))
            return False
        container.items.remove(node)
        self._commit(list(self.collections))
        return True

    def move_item(
        self,
        item_id: str,
        item_type: ItemType,
        source_path: Sequence[str],
        target_path: Sequence[str],
    ) -> bool:
        """Move a folder or request between containers.

        The same object is re-inserted at the end of the target container
        and its path field is rewritten. A moved folder also re-stamps the
        requests it holds. Folders may only move to a collection root, since
        folders do not nest.

        Returns:
            False, leaving the forest unchanged, when either path is empty or
            does not resolve, the item is not in the source container, or the
            move would nest a folder inside a folder.
        """
        if not source_path or not target_path:
            logger.warning("Cannot move %s: source and target paths are required", item_id)
            return False
        if item_type == ItemType.COLLECTION:
            logger.warning("Cannot move collection %s: collections are always top-level", item_id)
            return False
        if item_type == ItemType.FOLDER and len(target_path) != 1:
            logger.warning("Cannot move folder %s into another folder", item_id)
            return False

        source = resolve_container(self.collections, source_path)
        target = resolve_container(self.collections, target_path)
        node = self._child(item_id, item_type, source_path)
        if source is None or target is None or node is None:
            logger.warning(
                "Cannot move %s %s from %s to %s",
                item_type.value, item_id, list(source_path), list(target_path),
            )
            return False

        source.items.remove(node)
        target.items.append(node)
        if isinstance(node, Request):
            node.folder_path = list(target_path)
        else:
            node.parent_path = list(target_path)
            for request in node.requests():
                request.folder_path = [*target_path, node.id]
        self._commit(list(self.collections))
        return True

    def duplicate_request(self, request_id: str, path: Sequence[str]) -> Optional[Request]:
        """Insert a deep copy of a request into the container *path* addresses.

        The copy gets a fresh id, the name suffix ``" (Copy)"`` and
        ``folder_path = path``. It shares no mutable state with the original.

        Returns:
            The copy, or None when the source request or *path* is not found.
        """
        source = self.find_request(request_id)
        if source is None:
            logger.warning("Cannot duplicate: request %s not found", request_id)
            return None
        container = resolve_container(self.collections, path)
        if container is None:
            logger.warning("Cannot duplicate: path %s does not resolve", list(path))
            return None

        copy = source.model_copy(deep=True)
        copy.id = new_id()
        copy.name = f"{source.name}{COPY_SUFFIX}"
        copy.folder_path = list(path)
        container.items.append(copy)
        self._commit(list(self.collections))
        return copy

    def update_request(self, request: Request) -> bool:
        """Replace the stored request that has ``request.id``, keeping its position.

        The replacement's ``folder_path`` is rewritten to where it is stored.
        """
        if self.find_request(request.id) is None:
            logger.warning("Cannot update: request %s not found", request.id)
            return False
        self._commit(update_request_in_collections(self.collections, request))
        return True

    # --- Internals ---

    def _child(
        self, item_id: str, item_type: ItemType, path: Sequence[str]
    ) -> Optional[Folder | Request]:
        container: Optional[Container] = resolve_container(self.collections, path)
        if container is None:
            return None
        wanted = Request if item_type == ItemType.REQUEST else Folder
        for item in container.items:
            if item.id == item_id and isinstance(item, wanted):
                return item
        return None


def _log_save_outcome(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Saving collections raised: %s", exc)
        return
    result: SaveResult = future.result()
    if not result.success:
        logger.warning("Saving collections failed: %s", result.error)
