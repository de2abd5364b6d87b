"""Stateless lookups over a forest of collections.

A *path* addresses a container by its ancestor-id chain: ``[collection_id]``
is the root of a collection and ``[collection_id, folder_id]`` is a folder
inside it. Requests and folders store the path of the container that holds
them (``folder_path`` / ``parent_path``); these helpers read that structure
but never rely on the stored paths being correct, except
:func:`is_request_in_collection`, which is defined in terms of them.

Request lookups visit each collection's root requests first and then the
requests of its folders, one level deep, collection by collection.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Union

from reqtree.models import Collection, Folder, ItemType, Request

Container = Union[Collection, Folder]


def _iter_requests_in_lookup_order(collections: Sequence[Collection]) -> Iterator[Request]:
    for collection in collections:
        yield from collection.requests()
        for folder in collection.folders():
            yield from folder.requests()


def find_request_by_id(collections: Sequence[Collection], request_id: str) -> Optional[Request]:
    """Return the request with *request_id*, or None if it is not in the forest."""
    for request in _iter_requests_in_lookup_order(collections):
        if request.id == request_id:
            return request
    return None


def find_first_request(collections: Sequence[Collection]) -> Optional[Request]:
    """Return the first request in lookup order (used to pick a default active request)."""
    return next(_iter_requests_in_lookup_order(collections), None)


def is_request_in_collection(request: Request, collection_id: str) -> bool:
    """Return True when *request* claims to belong to *collection_id*."""
    return bool(request.folder_path) and request.folder_path[0] == collection_id


def update_request_in_collections(
    collections: Sequence[Collection], request: Request
) -> list[Collection]:
    """Replace the stored request that has ``request.id`` with *request*.

    The returned list is a new object, but the collections and folders in
    it are the same objects as before and are updated in place. The
    replaced request keeps its position, and its ``folder_path`` is
    rewritten to the address of the container it lands in. When no request
    matches, the forest is returned unchanged (as a new list).
    """
    updated = list(collections)
    for collection in updated:
        if _replace_request(collection, request, [collection.id]):
            break
        if any(
            _replace_request(folder, request, [collection.id, folder.id])
            for folder in collection.folders()
        ):
            break
    return updated


def _replace_request(container: Container, request: Request, path: list[str]) -> bool:
    for index, item in enumerate(container.items):
        if isinstance(item, Request) and item.id == request.id:
            request.folder_path = path
            container.items[index] = request
            return True
    return False


def find_collection(collections: Sequence[Collection], collection_id: str) -> Optional[Collection]:
    """Return the top-level collection with *collection_id*, or None."""
    for collection in collections:
        if collection.id == collection_id:
            return collection
    return None


def resolve_container(
    collections: Sequence[Collection], path: Sequence[str]
) -> Optional[Container]:
    """Return the container addressed by *path*.

    Args:
        collections: The forest to search.
        path: ``[collection_id]`` or ``[collection_id, folder_id]``.

    Returns:
        The collection or folder, or None when the path is empty, longer
        than two ids, or names something that does not exist.
    """
    if not path or len(path) > 2:
        return None
    collection = find_collection(collections, path[0])
    if collection is None or len(path) == 1:
        return collection
    for folder in collection.folders():
        if folder.id == path[1]:
            return folder
    return None


def compute_paths(collections: Sequence[Collection]) -> dict[str, list[str]]:
    """Recompute every node's ancestor-id chain by walking from the roots.

    Returns:
        A mapping from node id to its true path. Collections map to ``[]``.
    """
    paths: dict[str, list[str]] = {}

    def walk(container: Container, path: list[str]) -> None:
        for item in container.items:
            paths[item.id] = list(path)
            if isinstance(item, Folder):
                walk(item, [*path, item.id])

    for collection in collections:
        paths[collection.id] = []
        walk(collection, [collection.id])
    return paths


def stored_path(node: Union[Collection, Folder, Request]) -> list[str]:
    """Return the path a node records for itself."""
    if isinstance(node, Request):
        return node.folder_path
    return node.parent_path


def find_path_violations(collections: Sequence[Collection]) -> list[str]:
    """Return the ids of nodes whose stored path disagrees with the tree.

    An empty list means every ``folder_path`` and ``parent_path`` in the
    forest matches the structure it sits in.
    """
    true_paths = compute_paths(collections)
    violations: list[str] = []

    def walk(node: Union[Collection, Folder, Request]) -> None:
        if stored_path(node) != true_paths[node.id]:
            violations.append(node.id)
        if not isinstance(node, Request):
            for child in node.items:
                walk(child)

    for collection in collections:
        walk(collection)
    return violations


def locate_item(
    collections: Sequence[Collection], item_id: str
) -> Optional[tuple[ItemType, list[str]]]:
    """Find any node by id and return how the mutation API addresses it.

    Returns:
        ``(item_type, path)`` where *path* is the address of the container
        holding the node (``[]`` for a collection), or None when the id is
        not in the forest.
    """
    for collection in collections:
        if collection.id == item_id:
            return ItemType.COLLECTION, []

    true_paths = compute_paths(collections)
    if item_id not in true_paths:
        return None

    path = true_paths[item_id]
    container = resolve_container(collections, path)
    if container is None:
        return None
    for item in container.items:
        if item.id == item_id:
            item_type = ItemType.REQUEST if isinstance(item, Request) else ItemType.FOLDER
            return item_type, path
    return None
