"""Tree commands -- view and edit the stored collection forest.

Items are addressed by id alone; the command looks up the item's kind and
container path before calling the repository's mutation API. Use
``reqtree show --ids`` to see the ids.
"""

from __future__ import annotations

from typing import Optional

import typer

from reqtree.commands import container_path, finish, get_config, locate, open_repository
from reqtree.exceptions import InvalidUsageError, NotFoundError, ReqtreeError
from reqtree.models import ItemType, Request
from reqtree.output import get_output, success, warning


def show_command(
    ctx: typer.Context,
    ids: bool = typer.Option(False, "--ids", help="Show item ids (rich output)."),
    check: bool = typer.Option(
        False, "--check", help="Verify that stored paths match the tree."
    ),
) -> None:
    """Show every collection as a tree.

    Example::

        reqtree show --ids
        reqtree show --json
    """
    from reqtree.tree.paths import find_path_violations

    repo = open_repository(ctx)
    get_output().print_collections(repo.collections, show_ids=ids)
    repo.close()

    if check:
        violations = find_path_violations(repo.collections)
        if violations:
            raise ReqtreeError(
                f"{len(violations)} items have inconsistent paths: {', '.join(violations)}"
            )
        success("All stored paths are consistent")


def add_collection_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Collection name."),
) -> None:
    """Create an empty collection.

    Example::

        reqtree add-collection "Payments API"
    """
    repo = open_repository(ctx)
    collection = repo.add_folder(name or get_config(ctx).default_collection_name)
    finish(repo)
    success(f"Created collection '{collection.name}' ({collection.id})")


def add_folder_command(
    ctx: typer.Context,
    collection_id: str = typer.Argument(help="Id of the collection to add the folder to."),
    name: str = typer.Argument("New Folder", help="Folder name."),
) -> None:
    """Create an empty folder directly under a collection.

    Example::

        reqtree add-folder <collection-id> Users
    """
    repo = open_repository(ctx)
    folder = repo.add_subfolder(collection_id, name)
    finish(repo)
    if folder is None:
        raise NotFoundError(f"No collection with id {collection_id}")
    success(f"Created folder '{folder.name}' ({folder.id})")


def add_request_command(
    ctx: typer.Context,
    container_id: str = typer.Argument(help="Collection or folder id."),
    name: Optional[str] = typer.Option(None, "--name", help="Request name."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    url: str = typer.Option("", "--url", help="Request URL."),
) -> None:
    """Add a request to a collection or folder.

    Example::

        reqtree add-request <folder-id> --name "List users" --url https://api.example.com/users
    """
    repo = open_repository(ctx)
    request = Request(
        name=name or get_config(ctx).default_request_name, method=method, url=url
    )
    added = repo.add_request(container_path(repo, container_id), request)
    finish(repo)
    if added is None:
        raise InvalidUsageError(f"Cannot add a request to {container_id}")
    success(f"Added {added.method} '{added.name}' ({added.id})")


def rename_command(
    ctx: typer.Context,
    item_id: str = typer.Argument(help="Id of the collection, folder or request."),
    new_name: str = typer.Argument(help="New name."),
) -> None:
    """Rename a collection, folder or request.

    Example::

        reqtree rename <id> "Create user"
    """
    repo = open_repository(ctx)
    item_type, path = locate(repo, item_id)
    renamed = repo.rename_item(item_id, new_name, item_type, path)
    finish(repo)
    if not renamed:
        raise NotFoundError(f"No {item_type.value} with id {item_id}")
    success(f"Renamed {item_type.value} to '{new_name}'")


def delete_command(
    ctx: typer.Context,
    item_id: str = typer.Argument(help="Id of the collection, folder or request."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Delete an item and everything below it.

    Collections and folders ask for confirmation unless ``--force`` is set.

    Example::

        reqtree delete <id> --force
    """
    repo = open_repository(ctx)
    item_type, path = locate(repo, item_id)
    if item_type != ItemType.REQUEST and not force:
        confirm = typer.confirm(f"Delete this {item_type.value} and all of its contents?")
        if not confirm:
            warning("Aborted.")
            repo.close()
            raise typer.Exit()

    deleted = repo.delete_item(item_id, item_type, path)
    finish(repo)
    if not deleted:
        raise NotFoundError(f"No {item_type.value} with id {item_id}")
    success(f"Deleted {item_type.value} {item_id}")


def move_command(
    ctx: typer.Context,
    item_id: str = typer.Argument(help="Id of the folder or request to move."),
    target_id: str = typer.Argument(help="Id of the destination collection or folder."),
) -> None:
    """Move a folder or request to another collection or folder.

    Folders can only be moved to a collection.

    Example::

        reqtree move <request-id> <folder-id>
    """
    repo = open_repository(ctx)
    item_type, source_path = locate(repo, item_id)
    if item_type == ItemType.COLLECTION:
        raise InvalidUsageError("Collections cannot be moved")
    target_path = container_path(repo, target_id)

    moved = repo.move_item(item_id, item_type, source_path, target_path)
    finish(repo)
    if not moved:
        raise InvalidUsageError(f"Cannot move {item_type.value} {item_id} into {target_id}")
    success(f"Moved {item_type.value} {item_id}")


def duplicate_command(
    ctx: typer.Context,
    request_id: str = typer.Argument(help="Id of the request to duplicate."),
) -> None:
    """Duplicate a request next to the original.

    Example::

        reqtree duplicate <request-id>
    """
    repo = open_repository(ctx)
    item_type, path = locate(repo, request_id)
    if item_type != ItemType.REQUEST:
        raise InvalidUsageError(f"{request_id} is a {item_type.value}, not a request")

    copy = repo.duplicate_request(request_id, path)
    finish(repo)
    if copy is None:
        raise NotFoundError(f"No request with id {request_id}")
    success(f"Created '{copy.name}' ({copy.id})")
