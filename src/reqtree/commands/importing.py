"""Import commands -- bring external collections into the forest.

* ``reqtree import SOURCE`` -- import a Postman, Insomnia, Swagger/OpenAPI
  or HAR document from a file, a URL, or stdin as a new collection.
* ``reqtree curl COMMAND`` -- parse a cURL command and print it, or add it
  to a collection or folder with ``--into``.
* ``reqtree detect SOURCE`` -- report the detected format without
  importing anything.
"""

from __future__ import annotations

import sys
from typing import Optional

import typer

from reqtree.commands import container_path, finish, open_repository
from reqtree.exceptions import InvalidUsageError
from reqtree.output import OutputFormat, get_output, info, success, suggest


def import_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="File path, http(s) URL, or '-' for stdin."),
    name: Optional[str] = typer.Option(
        None, "--name", help="Rename the imported collection."
    ),
) -> None:
    """Import a collection file as a new collection.

    The format is detected from the document's structure. YAML input is
    accepted for Swagger/OpenAPI documents and for any other format
    exported as YAML.

    Example::

        reqtree import petstore.yaml
        reqtree import https://example.com/openapi.json --name Petstore
        cat capture.har | reqtree import -
    """
    from reqtree.importers import import_document, parse_content
    from reqtree.loader import read_source

    content, file_name = read_source(source)
    collection = import_document(parse_content(content, file_name), file_name)
    if name:
        collection.name = name

    repo = open_repository(ctx)
    repo.add_collection(collection)
    finish(repo)

    requests = sum(1 for _ in collection.iter_requests())
    success(
        f"Imported '{collection.name}' "
        f"({len(collection.folders())} folders, {requests} requests)"
    )
    get_output().print_node(collection)
    suggest("reqtree show")


def curl_command(
    ctx: typer.Context,
    command: str = typer.Argument(help="The cURL command, or '-' to read it from stdin."),
    into: Optional[str] = typer.Option(
        None, "--into", help="Collection or folder id to add the request to."
    ),
    name: Optional[str] = typer.Option(None, "--name", help="Request name."),
) -> None:
    """Parse a cURL command into a request.

    Without ``--into`` the parsed request is printed as JSON and nothing is
    stored.

    Example::

        reqtree curl "curl -X POST https://api.example.com/users -d '{}'"
        reqtree curl --into <collection-id> "curl https://example.com/health"
    """
    from reqtree.importers import import_from_curl

    if command == "-":
        command = sys.stdin.read()
    request = import_from_curl(command)
    if request is None:
        raise InvalidUsageError("Empty cURL command")
    if name:
        request.name = name

    if into is None:
        get_output().print_json(request.model_dump(mode="json", by_alias=True))
        return

    repo = open_repository(ctx)
    added = repo.add_request(container_path(repo, into), request)
    finish(repo)
    if added is None:
        raise InvalidUsageError(f"Cannot add a request to {into}")
    success(f"Added {added.method} '{added.name}' ({added.id})")


def detect_command(
    source: str = typer.Argument(help="File path, http(s) URL, or '-' for stdin."),
) -> None:
    """Print the detected format of a collection file.

    Prints one of ``postman``, ``insomnia``, ``swagger``, ``har``, ``yaml``
    (YAML content that matches no format) or ``unknown``.

    Example::

        reqtree detect export.json
    """
    from reqtree.importers import detect_source
    from reqtree.loader import read_source

    content, file_name = read_source(source)
    source_format = detect_source(content, file_name)
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json({"source": source, "format": source_format.value})
    else:
        output.print_data(source_format.value)
    info(f"Detected format of {file_name or source}: {source_format.value}")
