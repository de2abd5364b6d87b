"""reqtree -- import API collections from other tools into one request tree.

This package converts third-party API collection formats (Postman
collections, Insomnia exports, Swagger/OpenAPI documents, HAR captures, and
single cURL commands) into a canonical tree of *collections*, *folders*, and
*requests*, and provides a repository that edits that tree while keeping
every node's stored ancestor path in sync with the real structure.

Typical workflow::

    reqtree import postman_collection.json   # add a collection to the store
    reqtree show                             # print the stored tree

Modules:
    models: Pydantic models for the canonical tree and configuration.
    importers: Format detection and one importer per supported format.
    tree: Path lookups and the mutation repository.
    storage: Whole-snapshot persistence backends.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and console-script entry point.
"""

__version__ = "0.1.0"
